"""Shared pytest fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep MINDMAPPER_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("MINDMAPPER_"):
            monkeypatch.delenv(name)


@pytest.fixture
def fake_clock():
    """Manually advanced clock for debouncer tests."""

    class FakeClock:
        def __init__(self):
            self.now = 0.0

        def __call__(self):
            return self.now

        def advance(self, seconds):
            self.now += seconds

    return FakeClock()
