"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def flat_map():
    """A (B, C) and D under the root: task_0..task_3."""
    from tests.core.graph_test_helpers import FLAT_OUTLINE, build_mind_map

    return build_mind_map(FLAT_OUTLINE)


@pytest.fixture
def nested_map():
    """A with children B (grandchild C) and D, then E."""
    from tests.core.graph_test_helpers import NESTED_OUTLINE, build_mind_map

    return build_mind_map(NESTED_OUTLINE)


@pytest.fixture
def project_map():
    """Keyword-rich outline exercising every category."""
    from tests.core.graph_test_helpers import PROJECT_OUTLINE, build_mind_map

    return build_mind_map(PROJECT_OUTLINE)


@pytest.fixture
def builder():
    """Fresh MindMapBuilder instance."""
    from mindmapper.graph.builder import MindMapBuilder

    return MindMapBuilder()
