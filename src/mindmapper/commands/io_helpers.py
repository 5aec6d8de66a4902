"""
mindmapper.commands.io_helpers - Reading inputs and writing outputs for commands.

"-" stands for stdin/stdout.
"""

from __future__ import annotations

import sys
from pathlib import Path

from mindmapper.graph.serialize import EXPORTERS, FORMAT_EXTENSIONS

STDIO = "-"


def read_input(path: str) -> str:
    """Read UTF-8 text from a file, or from stdin for "-"."""
    if path == STDIO:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def write_output(path: str | None, content: str) -> None:
    """Write content to a file, or to stdout for None/"-"."""
    if path is None or path == STDIO:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
        return
    Path(path).write_text(content, encoding="utf-8")


def infer_format(path: str | None, explicit: str | None, fallback: str | None) -> str | None:
    """Pick a codec name: explicit flag, then file extension, then fallback."""
    if explicit:
        return explicit
    if path and path != STDIO:
        fmt = FORMAT_EXTENSIONS.get(Path(path).suffix.lower())
        if fmt is not None:
            return fmt
    return fallback


FORMAT_CHOICES = sorted(EXPORTERS)
