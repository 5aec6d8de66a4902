"""Outline parser - indentation-delimited text to an ordered tree.

Each non-blank line becomes one OutlineNode. Nesting is derived from
leading whitespace: every tab counts as 4 spaces and every 2 spaces are
one indentation level.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

TAB_WIDTH = 4
SPACES_PER_LEVEL = 2

_LINE_SPLIT = re.compile(r"\r?\n")
_LEADING_WS = re.compile(r"^(\s*)")


@dataclass
class OutlineNode:
    """One line of an outline together with its nested lines.

    Attributes:
        text: Line text with surrounding whitespace stripped.
        indent_level: Indentation level computed from leading whitespace.
        children: Nested lines, in input order.
    """

    text: str
    indent_level: int = 0
    children: list[OutlineNode] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        """True if at least one line is nested under this one."""
        return len(self.children) > 0

    def walk(self) -> Iterator[OutlineNode]:
        """Pre-order traversal of this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def indent_level(line: str, tab_width: int = TAB_WIDTH) -> int:
    """Compute the indentation level of a raw line.

    Args:
        line: Raw line, leading whitespace included.
        tab_width: Number of spaces a tab expands to.

    Returns:
        floor(expanded leading whitespace / 2).
    """
    match = _LEADING_WS.match(line)
    if not match:
        return 0
    spaces = match.group(1).replace("\t", " " * tab_width)
    return len(spaces) // SPACES_PER_LEVEL


class OutlineParser:
    """Stack-based outline tree builder.

    Parsing is total: any input produces a (possibly empty) forest.

    Example:
        >>> forest = OutlineParser().parse("A\\n  B\\n  C\\nD")
        >>> [(n.text, [c.text for c in n.children]) for n in forest]
        [('A', ['B', 'C']), ('D', [])]
    """

    def __init__(self, skip_comments: bool = False, tab_width: int = TAB_WIDTH) -> None:
        """Initialize the parser.

        Args:
            skip_comments: Drop lines whose first non-blank character is '#'.
            tab_width: Number of spaces a tab expands to.
        """
        self.skip_comments = skip_comments
        self.tab_width = tab_width

    def iter_lines(self, text: str) -> Iterator[tuple[int, str]]:
        """Yield (indent_level, stripped_text) for every meaningful line."""
        for raw_line in _LINE_SPLIT.split(text):
            stripped = raw_line.strip()
            if not stripped:
                continue
            if self.skip_comments and stripped.startswith("#"):
                continue
            yield indent_level(raw_line, self.tab_width), stripped

    def parse(self, text: str) -> list[OutlineNode]:
        """Parse outline text into an ordered forest.

        Args:
            text: Raw multi-line outline.

        Returns:
            Top-level OutlineNodes in input order.
        """
        forest: list[OutlineNode] = []
        # (level, children-list) pairs; the sentinel owns the forest
        stack: list[tuple[int, list[OutlineNode]]] = [(-1, forest)]

        for level, line_text in self.iter_lines(text):
            node = OutlineNode(text=line_text, indent_level=level)
            while len(stack) > 1 and stack[-1][0] >= level:
                stack.pop()
            stack[-1][1].append(node)
            stack.append((level, node.children))

        return forest


def parse_outline(text: str, skip_comments: bool = False) -> list[OutlineNode]:
    """Parse outline text with the default parser settings."""
    return OutlineParser(skip_comments=skip_comments).parse(text)


__all__ = [
    "OutlineNode",
    "OutlineParser",
    "indent_level",
    "parse_outline",
]
