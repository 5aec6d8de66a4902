"""Display label formatting.

Leaves wrap onto at most three short lines; containers stay on one line
and are truncated. Labels are always derived from a node's original text
and never parsed back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

ELLIPSIS = "..."

LEAF_LINE_WIDTH = 20
LEAF_MAX_LINES = 3
CONTAINER_MAX_LENGTH = 40


def wrap_leaf_label(
    text: str,
    line_width: int = LEAF_LINE_WIDTH,
    max_lines: int = LEAF_MAX_LINES,
) -> str:
    """Greedily pack words into lines for a leaf label.

    A word longer than line_width is placed on its own line unbroken.
    When words remain after max_lines, the last line loses its trailing
    three characters and gains an ellipsis.

    Args:
        text: Original node text.
        line_width: Maximum characters per line.
        max_lines: Maximum number of lines.

    Returns:
        Lines joined with newlines.
    """
    words = text.split()
    lines: list[str] = []
    current = ""
    consumed = 0

    for word in words:
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= line_width:
            current = candidate
            consumed += 1
            continue
        if current:
            lines.append(current)
            if len(lines) == max_lines:
                current = ""
                break
        current = word
        consumed += 1

    if current and len(lines) < max_lines:
        lines.append(current)

    if consumed < len(words) and lines:
        last = lines[-1]
        lines[-1] = last[: max(0, len(last) - len(ELLIPSIS))] + ELLIPSIS

    return "\n".join(lines)


def truncate_container_label(text: str, max_length: int = CONTAINER_MAX_LENGTH) -> str:
    """Single-line container label, truncated with an ellipsis when too long."""
    if len(text) > max_length:
        return text[: max_length - len(ELLIPSIS)] + ELLIPSIS
    return text


def format_display_label(
    text: str,
    has_children: bool,
    line_width: int = LEAF_LINE_WIDTH,
    max_lines: int = LEAF_MAX_LINES,
    max_length: int = CONTAINER_MAX_LENGTH,
) -> str:
    """Format a node's display label according to its shape."""
    if has_children:
        return truncate_container_label(text, max_length)
    return wrap_leaf_label(text, line_width, max_lines)


@dataclass(frozen=True)
class LabelStyle:
    """Configured label formatting rules.

    Attributes:
        leaf_line_width: Maximum characters per wrapped leaf line.
        leaf_max_lines: Maximum number of wrapped leaf lines.
        container_max_length: Longest container label kept untruncated.
    """

    leaf_line_width: int = LEAF_LINE_WIDTH
    leaf_max_lines: int = LEAF_MAX_LINES
    container_max_length: int = CONTAINER_MAX_LENGTH

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LabelStyle:
        """Create a LabelStyle from the [labels] config section."""
        return cls(
            leaf_line_width=int(data.get("leaf_line_width", LEAF_LINE_WIDTH)),
            leaf_max_lines=int(data.get("leaf_max_lines", LEAF_MAX_LINES)),
            container_max_length=int(data.get("container_max_length", CONTAINER_MAX_LENGTH)),
        )

    def format(self, text: str, has_children: bool) -> str:
        """Format a display label with these rules."""
        return format_display_label(
            text,
            has_children,
            line_width=self.leaf_line_width,
            max_lines=self.leaf_max_lines,
            max_length=self.container_max_length,
        )


__all__ = [
    "CONTAINER_MAX_LENGTH",
    "ELLIPSIS",
    "LEAF_LINE_WIDTH",
    "LEAF_MAX_LINES",
    "LabelStyle",
    "format_display_label",
    "truncate_container_label",
    "wrap_leaf_label",
]
