"""Outline reconstruction from a (possibly edited) MindMap.

Editing does not preserve sibling order, so children are emitted in a
deterministic order: depth ascending, then node ID. Text always comes
from ``original_text``; display labels may be wrapped or truncated and
are never read back.

Re-parsing the reconstructed text and rebuilding yields the same texts
and parent/child shape, with freshly minted IDs.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from mindmapper.graph.parsers import OutlineNode
from mindmapper.graph.parsers.outline import SPACES_PER_LEVEL

if TYPE_CHECKING:
    from mindmapper.graph.builder import MindMap
    from mindmapper.graph.GraphNode import GraphNode


def iter_outline_lines(mind_map: MindMap) -> Iterator[tuple[int, str]]:
    """Yield (level, original_text) for every non-root node, depth-first.

    Level 0 is a direct child of the root.
    """
    for node in mind_map.walk("pre"):
        if node.is_root:
            continue
        yield node.depth - 1, node.original_text


def render_outline_lines(lines: Iterator[tuple[int, str]] | list[tuple[int, str]]) -> str:
    """Join (level, text) pairs into outline text, 2 spaces per level."""
    return "\n".join(" " * (SPACES_PER_LEVEL * level) + text for level, text in lines)


def reconstruct_outline(mind_map: MindMap) -> str:
    """Reconstruct outline text from a MindMap.

    Args:
        mind_map: The document to render.

    Returns:
        Indented outline, one node per line, without a trailing newline.
        An empty document yields an empty string.
    """
    return render_outline_lines(iter_outline_lines(mind_map))


def to_outline_forest(mind_map: MindMap) -> list[OutlineNode]:
    """Map a MindMap back onto an outline forest (graph → tree)."""
    forest: list[OutlineNode] = []
    stack: list[tuple[GraphNode, list[OutlineNode], int]] = [
        (child, forest, 0) for child in reversed(mind_map.root.sorted_children())
    ]
    while stack:
        node, siblings, level = stack.pop()
        outline_node = OutlineNode(text=node.original_text, indent_level=level)
        siblings.append(outline_node)
        stack.extend(
            (child, outline_node.children, level + 1)
            for child in reversed(node.sorted_children())
        )
    return forest


__all__ = [
    "iter_outline_lines",
    "reconstruct_outline",
    "render_outline_lines",
    "to_outline_forest",
]
