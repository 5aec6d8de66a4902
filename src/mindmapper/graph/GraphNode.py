"""GraphNode - Node representation for the mind map graph.

This module provides the core data structures for a mind map document:
- NodeShape: Container/leaf shape derived from out-degree
- GraphNode: A node with its original text, depth, category and links
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

from mindmapper.graph.classify import ROOT_COLOR, category_color
from mindmapper.graph.labels import LabelStyle

if TYPE_CHECKING:
    from mindmapper.graph.relations import Edge

ROOT_ID = "root"
ROOT_LABEL = "Mind Map"
FONT_FACE = "Inter"

_DIGITS = re.compile(r"(\d+)")


class NodeShape(Enum):
    """Rendering shape of a node."""

    CONTAINER = "dot"
    LEAF = "box"


def natural_id_key(node_id: str) -> tuple[Any, ...]:
    """Sort key comparing digit runs numerically ("task_2" < "task_10")."""
    parts = _DIGITS.split(node_id)
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts))


def sibling_sort_key(node: GraphNode) -> tuple[Any, ...]:
    """Deterministic sibling order: depth ascending, then id."""
    return (node.depth, natural_id_key(node.id))


@dataclass(eq=False)
class GraphNode:
    """A node in the mind map graph.

    The parent/child links form the document's adjacency index and are
    maintained only by MindMap, which guarantees a single parent per
    node. ``has_children`` and ``shape`` are derived from those links and
    never stored.

    Attributes:
        id: Unique identifier within the document.
        original_text: Full untruncated text; authoritative for reconstruction.
        depth: Distance from the synthetic root (0 for the root).
        category: Resolved category name (None for the root).
        label_style: Formatting rules for the display label.
    """

    id: str
    original_text: str
    depth: int = 0
    category: str | None = None
    label_style: LabelStyle = field(default_factory=LabelStyle, repr=False)

    # Internal storage (prefixed)
    _children: list[GraphNode] = field(default_factory=list, repr=False)
    _parent: GraphNode | None = field(default=None, repr=False)
    _incoming_edge: Edge | None = field(default=None, repr=False)

    # Iterator access
    def iter_children(self) -> Iterator[GraphNode]:
        """Iterate over child nodes in link order."""
        yield from self._children

    def sorted_children(self) -> list[GraphNode]:
        """Children in deterministic sibling order."""
        return sorted(self._children, key=sibling_sort_key)

    def iter_outgoing_edges(self) -> Iterator[Edge]:
        """Iterate over edges to this node's children."""
        for child in self._children:
            if child._incoming_edge is not None:
                yield child._incoming_edge

    @property
    def incoming_edge(self) -> Edge | None:
        """The unique edge from the parent, None for the root."""
        return self._incoming_edge

    @property
    def parent(self) -> GraphNode | None:
        """The unique parent node, None for the root."""
        return self._parent

    def child_count(self) -> int:
        """Return number of children."""
        return len(self._children)

    def has_child(self, node: GraphNode) -> bool:
        """Check if node is a direct child."""
        return node in self._children

    @property
    def is_root(self) -> bool:
        """True for the synthetic document root."""
        return self.id == ROOT_ID

    @property
    def has_children(self) -> bool:
        """True if this node has at least one child."""
        return len(self._children) > 0

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return len(self._children) == 0

    @property
    def shape(self) -> NodeShape:
        """Container when the node has children; the root is always a container."""
        if self.is_root or self.has_children:
            return NodeShape.CONTAINER
        return NodeShape.LEAF

    @property
    def display_label(self) -> str:
        """Label shown by the renderer, derived from original_text."""
        if self.is_root:
            return self.original_text
        return self.label_style.format(self.original_text, self.has_children)

    @property
    def color(self) -> str:
        """Fill color derived from the category."""
        if self.is_root:
            return ROOT_COLOR
        return category_color(self.category)

    def presentation(self) -> dict[str, Any]:
        """Style attributes consumed by the rendering collaborator."""
        result: dict[str, Any] = {
            "id": self.id,
            "label": self.display_label,
            "title": self.original_text,
            "level": self.depth,
            "color": self.color,
            "shape": self.shape.value,
        }
        if self.is_root:
            result["size"] = 40
            result["font"] = {"size": 28, "face": FONT_FACE, "bold": True}
        elif self.has_children:
            result["size"] = 28
            result["font"] = {"size": 20, "face": FONT_FACE, "bold": True}
            result["borderWidth"] = 2
        else:
            result["margin"] = 10
            result["font"] = {"size": 16, "face": FONT_FACE, "bold": False}
            result["borderWidth"] = 2
        return result

    def walk(self, order: str = "pre") -> Iterator[GraphNode]:
        """Iterate over this node and descendants.

        Children are visited in deterministic sibling order.

        Args:
            order: Traversal order:
                - "pre": Parent first (depth-first, pre-order)
                - "level": Breadth-first (level order)

        Yields:
            GraphNode instances in the specified order.
        """
        if order == "pre":
            yield from self._walk_preorder()
        elif order == "level":
            yield from self._walk_level()
        else:
            raise ValueError(f"Unknown traversal order: {order}")

    def _walk_preorder(self) -> Iterator[GraphNode]:
        """Pre-order traversal without recursion."""
        stack: list[GraphNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.sorted_children()))

    def _walk_level(self) -> Iterator[GraphNode]:
        """Level-order (breadth-first) traversal."""
        queue: deque[GraphNode] = deque([self])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.sorted_children())

    def ancestors(self) -> Iterator[GraphNode]:
        """Iterate from the parent up to the root."""
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def is_descendant_of(self, other: GraphNode) -> bool:
        """True if other is a proper ancestor of this node."""
        return any(a is other for a in self.ancestors())
