"""Graph Builder - Constructs a MindMap from a parsed outline.

This module provides the MindMap document (node index, adjacency links
and the structural edit API) and the builder that maps an outline
forest onto it.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from mindmapper.graph.classify import OTHER, resolve_category
from mindmapper.graph.GraphNode import ROOT_ID, ROOT_LABEL, GraphNode, natural_id_key
from mindmapper.graph.labels import LabelStyle
from mindmapper.graph.mutations import GraphIntegrityError, MutationEntry, MutationLog
from mindmapper.graph.parsers import OutlineNode
from mindmapper.graph.relations import Edge

logger = logging.getLogger(__name__)

ID_PREFIX = "task_"
DEFAULT_PLACEHOLDER = "New Task"


def normalize_node_text(text: str) -> str:
    """Collapse text to a single stripped outline line."""
    return " ".join(line.strip() for line in text.strip().splitlines() if line.strip())


class Direction(Enum):
    """Keyboard navigation directions."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass(eq=False)
class MindMap:
    """A mind map document: one synthetic root plus a tree of nodes.

    Every non-root node has exactly one parent. The public edit methods
    check their preconditions and return None without touching the
    document when they fail; applied edits return the logged
    MutationEntry.

    Attributes:
        root_label: Label of the synthetic root node.
        label_style: Display label formatting rules shared by all nodes.
        placeholder_text: Text given to nodes created by the editor.
        allow_root_children: Whether add_child accepts the root as parent.
    """

    root_label: str = ROOT_LABEL
    label_style: LabelStyle = field(default_factory=LabelStyle)
    placeholder_text: str = DEFAULT_PLACEHOLDER
    allow_root_children: bool = False

    # Internal storage (prefixed) - excluded from constructor
    _root: GraphNode = field(init=False, repr=False)
    _index: dict[str, GraphNode] = field(default_factory=dict, init=False, repr=False)
    _next_serial: int = field(default=0, init=False)
    _mutation_log: MutationLog = field(default_factory=MutationLog, init=False, repr=False)

    def __post_init__(self) -> None:
        self._root = GraphNode(
            id=ROOT_ID,
            original_text=self.root_label,
            depth=0,
            label_style=self.label_style,
        )
        self._index[ROOT_ID] = self._root

    # ─────────────────────────────────────────────────────────────────────────
    # Query API
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def root(self) -> GraphNode:
        """The synthetic root node."""
        return self._root

    def find_by_id(self, node_id: str) -> GraphNode | None:
        """Find node by ID, or None if it does not exist."""
        return self._index.get(node_id)

    def has_node(self, node_id: str) -> bool:
        """Check if a node ID exists."""
        return node_id in self._index

    def all_nodes(self) -> Iterator[GraphNode]:
        """Iterate all nodes in insertion order, root first."""
        yield from self._index.values()

    def iter_edges(self) -> Iterator[Edge]:
        """Iterate all edges in node insertion order."""
        for node in self._index.values():
            if node.incoming_edge is not None:
                yield node.incoming_edge

    def walk(self, order: str = "pre") -> Iterator[GraphNode]:
        """Traverse from the root in deterministic sibling order."""
        yield from self._root.walk(order)

    def node_count(self) -> int:
        """Return total number of nodes, root included."""
        return len(self._index)

    def edge_count(self) -> int:
        """Return total number of edges."""
        return len(self._index) - 1

    def is_empty(self) -> bool:
        """True if the document holds only the root."""
        return len(self._index) == 1

    def clone(self) -> MindMap:
        """Create an independent deep copy of this document."""
        return copy.deepcopy(self)

    @property
    def mutation_log(self) -> MutationLog:
        """Access the log of applied edits."""
        return self._mutation_log

    def validate(self) -> list[str]:
        """Check the tree invariants.

        Returns:
            Human-readable problems; empty when the document is a valid
            single-rooted tree whose depths follow the parent links.
        """
        problems: list[str] = []
        for node in self._index.values():
            if node.is_root:
                if node.parent is not None:
                    problems.append("root has a parent")
                continue
            parent = node.parent
            if parent is None:
                problems.append(f"{node.id} has no parent")
            elif self._index.get(parent.id) is not parent:
                problems.append(f"{node.id} has a parent outside the document")
            elif not parent.has_child(node):
                problems.append(f"{node.id} is not listed by its parent {parent.id}")
            elif node.depth != parent.depth + 1:
                problems.append(f"{node.id} has depth {node.depth} under depth {parent.depth}")
        reachable = sum(1 for _ in self._root.walk())
        if reachable != len(self._index):
            problems.append(f"{len(self._index) - reachable} node(s) unreachable from root")
        return problems

    # ─────────────────────────────────────────────────────────────────────────
    # Construction primitives
    # ─────────────────────────────────────────────────────────────────────────

    def mint_id(self) -> str:
        """Return a fresh sequential node ID."""
        while True:
            node_id = f"{ID_PREFIX}{self._next_serial}"
            self._next_serial += 1
            if node_id not in self._index:
                return node_id

    def _note_id(self, node_id: str) -> None:
        """Keep minted IDs ahead of an externally supplied ID."""
        if node_id.startswith(ID_PREFIX):
            suffix = node_id[len(ID_PREFIX):]
            if suffix.isdigit():
                self._next_serial = max(self._next_serial, int(suffix) + 1)

    def _add_node(self, node: GraphNode) -> None:
        """Register an unlinked node in the index."""
        if node.id in self._index:
            raise GraphIntegrityError(f"Duplicate node id: {node.id}")
        node.label_style = self.label_style
        self._index[node.id] = node
        self._note_id(node.id)

    def _link(self, parent: GraphNode, child: GraphNode) -> Edge:
        """Attach child under parent.

        Raises:
            GraphIntegrityError: If the link would give child a second
                parent, create a cycle, or reference an unknown node.
        """
        if self._index.get(parent.id) is not parent or self._index.get(child.id) is not child:
            raise GraphIntegrityError(f"Cannot link unknown nodes {parent.id} -> {child.id}")
        if child.is_root:
            raise GraphIntegrityError("The root cannot have a parent")
        if child.parent is not None:
            raise GraphIntegrityError(f"{child.id} already has parent {child.parent.id}")
        if parent is child or parent.is_descendant_of(child):
            raise GraphIntegrityError(f"Linking {parent.id} -> {child.id} creates a cycle")

        edge = Edge(source=parent, target=child)
        parent._children.append(child)
        child._parent = parent
        child._incoming_edge = edge
        return edge

    def _unlink(self, child: GraphNode) -> GraphNode | None:
        """Detach child from its parent and return the former parent."""
        parent = child.parent
        if parent is not None:
            parent._children.remove(child)
        child._parent = None
        child._incoming_edge = None
        return parent

    def _record(
        self,
        operation: str,
        target_id: str,
        before: dict[str, object],
        after: dict[str, object],
    ) -> MutationEntry:
        entry = MutationEntry(
            operation=operation,
            target_id=target_id,
            before_state=before,
            after_state=after,
        )
        self._mutation_log.append(entry)
        logger.debug("Applied %s", entry)
        return entry

    # ─────────────────────────────────────────────────────────────────────────
    # Structural Edit API
    # ─────────────────────────────────────────────────────────────────────────

    def add_child(self, parent_id: str) -> MutationEntry | None:
        """Add a placeholder leaf under parent_id.

        The new node inherits the parent's category; a leaf parent turns
        into a container in the same operation.

        Returns:
            MutationEntry whose target_id is the new node, or None if
            the parent does not exist or may not receive children.
        """
        parent = self._index.get(parent_id)
        if parent is None:
            logger.debug("add_child ignored: unknown node %s", parent_id)
            return None
        if parent.is_root and not self.allow_root_children:
            logger.debug("add_child ignored: root is not an edit target")
            return None

        shape_before = parent.shape.value
        child = GraphNode(
            id=self.mint_id(),
            original_text=self.placeholder_text,
            depth=parent.depth + 1,
            category=parent.category or OTHER,
        )
        self._add_node(child)
        self._link(parent, child)
        return self._record(
            "add_child",
            child.id,
            {"parent_id": parent.id, "parent_shape": shape_before},
            {"parent_id": parent.id, "parent_shape": parent.shape.value},
        )

    def add_sibling(self, node_id: str) -> MutationEntry | None:
        """Add a placeholder leaf next to node_id under the same parent.

        Returns:
            MutationEntry whose target_id is the new node, or None for the
            root, an unknown node, or a node without a parent.
        """
        node = self._index.get(node_id)
        if node is None or node.is_root or node.parent is None:
            logger.debug("add_sibling ignored for %s", node_id)
            return None

        parent = node.parent
        sibling = GraphNode(
            id=self.mint_id(),
            original_text=self.placeholder_text,
            depth=node.depth,
            category=node.category,
        )
        self._add_node(sibling)
        self._link(parent, sibling)
        return self._record(
            "add_sibling",
            sibling.id,
            {"parent_id": parent.id, "sibling_of": node.id},
            {"parent_id": parent.id},
        )

    def delete_node(self, node_id: str) -> MutationEntry | None:
        """Delete a node together with all of its descendants.

        A parent left without children reverts to a leaf.

        Returns:
            MutationEntry listing the removed IDs, or None for the root or
            an unknown node.
        """
        node = self._index.get(node_id)
        if node is None or node.is_root:
            logger.debug("delete_node ignored for %s", node_id)
            return None

        removed = [n.id for n in node.walk()]
        parent = node.parent
        shape_before = parent.shape.value if parent else None
        self._unlink(node)
        for removed_id in removed:
            del self._index[removed_id]

        return self._record(
            "delete_node",
            node_id,
            {
                "parent_id": parent.id if parent else None,
                "parent_shape": shape_before,
                "removed_ids": removed,
            },
            {"parent_shape": parent.shape.value if parent else None},
        )

    def move_node(self, node_id: str, new_parent_id: str) -> MutationEntry | None:
        """Reparent a node (and its subtree) under new_parent_id.

        Depths of the moved subtree follow the new position.

        Returns:
            MutationEntry, or None when either node is unknown, node_id is
            the root, the node already sits under new_parent_id, or the
            target lies inside the moved subtree.
        """
        node = self._index.get(node_id)
        new_parent = self._index.get(new_parent_id)
        if node is None or new_parent is None or node.is_root:
            logger.debug("move_node ignored: %s -> %s", node_id, new_parent_id)
            return None
        if node.parent is new_parent:
            return None
        if new_parent is node or new_parent.is_descendant_of(node):
            logger.debug("move_node rejected: %s is inside %s", new_parent_id, node_id)
            return None

        old_parent = self._unlink(node)
        self._link(new_parent, node)
        delta = new_parent.depth + 1 - node.depth
        if delta:
            for moved in node.walk():
                moved.depth += delta

        return self._record(
            "move_node",
            node_id,
            {"parent_id": old_parent.id if old_parent else None},
            {"parent_id": new_parent.id, "depth": node.depth},
        )

    def update_text(self, node_id: str, text: str) -> MutationEntry | None:
        """Replace a node's original text; the display label follows.

        Returns:
            MutationEntry, or None for the root, an unknown node, blank
            text, or unchanged text.
        """
        node = self._index.get(node_id)
        new_text = normalize_node_text(text)
        if node is None or node.is_root or not new_text:
            logger.debug("update_text ignored for %s", node_id)
            return None
        if new_text == node.original_text:
            return None

        old_text = node.original_text
        node.original_text = new_text
        return self._record("update_text", node_id, {"text": old_text}, {"text": new_text})

    def refresh_styles(self, auto_group: bool) -> MutationEntry | None:
        """Re-resolve every node's category from its original text.

        Returns:
            MutationEntry listing changed node IDs, or None if nothing changed.
        """
        previous: dict[str, str | None] = {}
        for node in self._root.walk():
            if node.is_root:
                continue
            parent = node.parent
            parent_category = None if parent is None or parent.is_root else parent.category
            category = resolve_category(node.original_text, auto_group, parent_category)
            if category != node.category:
                previous[node.id] = node.category
                node.category = category
        if not previous:
            return None
        return self._record(
            "refresh_styles",
            ROOT_ID,
            {"categories": previous},
            {"auto_group": auto_group, "changed_ids": list(previous)},
        )

    def navigate(self, direction: Direction | str, current_id: str) -> str | None:
        """Find the neighbor of current_id in a direction.

        up/left go to the parent; down/right go to the first child, or
        the next sibling when there are no children.

        Returns:
            The neighbor's ID, or None if there is no such neighbor.
        """
        try:
            direction = Direction(direction.value if isinstance(direction, Direction) else direction.lower())
        except ValueError:
            logger.debug("navigate ignored: unknown direction %r", direction)
            return None

        node = self._index.get(current_id)
        if node is None:
            return None

        if direction in (Direction.UP, Direction.LEFT):
            return node.parent.id if node.parent else None

        if node.has_children:
            return min(node.iter_children(), key=lambda c: natural_id_key(c.id)).id
        if node.parent is None:
            return None
        siblings = node.parent.sorted_children()
        position = siblings.index(node)
        if position < len(siblings) - 1:
            return siblings[position + 1].id
        return None


class MindMapBuilder:
    """Builder for constructing a MindMap from an outline forest.

    Usage:
        builder = MindMapBuilder(auto_group=True)
        builder.add_outline(parse_outline(text))
        mind_map = builder.build()
    """

    def __init__(
        self,
        auto_group: bool = True,
        label_style: LabelStyle | None = None,
        root_label: str = ROOT_LABEL,
        placeholder_text: str = DEFAULT_PLACEHOLDER,
        allow_root_children: bool = False,
    ) -> None:
        """Initialize the builder.

        Args:
            auto_group: Classify each node by keyword; otherwise inherit
                the parent's category.
            label_style: Display label formatting rules.
            root_label: Label of the synthetic root.
            placeholder_text: Text for nodes later created by the editor.
            allow_root_children: Whether the editor may add children to the root.
        """
        self.auto_group = auto_group
        self._mind_map = MindMap(
            root_label=root_label,
            label_style=label_style or LabelStyle(),
            placeholder_text=placeholder_text,
            allow_root_children=allow_root_children,
        )

    def add_outline(self, forest: list[OutlineNode]) -> None:
        """Append an outline forest under the root, preserving order."""
        mind_map = self._mind_map
        # (outline node, parent graph node) pairs, processed depth-first
        pending: list[tuple[OutlineNode, GraphNode]] = [
            (entry, mind_map.root) for entry in reversed(forest)
        ]
        while pending:
            entry, parent = pending.pop()
            parent_category = None if parent.is_root else parent.category
            node = GraphNode(
                id=mind_map.mint_id(),
                original_text=entry.text,
                depth=parent.depth + 1,
                category=resolve_category(entry.text, self.auto_group, parent_category),
            )
            mind_map._add_node(node)
            mind_map._link(parent, node)
            pending.extend((child, node) for child in reversed(entry.children))

    def build(self) -> MindMap:
        """Return the constructed MindMap."""
        logger.debug(
            "Built mind map with %d nodes (auto_group=%s)",
            self._mind_map.node_count(),
            self.auto_group,
        )
        return self._mind_map


__all__ = [
    "DEFAULT_PLACEHOLDER",
    "Direction",
    "ID_PREFIX",
    "MindMap",
    "MindMapBuilder",
    "normalize_node_text",
]
