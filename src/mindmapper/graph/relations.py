"""Relations - Edges between mind map nodes.

This module defines the parent→child edges of the document tree:
- EdgeWeight: Visual weight class derived from the target's depth
- Edge: A parent→child edge
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mindmapper.graph.GraphNode import GraphNode


class EdgeWeight(Enum):
    """Weight class of an edge.

    - PRIMARY: Edge from the root to a top-level node
    - SECONDARY: Any deeper edge
    """

    PRIMARY = "primary"
    SECONDARY = "secondary"

    @property
    def width(self) -> int:
        """Stroke width used by the renderer."""
        return 3 if self is EdgeWeight.PRIMARY else 2


@dataclass(eq=False)
class Edge:
    """A parent→child edge.

    Attributes:
        source: The parent node.
        target: The child node.
    """

    source: GraphNode
    target: GraphNode

    @property
    def weight(self) -> EdgeWeight:
        """Primary for edges into depth 1, secondary otherwise."""
        if self.target.depth == 1:
            return EdgeWeight.PRIMARY
        return EdgeWeight.SECONDARY

    def presentation(self) -> dict[str, Any]:
        """Style attributes consumed by the rendering collaborator."""
        return {
            "from": self.source.id,
            "to": self.target.id,
            "width": self.weight.width,
            "color": {"color": "#666" if self.target.has_children else "#999"},
        }

    def __eq__(self, other: object) -> bool:
        """Check equality based on source and target ids."""
        if not isinstance(other, Edge):
            return NotImplemented
        return self.source.id == other.source.id and self.target.id == other.target.id

    def __hash__(self) -> int:
        """Hash based on source and target ids."""
        return hash((self.source.id, self.target.id))

    def __str__(self) -> str:
        return f"{self.source.id} -> {self.target.id}"
