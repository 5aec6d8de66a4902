"""Graph module - Core mind map data structures.

Exports:
- GraphNode: Node with original text, depth and category
- NodeShape: Container/leaf shape enum
- Edge: Parent -> child edge
- EdgeWeight: Primary/secondary edge weight
- GraphIntegrityError: Raised by links that would break the tree
- MutationEntry / MutationLog: Record of applied edits
- LabelStyle: Display label formatting rules

Note: MindMap is in mindmapper.graph.builder (use graph.factory.build_mind_map() to construct)
"""

from mindmapper.graph.GraphNode import ROOT_ID, ROOT_LABEL, GraphNode, NodeShape
from mindmapper.graph.labels import LabelStyle
from mindmapper.graph.mutations import GraphIntegrityError, MutationEntry, MutationLog
from mindmapper.graph.relations import Edge, EdgeWeight

__all__ = [
    "ROOT_ID",
    "ROOT_LABEL",
    "GraphNode",
    "NodeShape",
    "Edge",
    "EdgeWeight",
    "GraphIntegrityError",
    "MutationEntry",
    "MutationLog",
    "LabelStyle",
]
