"""
mindmapper - Indented outlines to mind maps and back

mindmapper parses indentation-delimited outlines into a rooted tree,
maps the tree onto a styled node/edge graph that supports structural
editing, reconstructs the outline from the edited graph, and converts
documents between JSON, plain-text and FreeMind formats.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mindmapper")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed

from mindmapper.graph.builder import MindMap, MindMapBuilder
from mindmapper.graph.factory import build_mind_map
from mindmapper.graph.reconstructor import reconstruct_outline
from mindmapper.session import MindMapSession

__all__ = [
    "__version__",
    "MindMap",
    "MindMapBuilder",
    "MindMapSession",
    "build_mind_map",
    "reconstruct_outline",
]
