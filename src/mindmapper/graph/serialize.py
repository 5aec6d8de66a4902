"""Graph Serialization - Export and import MindMap documents.

This module provides three codecs over the same normalized document:

- JSON: lossless; nodes, edges and the metadata bag
- Plain text: lossy; indented outline of original texts
- FreeMind (.mm) XML: lossy; nested <node TEXT="..."> elements

Importers never raise on bad input. Unparseable or structurally invalid
payloads return None so callers can report one uniform failure.
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from mindmapper.graph.builder import MindMap, MindMapBuilder, normalize_node_text
from mindmapper.graph.GraphNode import ROOT_ID, ROOT_LABEL, GraphNode
from mindmapper.graph.labels import LabelStyle
from mindmapper.graph.mutations import GraphIntegrityError
from mindmapper.graph.parsers import OutlineNode, OutlineParser
from mindmapper.graph.reconstructor import iter_outline_lines, render_outline_lines
from mindmapper.graph.relations import Edge

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"
JSON_FORMAT = "mindmap-json"
TEXT_HEADER = "# Mind Map Export"
FREEMIND_VERSION = "1.0.1"
FREEMIND_DEFAULT_TEXT = "Node"


class Layout(Enum):
    """Layout selector handed to the rendering collaborator.

    - HIERARCHICAL: Container tree, top-down
    - RADIAL: Radial tree around the root
    - FORCE: Force-directed, frozen once settled
    """

    HIERARCHICAL = "hierarchical"
    RADIAL = "radial"
    FORCE = "force"

    @classmethod
    def parse(cls, value: Any, default: Layout | None = None) -> Layout:
        """Parse a layout name, falling back to default (hierarchical)."""
        try:
            return cls(str(value).lower())
        except ValueError:
            return default or cls.HIERARCHICAL


@dataclass
class DocumentMetadata:
    """Metadata bag carried alongside a document.

    Attributes:
        layout: Layout selected when the document was exported.
        auto_group: Whether categories were keyword-derived.
        input_text: The outline text the document was generated from.
    """

    layout: Layout = Layout.HIERARCHICAL
    auto_group: bool = True
    input_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout": self.layout.value,
            "auto_group": self.auto_group,
            "input_text": self.input_text,
        }

    @classmethod
    def from_dict(cls, data: Any) -> DocumentMetadata:
        """Lenient parse: unknown or missing keys fall back to defaults."""
        if not isinstance(data, dict):
            return cls()
        auto_group = data.get("auto_group", data.get("autoGroup"))
        return cls(
            layout=Layout.parse(data.get("layout")),
            auto_group=auto_group if isinstance(auto_group, bool) else True,
            input_text=str(data.get("input_text", "")),
        )


@dataclass
class ImportResult:
    """A successfully imported document with its metadata."""

    document: MindMap
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)


# ─────────────────────────────────────────────────────────────────────────────
# Structured (JSON) codec
# ─────────────────────────────────────────────────────────────────────────────


def serialize_node(node: GraphNode) -> dict[str, Any]:
    """Serialize a GraphNode to a JSON-compatible dict.

    Args:
        node: The node to serialize.

    Returns:
        Dict with the stored fields and the derived label, color and shape.
    """
    return {
        "id": node.id,
        "label": node.display_label,
        "original_text": node.original_text,
        "level": node.depth,
        "category": node.category,
        "color": node.color,
        "shape": node.shape.value,
    }


def serialize_edge(edge: Edge) -> dict[str, Any]:
    """Serialize an Edge to a JSON-compatible dict."""
    return {
        "from": edge.source.id,
        "to": edge.target.id,
        "width": edge.weight.width,
    }


def serialize_document(mind_map: MindMap) -> dict[str, Any]:
    """Serialize a MindMap to nodes and edges lists.

    Nodes keep insertion order and edges keep link order, so
    document_from_dict() rebuilds an identical document.
    """
    return {
        "nodes": [serialize_node(node) for node in mind_map.all_nodes()],
        "edges": [serialize_edge(edge) for edge in mind_map.iter_edges()],
    }


def document_from_dict(
    data: Any,
    label_style: LabelStyle | None = None,
) -> MindMap | None:
    """Rebuild a MindMap from serialized nodes and edges.

    The edge set must describe a single tree rooted at the "root" node:
    no unknown IDs, no node with two parents, no cycles, nothing
    unreachable from the root.

    Args:
        data: Dict with "nodes" and "edges" lists.
        label_style: Display label rules for the rebuilt document.

    Returns:
        The rebuilt MindMap, or None if the payload is invalid.
    """
    if not isinstance(data, dict):
        return None
    raw_nodes = data.get("nodes")
    raw_edges = data.get("edges")
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        logger.warning("Import rejected: missing nodes or edges")
        return None

    try:
        root_entry = next(
            (n for n in raw_nodes if isinstance(n, dict) and n.get("id") == ROOT_ID), None
        )
        if root_entry is None:
            raise ValueError("missing root node")
        root_label = _node_text(root_entry) or ROOT_LABEL

        mind_map = MindMap(root_label=root_label, label_style=label_style or LabelStyle())
        for entry in raw_nodes:
            if not isinstance(entry, dict) or "id" not in entry:
                raise ValueError(f"malformed node entry: {entry!r}")
            node_id = str(entry["id"])
            if node_id == ROOT_ID:
                continue
            text = _node_text(entry)
            if not text:
                raise ValueError(f"node {node_id} has no text")
            mind_map._add_node(
                GraphNode(
                    id=node_id,
                    original_text=text,
                    category=entry.get("category"),
                )
            )

        for entry in raw_edges:
            if not isinstance(entry, dict):
                raise ValueError(f"malformed edge entry: {entry!r}")
            parent = mind_map.find_by_id(str(entry.get("from")))
            child = mind_map.find_by_id(str(entry.get("to")))
            if parent is None or child is None:
                raise ValueError(f"edge references unknown node: {entry!r}")
            mind_map._link(parent, child)
    except (GraphIntegrityError, ValueError, TypeError) as exc:
        logger.warning("Import rejected: %s", exc)
        return None

    for node in mind_map.walk():
        if node.parent is not None:
            node.depth = node.parent.depth + 1

    problems = mind_map.validate()
    if problems:
        logger.warning("Import rejected: %s", "; ".join(problems))
        return None
    return mind_map


def _node_text(entry: dict[str, Any]) -> str:
    # original_text is authoritative; older payloads only carry title/label
    for key in ("original_text", "originalText", "title", "label"):
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return normalize_node_text(value)
    return ""


def to_json(
    mind_map: MindMap,
    metadata: DocumentMetadata | None = None,
    created: datetime | None = None,
) -> str:
    """Export a MindMap to the lossless JSON format.

    Args:
        mind_map: Document to export.
        metadata: Metadata bag to embed.
        created: Export timestamp (defaults to now, UTC).

    Returns:
        Pretty-printed JSON string.
    """
    payload = {
        "version": FORMAT_VERSION,
        "format": JSON_FORMAT,
        "created": (created or datetime.now(timezone.utc)).isoformat(),
        **serialize_document(mind_map),
        "metadata": (metadata or DocumentMetadata()).to_dict(),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def from_json(text: str, label_style: LabelStyle | None = None) -> ImportResult | None:
    """Import a MindMap from the JSON format.

    Returns:
        ImportResult, or None for unparseable or invalid JSON.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning("JSON import failed: %s", exc)
        return None
    if not isinstance(data, dict):
        logger.warning("JSON import failed: top level is not an object")
        return None

    mind_map = document_from_dict(data, label_style)
    if mind_map is None:
        return None
    return ImportResult(mind_map, DocumentMetadata.from_dict(data.get("metadata")))


# ─────────────────────────────────────────────────────────────────────────────
# Plain-text outline codec
# ─────────────────────────────────────────────────────────────────────────────


def to_text(mind_map: MindMap) -> str:
    """Export a MindMap as a commented plain-text outline.

    Categories, colors and shapes are not represented. A node whose text
    starts with '#' reads back as a comment on import, so it is dropped
    and its children end up under an earlier line.
    """
    outline = render_outline_lines(iter_outline_lines(mind_map))
    body = outline + "\n" if outline else ""
    return f"{TEXT_HEADER}\n\n{body}"


def from_text(text: str, label_style: LabelStyle | None = None) -> ImportResult | None:
    """Import a MindMap from a plain-text outline.

    Lines starting with '#' are comments. Categories default to Other.

    Returns:
        ImportResult, or None if the text holds no outline lines.
    """
    if not isinstance(text, str):
        return None
    forest = OutlineParser(skip_comments=True).parse(text)
    if not forest:
        logger.warning("Text import failed: no outline lines")
        return None
    builder = MindMapBuilder(auto_group=False, label_style=label_style)
    builder.add_outline(forest)
    return ImportResult(builder.build(), DocumentMetadata(auto_group=False))


# ─────────────────────────────────────────────────────────────────────────────
# FreeMind XML codec
# ─────────────────────────────────────────────────────────────────────────────


def escape_xml(value: str) -> str:
    """Escape the five XML metacharacters."""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def to_freemind(mind_map: MindMap) -> str:
    """Export a MindMap to FreeMind .mm XML.

    Containers become open <node> elements wrapping their children;
    leaves become self-closing elements.
    """
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', f'<map version="{FREEMIND_VERSION}">']

    # None marks the closing tag of a container
    stack: list[tuple[GraphNode | None, int]] = [(mind_map.root, 1)]
    while stack:
        node, level = stack.pop()
        indent = "  " * level
        if node is None:
            lines.append(f"{indent}</node>")
            continue
        text = escape_xml(node.original_text or FREEMIND_DEFAULT_TEXT)
        children = node.sorted_children()
        if children or node.is_root:
            lines.append(f'{indent}<node TEXT="{text}">')
            stack.append((None, level))
            stack.extend((child, level + 1) for child in reversed(children))
        else:
            lines.append(f'{indent}<node TEXT="{text}"/>')

    lines.append("</map>")
    return "\n".join(lines)


def _outline_from_elements(root_element: ET.Element) -> list[OutlineNode]:
    forest: list[OutlineNode] = []
    # findall("node") matches direct children only
    stack = [(child, forest, 0) for child in reversed(root_element.findall("node"))]
    while stack:
        element, siblings, level = stack.pop()
        outline_node = OutlineNode(
            text=normalize_node_text(element.get("TEXT") or "") or FREEMIND_DEFAULT_TEXT,
            indent_level=level,
        )
        siblings.append(outline_node)
        stack.extend(
            (child, outline_node.children, level + 1)
            for child in reversed(element.findall("node"))
        )
    return forest


def from_freemind(xml_text: str, label_style: LabelStyle | None = None) -> ImportResult | None:
    """Import a MindMap from FreeMind .mm XML.

    The first <node> directly under <map> becomes the root; its TEXT is
    the root label. IDs are minted afresh and categories default to Other.

    Returns:
        ImportResult, or None for unparseable XML or a missing root <node>.
    """
    try:
        tree = ET.fromstring(xml_text)
    except (ET.ParseError, TypeError, ValueError) as exc:
        logger.warning("FreeMind import failed: %s", exc)
        return None

    if tree.tag != "map":
        logger.warning("FreeMind import failed: top-level element is <%s>", tree.tag)
        return None
    root_element = tree.find("node")
    if root_element is None:
        logger.warning("FreeMind import failed: no root <node>")
        return None

    forest = _outline_from_elements(root_element)

    builder = MindMapBuilder(
        auto_group=False,
        label_style=label_style,
        root_label=root_element.get("TEXT") or ROOT_LABEL,
    )
    builder.add_outline(forest)
    return ImportResult(builder.build(), DocumentMetadata(auto_group=False))


# ─────────────────────────────────────────────────────────────────────────────
# Share payload and format registry
# ─────────────────────────────────────────────────────────────────────────────


def to_share_payload(
    mind_map: MindMap,
    metadata: DocumentMetadata | None = None,
    created: datetime | None = None,
) -> dict[str, Any]:
    """Plain structured payload handed to the link-sharing collaborator."""
    metadata = metadata or DocumentMetadata()
    return {
        **serialize_document(mind_map),
        "metadata": {
            "version": FORMAT_VERSION,
            "created": (created or datetime.now(timezone.utc)).isoformat(),
            "layout": metadata.layout.value,
            "auto_group": metadata.auto_group,
        },
    }


def from_share_payload(
    payload: Any,
    label_style: LabelStyle | None = None,
) -> ImportResult | None:
    """Rebuild a document from a decoded share payload, or None if invalid."""
    mind_map = document_from_dict(payload, label_style)
    if mind_map is None:
        return None
    return ImportResult(mind_map, DocumentMetadata.from_dict(payload.get("metadata")))


EXPORTERS: dict[str, Callable[[MindMap, DocumentMetadata], str]] = {
    "json": lambda mind_map, metadata: to_json(mind_map, metadata),
    "text": lambda mind_map, metadata: to_text(mind_map),
    "freemind": lambda mind_map, metadata: to_freemind(mind_map),
}

IMPORTERS: dict[str, Callable[[str, LabelStyle | None], ImportResult | None]] = {
    "json": from_json,
    "text": from_text,
    "freemind": from_freemind,
}

FORMAT_EXTENSIONS: dict[str, str] = {
    ".json": "json",
    ".txt": "text",
    ".md": "text",
    ".mm": "freemind",
    ".xml": "freemind",
}


def export_document(
    fmt: str,
    mind_map: MindMap,
    metadata: DocumentMetadata | None = None,
) -> str:
    """Export with a named codec.

    Raises:
        ValueError: If fmt is not a known format.
    """
    try:
        exporter = EXPORTERS[fmt]
    except KeyError:
        raise ValueError(f"Unknown format: {fmt}") from None
    return exporter(mind_map, metadata or DocumentMetadata())


def import_document(
    fmt: str,
    payload: str,
    label_style: LabelStyle | None = None,
) -> ImportResult | None:
    """Import with a named codec.

    Raises:
        ValueError: If fmt is not a known format.
    """
    try:
        importer = IMPORTERS[fmt]
    except KeyError:
        raise ValueError(f"Unknown format: {fmt}") from None
    return importer(payload, label_style)


__all__ = [
    "DocumentMetadata",
    "EXPORTERS",
    "FORMAT_EXTENSIONS",
    "IMPORTERS",
    "ImportResult",
    "Layout",
    "document_from_dict",
    "escape_xml",
    "export_document",
    "from_freemind",
    "from_json",
    "from_share_payload",
    "from_text",
    "import_document",
    "serialize_document",
    "serialize_edge",
    "serialize_node",
    "to_freemind",
    "to_json",
    "to_share_payload",
    "to_text",
]
