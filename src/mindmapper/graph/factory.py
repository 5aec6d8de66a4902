"""Graph Factory - Shared entry point for building a MindMap from outline text.

Commands and the session use this instead of wiring the parser, the
builder and the configuration together themselves.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mindmapper.config import DEFAULT_CONFIG, get_config
from mindmapper.graph.builder import (
    DEFAULT_PLACEHOLDER,
    MindMap,
    MindMapBuilder,
    normalize_node_text,
)
from mindmapper.graph.labels import LabelStyle
from mindmapper.graph.parsers import OutlineParser


def label_style_from_config(config: dict[str, Any]) -> LabelStyle:
    """LabelStyle from the [labels] section."""
    return LabelStyle.from_dict(config.get("labels", {}))


def builder_options(config: dict[str, Any]) -> dict[str, Any]:
    """Keyword arguments for MindMapBuilder drawn from a config dict."""
    generate = config.get("generate", {})
    editor = config.get("editor", {})
    return {
        "auto_group": bool(generate.get("auto_group", DEFAULT_CONFIG["generate"]["auto_group"])),
        "label_style": label_style_from_config(config),
        "placeholder_text": normalize_node_text(str(editor.get("placeholder_text", "")))
        or DEFAULT_PLACEHOLDER,
        "allow_root_children": bool(editor.get("allow_root_children", False)),
    }


def build_mind_map(
    text: str,
    config: dict[str, Any] | None = None,
    config_path: Path | None = None,
    auto_group: bool | None = None,
) -> MindMap:
    """Parse outline text and build a MindMap.

    Args:
        text: Indentation-delimited outline.
        config: Pre-loaded config dict (optional).
        config_path: Path to config file, used when config is None.
        auto_group: Overrides generate.auto_group when given.

    Returns:
        The built MindMap; empty text yields a root-only document.

    Priority:
        auto_group > config > config_path > defaults
    """
    if config is None:
        config = get_config(config_path)

    options = builder_options(config)
    if auto_group is not None:
        options["auto_group"] = auto_group

    builder = MindMapBuilder(**options)
    builder.add_outline(OutlineParser().parse(text))
    return builder.build()


__all__ = ["build_mind_map", "builder_options", "label_style_from_config"]
