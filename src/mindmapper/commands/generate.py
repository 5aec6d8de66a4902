"""
mindmapper.commands.generate - Build a mind map from an outline file.

- `mindmapper generate tasks.txt -o tasks.mm` - FreeMind export (by extension)
- `mindmapper generate - --format json` - Read the outline from stdin
"""

from __future__ import annotations

import argparse
import logging
import sys

from mindmapper.commands.io_helpers import infer_format, read_input, write_output
from mindmapper.config import get_config
from mindmapper.graph.factory import build_mind_map
from mindmapper.graph.serialize import DocumentMetadata, Layout, export_document

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace) -> int:
    """Run the generate command."""
    config = get_config(getattr(args, "config", None))
    generate = config.get("generate", {})

    auto_group = getattr(args, "auto_group", None)
    if auto_group is None:
        auto_group = bool(generate.get("auto_group", True))
    layout = Layout.parse(getattr(args, "layout", None) or generate.get("layout"))

    text = read_input(args.input)
    if not text.strip():
        print("Error: outline is empty", file=sys.stderr)
        return 1

    mind_map = build_mind_map(text, config=config, auto_group=auto_group)
    fmt = infer_format(args.output, args.format, "json")
    metadata = DocumentMetadata(layout=layout, auto_group=auto_group, input_text=text)

    write_output(args.output, export_document(fmt, mind_map, metadata))
    logger.info("Generated %d nodes as %s", mind_map.node_count(), fmt)
    return 0
