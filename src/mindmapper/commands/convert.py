"""
mindmapper.commands.convert - Convert a mind map between formats.

- `mindmapper convert map.json -o map.mm` - JSON to FreeMind
- `mindmapper convert map.mm --to text` - FreeMind to an outline on stdout
"""

from __future__ import annotations

import argparse
import logging
import sys

from mindmapper.commands.io_helpers import infer_format, read_input, write_output
from mindmapper.config import get_config
from mindmapper.graph.factory import label_style_from_config
from mindmapper.graph.serialize import export_document, import_document

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace) -> int:
    """Run the convert command."""
    config = get_config(getattr(args, "config", None))

    source_format = infer_format(args.input, args.source_format, None)
    if source_format is None:
        print(
            f"Error: cannot tell the format of {args.input}; pass --from",
            file=sys.stderr,
        )
        return 1
    target_format = infer_format(args.output, args.target_format, "text")

    result = import_document(source_format, read_input(args.input), label_style_from_config(config))
    if result is None:
        print(f"Error: {args.input} is not a valid {source_format} mind map", file=sys.stderr)
        return 1

    write_output(args.output, export_document(target_format, result.document, result.metadata))
    logger.info("Converted %s to %s", source_format, target_format)
    return 0
