"""Outline parsing.

Exports:
- OutlineNode: One outline line with its nested lines
- OutlineParser: Stack-based indentation parser
- indent_level: Indentation level of a raw line
- parse_outline: Convenience wrapper around OutlineParser
"""

from mindmapper.graph.parsers.outline import (
    OutlineNode,
    OutlineParser,
    indent_level,
    parse_outline,
)

__all__ = [
    "OutlineNode",
    "OutlineParser",
    "indent_level",
    "parse_outline",
]
