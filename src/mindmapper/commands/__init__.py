"""
mindmapper.commands - CLI command implementations
"""

__all__ = [
    "convert",
    "generate",
    "init",
]
