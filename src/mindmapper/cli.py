"""
mindmapper.cli - Command-line interface.

Main entry point for the mindmapper CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mindmapper import __version__
from mindmapper.commands import convert, generate, init
from mindmapper.commands.io_helpers import FORMAT_CHOICES
from mindmapper.config import ConfigError
from mindmapper.graph.serialize import Layout


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mindmapper",
        description="Turn indented outlines into mind maps and convert between formats",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mindmapper generate tasks.txt                 # JSON mind map on stdout
  mindmapper generate tasks.txt -o tasks.mm     # FreeMind file
  mindmapper generate - --no-auto-group         # Read outline from stdin
  mindmapper convert map.json -o map.mm         # JSON to FreeMind
  mindmapper convert map.mm --to text           # FreeMind back to an outline

Configuration:
  mindmapper init                               # Create .mindmapper.toml here

Formats: json (lossless), text and freemind (lossy).

For detailed command help: mindmapper <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"mindmapper {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Build a mind map from an indented outline",
    )
    generate_parser.add_argument(
        "input",
        help="Outline file ('-' for stdin)",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
        metavar="PATH",
    )
    generate_parser.add_argument(
        "-f",
        "--format",
        choices=FORMAT_CHOICES,
        help="Output format (default: from the output extension, else json)",
    )
    generate_parser.add_argument(
        "--layout",
        choices=[layout.value for layout in Layout],
        help="Layout recorded in the document metadata",
    )
    group = generate_parser.add_mutually_exclusive_group()
    group.add_argument(
        "--auto-group",
        dest="auto_group",
        action="store_true",
        default=None,
        help="Color nodes by keyword category",
    )
    group.add_argument(
        "--no-auto-group",
        dest="auto_group",
        action="store_false",
        help="Inherit categories from parents instead",
    )

    # convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a mind map between json, text and freemind",
    )
    convert_parser.add_argument(
        "input",
        help="Input file ('-' for stdin, requires --from)",
    )
    convert_parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
        metavar="PATH",
    )
    convert_parser.add_argument(
        "--from",
        dest="source_format",
        choices=FORMAT_CHOICES,
        help="Input format (default: from the input extension)",
    )
    convert_parser.add_argument(
        "--to",
        dest="target_format",
        choices=FORMAT_CHOICES,
        help="Output format (default: from the output extension, else text)",
    )

    # init command
    init_parser = subparsers.add_parser(
        "init",
        help="Create .mindmapper.toml with default settings",
    )
    init_parser.add_argument(
        "--directory",
        type=Path,
        help="Where to create the file (default: current directory)",
        metavar="PATH",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    try:
        # Dispatch to command handlers
        if args.command == "generate":
            return generate.run(args)
        elif args.command == "convert":
            return convert.run(args)
        elif args.command == "init":
            return init.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except (ConfigError, OSError, ValueError) as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
