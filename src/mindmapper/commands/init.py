"""
mindmapper.commands.init - Create a .mindmapper.toml with the default settings.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mindmapper.config import CONFIG_FILENAME, render_default_config


def run(args: argparse.Namespace) -> int:
    """Run the init command."""
    directory = Path(getattr(args, "directory", None) or Path.cwd())
    target = directory / CONFIG_FILENAME

    if target.exists() and not getattr(args, "force", False):
        print(f"{target} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    target.write_text(render_default_config(), encoding="utf-8")
    print(f"Created {target}")
    return 0
