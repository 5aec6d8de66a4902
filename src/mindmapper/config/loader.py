"""
mindmapper.config.loader - Configuration discovery, parsing and merging

Configuration is resolved in three layers, later layers winning:

1. DEFAULT_CONFIG
2. The nearest .mindmapper.toml (or an explicit path)
3. MINDMAPPER_<SECTION>_<KEY> environment variables
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from mindmapper.config.defaults import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".mindmapper.toml"
ENV_PREFIX = "MINDMAPPER_"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


def find_config_file(start_path: Path) -> Path | None:
    """Find .mindmapper.toml in start_path or any parent directory.

    Args:
        start_path: Directory to start searching from.

    Returns:
        Path to the config file, or None if none exists up to the filesystem root.
    """
    current = Path(start_path).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def parse_toml_document(content: str) -> tomlkit.TOMLDocument:
    """Parse TOML content, preserving formatting for round-trip edits."""
    return tomlkit.parse(content)


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML content into plain Python values."""
    return parse_toml_document(content).unwrap()


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into a copy of base.

    Nested dicts merge key by key; any other value replaces the base value.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Interpret an environment variable string.

    JSON arrays and objects, booleans and numbers are converted; malformed
    JSON and everything else stay strings.
    """
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if any(ch.isdigit() for ch in stripped):
        for number in (int, float):
            try:
                return number(stripped)
            except ValueError:
                continue
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply MINDMAPPER_<SECTION>_<KEY> overrides in place.

    The first underscore-separated word after the prefix names the
    section; the rest, lowercased, is the key. Missing sections are created.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX):].lower().partition("_")
        if not section or not key:
            continue
        target = config.setdefault(section, {})
        if not isinstance(target, dict):
            continue
        target[key] = _try_parse_env_value(raw)
        logger.debug("Config override from %s: %s.%s", name, section, key)
    return config


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file and merge it over the defaults.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    try:
        user_config = parse_toml(content)
    except TOMLKitError as exc:
        raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc
    logger.debug("Loaded config from %s", config_path)
    return merge_configs(DEFAULT_CONFIG, user_config)


def get_config(
    config_path: Path | None = None,
    start_path: Path | None = None,
) -> dict[str, Any]:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit config file (skips discovery).
        start_path: Directory to start discovery from (defaults to cwd).

    Returns:
        Defaults merged with the config file, then environment overrides.

    Raises:
        ConfigError: If a config file exists but cannot be parsed.
    """
    if config_path is None:
        config_path = find_config_file(start_path or Path.cwd())

    if config_path is not None:
        config = load_config(config_path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)

    return _apply_env_overrides(config)


def render_default_config() -> str:
    """Render DEFAULT_CONFIG as a commented TOML document."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("mindmapper configuration"))
    doc.add(tomlkit.nl())
    for section, values in DEFAULT_CONFIG.items():
        table = tomlkit.table()
        for key, value in values.items():
            table.add(key, value)
        doc.add(section, table)
    return tomlkit.dumps(doc)
