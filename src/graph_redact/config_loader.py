"""
Configuration file loader for graph-redact.

Supports loading configuration from:
- graph-redact.toml / .graph-redact.toml
- graph-redact.yml / .graph-redact.yml / graph-redact.yaml / .graph-redact.yaml

Values may sit at the top level or under a ``graph-redact`` section.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .config import ConfigError, RedactionConfig

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore


SECTION_NAME = "graph-redact"

# Config file search order (first found wins)
CONFIG_FILE_NAMES = [
    "graph-redact.toml",
    ".graph-redact.toml",
    "graph-redact.yml",
    ".graph-redact.yml",
    "graph-redact.yaml",
    ".graph-redact.yaml",
]


def find_config_file(directory: Path) -> Path | None:
    """
    Find a configuration file in a directory.

    Args:
        directory: Directory to search

    Returns:
        Path to the config file, or None if not found
    """
    for name in CONFIG_FILE_NAMES:
        config_path = directory / name
        if config_path.exists() and config_path.is_file():
            return config_path
    return None


def _unwrap_section(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    section = data.get(SECTION_NAME)
    if isinstance(section, dict):
        return section
    return data


def _parse_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML config file."""
    with open(path, "rb") as f:
        return _unwrap_section(tomllib.load(f))


def _parse_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML config file."""
    with open(path, encoding="utf-8") as f:
        return _unwrap_section(yaml.safe_load(f))


def load_config_data(config_path: Path) -> dict[str, Any]:
    """
    Parse a config file into a plain dictionary.

    Raises:
        ConfigError: If the file type is unsupported or the file can't be parsed
    """
    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            return _parse_toml(config_path)
        if suffix in (".yml", ".yaml"):
            return _parse_yaml(config_path)
    except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

    raise ConfigError(f"Unsupported config file type: {config_path.name}")


def load_config(
    directory: Path | None = None,
    config_path: Path | None = None,
) -> RedactionConfig:
    """
    Load redaction configuration.

    Args:
        directory: Directory searched when ``config_path`` is not given
            (defaults to the working directory)
        config_path: Explicit path to config file (optional)

    Returns:
        RedactionConfig with loaded values, or defaults when no file is found
    """
    if config_path is None:
        config_path = find_config_file(directory or Path.cwd())

    if config_path is None:
        return RedactionConfig()

    if not config_path.exists():
        raise ConfigError(f"Config file does not exist: {config_path}")

    return RedactionConfig.from_dict(load_config_data(config_path))
