"""
Configuration file loader for asp-sanitizer.

Supports loading configuration from:
- asp.toml / .asp.toml
- asp.yml / .asp.yml / asp.yaml / .asp.yaml

Settings may sit at the top level, under an ``[asp]`` or ``[sanitizer]``
section, or under ``[asp.sanitizer]``. CLI flags override config file
values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import SanitizerConfig

# Optional imports for config file parsing
try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # type: ignore
    except ImportError:
        tomllib = None  # type: ignore

try:
    import yaml
except ImportError:
    yaml = None  # type: ignore

logger = logging.getLogger(__name__)

# Config file search order (first found wins)
CONFIG_FILE_NAMES = [
    "asp.toml",
    ".asp.toml",
    "asp.yml",
    ".asp.yml",
    "asp.yaml",
    ".asp.yaml",
]


def find_config_file(root: Path) -> Path | None:
    """
    Find a configuration file in a directory.

    Args:
        root: Directory to search

    Returns:
        Path to the config file, or None if not found
    """
    for name in CONFIG_FILE_NAMES:
        config_path = root / name
        if config_path.exists() and config_path.is_file():
            return config_path
    return None


def _select_section(data: Any) -> dict[str, Any]:
    """Pick the sanitizer settings out of a parsed config document."""
    if not isinstance(data, dict):
        return {}

    section = data
    if isinstance(section.get("asp"), dict):
        section = section["asp"]
    if isinstance(section.get("sanitizer"), dict):
        section = section["sanitizer"]
    return section


def _parse_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML config file."""
    if tomllib is None:
        raise ImportError(
            "TOML support requires 'tomli' package (Python < 3.11) or Python 3.11+. "
            "Install with: pip install tomli"
        )

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return _select_section(data)


def _parse_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML config file."""
    if yaml is None:
        raise ImportError(
            "YAML support requires 'pyyaml' package. Install with: pip install pyyaml"
        )

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return _select_section(data)


def load_config(root: Path, config_path: Path | None = None) -> SanitizerConfig:
    """
    Load sanitizer configuration from a config file.

    Unreadable or malformed files are logged and ignored; the defaults are
    returned instead.

    Args:
        root: Directory searched when no explicit path is given
        config_path: Explicit path to config file (optional)

    Returns:
        SanitizerConfig with loaded values
    """
    if config_path is None:
        config_path = find_config_file(root)

    if config_path is None or not config_path.exists():
        return SanitizerConfig()

    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            data = _parse_toml(config_path)
        elif suffix in (".yml", ".yaml"):
            data = _parse_yaml(config_path)
        else:
            logger.warning("Unsupported config file type: %s", config_path.name)
            return SanitizerConfig()
    except Exception as e:
        logger.warning("Ignoring config file %s: %s", config_path, e)
        return SanitizerConfig()

    logger.debug("Loaded config from %s", config_path)
    return SanitizerConfig.from_dict(data)


def merge_cli_with_config(
    config: SanitizerConfig,
    *,
    # CLI arguments (None means not specified on CLI)
    no_redact: bool = False,
    replacement: str | None = None,
    extra_names: str | None = None,
) -> SanitizerConfig:
    """
    Merge CLI arguments with config file values.

    CLI arguments take precedence over config file values. The input
    config is not modified.

    Returns:
        A new SanitizerConfig with the merged values
    """
    merged = SanitizerConfig.from_dict(config.to_dict())

    if no_redact:
        merged.enabled = False

    if replacement:
        merged.replacement = replacement

    if extra_names:
        for name in extra_names.split(","):
            name = name.strip().lower()
            if name and name not in merged.extra_sensitive_names:
                merged.extra_sensitive_names.append(name)

    return merged
