"""Configuration management module.

Handles loading, saving, and accessing the lettre configuration.
Config is stored at ~/.config/lettre/config.toml

Usage:
    from lettre.config import load_config, set_config_value

    config = load_config()
    prefix = config.get("maildir", {}).get("prefix")
"""

import tomllib

import tomli_w

from .paths import CONFIG_FILE, ensure_config_dir
from .schema import ComposeConfig, IndexConfig, LettreConfig, MaildirConfig
from .template import CONFIG_TEMPLATE

# Re-export for convenience
__all__ = [
    "load_config",
    "save_config",
    "init_config",
    "set_config_value",
    "CONFIG_FILE",
    "LettreConfig",
    "MaildirConfig",
    "IndexConfig",
    "ComposeConfig",
]

# Parsed config file, read once per process unless forced.
_cached_config: LettreConfig | None = None

# Fields holding lists, with the separator used when setting them from the CLI.
# Date patterns contain commas themselves.
_LIST_FIELDS = {"date_formats": "|", "headers": ","}


def load_config(*, force_reload: bool = False) -> LettreConfig:
    """Read config.toml, or return the cached copy.

    A missing file is an empty configuration; every setting then has its
    built-in default.

    Args:
        force_reload: Read the file again even if it was already loaded.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    if not CONFIG_FILE.exists():
        _cached_config = {}
        return _cached_config

    with open(CONFIG_FILE, "rb") as f:
        _cached_config = tomllib.load(f)

    return _cached_config


def save_config(config: LettreConfig) -> None:
    """Write ``config`` to config.toml and make it the cached copy."""
    global _cached_config

    ensure_config_dir()

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(config, f)

    _cached_config = config


def init_config(*, overwrite: bool = False) -> bool:
    """Write the commented template to config.toml.

    Returns:
        False, leaving the file alone, if it exists and ``overwrite`` is not set.
    """
    ensure_config_dir()

    if CONFIG_FILE.exists() and not overwrite:
        return False

    CONFIG_FILE.write_text(CONFIG_TEMPLATE)
    return True


def set_config_value(key: str, value: str) -> None:
    """Set a configuration value using dot notation.

    Examples:
        set_config_value("maildir.prefix", "~/Mail")
        set_config_value("index.headers", "Date,From,Subject")

    Args:
        key: Dot-separated key path (e.g., "index.limit").
        value: Value to set (list fields are split on their separator).

    Raises:
        ValueError: If the key is empty or walks through a non-table value.
    """
    config = load_config(force_reload=True)

    parts = key.split(".")
    if not all(parts):
        raise ValueError(f"Invalid key: {key!r}")

    # Navigate to parent dict, creating intermediate dicts as needed
    current: dict = config
    for part in parts[:-1]:
        if part not in current:
            current[part] = {}
        current = current[part]
        if not isinstance(current, dict):
            raise ValueError(f"'{part}' is not a section")

    final_key = parts[-1]
    current[final_key] = _convert_value(final_key, value)

    save_config(config)


def _convert_value(key: str, value: str) -> str | list[str]:
    """Convert string value to appropriate type based on field name.

    Known list fields are split on their separator, everything else stays str.
    """
    if key in _LIST_FIELDS:
        return [item.strip() for item in value.split(_LIST_FIELDS[key]) if item.strip()]

    return value
