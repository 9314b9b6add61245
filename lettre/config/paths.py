"""Path constants and directory utilities for lettre config.

Follows the XDG Base Directory specification:
- Config: $XDG_CONFIG_HOME/lettre/ (default ~/.config/lettre/)
"""

import os
from pathlib import Path


CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / "lettre"
CONFIG_FILE = CONFIG_DIR / "config.toml"


def ensure_config_dir() -> Path:
    """Create config directory if it doesn't exist.

    Returns the config directory path.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR
