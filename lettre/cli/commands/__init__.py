"""CLI commands module."""

from . import config, delete, flag, folders, index, mark, move, read

__all__ = ["folders", "index", "read", "flag", "mark", "delete", "move", "config"]
