"""Helpers shared by the CLI commands."""

import os
from typing import NoReturn

import typer

from lettre.config import load_config
from lettre.nav import Navigator


def fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    typer.echo(message, err=True)
    raise typer.Exit(1)


def require_file(path: str) -> None:
    if not os.path.isfile(path):
        fail(f"File not found: {path}")


def load_navigator(**overrides: str | None) -> Navigator:
    """Build a navigator from the config file, with command line overrides.

    Keyword names are ``section_key`` pairs such as ``maildir_prefix`` or
    ``index_limit``; None values leave the configured value alone.
    """
    config = load_config()
    sections = {
        "maildir": dict(config.get("maildir", {})),
        "index": dict(config.get("index", {})),
    }

    for name, value in overrides.items():
        if value is None:
            continue
        section, _, key = name.partition("_")
        sections[section][key] = value

    return Navigator.from_config({**config, **sections})
