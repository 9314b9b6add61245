"""Index command implementation."""

import os

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail, load_navigator
from lettre.errors import LettreError
from lettre.storage import is_maildir


def _resolve_folder(name: str, prefix: str | None) -> str:
    """A folder given by path, or by name relative to the prefix."""
    if is_maildir(name):
        return name
    if prefix and is_maildir(os.path.join(prefix, name)):
        return os.path.join(prefix, name)
    fail(f"Not a Maildir folder: {name}")


def index(
    folders: Annotated[
        list[str], typer.Argument(help="Folders to list (paths or names under the prefix)")
    ],
    limit: Annotated[
        str | None,
        typer.Option("--limit", "-l", help="Message filter: all, new or a substring"),
    ] = None,
    format: Annotated[
        str | None,
        typer.Option("--format", help="Line template (FLAGS FROM TO SUBJECT DATE YEAR MONTH DAY)"),
    ] = None,
    show_path: Annotated[
        bool, typer.Option("--path", help="Append the message file path to each line")
    ] = False,
):
    """List the messages of one or more folders."""
    try:
        nav = load_navigator(index_limit=limit, index_format=format)
        for name in folders:
            nav.add_folder(_resolve_folder(name, nav.prefix))
    except LettreError as e:
        fail(str(e))

    entries = nav.index_entries()
    if not entries:
        typer.echo("No messages found.")
        return

    for msg, line in entries:
        typer.echo(f"{line}\t{msg.path}" if show_path else line)
