"""Folders command implementation."""

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail, load_navigator
from lettre.errors import LettreError


def folders(
    prefix: Annotated[
        str | None, typer.Option("--prefix", "-p", help="Directory holding the Maildir folders")
    ] = None,
    limit: Annotated[
        str | None,
        typer.Option("--limit", "-l", help="Folder filter: all, new or a path substring"),
    ] = None,
    format: Annotated[
        str | None,
        typer.Option("--format", help="Line template (PATH NAME UNREAD TOTAL)"),
    ] = None,
):
    """List Maildir folders under the prefix."""
    try:
        nav = load_navigator(maildir_prefix=prefix, maildir_limit=limit, maildir_format=format)
    except LettreError as e:
        fail(str(e))

    if nav.prefix is None:
        fail(
            "No Maildir prefix configured. Use --prefix or "
            "'lettre config set maildir.prefix ~/Maildir'"
        )

    if not nav.visible_folders:
        typer.echo("No folders found.")
        return

    for folder in nav.visible_folders:
        typer.echo(nav.format_folder(folder))
