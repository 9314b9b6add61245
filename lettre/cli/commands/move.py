"""Move command implementation."""

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail, require_file
from lettre.errors import LettreError
from lettre.nav import Navigator


def move(
    path: Annotated[str, typer.Argument(help="Path to the message file")],
    destination: Annotated[str, typer.Argument(help="Destination Maildir folder")],
):
    """Move a message into another folder and print its new path."""
    require_file(path)

    try:
        new_path = Navigator().move_selected(destination, path)
    except LettreError as e:
        fail(str(e))
    typer.echo(new_path)
