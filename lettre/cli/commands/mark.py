"""Mark command implementation."""

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail, require_file
from lettre.errors import LettreError
from lettre.read import Message

app = typer.Typer(help="Mark a message read or unread")

PathArg = Annotated[str, typer.Argument(help="Path to the message file")]


@app.command("read")
def mark_read(path: PathArg):
    """Mark a message read and print its new path."""
    require_file(path)
    msg = Message(path)
    try:
        msg.mark_read()
    except LettreError as e:
        fail(str(e))
    typer.echo(msg.path)


@app.command("new")
def mark_new(path: PathArg):
    """Mark a message unread and print its new path."""
    require_file(path)
    msg = Message(path)
    try:
        msg.mark_new()
    except LettreError as e:
        fail(str(e))
    typer.echo(msg.path)
