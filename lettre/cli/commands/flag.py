"""Flag command implementation."""

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail, require_file
from lettre.errors import LettreError
from lettre.read import Message

app = typer.Typer(help="Add or remove Maildir flags on a message")

PathArg = Annotated[str, typer.Argument(help="Path to the message file")]
FlagArg = Annotated[str, typer.Argument(help="Flag letter, e.g. S, R, F, T")]


@app.command()
def add(path: PathArg, flag: FlagArg):
    """Add a flag and print the message's new path."""
    require_file(path)
    msg = Message(path)
    try:
        msg.add_flag(flag)
    except LettreError as e:
        fail(str(e))
    typer.echo(msg.path)


@app.command()
def remove(path: PathArg, flag: FlagArg):
    """Remove a flag and print the message's new path."""
    require_file(path)
    msg = Message(path)
    try:
        msg.remove_flag(flag)
    except LettreError as e:
        fail(str(e))
    typer.echo(msg.path)


@app.command("list")
def list_flags(path: PathArg):
    """Print the message's effective flags."""
    require_file(path)
    typer.echo(Message(path).flags)
