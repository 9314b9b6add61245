"""Delete command implementation."""

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail, require_file
from lettre.errors import LettreError
from lettre.nav import Navigator


def delete(
    path: Annotated[str, typer.Argument(help="Path to the message file")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Don't ask for confirmation")] = False,
):
    """Delete a message file."""
    require_file(path)

    if not yes:
        typer.confirm(f"Delete {path}?", abort=True)

    try:
        Navigator().delete_selected(path)
    except LettreError as e:
        fail(str(e))
    typer.echo(f"Deleted {path}")
