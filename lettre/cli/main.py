"""Main CLI entry point for lettre."""

import logging
import sys

import typer
from typing_extensions import Annotated

from lettre import __version__
from lettre.cli import commands

app = typer.Typer(
    name="lettre",
    help="Maildir mail reader: browse folders, list and read messages, change flags",
    no_args_is_help=True,
)

# Single commands
app.command("folders")(commands.folders.folders)
app.command("index")(commands.index.index)
app.command("read")(commands.read.read)
app.command("delete")(commands.delete.delete)
app.command("move")(commands.move.move)

# Register command groups
app.add_typer(commands.flag.app, name="flag")
app.add_typer(commands.mark.app, name="mark")
app.add_typer(commands.config.app, name="config")


def _setup_logging(verbose: bool) -> None:
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=fmt,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


@app.callback()
def callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")
    ] = False,
):
    """Maildir mail reader."""
    _setup_logging(verbose)


@app.command()
def version():
    """Show version information."""
    typer.echo(f"lettre version {__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
