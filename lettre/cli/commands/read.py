"""Read command implementation."""

import json
from pathlib import Path

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail, require_file
from lettre.config import load_config
from lettre.errors import LettreError
from lettre.read import Message

OUTPUT_FORMATS = ("text", "json", "headers", "raw")

DEFAULT_HEADERS = ["Date", "From", "To", "Subject"]


def read(
    path: Annotated[str, typer.Argument(help="Path to the message file")],
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output format: text, json, headers, raw")
    ] = "text",
    mark_read: Annotated[
        bool, typer.Option("--mark-read", help="Mark the message read after display")
    ] = False,
):
    """Display a message."""
    if output not in OUTPUT_FORMATS:
        fail(f"Invalid output format: {output}. Choose from: {', '.join(OUTPUT_FORMATS)}")

    require_file(path)

    headers = load_config().get("index", {}).get("headers", DEFAULT_HEADERS)
    msg = Message(path)

    try:
        if output == "raw":
            typer.echo(Path(path).read_bytes().decode("utf-8", errors="replace"), nl=False)
        elif output == "json":
            typer.echo(json.dumps(msg.to_dict(headers), indent=2, ensure_ascii=False))
        else:
            for name in headers:
                typer.echo(f"{name}: {msg.header(name)}")
            if output == "text":
                typer.echo()
                for line in msg.body():
                    typer.echo(line)

        if mark_read:
            msg.mark_read()
    except (LettreError, OSError) as e:
        fail(str(e))
