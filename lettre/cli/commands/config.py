"""`lettre config`: create, inspect and edit config.toml."""

import typer
from typing_extensions import Annotated

from lettre.cli.utils import fail
from lettre.config import CONFIG_FILE, init_config, load_config, set_config_value
from lettre.config.paths import CONFIG_DIR

app = typer.Typer(help="Inspect or change the lettre configuration")


@app.command()
def init(
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing config")
    ] = False,
):
    """Write a commented config.toml to start from."""
    if init_config(overwrite=force):
        typer.echo(f"Created config file: {CONFIG_FILE}")
        typer.echo(f"Config directory: {CONFIG_DIR}")
        typer.echo("Point maildir.prefix at the directory that holds your folders.")
    else:
        typer.echo(f"Config already exists at {CONFIG_FILE} (--force replaces it).")


@app.command()
def show(
    section: Annotated[
        str | None, typer.Option("--section", "-s", help="Show a single section")
    ] = None,
):
    """Print the settings from config.toml."""
    config = load_config()

    if not config:
        typer.echo("No configuration found.")
        typer.echo(f"Run 'lettre config init' to create {CONFIG_FILE}")
        return

    if section:
        if section not in config:
            fail(f"No [{section}] section in {CONFIG_FILE}")
        _display_section(section, config[section])
        return

    for name, values in config.items():
        if isinstance(values, dict):
            _display_section(name, values)
        else:
            typer.echo(f"{name} = {values}")


def _display_section(name: str, values: dict) -> None:
    typer.echo(f"[{name}]")
    for key, value in values.items():
        typer.echo(f"  {key} = {value}")
    typer.echo()


@app.command("set")
def set_value(
    key: Annotated[
        str,
        typer.Argument(help="Configuration key (dot notation, e.g., 'maildir.prefix')"),
    ],
    value: Annotated[str, typer.Argument(help="Configuration value")],
):
    """Store one setting, addressed as section.key.

    Examples:
        lettre config set maildir.prefix ~/Maildir
        lettre config set index.headers Date,From,Subject
    """
    try:
        set_config_value(key, value)
    except ValueError as e:
        fail(f"Invalid value: {e}")
    typer.echo(f"Set {key} = {value}")
