"""Config commands for the settings file.

Provides commands to show the effective settings, write a default
settings file and print its location.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from dirwalk.cli.types import load_cli_settings
from dirwalk.core.config import Settings, SettingsError, save_settings
from dirwalk.core.paths import get_settings_path
from dirwalk.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Show and initialize the settings file.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show the effective settings (file values over defaults)."""
    settings = load_cli_settings()

    if json_output:
        typer.echo(json.dumps(settings.model_dump(), indent=2))
        return

    path = get_settings_path()
    source = str(path) if path.exists() else "defaults (no settings file)"
    table = Table(title=f"Settings: {source}", header_style="bold_header", border_style="border")
    table.add_column("Key", style="info")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, repr(value) if isinstance(value, str) else str(value))
    console.print(table)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with all default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_warning(f"Settings file already exists: {path} (use --force to overwrite)")
        return

    try:
        saved = save_settings(Settings(), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    print_success(f"Settings written to {saved}")


@app.command()
def path() -> None:
    """Print the settings file location."""
    typer.echo(str(get_settings_path()))
