"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import locale
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from dirwalk import __version__
from dirwalk.cli.commands import browse, config, history, scan
from dirwalk.utils.formatting import err_console

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dirwalk",
    help="Browse, inspect and edit a directory tree with undo.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dirwalk version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route dirwalk's log records to stderr through Rich."""
    package_logger = logging.getLogger("dirwalk")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def configure_collation() -> None:
    """Collate display paths by the user's locale instead of code points."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Cannot apply locale collation, using code-point order: %s", e)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging on stderr.",
        ),
    ] = False,
) -> None:
    """dirwalk - browse a directory tree and undo what you change.

    Lists every entry under a directory, lets you copy, delete, chmod,
    create, edit, rename and move them, and reverses any of those
    changes from an in-memory undo history.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)
    configure_collation()


app.add_typer(scan.app, name="scan")
app.add_typer(browse.app, name="browse")
app.add_typer(history.app, name="history")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
