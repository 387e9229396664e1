"""Scan command for listing a directory tree.

This module provides the `dirwalk scan` command, a non-interactive
listing of the same sorted entry list the browser shows.
"""

import json
from enum import Enum
from typing import Annotated

import typer
from rich.markup import escape

from dirwalk.cli.display import create_entries_table
from dirwalk.cli.types import (
    DirectoryArgument,
    DirsOption,
    FilesOption,
    LinksOption,
    SizeOption,
    build_type_filter,
    load_cli_settings,
    resolve_root,
)
from dirwalk.errors import DirwalkError
from dirwalk.filesystem.models import Entry
from dirwalk.filesystem.scanner import DirectoryScanner
from dirwalk.utils.formatting import console, format_size, print_error, print_info

app = typer.Typer(
    name="scan",
    help="List a directory tree without entering the browser.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options for scan."""

    TABLE = "table"
    JSON = "json"


@app.callback(invoke_without_command=True)
def scan(
    ctx: typer.Context,
    directory: DirectoryArgument = None,
    size: SizeOption = False,
    links: LinksOption = False,
    dirs: DirsOption = False,
    files: FilesOption = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            help="Limit number of results.",
        ),
    ] = None,
) -> None:
    """List every entry under DIRECTORY, sorted for display.

    Examples:
        dirwalk scan                # Everything under the current directory
        dirwalk scan ~/src -f -s    # Regular files only, largest first
        dirwalk scan --format json  # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = load_cli_settings()
    root = resolve_root(directory)
    type_filter = build_type_filter(links, dirs, files)
    scanner = DirectoryScanner(
        root,
        type_filter=settings.type_filter if type_filter is None else type_filter,
        max_entries=settings.max_entries,
    )

    try:
        entries = scanner.scan_sorted(sort_by_size=size or settings.sort_by_size)
    except DirwalkError as e:
        print_error(f"Failed to walk directory: {e}")
        raise typer.Exit(code=1) from None

    if not entries:
        print_info("No entries found.")
        return

    display_entries = entries[:limit] if limit else entries

    if output_format == OutputFormat.JSON:
        _print_json(display_entries)
        return

    console.print(create_entries_table(display_entries, title=escape(root)))
    total_size = sum(e.size for e in entries if e.is_file)
    console.print(f"\n[dim]{len(entries)} entries ({format_size(total_size)} in files)[/dim]")
    if limit and len(display_entries) < len(entries):
        console.print(
            f"[dim](showing {len(display_entries)} of {len(entries)}, limited to {limit})[/dim]"
        )


def _print_json(entries: list[Entry]) -> None:
    """Print entries as a JSON array."""
    data = [
        {
            "path": entry.full_path,
            "display_path": entry.display_path,
            "type": entry.entry_type.value,
            "size": entry.size,
            "mode": f"{entry.permissions:o}",
            "mtime": entry.mtime,
        }
        for entry in entries
    ]
    typer.echo(json.dumps(data, indent=2))
