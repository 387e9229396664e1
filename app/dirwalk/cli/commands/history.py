"""History command for viewing past actions.

This module provides the `dirwalk history` command for viewing the
action journal written by browse sessions.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from dirwalk.core.state import StateManager
from dirwalk.models.history import HistoryEntry
from dirwalk.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View history of filesystem changes.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    since: Annotated[
        str | None,
        typer.Option(
            "--since",
            help="Show entries since date (YYYY-MM-DD).",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of filesystem changes.

    Each entry shows the action type, the affected path, the timestamp
    and whether the action went onto the session's undo stack. The undo
    stack itself lives only as long as the browse session.

    Examples:
        dirwalk history              # Show last 20 entries
        dirwalk history -n 50        # Show last 50 entries
        dirwalk history --since 2026-01-01
        dirwalk history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    state = StateManager()
    entries = state.get_history(limit=limit)

    if since:
        try:
            since_parsed = datetime.fromisoformat(since)
        except ValueError:
            typer.echo(f"Invalid date format: {since}. Use YYYY-MM-DD.", err=True)
            raise typer.Exit(code=1) from None
        if since_parsed.tzinfo is None:
            since_date = since_parsed.strftime("%Y-%m-%d")
            entries = [e for e in entries if e.timestamp[:10] >= since_date]
        else:
            entries = [e for e in entries if datetime.fromisoformat(e.timestamp) >= since_parsed]

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        _print_json(entries)
    else:
        _print_table(entries)


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as Rich table.

    Args:
        entries: List of history entries to display.
    """
    table = Table(title="Filesystem History", header_style="bold_header", border_style="border")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="info")
    table.add_column("Action", style="success")
    table.add_column("Path", style="text")
    table.add_column("Undo?", style="warning")

    for entry in entries:
        path = escape(entry.path)
        if entry.old_path is not None:
            path = f"{escape(entry.old_path)} -> {path}"
        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            entry.action_type.value,
            path,
            "[success]Yes[/]" if entry.reversible else "[error]No[/]",
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO 8601 timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")


def _print_json(entries: list[HistoryEntry]) -> None:
    """Print history as JSON for scripting."""
    output = [entry.to_dict() for entry in entries]
    typer.echo(json.dumps(output, indent=2))
