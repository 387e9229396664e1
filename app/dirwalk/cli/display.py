"""Shared Rich display functions for entries and session state.

Provides the entry table, the info panel and the file viewer used by
the scan and browse commands.
"""

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from dirwalk.core.session import BrowserSession, CommandStatus, EntryInfo
from dirwalk.filesystem.models import Entry, EntryType
from dirwalk.utils.formatting import (
    console,
    format_mode,
    format_mtime,
    format_size,
    print_error,
    print_success,
)

HELP_LINE = (
    "q:Quit j/k:Down/Up g N:Go c:Copy d:Del m:Chmod n:New "
    "e:Edit r:Ren p:Move u:Undo v:View"
)

_ENTRY_STYLES: dict[EntryType, str] = {
    EntryType.DIRECTORY: "entry.directory",
    EntryType.FILE: "entry.file",
    EntryType.LINK: "entry.link",
    EntryType.OTHER: "entry.other",
}


def format_entry_name(entry: Entry) -> str:
    """Render an entry's display path with its type style.

    Directories get a trailing slash.
    """
    style = _ENTRY_STYLES[entry.entry_type]
    suffix = "/" if entry.is_dir else ""
    return f"[{style}]{escape(entry.display_path)}{suffix}[/{style}]"


def create_entries_table(
    entries: list[Entry] | tuple[Entry, ...],
    *,
    title: str | None = None,
    selected: int | None = None,
    offset: int = 0,
) -> Table:
    """Create a Rich table listing entries.

    Args:
        entries: Entries to show (already windowed by the caller).
        title: Optional table title.
        selected: Absolute index of the selected entry, if any.
        offset: Absolute index of the first entry in the window.

    Returns:
        Rich Table configured for entry display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("Path", no_wrap=True)
    table.add_column("Size", justify="right", style="info")
    table.add_column("Perm", justify="center", style="muted")
    table.add_column("Modified", style="muted")

    for position, entry in enumerate(entries, start=offset):
        table.add_row(
            str(position),
            format_entry_name(entry),
            format_size(entry.size),
            format_mode(entry.mode),
            format_mtime(entry.mtime),
            style="entry.selected" if position == selected else None,
        )

    return table


def create_info_panel(info: EntryInfo | None) -> Panel:
    """Create the info panel for the selected entry."""
    if info is None:
        return Panel("[muted]No entries[/muted]", title="Info", border_style="border")
    body = "\n".join(
        [
            f"Name: {escape(info.name)}",
            f"Size: {info.size}",
            f"Type: {info.type_label}",
            f"Modified: {info.modified}",
            f"Perm: {info.permissions}",
        ]
    )
    return Panel(body, title="Info", border_style="border")


def visible_window(total: int, selected: int, height: int) -> tuple[int, int]:
    """Compute the [start, end) slice of entries that fits on screen.

    The selection is kept visible, roughly centered.
    """
    if total <= height:
        return 0, total
    start = max(0, selected - height // 2)
    start = min(start, total - height)
    return start, start + height


def render_session(session: BrowserSession, header: str, height: int = 20) -> None:
    """Print one frame: header, windowed entry table, info panel, help."""
    entries = session.entries
    start, end = visible_window(len(entries), session.selected, height)

    console.print(f"[muted]{escape(header)}[/muted]")
    console.print(
        create_entries_table(
            entries[start:end],
            title=escape(session.root),
            selected=session.selected,
            offset=start,
        )
    )
    console.print(create_info_panel(session.info()))
    console.print(f"[muted]{HELP_LINE}[/muted]")


def render_file_view(path: str, content: str) -> None:
    """Show the beginning of a file in a panel."""
    console.print(Panel(escape(content), title=escape(path), border_style="border"))


def print_status(status: CommandStatus) -> None:
    """Print a command status with success or error styling."""
    if status.success:
        print_success(status.message)
    else:
        print_error(status.message)
