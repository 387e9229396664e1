"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich, plus the
human-readable size, mode and time formats used by the info panel.
"""

import sys
from datetime import datetime

from rich.console import Console
from rich.markup import escape

from dirwalk.core.theme import get_theme

KIB = 1024
MIB = 1024 * 1024


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size: int) -> str:
    """Format a byte count for display.

    Below 1024 bytes the integer byte count is shown; below 1 MiB one
    decimal in KiB; otherwise one decimal in MiB.
    """
    if size < KIB:
        return f"{size} B"
    if size < MIB:
        return f"{size / KIB:.1f} KiB"
    return f"{size / MIB:.1f} MiB"


def format_mode(mode: int) -> str:
    """Format permission bits as octal (e.g. "644")."""
    return f"{mode & 0o777:o}"


def format_mtime(mtime: float) -> str:
    """Format a modification timestamp in local time."""
    return datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M:%S")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
