"""Shared option types and helpers for CLI commands.

The browse and scan commands take the same directory argument and the
same filter/sort flags; they are defined once here.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from dirwalk.core.config import Settings, SettingsError, load_settings_or_default
from dirwalk.filesystem.models import EntryType
from dirwalk.utils.formatting import print_error

DirectoryArgument = Annotated[
    Path | None,
    typer.Argument(
        help="Directory to browse (default: current directory).",
        show_default=False,
    ),
]
SizeOption = Annotated[
    bool,
    typer.Option("--size", "-s", help="Sort by size, largest first."),
]
LinksOption = Annotated[
    bool,
    typer.Option("--links", "-l", help="Show symbolic links."),
]
DirsOption = Annotated[
    bool,
    typer.Option("--dirs", "-d", help="Show directories."),
]
FilesOption = Annotated[
    bool,
    typer.Option("--files", "-f", help="Show regular files."),
]

_TYPE_FLAGS: tuple[tuple[EntryType, str], ...] = (
    (EntryType.LINK, "-l"),
    (EntryType.DIRECTORY, "-d"),
    (EntryType.FILE, "-f"),
)


def build_type_filter(links: bool, dirs: bool, files: bool) -> frozenset[EntryType] | None:
    """Turn the type flags into a filter.

    Returns:
        The requested types, or None if no flag was given (so the
        settings file decides).
    """
    selected: set[EntryType] = set()
    if links:
        selected.add(EntryType.LINK)
    if dirs:
        selected.add(EntryType.DIRECTORY)
    if files:
        selected.add(EntryType.FILE)
    return frozenset(selected) if selected else None


def describe_flags(type_filter: frozenset[EntryType], sort_by_size: bool) -> str:
    """Short description of the active flags for the header line."""
    flags: list[str] = []
    if sort_by_size:
        flags.append("-s")
    for entry_type, flag in _TYPE_FLAGS:
        if entry_type in type_filter:
            flags.append(flag)
    return "Used flags: " + (" ".join(flags) if flags else "none")


def resolve_root(directory: Path | None) -> str:
    """Resolve the scan root, exiting with an error if it is unusable."""
    raw = os.fspath(directory) if directory is not None else os.getcwd()
    resolved = os.path.realpath(raw)
    if not os.path.isdir(resolved):
        print_error(f"{resolved} is not a directory")
        raise typer.Exit(code=1)
    return resolved


def load_cli_settings() -> Settings:
    """Load settings for a CLI command, exiting on an invalid file."""
    try:
        return load_settings_or_default()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
