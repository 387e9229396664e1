"""Browse command: the interactive directory-tree browser.

This module provides the `dirwalk browse` command. It runs a single
synchronous loop: render the current frame, read one command line,
dispatch it to the session, print the resulting status.
"""

from collections.abc import Callable

import typer

from dirwalk.cli.display import (
    print_status,
    render_file_view,
    render_session,
)
from dirwalk.cli.types import (
    DirectoryArgument,
    DirsOption,
    FilesOption,
    LinksOption,
    SizeOption,
    build_type_filter,
    describe_flags,
    load_cli_settings,
    resolve_root,
)
from dirwalk.core.session import BrowserSession, CommandStatus, open_session
from dirwalk.core.state import StateManager
from dirwalk.errors import DirwalkError
from dirwalk.filesystem.models import EntryType
from dirwalk.utils.formatting import console, print_error, print_info

app = typer.Typer(
    name="browse",
    help="Browse and edit a directory tree interactively.",
    invoke_without_command=True,
)

_KIND_CHOICES: dict[str, EntryType] = {
    "f": EntryType.FILE,
    "d": EntryType.DIRECTORY,
    "l": EntryType.LINK,
}


@app.callback(invoke_without_command=True)
def browse(
    ctx: typer.Context,
    directory: DirectoryArgument = None,
    size: SizeOption = False,
    links: LinksOption = False,
    dirs: DirsOption = False,
    files: FilesOption = False,
) -> None:
    """Browse DIRECTORY, with undo for every change.

    Examples:
        dirwalk browse              # Browse the current directory
        dirwalk browse ~/src -d     # Directories only
        dirwalk browse -s -f        # Regular files, largest first
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = load_cli_settings()
    root = resolve_root(directory)
    type_filter = build_type_filter(links, dirs, files)

    try:
        session = open_session(
            root,
            settings=settings,
            type_filter=type_filter,
            sort_by_size=True if size else None,
            state=StateManager(),
        )
    except DirwalkError as e:
        print_error(f"Failed to walk directory: {e}")
        raise typer.Exit(code=1) from None

    with session:
        run_loop(session, describe_flags(session.type_filter, session.sort_by_size))


def run_loop(session: BrowserSession, header: str) -> None:
    """Run the browser until the user quits or input ends."""
    render_session(session, header, height=_table_height())
    while True:
        try:
            line = typer.prompt("Command", default="", show_default=False)
        except typer.Abort:
            break
        command, _, argument = line.strip().partition(" ")
        if command == "q":
            break
        if not command:
            continue
        handler = _HANDLERS.get(command)
        if handler is None:
            print_error(f"Unknown command: {command}")
            continue
        status = handler(session, argument.strip())
        if status is not None:
            print_status(status)
        render_session(session, header, height=_table_height())


def _table_height() -> int:
    return max(5, console.height - 14)


def _handle_down(session: BrowserSession, argument: str) -> CommandStatus | None:
    session.move_selection(1)
    return None


def _handle_up(session: BrowserSession, argument: str) -> CommandStatus | None:
    session.move_selection(-1)
    return None


def _handle_goto(session: BrowserSession, argument: str) -> CommandStatus | None:
    try:
        session.select(int(argument))
    except ValueError:
        return CommandStatus.failed(f"Not an index: {argument!r}")
    return None


def _handle_copy(session: BrowserSession, argument: str) -> CommandStatus | None:
    entry = session.selected_entry
    if entry is None or not entry.is_file:
        return CommandStatus.failed("Can only copy regular files")
    if not typer.confirm("Copy file?"):
        return None
    return session.copy_selected()


def _handle_delete(session: BrowserSession, argument: str) -> CommandStatus | None:
    entry = session.selected_entry
    if entry is None:
        return CommandStatus.failed("No entry selected")
    if not typer.confirm(f"Delete {entry.entry_type.label.lower()} {entry.display_path}?"):
        return None
    return session.delete_selected()


def _handle_chmod(session: BrowserSession, argument: str) -> CommandStatus | None:
    if session.selected_entry is None:
        return CommandStatus.failed("No entry selected")
    if not typer.confirm("Change permissions?"):
        return None
    mode_text = typer.prompt("Perms (octal, 755)")
    return session.chmod_selected(mode_text)


def _handle_create(session: BrowserSession, argument: str) -> CommandStatus | None:
    if not typer.confirm("Create new file/dir/link?"):
        return None
    name = typer.prompt("Name for file/dir/link")
    choice = typer.prompt("[F]ile, [D]ir or [L]ink?").strip().lower()[:1]
    kind = _KIND_CHOICES.get(choice)
    if kind is None:
        return CommandStatus.failed(f"Unknown kind: {choice!r}")
    link_target = typer.prompt("Link target") if kind == EntryType.LINK else None
    return session.create_new(name, kind, link_target)


def _handle_edit(session: BrowserSession, argument: str) -> CommandStatus | None:
    entry = session.selected_entry
    if entry is None or not entry.is_file:
        return CommandStatus.failed("Can only edit regular files")
    if not typer.confirm("Edit file?"):
        return None
    content = typer.prompt("Enter new content", default="", show_default=False)
    return session.edit_selected(content)


def _handle_rename(session: BrowserSession, argument: str) -> CommandStatus | None:
    if session.selected_entry is None:
        return CommandStatus.failed("No entry selected")
    if not typer.confirm("Rename?"):
        return None
    return session.rename_selected(typer.prompt("New name"))


def _handle_move(session: BrowserSession, argument: str) -> CommandStatus | None:
    if session.selected_entry is None:
        return CommandStatus.failed("No entry selected")
    if not typer.confirm("Move?"):
        return None
    return session.move_selected(typer.prompt("New full path"))


def _handle_undo(session: BrowserSession, argument: str) -> CommandStatus | None:
    if not session.undo_stack:
        return CommandStatus.failed("Nothing to undo")
    if not typer.confirm("Undo last action?"):
        return None
    return session.undo_last()


def _handle_view(session: BrowserSession, argument: str) -> CommandStatus | None:
    entry = session.selected_entry
    if entry is None or not entry.is_file:
        return CommandStatus.failed("Can only view regular files")
    status = session.view_selected()
    if status.success:
        render_file_view(entry.display_path, status.detail or "")
        typer.prompt("Press Enter to continue", default="", show_default=False)
    return status


def _handle_help(session: BrowserSession, argument: str) -> CommandStatus | None:
    print_info("Commands: j/k move, g N go to index, c d m n e r p u v act, q quits.")
    return None


_HANDLERS: dict[str, Callable[[BrowserSession, str], CommandStatus | None]] = {
    "j": _handle_down,
    "k": _handle_up,
    "g": _handle_goto,
    "c": _handle_copy,
    "d": _handle_delete,
    "m": _handle_chmod,
    "n": _handle_create,
    "e": _handle_edit,
    "r": _handle_rename,
    "p": _handle_move,
    "u": _handle_undo,
    "v": _handle_view,
    "?": _handle_help,
}
