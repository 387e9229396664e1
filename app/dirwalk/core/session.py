"""Browsing session context.

A BrowserSession owns everything one interactive run needs: the scan
root and filter, the current ordered entry list, the selection, the
undo stack and the operator that mutates the filesystem. Front ends
call one command method per user action and display the returned
CommandStatus; no state lives outside the session object.
"""

import logging
import os
from dataclasses import dataclass
from types import TracebackType

from dirwalk.core.config import Settings
from dirwalk.core.state import StateManager
from dirwalk.core.undo import UndoStack
from dirwalk.errors import (
    DirwalkError,
    FilesystemIOError,
    IncompleteRestoreError,
    NothingToUndoError,
    from_os_error,
)
from dirwalk.filesystem.models import Entry, EntryType
from dirwalk.filesystem.operator import FilesystemActionResult, FilesystemOperator, parse_mode
from dirwalk.filesystem.scanner import DirectoryScanner
from dirwalk.models.history import HistoryActionType, create_history_entry
from dirwalk.models.undo import UndoRecord
from dirwalk.utils.formatting import format_mode, format_mtime, format_size

logger = logging.getLogger(__name__)

_NOT_REVERSIBLE = " (undo history full, cannot be undone)"


@dataclass(frozen=True, slots=True)
class CommandStatus:
    """Outcome of one session command, ready for display.

    Attributes:
        success: Whether the command completed.
        message: Short status text (success text or failure reason).
        detail: Extra payload, e.g. file content for the view command.
    """

    success: bool
    message: str
    detail: str | None = None

    @classmethod
    def ok(cls, message: str, detail: str | None = None) -> "CommandStatus":
        return cls(success=True, message=message, detail=detail)

    @classmethod
    def failed(cls, message: str) -> "CommandStatus":
        return cls(success=False, message=message)


@dataclass(frozen=True, slots=True)
class EntryInfo:
    """Info panel projection of the selected entry."""

    name: str
    size: str
    type_label: str
    modified: str
    permissions: str

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryInfo":
        return cls(
            name=entry.name,
            size=format_size(entry.size),
            type_label=entry.entry_type.label,
            modified=format_mtime(entry.mtime),
            permissions=format_mode(entry.mode),
        )


class BrowserSession:
    """Interactive browsing session over one scan root.

    Args:
        root: Absolute path of the scan root.
        type_filter: Entry types to show (empty = all).
        sort_by_size: Sort larger entries first.
        settings: Capacities and limits (defaults if None).
        state: Journal to record mutations in (None disables journaling).
    """

    def __init__(
        self,
        root: str,
        *,
        type_filter: frozenset[EntryType] = frozenset(),
        sort_by_size: bool = False,
        settings: Settings | None = None,
        state: StateManager | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._root = root
        self._scanner = DirectoryScanner(
            root,
            type_filter=type_filter,
            max_entries=self._settings.max_entries,
        )
        self._sort_by_size = sort_by_size
        self._undo_stack = UndoStack(self._settings.undo_capacity)
        self._operator = FilesystemOperator(
            self._undo_stack,
            max_snapshot_nodes=self._settings.max_snapshot_nodes,
        )
        self._state = state if self._settings.journal else None
        self._entries: list[Entry] = []
        self._selected = 0

    def __enter__(self) -> "BrowserSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def root(self) -> str:
        return self._root

    @property
    def sort_by_size(self) -> bool:
        return self._sort_by_size

    @property
    def type_filter(self) -> frozenset[EntryType]:
        return self._scanner.type_filter

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def selected(self) -> int:
        return self._selected

    @property
    def selected_entry(self) -> Entry | None:
        if 0 <= self._selected < len(self._entries):
            return self._entries[self._selected]
        return None

    @property
    def undo_stack(self) -> UndoStack:
        return self._undo_stack

    def info(self) -> EntryInfo | None:
        """Info panel projection of the selected entry (None if empty)."""
        entry = self.selected_entry
        return EntryInfo.from_entry(entry) if entry is not None else None

    def refresh(self, focus_path: str | None = None) -> None:
        """Discard the entry list and rebuild it from a full rescan.

        Args:
            focus_path: Select this entry after the rescan if present;
                otherwise the selection index is clamped.

        Raises:
            DirwalkError: If the scan fails. The previous list is kept.
        """
        self._entries = self._scanner.scan_sorted(sort_by_size=self._sort_by_size)
        if focus_path is not None:
            for index, entry in enumerate(self._entries):
                if entry.full_path == focus_path:
                    self._selected = index
                    return
        self._clamp_selection()

    def select(self, index: int) -> None:
        """Select an entry by index, clamped to the list bounds."""
        self._selected = index
        self._clamp_selection()

    def move_selection(self, delta: int) -> None:
        self.select(self._selected + delta)

    def close(self) -> None:
        """Release the undo history and the entry list."""
        self._undo_stack.clear()
        self._entries = []
        self._selected = 0

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def copy_selected(self) -> CommandStatus:
        """Copy the selected regular file to <path><copy_suffix>."""
        entry = self.selected_entry
        if entry is None or not entry.is_file:
            return CommandStatus.failed("Can only copy regular files")
        dst_path = entry.full_path + self._settings.copy_suffix
        try:
            result = self._operator.copy(entry.full_path, dst_path)
        except DirwalkError as e:
            return CommandStatus.failed(f"Copy failed: {e}")
        self._journal(HistoryActionType.COPY, result, old_path=entry.full_path)
        return self._after_structural(f"File copied to {dst_path}", focus_path=entry.full_path)

    def delete_selected(self) -> CommandStatus:
        """Delete the selected entry (directories recursively)."""
        entry = self.selected_entry
        if entry is None:
            return CommandStatus.failed("No entry selected")
        label = entry.entry_type.label
        try:
            result = self._operator.delete(entry.full_path)
        except DirwalkError as e:
            if entry.is_dir and os.path.lexists(entry.full_path):
                # A partial directory delete changed the tree.
                self._safe_refresh()
            return CommandStatus.failed(f"Delete failed: {e}")
        self._journal(HistoryActionType.DELETE, result)
        return self._after_structural(self._with_undo_note(f"{label} deleted", result))

    def chmod_selected(self, mode_text: str) -> CommandStatus:
        """Change the permission bits of the selected entry.

        Args:
            mode_text: Octal permission text such as "755".
        """
        entry = self.selected_entry
        if entry is None:
            return CommandStatus.failed("No entry selected")
        try:
            new_mode = parse_mode(mode_text)
            result = self._operator.chmod(entry.full_path, new_mode)
        except DirwalkError as e:
            return CommandStatus.failed(f"Failed to change permissions: {e}")
        entry.refresh_metadata()
        self._journal(HistoryActionType.CHMOD, result, metadata={"mode": f"{new_mode:o}"})
        return CommandStatus.ok(self._with_undo_note("Permissions changed", result))

    def create_new(
        self,
        name: str,
        kind: EntryType,
        link_target: str | None = None,
        base_dir: str | None = None,
    ) -> CommandStatus:
        """Create a file, directory or symlink (in the scan root by default)."""
        try:
            result = self._operator.create(base_dir or self._root, name, kind, link_target)
        except DirwalkError as e:
            return CommandStatus.failed(f"Failed to create object: {e}")
        self._journal(HistoryActionType.CREATE, result, metadata={"kind": kind.value})
        return self._after_structural(
            self._with_undo_note("Object created", result), focus_path=result.path
        )

    def edit_selected(self, new_content: str | bytes) -> CommandStatus:
        """Overwrite the selected regular file with new content."""
        entry = self.selected_entry
        if entry is None or not entry.is_file:
            return CommandStatus.failed("Can only edit regular files")
        try:
            result = self._operator.edit(entry.full_path, new_content)
        except DirwalkError as e:
            return CommandStatus.failed(f"Failed to edit file: {e}")
        entry.refresh_metadata()
        self._journal(HistoryActionType.EDIT, result)
        return CommandStatus.ok(self._with_undo_note("File edited", result))

    def rename_selected(self, new_name: str) -> CommandStatus:
        """Rename the selected entry within its parent directory."""
        entry = self.selected_entry
        if entry is None:
            return CommandStatus.failed("No entry selected")
        base_dir = os.path.dirname(entry.full_path)
        try:
            result = self._operator.rename(entry.full_path, new_name, base_dir)
        except DirwalkError as e:
            return CommandStatus.failed(f"Failed to rename: {e}")
        self._journal(HistoryActionType.RENAME, result, old_path=entry.full_path)
        return self._after_structural(
            self._with_undo_note("Renamed", result), focus_path=result.path
        )

    def move_selected(self, new_path: str) -> CommandStatus:
        """Move the selected entry to a new path.

        Relative destinations are resolved against the scan root.
        """
        entry = self.selected_entry
        if entry is None:
            return CommandStatus.failed("No entry selected")
        if new_path and not os.path.isabs(new_path):
            new_path = os.path.normpath(os.path.join(self._root, new_path))
        try:
            result = self._operator.move(entry.full_path, new_path)
        except DirwalkError as e:
            return CommandStatus.failed(f"Failed to move: {e}")
        self._journal(HistoryActionType.MOVE, result, old_path=entry.full_path)
        return self._after_structural(
            self._with_undo_note("Moved", result), focus_path=result.path
        )

    def undo_last(self) -> CommandStatus:
        """Reverse the most recent recorded mutation."""
        try:
            record = self._undo_stack.undo()
        except NothingToUndoError:
            return CommandStatus.failed("Nothing to undo")
        except IncompleteRestoreError as e:
            self._safe_refresh()
            return CommandStatus.failed(f"Undo incomplete: {e}")
        except DirwalkError as e:
            self._safe_refresh()
            return CommandStatus.failed(f"Undo failed: {e}")

        self._journal_undo(record)
        if record.action_type.changes_structure:
            return self._after_structural(
                f"Action undone: {record.describe()}", focus_path=record.old_path or record.path
            )
        for entry in self._entries:
            if entry.full_path == record.path:
                entry.refresh_metadata()
        return CommandStatus.ok(f"Action undone: {record.describe()}")

    def view_selected(self) -> CommandStatus:
        """Read the beginning of the selected regular file (read-only)."""
        entry = self.selected_entry
        if entry is None or not entry.is_file:
            return CommandStatus.failed("Can only view regular files")
        try:
            with open(entry.full_path, "rb") as f:
                data = f.read(self._settings.view_limit)
        except OSError as e:
            return CommandStatus.failed(f"Failed to view file: {from_os_error(e, 'open')}")
        return CommandStatus.ok("File viewed", detail=data.decode("utf-8", errors="replace"))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clamp_selection(self) -> None:
        if not self._entries:
            self._selected = 0
        else:
            self._selected = max(0, min(self._selected, len(self._entries) - 1))

    def _after_structural(self, message: str, focus_path: str | None = None) -> CommandStatus:
        try:
            self.refresh(focus_path)
        except DirwalkError as e:
            logger.warning("Rescan after mutation failed: %s", e)
            return CommandStatus(success=True, message=f"{message}; rescan failed: {e}")
        return CommandStatus.ok(message)

    def _safe_refresh(self) -> None:
        try:
            self.refresh()
        except DirwalkError as e:
            logger.warning("Rescan failed: %s", e)

    @staticmethod
    def _with_undo_note(message: str, result: FilesystemActionResult) -> str:
        return message if result.recorded else message + _NOT_REVERSIBLE

    def _journal(
        self,
        action_type: HistoryActionType,
        result: FilesystemActionResult,
        old_path: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None:
        if self._state is None:
            return
        self._state.try_record_action(
            create_history_entry(
                action_type=action_type,
                path=result.path,
                old_path=old_path,
                reversible=result.recorded,
                metadata={"root": self._root, **(metadata or {})},
            )
        )

    def _journal_undo(self, record: UndoRecord) -> None:
        if self._state is None:
            return
        self._state.try_record_action(
            create_history_entry(
                action_type=HistoryActionType.UNDO,
                path=record.path,
                old_path=record.old_path,
                reversible=False,
                metadata={"root": self._root, **record.to_summary()},
            )
        )


def open_session(
    root: str,
    *,
    settings: Settings,
    type_filter: frozenset[EntryType] | None = None,
    sort_by_size: bool | None = None,
    state: StateManager | None = None,
) -> BrowserSession:
    """Create a session and run the initial scan.

    Explicit filter and sort arguments override the settings.

    Raises:
        FilesystemIOError: If root is not a directory.
        DirwalkError: If the initial scan fails.
    """
    if not os.path.isdir(root):
        raise FilesystemIOError(f"{root} is not a directory")
    session = BrowserSession(
        os.path.realpath(root),
        type_filter=settings.type_filter if type_filter is None else type_filter,
        sort_by_size=settings.sort_by_size if sort_by_size is None else sort_by_size,
        settings=settings,
        state=state,
    )
    session.refresh()
    return session
