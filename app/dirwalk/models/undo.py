"""Undo record model.

This module defines the reversal data for exactly one past mutation.
Records are immutable value trees: dropping a record releases every
path, content buffer and snapshot it references.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from dirwalk.filesystem.models import SnapshotNode


class UndoActionType(str, Enum):
    """Kind of mutation an undo record reverses.

    Attributes:
        DELETE: A file, directory or symlink was deleted.
        CREATE: A file, directory or symlink was created.
        RENAME: An entry was renamed inside a base directory.
        MOVE: An entry was moved to a new full path.
        CHMOD: Permission bits were changed.
        EDIT: File content was overwritten.
    """

    DELETE = "delete"
    CREATE = "create"
    RENAME = "rename"
    MOVE = "move"
    CHMOD = "chmod"
    EDIT = "edit"

    @property
    def changes_structure(self) -> bool:
        """Whether undoing this kind changes the tree shape.

        Structural undos require a full rescan; chmod and edit undos
        only require refreshing the affected entry.
        """
        return self not in (UndoActionType.CHMOD, UndoActionType.EDIT)


@dataclass(frozen=True, slots=True)
class UndoRecord:
    """Reversal data for one mutation.

    Use the for_* factory methods rather than the constructor; they
    enforce which payload belongs to which action kind.

    Attributes:
        action_type: Kind of mutation.
        path: Primary path in the post-mutation state.
        old_path: Path to restore to (rename/move only).
        old_mode: Permission bits before the change (chmod only).
        content: File bytes before a delete or edit.
        snapshot: Captured subtree of a deleted directory.
        link_target: Target of a deleted symlink.
    """

    action_type: UndoActionType
    path: str
    old_path: str | None = None
    old_mode: int | None = None
    content: bytes | None = None
    snapshot: tuple[SnapshotNode, ...] | None = None
    link_target: str | None = None

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.path:
            msg = "Undo record path cannot be empty"
            raise ValueError(msg)
        if self.content is not None and self.snapshot is not None:
            msg = "Undo record cannot carry both content and a snapshot"
            raise ValueError(msg)
        if self.action_type in (UndoActionType.RENAME, UndoActionType.MOVE) and not self.old_path:
            msg = f"{self.action_type.value} record requires old_path"
            raise ValueError(msg)
        if self.action_type == UndoActionType.CHMOD and self.old_mode is None:
            msg = "chmod record requires old_mode"
            raise ValueError(msg)
        if self.action_type == UndoActionType.EDIT and self.content is None:
            msg = "edit record requires content"
            raise ValueError(msg)

    @classmethod
    def for_file_delete(cls, path: str, content: bytes) -> "UndoRecord":
        return cls(action_type=UndoActionType.DELETE, path=path, content=content)

    @classmethod
    def for_directory_delete(cls, path: str, snapshot: list[SnapshotNode]) -> "UndoRecord":
        return cls(action_type=UndoActionType.DELETE, path=path, snapshot=tuple(snapshot))

    @classmethod
    def for_link_delete(cls, path: str, link_target: str | None) -> "UndoRecord":
        return cls(action_type=UndoActionType.DELETE, path=path, link_target=link_target)

    @classmethod
    def for_create(cls, path: str) -> "UndoRecord":
        return cls(action_type=UndoActionType.CREATE, path=path)

    @classmethod
    def for_rename(cls, path: str, old_path: str) -> "UndoRecord":
        return cls(action_type=UndoActionType.RENAME, path=path, old_path=old_path)

    @classmethod
    def for_move(cls, path: str, old_path: str) -> "UndoRecord":
        return cls(action_type=UndoActionType.MOVE, path=path, old_path=old_path)

    @classmethod
    def for_chmod(cls, path: str, old_mode: int) -> "UndoRecord":
        return cls(action_type=UndoActionType.CHMOD, path=path, old_mode=old_mode)

    @classmethod
    def for_edit(cls, path: str, content: bytes) -> "UndoRecord":
        return cls(action_type=UndoActionType.EDIT, path=path, content=content)

    @property
    def is_directory_delete(self) -> bool:
        return self.action_type == UndoActionType.DELETE and self.snapshot is not None

    @property
    def is_link_delete(self) -> bool:
        return self.action_type == UndoActionType.DELETE and self.link_target is not None

    def describe(self) -> str:
        """Short human-readable description of the reversal."""
        if self.action_type == UndoActionType.DELETE:
            return f"restore {self.path}"
        if self.action_type == UndoActionType.CREATE:
            return f"remove {self.path}"
        if self.action_type in (UndoActionType.RENAME, UndoActionType.MOVE):
            return f"{self.action_type.value} {self.path} back to {self.old_path}"
        if self.action_type == UndoActionType.CHMOD:
            return f"chmod {self.path} back to {self.old_mode or 0:o}"
        return f"restore previous content of {self.path}"

    def to_summary(self) -> dict[str, Any]:
        """Content-free summary, safe to journal or display.

        Returns:
            Dictionary with the action type, paths and payload sizes.
        """
        result: dict[str, Any] = {
            "action_type": self.action_type.value,
            "path": self.path,
        }
        if self.old_path is not None:
            result["old_path"] = self.old_path
        if self.old_mode is not None:
            result["old_mode"] = f"{self.old_mode:o}"
        if self.content is not None:
            result["content_bytes"] = len(self.content)
        if self.snapshot is not None:
            result["snapshot_nodes"] = len(self.snapshot)
        if self.link_target is not None:
            result["link_target"] = self.link_target
        return result
