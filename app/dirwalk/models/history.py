"""History entry model for the action journal.

This module defines data structures for recording filesystem mutations
and undos in an append-only JSONL journal. Entries never carry file
contents or snapshots; those live only in the in-memory undo stack.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class HistoryActionType(str, Enum):
    """Type of action recorded in the journal.

    Attributes:
        CREATE: File, directory or symlink created.
        DELETE: Entry deleted (directories recursively).
        RENAME: Entry renamed.
        MOVE: Entry moved to a new path.
        CHMOD: Permission bits changed.
        EDIT: File content overwritten.
        COPY: File copied (not undoable).
        UNDO: A previous mutation was reversed.
    """

    CREATE = "create"
    DELETE = "delete"
    RENAME = "rename"
    MOVE = "move"
    CHMOD = "chmod"
    EDIT = "edit"
    COPY = "copy"
    UNDO = "undo"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Record of a single action in the journal.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the action occurred (ISO 8601 format with timezone).
        action_type: Type of action.
        path: Primary path affected by the action.
        old_path: Previous path for rename/move (or copy source).
        reversible: Whether the action was recorded on the undo stack.
        metadata: Additional context (scan root, mode, undone action, ...).
    """

    id: str
    timestamp: str
    action_type: HistoryActionType
    path: str
    old_path: str | None = None
    reversible: bool = True
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "History entry ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        if not self.path:
            msg = "History entry path cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        result: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "action_type": self.action_type.value,
            "path": self.path,
            "reversible": self.reversible,
            "metadata": self.metadata,
        }
        if self.old_path is not None:
            result["old_path"] = self.old_path
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If action_type is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            action_type=HistoryActionType(data["action_type"]),
            path=data["path"],
            old_path=data.get("old_path"),
            reversible=data.get("reversible", True),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "HistoryEntry":
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        data = json.loads(line.strip())
        return cls.from_dict(data)


def create_history_entry(
    action_type: HistoryActionType,
    path: str,
    old_path: str | None = None,
    reversible: bool = True,
    metadata: dict[str, Any] | None = None,
) -> HistoryEntry:
    """Factory function to create a new HistoryEntry.

    Automatically generates a unique ID and current timestamp.
    """
    return HistoryEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        action_type=action_type,
        path=path,
        old_path=old_path,
        reversible=reversible,
        metadata=metadata or {},
    )
