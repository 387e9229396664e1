"""Bounded undo stack and reversal logic.

The stack owns every UndoRecord pushed onto it. A push onto a full
stack is dropped: the mutation already happened, but it can no longer
be reversed. Undo pops the top record first and then replays its
inverse, so a failed reversal is still discarded (one-shot).
"""

import logging
import os
import shutil
import stat

from dirwalk.errors import (
    DirwalkError,
    IncompleteRestoreError,
    NothingToUndoError,
    UnsupportedOperationError,
    from_os_error,
)
from dirwalk.filesystem import snapshot
from dirwalk.models.undo import UndoActionType, UndoRecord

logger = logging.getLogger(__name__)

MAX_UNDO = 100


class UndoStack:
    """Fixed-capacity LIFO of undo records.

    Args:
        capacity: Maximum number of records kept (default 100).
    """

    def __init__(self, capacity: int = MAX_UNDO) -> None:
        if capacity < 1:
            msg = f"Undo capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._records: list[UndoRecord] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._records) >= self._capacity

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def push(self, record: UndoRecord) -> bool:
        """Record a reversible mutation.

        Args:
            record: Reversal data for the mutation that just happened.

        Returns:
            True if the record was stored, False if the stack was full
            and the record was dropped.
        """
        if self.is_full:
            logger.warning(
                "Undo stack full (%d); %s is not reversible",
                self._capacity,
                record.path,
            )
            return False
        self._records.append(record)
        return True

    def peek(self) -> UndoRecord | None:
        """Return the most recent record without removing it."""
        return self._records[-1] if self._records else None

    def pop(self) -> UndoRecord:
        """Remove and return the most recent record without replaying it.

        Raises:
            NothingToUndoError: If the stack is empty.
        """
        if not self._records:
            raise NothingToUndoError()
        return self._records.pop()

    def clear(self) -> None:
        """Drop every record."""
        self._records.clear()

    def undo(self) -> UndoRecord:
        """Pop the most recent record and reverse its mutation.

        Returns:
            The record that was undone. Callers use
            record.action_type.changes_structure to decide between a
            full rescan and a single-entry refresh.

        Raises:
            NothingToUndoError: If the stack is empty.
            DirwalkError: If the reversal fails. The record is discarded
                either way.
        """
        record = self.pop()
        logger.info("Undoing %s: %s", record.action_type.value, record.describe())
        replay(record)
        return record


def replay(record: UndoRecord) -> None:
    """Apply the inverse effect of a record to the filesystem.

    Raises:
        DirwalkError: If the filesystem refuses the reversal.
    """
    try:
        _REPLAYERS[record.action_type](record)
    except DirwalkError:
        raise
    except OSError as e:
        raise from_os_error(e, f"undo {record.action_type.value} of") from e


def _undo_delete(record: UndoRecord) -> None:
    if record.is_directory_delete:
        os.makedirs(record.path, mode=0o755, exist_ok=True)
        skipped = snapshot.restore(record.snapshot)
        if skipped:
            raise IncompleteRestoreError(record.path, skipped)
    elif record.is_link_delete:
        os.symlink(record.link_target, record.path)
    elif record.content is not None:
        with open(record.path, "wb") as f:
            f.write(record.content)
    else:
        raise UnsupportedOperationError(f"Cannot recreate special file {record.path}")


def _undo_create(record: UndoRecord) -> None:
    try:
        st = os.lstat(record.path)
    except FileNotFoundError:
        logger.debug("Created path %s no longer exists", record.path)
        return
    if stat.S_ISDIR(st.st_mode):
        shutil.rmtree(record.path)
    else:
        os.unlink(record.path)


def _undo_rename(record: UndoRecord) -> None:
    os.rename(record.path, record.old_path)


def _undo_chmod(record: UndoRecord) -> None:
    if os.path.islink(record.path):
        os.chmod(record.path, record.old_mode, follow_symlinks=False)
    else:
        os.chmod(record.path, record.old_mode)


def _undo_edit(record: UndoRecord) -> None:
    with open(record.path, "wb") as f:
        f.write(record.content)


_REPLAYERS = {
    UndoActionType.DELETE: _undo_delete,
    UndoActionType.CREATE: _undo_create,
    UndoActionType.RENAME: _undo_rename,
    UndoActionType.MOVE: _undo_rename,
    UndoActionType.CHMOD: _undo_chmod,
    UndoActionType.EDIT: _undo_edit,
}
