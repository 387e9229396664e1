"""Filesystem mutation operator.

Performs the mutating operations a browsing session can issue (create,
delete, rename, move, chmod, edit, copy). Each reversible operation
validates its preconditions, mutates the filesystem, and only then
pushes an UndoRecord. A failing operation raises a DirwalkError and
pushes nothing.
"""

import errno
import logging
import os
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path

from dirwalk.core.undo import UndoStack
from dirwalk.errors import (
    FilesystemIOError,
    InvalidArgumentError,
    InvalidModeError,
    PathExistsError,
    PathNotFoundError,
    UnsupportedOperationError,
    from_os_error,
)
from dirwalk.filesystem import snapshot
from dirwalk.filesystem.models import EntryType
from dirwalk.models.undo import UndoRecord

logger = logging.getLogger(__name__)

MAX_MODE = 0o777
_COPY_CHUNK_SIZE = 4096


@dataclass(frozen=True, slots=True)
class FilesystemActionResult:
    """Result of a single successful filesystem mutation.

    Attributes:
        path: Final path of the affected entry.
        record: Undo record built for the mutation (None for copy).
        recorded: Whether the record made it onto the undo stack.
    """

    path: str
    record: UndoRecord | None = None
    recorded: bool = False


def parse_mode(text: str) -> int:
    """Parse octal permission text such as "755" or "0o644".

    Raises:
        InvalidModeError: If the text is not octal or exceeds 0o777.
    """
    cleaned = text.strip().lower().removeprefix("0o")
    try:
        mode = int(cleaned, 8)
    except ValueError:
        raise InvalidModeError(f"Invalid permissions: {text!r}") from None
    if not 0 <= mode <= MAX_MODE:
        raise InvalidModeError(f"Invalid permissions: {text!r}")
    return mode


def _child_path(base_dir: str, name: str) -> str:
    """Join a single path component onto base_dir.

    Raises:
        InvalidArgumentError: If name is empty, contains a separator, or
            refers to the directory itself or its parent.
    """
    if not name:
        raise InvalidArgumentError("Name cannot be empty")
    separators = [os.sep] + ([os.altsep] if os.altsep else [])
    if any(sep in name for sep in separators) or name in (os.curdir, os.pardir):
        raise InvalidArgumentError(f"Name must be a single path component: {name!r}")
    return os.path.join(base_dir, name)


class FilesystemOperator:
    """Executes filesystem mutations and records how to reverse them.

    Args:
        undo_stack: Stack receiving an UndoRecord for every successful
            reversible mutation.
        max_snapshot_nodes: Node limit for directory snapshots taken
            before a directory delete.
    """

    def __init__(
        self,
        undo_stack: UndoStack,
        *,
        max_snapshot_nodes: int = snapshot.MAX_SNAPSHOT_NODES,
    ) -> None:
        self._undo_stack = undo_stack
        self._max_snapshot_nodes = max_snapshot_nodes

    @property
    def undo_stack(self) -> UndoStack:
        return self._undo_stack

    def create(
        self,
        base_dir: str,
        name: str,
        kind: EntryType,
        link_target: str | None = None,
    ) -> FilesystemActionResult:
        """Create an empty file, a directory, or a symbolic link.

        Args:
            base_dir: Directory to create the entry in.
            name: Name of the new entry.
            kind: EntryType.FILE, EntryType.DIRECTORY or EntryType.LINK.
            link_target: Target for symbolic links (required for LINK).

        Raises:
            PathExistsError: If something already exists at base_dir/name.
            InvalidArgumentError: If the name is empty or not a single
                path component, or the link target is empty.
            UnsupportedOperationError: If kind is not creatable.
            DirwalkError: If the OS call fails.
        """
        path = _child_path(base_dir, name)
        if os.path.lexists(path):
            raise PathExistsError(path)

        try:
            if kind == EntryType.FILE:
                fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_EXCL, 0o644)
                os.close(fd)
            elif kind == EntryType.DIRECTORY:
                os.mkdir(path, 0o755)
            elif kind == EntryType.LINK:
                if not link_target:
                    raise InvalidArgumentError("Link target cannot be empty")
                os.symlink(link_target, path)
            else:
                raise UnsupportedOperationError(f"Cannot create entries of type {kind.value}")
        except OSError as e:
            raise from_os_error(e, "create") from e

        logger.info("Created %s %s", kind.value, path)
        return self._record(UndoRecord.for_create(path))

    def delete(self, path: str) -> FilesystemActionResult:
        """Delete a file, symlink or directory tree.

        Regular files have their bytes captured first; directories are
        snapshotted and then removed recursively; symlinks keep their
        target. A directory whose removal fails partway is left
        partially removed and nothing is recorded.

        Raises:
            PathNotFoundError: If the path does not exist.
            ResourceLimitExceededError: If the directory snapshot would
                exceed the node limit (nothing is deleted).
            DirwalkError: If capture or removal fails.
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            raise from_os_error(e, "stat") from e

        entry_type = EntryType.from_mode(st.st_mode)

        if entry_type == EntryType.DIRECTORY:
            nodes = snapshot.capture(path, max_nodes=self._max_snapshot_nodes)
            try:
                shutil.rmtree(path)
            except OSError as e:
                logger.error("Directory delete of %s failed partway: %s", path, e)
                raise FilesystemIOError(
                    f"Cannot delete {path}: {e.strerror or e} (partially removed)"
                ) from e
            record = UndoRecord.for_directory_delete(path, nodes)
        elif entry_type == EntryType.FILE:
            try:
                content = Path(path).read_bytes()
                os.unlink(path)
            except OSError as e:
                raise from_os_error(e, "delete") from e
            record = UndoRecord.for_file_delete(path, content)
        else:
            try:
                link_target = os.readlink(path) if entry_type == EntryType.LINK else None
                os.unlink(path)
            except OSError as e:
                raise from_os_error(e, "delete") from e
            record = UndoRecord.for_link_delete(path, link_target)

        logger.info("Deleted %s %s", entry_type.value, path)
        return self._record(record)

    def rename(self, old_path: str, new_name: str, base_dir: str) -> FilesystemActionResult:
        """Rename an entry to base_dir/new_name.

        Raises:
            PathExistsError: If the new path already exists.
            InvalidArgumentError: If the new name is empty or not a
                single path component.
            DirwalkError: If the rename call fails (e.g. cross-device).
        """
        new_path = _child_path(base_dir, new_name)
        if os.path.lexists(new_path):
            raise PathExistsError(new_path)

        try:
            os.rename(old_path, new_path)
        except OSError as e:
            raise from_os_error(e, "rename") from e

        logger.info("Renamed %s -> %s", old_path, new_path)
        return self._record(UndoRecord.for_rename(new_path, old_path))

    def move(self, old_path: str, new_path: str) -> FilesystemActionResult:
        """Move an entry to a new full path.

        Raises:
            PathNotFoundError: If the parent directory of new_path does
                not exist.
            PathExistsError: If new_path already exists.
            DirwalkError: If the rename call fails.
        """
        if not new_path:
            raise InvalidArgumentError("Destination cannot be empty")
        parent = os.path.dirname(new_path)
        if parent and not os.path.isdir(parent):
            raise PathNotFoundError(parent, f"Directory does not exist: {parent}")
        if os.path.lexists(new_path):
            raise PathExistsError(new_path)

        try:
            os.rename(old_path, new_path)
        except OSError as e:
            raise from_os_error(e, "move") from e

        logger.info("Moved %s -> %s", old_path, new_path)
        return self._record(UndoRecord.for_move(new_path, old_path))

    def chmod(self, path: str, new_mode: int) -> FilesystemActionResult:
        """Change the permission bits of an entry.

        Raises:
            InvalidModeError: If new_mode is outside 0o000-0o777.
            UnsupportedOperationError: If path is a symlink and the
                platform cannot change link permissions.
            DirwalkError: If lstat or chmod fails.
        """
        if not 0 <= new_mode <= MAX_MODE:
            raise InvalidModeError(f"Invalid permissions: {new_mode:o}")

        try:
            st = os.lstat(path)
        except OSError as e:
            raise from_os_error(e, "stat") from e

        old_mode = stat.S_IMODE(st.st_mode)
        if stat.S_ISLNK(st.st_mode):
            self._chmod_link(path, new_mode)
        else:
            try:
                os.chmod(path, new_mode)
            except OSError as e:
                raise from_os_error(e, "chmod") from e

        logger.info("Changed mode of %s: %o -> %o", path, old_mode, new_mode)
        return self._record(UndoRecord.for_chmod(path, old_mode))

    def edit(self, path: str, new_content: bytes | str) -> FilesystemActionResult:
        """Overwrite a file, keeping its previous content for undo.

        Previous content that cannot be read is recorded as empty.

        Raises:
            DirwalkError: If the file cannot be opened for writing.
        """
        if isinstance(new_content, str):
            new_content = new_content.encode("utf-8")

        try:
            old_content = Path(path).read_bytes()
        except OSError as e:
            logger.warning("Cannot read %s before edit: %s", path, e.strerror or e)
            old_content = b""

        try:
            with open(path, "wb") as f:
                f.write(new_content)
        except OSError as e:
            raise from_os_error(e, "write") from e

        logger.info("Edited %s (%d bytes)", path, len(new_content))
        return self._record(UndoRecord.for_edit(path, old_content))

    def copy(self, src_path: str, dst_path: str) -> FilesystemActionResult:
        """Copy a file byte for byte. Copies are not undoable.

        Raises:
            DirwalkError: If either endpoint cannot be opened.
        """
        try:
            with open(src_path, "rb") as src, open(dst_path, "wb") as dst:
                shutil.copyfileobj(src, dst, _COPY_CHUNK_SIZE)
        except OSError as e:
            raise from_os_error(e, "copy") from e

        logger.info("Copied %s -> %s", src_path, dst_path)
        return FilesystemActionResult(path=dst_path)

    def _chmod_link(self, path: str, new_mode: int) -> None:
        if os.chmod not in os.supports_follow_symlinks:
            raise UnsupportedOperationError("Link permissions not supported on this platform")
        try:
            os.chmod(path, new_mode, follow_symlinks=False)
        except NotImplementedError as e:
            raise UnsupportedOperationError(
                "Link permissions not supported on this platform"
            ) from e
        except OSError as e:
            if e.errno in (errno.ENOTSUP, errno.EOPNOTSUPP):
                raise UnsupportedOperationError(
                    "Link permissions not supported on this platform"
                ) from e
            raise from_os_error(e, "chmod") from e

    def _record(self, record: UndoRecord) -> FilesystemActionResult:
        recorded = self._undo_stack.push(record)
        return FilesystemActionResult(path=record.path, record=record, recorded=recorded)
