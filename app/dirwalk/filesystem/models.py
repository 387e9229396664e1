"""Filesystem domain models for scanning and snapshotting.

This module defines the core data structures for representing
filesystem entries discovered while walking the scan root, and the
nodes captured from a directory subtree before it is deleted.
"""

import os
import stat
from dataclasses import dataclass
from enum import Enum


class EntryType(str, Enum):
    """Type of filesystem entry.

    Attributes:
        LINK: Symbolic link (never followed).
        DIRECTORY: Regular directory.
        FILE: Regular file.
        OTHER: Socket, FIFO or device node.
    """

    LINK = "link"
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> "EntryType":
        """Classify raw st_mode bits as reported by lstat."""
        if stat.S_ISLNK(mode):
            return cls.LINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER

    @property
    def label(self) -> str:
        """Human-readable type label used by the info panel."""
        return _TYPE_LABELS[self]


_TYPE_LABELS: dict[EntryType, str] = {
    EntryType.LINK: "Link",
    EntryType.DIRECTORY: "Directory",
    EntryType.FILE: "File",
    EntryType.OTHER: "Other",
}


def matches_filter(entry_type: EntryType, type_filter: frozenset[EntryType]) -> bool:
    """Check whether an entry type passes the type filter.

    An empty filter matches everything.

    Args:
        entry_type: Type of the entry being considered.
        type_filter: Set of requested types.

    Returns:
        True if the entry should be included in the scan output.
    """
    if not type_filter:
        return True
    return entry_type in type_filter


@dataclass(slots=True)
class Entry:
    """One filesystem object found under the scan root.

    Entries are rebuilt by every full rescan. Only edit and chmod
    update an existing entry, through refresh_metadata().

    Attributes:
        full_path: Absolute path used for all filesystem calls.
        display_path: Path relative to the scan root, prefixed with ".".
        size: Size in bytes as reported by lstat.
        mode: Raw st_mode bits (type and permission bits).
        mtime: Last modification time (seconds since the epoch).
    """

    full_path: str
    display_path: str
    size: int
    mode: int
    mtime: float

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.full_path:
            msg = "Entry path cannot be empty"
            raise ValueError(msg)

    @classmethod
    def from_stat(cls, full_path: str, display_path: str, st: os.stat_result) -> "Entry":
        """Build an entry from an lstat result."""
        return cls(
            full_path=full_path,
            display_path=display_path,
            size=st.st_size,
            mode=st.st_mode,
            mtime=st.st_mtime,
        )

    @property
    def entry_type(self) -> EntryType:
        return EntryType.from_mode(self.mode)

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_file(self) -> bool:
        return stat.S_ISREG(self.mode)

    @property
    def is_link(self) -> bool:
        return stat.S_ISLNK(self.mode)

    @property
    def name(self) -> str:
        """Last component of the display path."""
        return self.display_path.rsplit("/", 1)[-1]

    @property
    def permissions(self) -> int:
        """Permission bits only (e.g. 0o644)."""
        return self.mode & 0o777

    def refresh_metadata(self) -> bool:
        """Re-read size, mode and mtime from the filesystem in place.

        Returns:
            True if lstat succeeded, False if the entry is gone or
            unreadable (fields are left untouched in that case).
        """
        try:
            st = os.lstat(self.full_path)
        except OSError:
            return False
        self.size = st.st_size
        self.mode = st.st_mode
        self.mtime = st.st_mtime
        return True


@dataclass(frozen=True, slots=True)
class SnapshotNode:
    """One object captured from a directory subtree before deletion.

    Attributes:
        path: Absolute path at capture time.
        entry_type: Type of the object at capture time.
        content: File bytes for regular files, None otherwise (or when
            the file could not be read).
        link_target: Symlink target for symbolic links, None otherwise
            (or when the link could not be read).
    """

    path: str
    entry_type: EntryType
    content: bytes | None = None
    link_target: str | None = None

    def __post_init__(self) -> None:
        """Validate snapshot node data after initialization."""
        if not self.path:
            msg = "Snapshot path cannot be empty"
            raise ValueError(msg)
        if self.content is not None and self.entry_type != EntryType.FILE:
            msg = "Only file nodes can carry content"
            raise ValueError(msg)
        if self.link_target is not None and self.entry_type != EntryType.LINK:
            msg = "Only link nodes can carry a link target"
            raise ValueError(msg)

    @property
    def is_dir(self) -> bool:
        return self.entry_type == EntryType.DIRECTORY

    @property
    def is_link(self) -> bool:
        return self.entry_type == EntryType.LINK

    @property
    def restorable(self) -> bool:
        """Whether restore can recreate this node.

        Special files and links whose target could not be read are not.
        """
        if self.entry_type == EntryType.LINK:
            return self.link_target is not None
        return self.entry_type != EntryType.OTHER
