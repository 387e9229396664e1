"""Recursive directory scanner.

Walks the scan root depth-first (pre-order) and produces a flat list
of entries, filtered by type. The walk is best-effort over a live tree:
entries whose metadata cannot be read are logged and skipped.
"""

import logging
import os
from pathlib import Path

from dirwalk.errors import ResourceLimitExceededError, ScanError
from dirwalk.filesystem.models import Entry, EntryType, matches_filter
from dirwalk.filesystem.ordering import sort_entries
from dirwalk.filesystem.paths import normalize

logger = logging.getLogger(__name__)

MAX_ENTRIES = 20000


class DirectoryScanner:
    """Scans a directory subtree into a flat list of entries.

    Recurses into every directory, whether or not the directory itself
    passes the type filter, so children of a filtered-out directory are
    still visited.

    Args:
        root: Absolute path of the scan root.
        type_filter: Entry types to include. Empty means all types.
        max_entries: Upper bound on the number of collected entries.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        type_filter: frozenset[EntryType] = frozenset(),
        max_entries: int = MAX_ENTRIES,
    ) -> None:
        self._root = str(root)
        self._type_filter = type_filter
        self._max_entries = max_entries

    @property
    def root(self) -> str:
        return self._root

    @property
    def type_filter(self) -> frozenset[EntryType]:
        return self._type_filter

    def scan(self) -> list[Entry]:
        """Scan the root and return entries in discovery order.

        Returns:
            Entries in depth-first, pre-order discovery order.

        Raises:
            ScanError: If the root directory cannot be opened.
            ResourceLimitExceededError: If more than max_entries match.
        """
        entries: list[Entry] = []
        try:
            children = list(Path(self._root).iterdir())
        except OSError as e:
            raise ScanError(f"Cannot open directory {self._root}: {e.strerror or e}") from e

        self._walk_children(children, entries)
        logger.debug("Scanned %d entries under %s", len(entries), self._root)
        return entries

    def scan_sorted(self, *, sort_by_size: bool = False) -> list[Entry]:
        """Scan the root and return entries in display order."""
        return sort_entries(self.scan(), sort_by_size=sort_by_size)

    def _walk(self, directory: Path, entries: list[Entry]) -> None:
        """Recurse into a sub-directory, skipping it if it cannot be opened."""
        try:
            children = list(directory.iterdir())
        except OSError as e:
            logger.warning("Cannot open directory %s: %s", directory, e.strerror or e)
            return
        self._walk_children(children, entries)

    def _walk_children(self, children: list[Path], entries: list[Entry]) -> None:
        for child in children:
            try:
                st = child.lstat()
            except OSError as e:
                logger.warning("Cannot stat %s: %s", child, e.strerror or e)
                continue

            entry_type = EntryType.from_mode(st.st_mode)
            if matches_filter(entry_type, self._type_filter):
                if len(entries) >= self._max_entries:
                    raise ResourceLimitExceededError("files", self._max_entries)
                display_path, full_path = normalize(os.fspath(child), self._root)
                entries.append(Entry.from_stat(full_path, display_path, st))

            if entry_type == EntryType.DIRECTORY:
                self._walk(child, entries)
