"""State management for the action journal.

This module provides the StateManager class for persisting and querying
journal entries in a JSONL file format.
"""

import json
import logging
from pathlib import Path

from dirwalk.core.paths import ensure_state_dir, get_state_dir
from dirwalk.models.history import HistoryEntry

logger = logging.getLogger(__name__)


class StateManager:
    """Manages the action journal in a JSONL file.

    Storage location: ~/.local/state/dirwalk/history.jsonl

    Each line is a complete JSON object representing a HistoryEntry.
    The journal is append-only and never holds file contents.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/dirwalk
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        return self._state_dir / self.HISTORY_FILENAME

    def record_action(self, entry: HistoryEntry) -> None:
        """Append an entry to the journal.

        Creates the file and parent directories if they don't exist.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        line = entry.to_json_line()
        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()

    def try_record_action(self, entry: HistoryEntry) -> bool:
        """Append an entry, logging instead of raising on failure.

        The journal is an audit trail; a journal write failure must
        never fail the mutation it describes.

        Returns:
            True if the entry was written.
        """
        try:
            self.record_action(entry)
        except (OSError, RuntimeError) as e:
            logger.warning("Cannot write journal %s: %s", self.history_path, e)
            return False
        return True

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Read journal entries, newest first.

        Corrupt lines are skipped with a warning.

        Args:
            limit: Maximum number of entries to return (None = all).

        Returns:
            List of HistoryEntry, newest first. Empty if no journal exists.
        """
        if not self.history_path.exists():
            return []

        entries: list[HistoryEntry] = []

        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entries.append(HistoryEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning(
                        "Skipping corrupt history line %d: %s",
                        line_num,
                        str(e),
                    )
                    continue

        entries.reverse()

        if limit is not None:
            return entries[:limit]

        return entries
