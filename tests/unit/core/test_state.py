"""Unit tests for StateManager.

Tests for the JSONL action journal.
"""

from pathlib import Path

import pytest
from dirwalk.core.state import StateManager
from dirwalk.models.history import HistoryActionType, HistoryEntry, create_history_entry


@pytest.fixture
def state(tmp_path: Path) -> StateManager:
    return StateManager(state_dir=tmp_path / "state")


def _entry(entry_id: str, path: str = "/r/f") -> HistoryEntry:
    return HistoryEntry(
        id=entry_id,
        timestamp="2026-01-26T14:30:00+00:00",
        action_type=HistoryActionType.CREATE,
        path=path,
    )


class TestStateManager:
    """Tests for StateManager."""

    def test_no_journal(self, state: StateManager) -> None:
        assert state.get_history() == []

    def test_record_creates_directory(self, state: StateManager) -> None:
        state.record_action(_entry("aaa"))
        assert state.history_path.exists()
        assert state.history_path.name == "history.jsonl"

    def test_newest_first(self, state: StateManager) -> None:
        for entry_id in ("aaa", "bbb", "ccc"):
            state.record_action(_entry(entry_id))

        assert [e.id for e in state.get_history()] == ["ccc", "bbb", "aaa"]
        assert [e.id for e in state.get_history(limit=2)] == ["ccc", "bbb"]

    def test_corrupt_lines_are_skipped(self, state: StateManager) -> None:
        state.record_action(_entry("aaa"))
        with state.history_path.open("a", encoding="utf-8") as f:
            f.write("not json\n\n")
            f.write('{"id": "x"}\n')
        state.record_action(_entry("bbb"))

        assert [e.id for e in state.get_history()] == ["bbb", "aaa"]

    def test_try_record_action(self, state: StateManager) -> None:
        assert state.try_record_action(create_history_entry(HistoryActionType.EDIT, "/r")) is True

    def test_try_record_action_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        state = StateManager(state_dir=blocker)

        assert state.try_record_action(_entry("aaa")) is False

    def test_default_state_dir_uses_xdg(self, isolated_xdg: Path) -> None:
        state = StateManager()
        state.record_action(_entry("aaa"))
        assert state.history_path == isolated_xdg / "state" / "dirwalk" / "history.jsonl"
        assert state.history_path.exists()
