"""Unit tests for the undo record model."""

import pytest
from dirwalk.filesystem.models import EntryType, SnapshotNode
from dirwalk.models.undo import UndoActionType, UndoRecord


class TestUndoActionType:
    """Tests for UndoActionType."""

    def test_structural_kinds(self) -> None:
        assert UndoActionType.DELETE.changes_structure is True
        assert UndoActionType.CREATE.changes_structure is True
        assert UndoActionType.RENAME.changes_structure is True
        assert UndoActionType.MOVE.changes_structure is True

    def test_in_place_kinds(self) -> None:
        assert UndoActionType.CHMOD.changes_structure is False
        assert UndoActionType.EDIT.changes_structure is False


class TestUndoRecordFactories:
    """Tests for UndoRecord factory methods and validation."""

    def test_file_delete(self) -> None:
        record = UndoRecord.for_file_delete("/r/f", b"data")
        assert record.action_type == UndoActionType.DELETE
        assert record.content == b"data"
        assert record.is_directory_delete is False
        assert record.is_link_delete is False

    def test_empty_file_delete_is_not_a_link_delete(self) -> None:
        record = UndoRecord.for_file_delete("/r/f", b"")
        assert record.is_link_delete is False

    def test_directory_delete_freezes_snapshot(self) -> None:
        nodes = [SnapshotNode(path="/r/d/x", entry_type=EntryType.FILE, content=b"x")]
        record = UndoRecord.for_directory_delete("/r/d", nodes)
        nodes.clear()

        assert record.is_directory_delete is True
        assert record.snapshot is not None
        assert len(record.snapshot) == 1

    def test_link_delete(self) -> None:
        record = UndoRecord.for_link_delete("/r/l", "target")
        assert record.is_link_delete is True
        assert record.link_target == "target"

    def test_rename_requires_old_path(self) -> None:
        with pytest.raises(ValueError, match="requires old_path"):
            UndoRecord(action_type=UndoActionType.RENAME, path="/r/new")

    def test_chmod_requires_old_mode(self) -> None:
        with pytest.raises(ValueError, match="requires old_mode"):
            UndoRecord(action_type=UndoActionType.CHMOD, path="/r/f")

    def test_edit_requires_content(self) -> None:
        with pytest.raises(ValueError, match="requires content"):
            UndoRecord(action_type=UndoActionType.EDIT, path="/r/f")

    def test_content_and_snapshot_exclusive(self) -> None:
        with pytest.raises(ValueError, match="both content and a snapshot"):
            UndoRecord(
                action_type=UndoActionType.DELETE,
                path="/r/d",
                content=b"x",
                snapshot=(),
            )

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            UndoRecord.for_create("")


class TestUndoRecordDisplay:
    """Tests for describe and to_summary."""

    @pytest.mark.parametrize(
        ("record", "expected"),
        [
            (UndoRecord.for_file_delete("/r/f", b""), "restore /r/f"),
            (UndoRecord.for_create("/r/f"), "remove /r/f"),
            (UndoRecord.for_rename("/r/new", "/r/old"), "rename /r/new back to /r/old"),
            (UndoRecord.for_move("/x/f", "/r/f"), "move /x/f back to /r/f"),
            (UndoRecord.for_chmod("/r/f", 0o644), "chmod /r/f back to 644"),
            (UndoRecord.for_edit("/r/f", b"old"), "restore previous content of /r/f"),
        ],
    )
    def test_describe(self, record: UndoRecord, expected: str) -> None:
        assert record.describe() == expected

    def test_summary_has_no_content(self) -> None:
        summary = UndoRecord.for_edit("/r/f", b"secret").to_summary()

        assert summary == {"action_type": "edit", "path": "/r/f", "content_bytes": 6}
        assert b"secret" not in repr(summary).encode()

    def test_summary_for_directory_delete(self) -> None:
        nodes = [SnapshotNode(path="/r/d/x", entry_type=EntryType.DIRECTORY)]
        summary = UndoRecord.for_directory_delete("/r/d", nodes).to_summary()
        assert summary["snapshot_nodes"] == 1

    def test_summary_for_chmod(self) -> None:
        assert UndoRecord.for_chmod("/r/f", 0o755).to_summary()["old_mode"] == "755"
