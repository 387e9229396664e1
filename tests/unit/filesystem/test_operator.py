"""Unit tests for FilesystemOperator.

Tests every mutation, the undo record it pushes, and the failure
paths that must leave the filesystem and the undo stack untouched.
"""

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest
from dirwalk.core.undo import UndoStack
from dirwalk.errors import (
    InvalidArgumentError,
    InvalidModeError,
    PathExistsError,
    PathNotFoundError,
    PermissionDeniedError,
    ResourceLimitExceededError,
    UnsupportedOperationError,
)
from dirwalk.filesystem.models import EntryType
from dirwalk.filesystem.operator import FilesystemOperator, parse_mode
from dirwalk.models.undo import UndoActionType


@pytest.fixture
def stack() -> UndoStack:
    return UndoStack()


@pytest.fixture
def op(stack: UndoStack) -> FilesystemOperator:
    return FilesystemOperator(stack)


class TestParseMode:
    """Tests for parse_mode."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("755", 0o755), ("0o644", 0o644), (" 600 ", 0o600), ("0", 0), ("777", 0o777)],
    )
    def test_valid(self, text: str, expected: int) -> None:
        assert parse_mode(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "888", "1000", "-1"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidModeError):
            parse_mode(text)


class TestCreate:
    """Tests for FilesystemOperator.create."""

    def test_create_file(self, op: FilesystemOperator, stack: UndoStack, tmp_path: Path) -> None:
        result = op.create(str(tmp_path), "new.txt", EntryType.FILE)

        target = tmp_path / "new.txt"
        assert target.is_file()
        assert target.read_bytes() == b""
        assert result.path == str(target)
        assert result.recorded is True
        record = stack.peek()
        assert record is not None
        assert record.action_type == UndoActionType.CREATE
        assert record.path == str(target)

    def test_create_directory(self, op: FilesystemOperator, tmp_path: Path) -> None:
        op.create(str(tmp_path), "newdir", EntryType.DIRECTORY)
        assert (tmp_path / "newdir").is_dir()

    def test_create_link(self, op: FilesystemOperator, tmp_path: Path) -> None:
        op.create(str(tmp_path), "ln", EntryType.LINK, link_target="nowhere")

        link = tmp_path / "ln"
        assert link.is_symlink()
        assert os.readlink(link) == "nowhere"

    def test_create_existing_rejected(
        self, op: FilesystemOperator, stack: UndoStack, tmp_path: Path
    ) -> None:
        (tmp_path / "taken").write_text("keep")

        with pytest.raises(PathExistsError, match="Name already exists"):
            op.create(str(tmp_path), "taken", EntryType.DIRECTORY)

        assert (tmp_path / "taken").read_text() == "keep"
        assert len(stack) == 0

    def test_create_over_dangling_link_rejected(
        self, op: FilesystemOperator, tmp_path: Path
    ) -> None:
        (tmp_path / "dangling").symlink_to("missing")
        with pytest.raises(PathExistsError):
            op.create(str(tmp_path), "dangling", EntryType.FILE)

    def test_empty_name_rejected(self, op: FilesystemOperator, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            op.create(str(tmp_path), "", EntryType.FILE)

    def test_absolute_name_rejected(
        self, op: FilesystemOperator, stack: UndoStack, tmp_path: Path
    ) -> None:
        base = tmp_path / "base"
        base.mkdir()
        outside = tmp_path / "outside.txt"

        with pytest.raises(InvalidArgumentError):
            op.create(str(base), str(outside), EntryType.FILE)

        assert not outside.exists()
        assert len(stack) == 0

    @pytest.mark.parametrize("name", ["../escape.txt", "sub/new.txt", ".", ".."])
    def test_multi_component_name_rejected(
        self, op: FilesystemOperator, tmp_path: Path, name: str
    ) -> None:
        (tmp_path / "sub").mkdir()
        with pytest.raises(InvalidArgumentError):
            op.create(str(tmp_path / "sub"), name, EntryType.FILE)
        assert not (tmp_path / "escape.txt").exists()

    def test_link_without_target_rejected(
        self, op: FilesystemOperator, stack: UndoStack, tmp_path: Path
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            op.create(str(tmp_path), "ln", EntryType.LINK)
        assert not os.path.lexists(tmp_path / "ln")
        assert len(stack) == 0

    def test_other_kind_rejected(self, op: FilesystemOperator, tmp_path: Path) -> None:
        with pytest.raises(UnsupportedOperationError):
            op.create(str(tmp_path), "fifo", EntryType.OTHER)

    def test_missing_base_dir(self, op: FilesystemOperator, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            op.create(str(tmp_path / "missing"), "f", EntryType.FILE)


class TestDelete:
    """Tests for FilesystemOperator.delete."""

    def test_delete_file_keeps_content(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        target = sample_tree / "a.txt"

        op.delete(str(target))

        assert not target.exists()
        record = stack.peek()
        assert record is not None
        assert record.action_type == UndoActionType.DELETE
        assert record.content == b"hello"
        assert record.snapshot is None

    def test_delete_directory_keeps_snapshot(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        target = sample_tree / "sub"

        op.delete(str(target))

        assert not target.exists()
        record = stack.peek()
        assert record is not None
        assert record.is_directory_delete is True
        assert record.snapshot is not None
        assert len(record.snapshot) == 3

    def test_delete_link_keeps_target(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        op.delete(str(sample_tree / "link"))

        assert not os.path.lexists(sample_tree / "link")
        assert (sample_tree / "a.txt").exists()
        record = stack.peek()
        assert record is not None
        assert record.link_target == "a.txt"
        assert record.is_link_delete is True

    def test_oversized_directory_is_not_deleted(self, stack: UndoStack, sample_tree: Path) -> None:
        op = FilesystemOperator(stack, max_snapshot_nodes=2)

        with pytest.raises(ResourceLimitExceededError):
            op.delete(str(sample_tree / "sub"))

        assert (sample_tree / "sub/deeper/c.bin").exists()
        assert len(stack) == 0

    def test_delete_missing(self, op: FilesystemOperator, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            op.delete(str(tmp_path / "missing"))

    def test_unreadable_file_is_not_deleted(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        target = sample_tree / "a.txt"

        with patch.object(Path, "read_bytes", side_effect=PermissionError(13, "denied")):
            with pytest.raises(PermissionDeniedError, match="Cannot delete"):
                op.delete(str(target))

        assert target.exists()
        assert len(stack) == 0


class TestRenameAndMove:
    """Tests for rename and move."""

    def test_rename(self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path) -> None:
        old = sample_tree / "a.txt"

        result = op.rename(str(old), "renamed.txt", str(sample_tree))

        assert not old.exists()
        assert (sample_tree / "renamed.txt").read_text() == "hello"
        assert result.path == str(sample_tree / "renamed.txt")
        record = stack.peek()
        assert record is not None
        assert record.action_type == UndoActionType.RENAME
        assert record.old_path == str(old)

    def test_rename_onto_existing_rejected(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        with pytest.raises(PathExistsError):
            op.rename(str(sample_tree / "a.txt"), "sub", str(sample_tree))
        assert (sample_tree / "a.txt").read_text() == "hello"
        assert (sample_tree / "sub").is_dir()
        assert sorted(p.name for p in (sample_tree / "sub").iterdir()) == ["b.txt", "deeper"]
        assert (sample_tree / "sub/b.txt").read_text() == "world!!"
        assert len(stack) == 0

    def test_rename_empty_name_rejected(self, op: FilesystemOperator, sample_tree: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            op.rename(str(sample_tree / "a.txt"), "", str(sample_tree))

    def test_rename_out_of_base_dir_rejected(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path, tmp_path: Path
    ) -> None:
        moved = tmp_path / "moved.txt"

        with pytest.raises(InvalidArgumentError):
            op.rename(str(sample_tree / "a.txt"), str(moved), str(sample_tree))

        assert not moved.exists()
        assert (sample_tree / "a.txt").read_text() == "hello"
        assert len(stack) == 0

    def test_move(self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path) -> None:
        destination = sample_tree / "sub/deeper/a.txt"

        op.move(str(sample_tree / "a.txt"), str(destination))

        assert destination.read_text() == "hello"
        record = stack.peek()
        assert record is not None
        assert record.action_type == UndoActionType.MOVE

    def test_move_to_missing_parent(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        with pytest.raises(PathNotFoundError, match="Directory does not exist"):
            op.move(str(sample_tree / "a.txt"), str(sample_tree / "nope/a.txt"))
        assert (sample_tree / "a.txt").exists()
        assert len(stack) == 0

    def test_move_onto_existing_rejected(self, op: FilesystemOperator, sample_tree: Path) -> None:
        with pytest.raises(PathExistsError):
            op.move(str(sample_tree / "a.txt"), str(sample_tree / "sub/b.txt"))
        assert (sample_tree / "sub/b.txt").read_text() == "world!!"


class TestChmod:
    """Tests for FilesystemOperator.chmod."""

    def test_chmod_records_old_mode(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        target = sample_tree / "a.txt"
        target.chmod(0o644)

        op.chmod(str(target), 0o600)

        assert stat.S_IMODE(target.stat().st_mode) == 0o600
        record = stack.peek()
        assert record is not None
        assert record.old_mode == 0o644

    def test_mode_out_of_range(self, op: FilesystemOperator, sample_tree: Path) -> None:
        with pytest.raises(InvalidModeError):
            op.chmod(str(sample_tree / "a.txt"), 0o1000)

    def test_missing_path(self, op: FilesystemOperator, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            op.chmod(str(tmp_path / "missing"), 0o644)

    def test_link_unsupported(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        with patch("dirwalk.filesystem.operator.os.supports_follow_symlinks", set()):
            with pytest.raises(UnsupportedOperationError):
                op.chmod(str(sample_tree / "link"), 0o600)
        assert len(stack) == 0


class TestEditAndCopy:
    """Tests for edit and copy."""

    def test_edit_records_old_content(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        target = sample_tree / "a.txt"

        op.edit(str(target), "brand new")

        assert target.read_text() == "brand new"
        record = stack.peek()
        assert record is not None
        assert record.action_type == UndoActionType.EDIT
        assert record.content == b"hello"

    def test_edit_accepts_bytes(self, op: FilesystemOperator, sample_tree: Path) -> None:
        op.edit(str(sample_tree / "a.txt"), b"\x00\x01")
        assert (sample_tree / "a.txt").read_bytes() == b"\x00\x01"

    def test_copy_is_not_recorded(
        self, op: FilesystemOperator, stack: UndoStack, sample_tree: Path
    ) -> None:
        src = sample_tree / "sub/deeper/c.bin"
        dst = sample_tree / "c.bin.copy"

        result = op.copy(str(src), str(dst))

        assert dst.read_bytes() == src.read_bytes()
        assert result.record is None
        assert result.recorded is False
        assert len(stack) == 0

    def test_copy_missing_source(self, op: FilesystemOperator, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            op.copy(str(tmp_path / "missing"), str(tmp_path / "dst"))


class TestFullUndoStack:
    """Mutations still happen when the undo stack is full."""

    def test_mutation_proceeds_unrecorded(self, tmp_path: Path) -> None:
        stack = UndoStack(capacity=1)
        op = FilesystemOperator(stack)

        first = op.create(str(tmp_path), "one", EntryType.FILE)
        second = op.create(str(tmp_path), "two", EntryType.FILE)

        assert first.recorded is True
        assert second.recorded is False
        assert (tmp_path / "two").exists()
        assert len(stack) == 1
