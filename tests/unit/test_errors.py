"""Unit tests for OSError translation."""

import errno

import pytest
from dirwalk.errors import (
    DirwalkError,
    FilesystemIOError,
    PathExistsError,
    PathNotFoundError,
    PermissionDeniedError,
    ResourceLimitExceededError,
    from_os_error,
)


class TestFromOsError:
    """Tests for from_os_error."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (FileExistsError(errno.EEXIST, "File exists", "/r/f"), PathExistsError),
            (FileNotFoundError(errno.ENOENT, "No such file", "/r/f"), PathNotFoundError),
            (PermissionError(errno.EACCES, "Permission denied", "/r/f"), PermissionDeniedError),
            (OSError(errno.EXDEV, "Cross-device link", "/r/f"), FilesystemIOError),
        ],
    )
    def test_mapping(self, error: OSError, expected: type[DirwalkError]) -> None:
        assert isinstance(from_os_error(error, "rename"), expected)

    def test_message_names_action_and_path(self) -> None:
        result = from_os_error(PermissionError(errno.EACCES, "Permission denied", "/r/f"), "chmod")
        assert str(result) == "Cannot chmod /r/f: Permission denied"

    def test_message_without_path(self) -> None:
        result = from_os_error(OSError(errno.EIO, "I/O error"), "write")
        assert str(result) == "Cannot write: I/O error"

    def test_exists_message(self) -> None:
        result = from_os_error(FileExistsError(errno.EEXIST, "File exists", "/r/f"), "create")
        assert str(result) == "Name already exists: /r/f"


class TestResourceLimitExceededError:
    def test_message(self) -> None:
        error = ResourceLimitExceededError("files", 20000)
        assert str(error) == "Too many files (limit 20000)"
        assert error.limit == 20000


class TestHierarchy:
    def test_os_level_failures_are_io_errors(self) -> None:
        assert issubclass(PathNotFoundError, FilesystemIOError)
        assert issubclass(PermissionDeniedError, FilesystemIOError)
        assert not issubclass(PathExistsError, FilesystemIOError)
