"""Exception hierarchy for dirwalk.

Every failure the core can report is a subclass of DirwalkError, so
the session and CLI layers can turn any of them into a short status
message without catching unrelated exceptions.
"""


class DirwalkError(Exception):
    """Base exception for all dirwalk errors."""


class ResourceLimitExceededError(DirwalkError):
    """Raised when a fixed capacity (entries, snapshot nodes) is exceeded."""

    def __init__(self, resource: str, limit: int) -> None:
        super().__init__(f"Too many {resource} (limit {limit})")
        self.resource = resource
        self.limit = limit


class PathExistsError(DirwalkError):
    """Raised when a create/rename target already exists."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Name already exists: {path}")
        self.path = path


class FilesystemIOError(DirwalkError):
    """Raised when an open, read, write or metadata call fails."""


class ScanError(FilesystemIOError):
    """Raised when the scan root cannot be opened."""


class PathNotFoundError(FilesystemIOError):
    """Raised when a required path (or its parent directory) is missing."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(message or f"Path does not exist: {path}")
        self.path = path


class PermissionDeniedError(FilesystemIOError):
    """Raised when the OS refuses an operation for permission reasons."""


class UnsupportedOperationError(DirwalkError):
    """Raised when the host platform cannot perform an operation."""


class InvalidArgumentError(DirwalkError):
    """Raised when a name, mode or target supplied by the user is unusable."""


class InvalidModeError(InvalidArgumentError):
    """Raised when a permission mode is outside the 0o000-0o777 range."""


class IncompleteRestoreError(DirwalkError):
    """Raised when undoing a directory delete could not recreate every node."""

    def __init__(self, path: str, skipped: list[str]) -> None:
        super().__init__(
            f"Restored {path} without {len(skipped)} item(s) that cannot be recreated"
        )
        self.path = path
        self.skipped = skipped


class NothingToUndoError(DirwalkError):
    """Raised when undo is requested on an empty undo stack."""

    def __init__(self) -> None:
        super().__init__("Nothing to undo")


def from_os_error(error: OSError, action: str) -> DirwalkError:
    """Translate an OSError into the matching dirwalk exception.

    Args:
        error: The OSError raised by the failing call.
        action: Short description of what was attempted (e.g. "rename").

    Returns:
        A DirwalkError subclass instance carrying a readable message.
    """
    path = error.filename or ""
    reason = error.strerror or str(error)
    message = f"Cannot {action} {path}: {reason}" if path else f"Cannot {action}: {reason}"

    if isinstance(error, FileExistsError):
        return PathExistsError(path)
    if isinstance(error, FileNotFoundError):
        return PathNotFoundError(path, message)
    if isinstance(error, PermissionError):
        return PermissionDeniedError(message)
    return FilesystemIOError(message)
