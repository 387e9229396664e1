"""User settings for dirwalk.

Settings are stored in ~/.config/dirwalk/config.toml. Every field has
a default, so a missing file simply means default behavior; command
line flags override whatever the file says.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dirwalk.core.paths import get_settings_path
from dirwalk.filesystem.models import EntryType

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Browser settings.

    Attributes:
        sort_by_size: Sort entries by size (largest first) by default.
        show_links: Include symbolic links in the type filter.
        show_dirs: Include directories in the type filter.
        show_files: Include regular files in the type filter.
        undo_capacity: Number of undo records kept per session.
        max_entries: Maximum number of entries a scan may collect.
        max_snapshot_nodes: Maximum nodes captured before a directory delete.
        view_limit: Number of bytes shown by the view command.
        copy_suffix: Suffix appended to the destination of a copy.
        journal: Record mutations in the action journal.
    """

    model_config = ConfigDict(extra="forbid")

    sort_by_size: bool = False
    show_links: bool = False
    show_dirs: bool = False
    show_files: bool = False
    undo_capacity: Annotated[
        int,
        Field(ge=1, le=1000, description="Undo records kept per session"),
    ] = 100
    max_entries: Annotated[
        int,
        Field(ge=1, description="Maximum entries collected by a scan"),
    ] = 20000
    max_snapshot_nodes: Annotated[
        int,
        Field(ge=1, description="Maximum nodes in a directory snapshot"),
    ] = 1000
    view_limit: Annotated[
        int,
        Field(ge=1, description="Bytes shown when viewing a file"),
    ] = 1024
    copy_suffix: Annotated[
        str,
        Field(min_length=1, description="Suffix for copy destinations"),
    ] = ".copy"
    journal: bool = True

    @property
    def type_filter(self) -> frozenset[EntryType]:
        """Entry types selected by the show_* flags (empty = all)."""
        selected: set[EntryType] = set()
        if self.show_links:
            selected.add(EntryType.LINK)
        if self.show_dirs:
            selected.add(EntryType.DIRECTORY)
        if self.show_files:
            selected.add(EntryType.FILE)
        return frozenset(selected)


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when the settings file is not found."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated Settings object.

    Raises:
        SettingsNotFoundError: If the file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise SettingsNotFoundError(f"Settings not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def load_settings_or_default(path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when the file is missing.

    Invalid files are still reported as errors.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    try:
        return load_settings(path)
    except SettingsNotFoundError:
        logger.debug("No settings file, using defaults")
        return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump()

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path
