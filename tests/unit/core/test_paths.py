"""Unit tests for XDG path management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from dirwalk.core.paths import (
    APP_NAME,
    ensure_config_dir,
    ensure_state_dir,
    get_config_dir,
    get_history_path,
    get_settings_path,
    get_state_dir,
    get_theme_path,
)


class TestXdgDirs:
    """Tests for config and state directory lookup."""

    def test_default_config_dir(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_dir()
            expected = Path.home() / ".config" / APP_NAME
        assert result == expected

    def test_default_state_dir(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            result = get_state_dir()
            expected = Path.home() / ".local" / "state" / APP_NAME
        assert result == expected

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_dir() == tmp_path / APP_NAME

    def test_empty_variable_is_ignored(self) -> None:
        with patch.dict(os.environ, {"XDG_STATE_HOME": ""}):
            assert get_state_dir() == Path.home() / ".local" / "state" / APP_NAME


class TestFilePaths:
    """Tests for the file path helpers."""

    def test_files(self, isolated_xdg: Path) -> None:
        assert get_settings_path() == isolated_xdg / "config" / APP_NAME / "config.toml"
        assert get_theme_path() == isolated_xdg / "config" / APP_NAME / "theme.toml"
        assert get_history_path() == isolated_xdg / "state" / APP_NAME / "history.jsonl"


class TestEnsureDirs:
    """Tests for directory creation."""

    def test_creates_directories(self) -> None:
        assert ensure_config_dir().is_dir()
        assert ensure_state_dir().is_dir()

    def test_failure_raises_runtime_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(blocker)}):
            with pytest.raises(RuntimeError, match="Cannot create state directory"):
                ensure_state_dir()
