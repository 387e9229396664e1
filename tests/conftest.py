"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import locale
import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

# Rich reads COLUMNS once, when the shared consoles are created.
os.environ["COLUMNS"] = "200"


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    """Point the XDG config and state directories at a temporary home.

    Keeps settings, theme overrides and the journal out of the real
    home directory.
    """
    home = tmp_path_factory.mktemp("xdg")
    env = {
        "XDG_CONFIG_HOME": str(home / "config"),
        "XDG_STATE_HOME": str(home / "state"),
    }
    with patch.dict(os.environ, env):
        yield home


@pytest.fixture(autouse=True)
def restore_collation() -> Iterator[None]:
    """Undo the LC_COLLATE change the CLI callback makes."""
    saved = locale.setlocale(locale.LC_COLLATE)
    yield
    locale.setlocale(locale.LC_COLLATE, saved)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Small directory tree covering every entry type the browser shows.

    Layout::

        tree/
            a.txt             "hello"
            link -> a.txt
            sub/
                b.txt         "world!!"
                deeper/
                    c.bin     2000 bytes
    """
    root = tmp_path / "tree"
    root.mkdir()
    (root / "a.txt").write_text("hello")
    (root / "link").symlink_to("a.txt")
    sub = root / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("world!!")
    deeper = sub / "deeper"
    deeper.mkdir()
    (deeper / "c.bin").write_bytes(bytes(range(250)) * 8)
    return root
