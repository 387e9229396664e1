"""Filesystem scanning, ordering and snapshot module.

This module provides the entry model, path normalization, the
recursive directory scanner, display ordering and subtree snapshots.
The mutation operator lives in dirwalk.filesystem.operator.
"""

from dirwalk.filesystem.models import Entry, EntryType, SnapshotNode
from dirwalk.filesystem.ordering import compare_entries, sort_entries
from dirwalk.filesystem.paths import normalize
from dirwalk.filesystem.scanner import DirectoryScanner

__all__ = [
    "DirectoryScanner",
    "Entry",
    "EntryType",
    "SnapshotNode",
    "compare_entries",
    "normalize",
    "sort_entries",
]
