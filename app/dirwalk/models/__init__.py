"""Data models for dirwalk.

This module exports the undo and journal data structures.
"""

from dirwalk.models.history import HistoryActionType, HistoryEntry, create_history_entry
from dirwalk.models.undo import UndoActionType, UndoRecord

__all__ = [
    "HistoryActionType",
    "HistoryEntry",
    "UndoActionType",
    "UndoRecord",
    "create_history_entry",
]
