"""Persistent storage for the snapshot history."""

from code_timeline.db.history_store import MAX_ENTRIES, HistoryStore

__all__ = ["HistoryStore", "MAX_ENTRIES"]
