"""Data models for code-timeline."""

from code_timeline.models.timeline import (
    INTERVAL_CHOICES_MS,
    ClearResult,
    LoadResult,
    RecordResult,
    RestoreResult,
    SnapshotEntry,
    TimeBucket,
    TimelineStats,
)

__all__ = [
    "INTERVAL_CHOICES_MS",
    "ClearResult",
    "LoadResult",
    "RecordResult",
    "RestoreResult",
    "SnapshotEntry",
    "TimeBucket",
    "TimelineStats",
]
