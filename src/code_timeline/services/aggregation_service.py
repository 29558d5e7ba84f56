"""Time-bucketed aggregation of the snapshot history."""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from code_timeline.exceptions import ValidationError
from code_timeline.models.timeline import SnapshotEntry, TimeBucket, TimelineStats

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 300_000


def _coerce_entry(item: Any) -> SnapshotEntry | None:
    if isinstance(item, SnapshotEntry):
        return item
    try:
        return SnapshotEntry.model_validate(item)
    except PydanticValidationError:
        return None


def bucket_entries(
    entries: Iterable[SnapshotEntry | dict[str, Any]],
    interval_ms: int = DEFAULT_INTERVAL_MS,
) -> list[TimeBucket]:
    """Group snapshots into fixed-width time windows.

    Each entry falls in the window starting at
    ``timestamp // interval_ms * interval_ms``. Entries keep their history
    order inside a window, windows are sorted by start and empty windows
    are not emitted. Malformed entries are skipped.

    Args:
        entries: Snapshots in recording order
        interval_ms: Window width in milliseconds

    Returns:
        Buckets in ascending start order

    Raises:
        ValidationError: If interval_ms is not positive
    """
    if interval_ms <= 0:
        raise ValidationError("interval_ms must be a positive number of milliseconds")

    buckets: dict[int, TimeBucket] = {}
    for index, item in enumerate(entries):
        entry = _coerce_entry(item)
        if entry is None:
            logger.warning(f"Skipping malformed timeline entry #{index}")
            continue

        start = entry.timestamp // interval_ms * interval_ms
        bucket = buckets.get(start)
        if bucket is None:
            bucket = buckets[start] = TimeBucket(bucket_start=start)
        bucket.total_change_count += entry.change_count
        bucket.entries.append(entry)

    return [buckets[start] for start in sorted(buckets)]


def start_of_day_ms(now: datetime | None = None) -> int:
    """Local midnight of the given moment, in ms since epoch."""
    now = now or datetime.now()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp() * 1000)


def summarize(buckets: list[TimeBucket], now: datetime | None = None) -> TimelineStats:
    """Compute the quick statistics shown above the timeline.

    Args:
        buckets: Aggregated timeline
        now: Reference time for the "today" total (default: current time)

    Returns:
        TimelineStats
    """
    today = start_of_day_ms(now)
    files = {entry.file_path for bucket in buckets for entry in bucket.entries}
    return TimelineStats(
        files=len(files),
        total_entries=sum(len(bucket.entries) for bucket in buckets),
        total_changes=sum(bucket.total_change_count for bucket in buckets),
        today_changes=sum(
            bucket.total_change_count for bucket in buckets if bucket.bucket_start >= today
        ),
    )


def recent_entries(entries: Iterable[SnapshotEntry], limit: int = 15) -> list[SnapshotEntry]:
    """Return the newest snapshots first.

    Args:
        entries: Snapshots in recording order
        limit: Maximum number of snapshots returned

    Returns:
        At most ``limit`` snapshots, newest first
    """
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    # reversed() keeps later recordings first when timestamps tie
    ordered = sorted(reversed(list(entries)), key=lambda e: e.timestamp, reverse=True)
    return ordered[:limit]
