"""Service recording file saves into the snapshot timeline."""

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from code_timeline.config.settings import Settings
from code_timeline.db.history_store import HistoryStore
from code_timeline.exceptions import (
    NotFoundError,
    RestoreTargetUnavailableError,
    StorageError,
)
from code_timeline.models.timeline import (
    ClearResult,
    RecordResult,
    RestoreResult,
    SnapshotEntry,
    TimeBucket,
    TimelineStats,
)
from code_timeline.services.aggregation_service import (
    DEFAULT_INTERVAL_MS,
    bucket_entries,
    recent_entries,
    summarize,
)
from code_timeline.services.diff_service import DiffService
from code_timeline.services.restore_service import RestoreService
from code_timeline.services.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)


def current_time_ms() -> int:
    """Wall-clock time in milliseconds since epoch."""
    return time.time_ns() // 1_000_000


def format_timestamp(timestamp: int) -> str:
    """Local, human-readable form of a snapshot timestamp.

    Timestamps the platform cannot represent as a local date are shown
    as raw milliseconds.
    """
    try:
        return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return f"{timestamp} ms"


class TimelineService:
    """Handle owning the history, the snapshot cache and their operations.

    One instance is built at startup and shared by every caller. Mutations
    (recording and clearing) run one at a time under a lock so concurrent
    save events cannot interleave their updates.
    """

    def __init__(
        self,
        store: HistoryStore,
        cache: SnapshotCache | None = None,
        diff_service: DiffService | None = None,
        restore_service: RestoreService | None = None,
        clock: Callable[[], int] = current_time_ms,
        default_interval_ms: int = DEFAULT_INTERVAL_MS,
        recent_limit: int = 15,
    ) -> None:
        """Initialize timeline service.

        Args:
            store: History store (already loaded)
            cache: Last-known content per file
            diff_service: Change scoring and diff rendering
            restore_service: File overwrite
            clock: Time source in ms since epoch
            default_interval_ms: Bucket width used when none is requested
            recent_limit: Default size of the recent snapshots list
        """
        self.store = store
        self.cache = cache or SnapshotCache()
        self.diff_service = diff_service or DiffService()
        self.restore_service = restore_service or RestoreService()
        self.clock = clock
        self.default_interval_ms = default_interval_ms
        self.recent_limit = recent_limit
        self._write_lock = asyncio.Lock()

    @classmethod
    async def open(cls, settings: Settings, **kwargs) -> "TimelineService":
        """Build a service from settings and load the stored history.

        Args:
            settings: Application settings
            **kwargs: Overrides passed to the constructor (clock, services)

        Returns:
            Ready-to-use TimelineService
        """
        store = HistoryStore(
            settings.storage_path,
            max_entries=settings.max_entries,
            indent=settings.json_indent,
        )
        await store.load()

        cache = SnapshotCache()
        if settings.seed_cache_from_history:
            cache.seed(store.all())
            logger.info(f"Seeded snapshot cache with {len(cache)} files")

        return cls(
            store,
            cache=cache,
            default_interval_ms=settings.default_interval_ms,
            recent_limit=settings.recent_limit,
            **kwargs,
        )

    async def record_change(
        self,
        file_path: str,
        content: str,
        file_name: str | None = None,
    ) -> RecordResult:
        """Record a save event.

        The first observation of a file is always recorded, with a change
        count of 1 and no diff. Later saves are recorded only when at least
        one line position differs from the last recorded snapshot.

        Args:
            file_path: Path identifying the tracked file
            content: Full text of the file as saved
            file_name: Display name (default: last path component)

        Returns:
            RecordResult; ``persisted`` is False and ``error`` set when the
            history could not be written (the snapshot is kept in memory)
        """
        async with self._write_lock:
            previous = self.cache.get(file_path)
            previous_text = previous or ""
            line_changes = self.diff_service.count_changed_lines(previous_text, content)

            if previous is not None and line_changes == 0:
                logger.debug(f"No line changes in {file_path}, skipping")
                return RecordResult(recorded=False, change_count=0, persisted=True)

            entry = SnapshotEntry(
                timestamp=self.clock(),
                file_path=file_path,
                file_name=file_name or Path(file_path).name,
                content=content,
                change_count=self.diff_service.change_magnitude(previous_text, content),
                diff=(
                    self.diff_service.render(previous_text, content)
                    if previous_text
                    else None
                ),
            )

            evicted = self.store.append(entry)
            self.cache.set(file_path, content)

            try:
                await self.store.persist()
            except StorageError as e:
                logger.error(f"Failed to persist timeline after recording {entry.file_name}: {e}")
                return RecordResult(
                    recorded=True,
                    entry=entry,
                    change_count=line_changes,
                    persisted=False,
                    evicted=evicted,
                    error=str(e),
                )

        logger.info(f"Recorded change: {entry.file_name} - {entry.change_count} changes")
        return RecordResult(
            recorded=True,
            entry=entry,
            change_count=line_changes,
            persisted=True,
            evicted=evicted,
        )

    def get_timeline(self) -> list[SnapshotEntry]:
        """Return a copy of the full history in recording order."""
        return self.store.all()

    def get_aggregated_history(self, interval_ms: int | None = None) -> list[TimeBucket]:
        """Group the history into time buckets.

        Args:
            interval_ms: Bucket width (default: configured interval)

        Returns:
            Buckets in ascending start order
        """
        return bucket_entries(
            self.store.all(),
            self.default_interval_ms if interval_ms is None else interval_ms,
        )

    def get_recent(self, limit: int | None = None) -> list[SnapshotEntry]:
        """Return the newest snapshots first."""
        return recent_entries(
            self.store.all(), self.recent_limit if limit is None else limit
        )

    def get_stats(
        self, interval_ms: int | None = None, now: datetime | None = None
    ) -> TimelineStats:
        """Compute files/changes/today statistics over the timeline."""
        return summarize(self.get_aggregated_history(interval_ms), now)

    def find_entry(self, file_path: str, timestamp: int) -> SnapshotEntry:
        """Look a snapshot up by file path and timestamp.

        Raises:
            NotFoundError: If no such snapshot is stored
        """
        for entry in reversed(self.store.all()):
            if entry.file_path == file_path and entry.timestamp == timestamp:
                return entry
        raise NotFoundError(f"Snapshot not found: {file_path} @ {timestamp}")

    async def restore_snapshot(self, entry: SnapshotEntry) -> RestoreResult:
        """Overwrite the live file with a snapshot.

        Restoring is not itself recorded; history and cache are unchanged.

        Args:
            entry: Snapshot to restore

        Returns:
            RestoreResult with a short user-facing message
        """
        try:
            await self.restore_service.restore(entry)
        except RestoreTargetUnavailableError as e:
            logger.warning(f"Failed to restore {entry.file_path}: {e}")
            return RestoreResult(
                success=False,
                file_path=entry.file_path,
                file_name=entry.file_name,
                timestamp=entry.timestamp,
                message=f"Failed to restore {entry.file_name}: {e}",
            )

        return RestoreResult(
            success=True,
            file_path=entry.file_path,
            file_name=entry.file_name,
            timestamp=entry.timestamp,
            message=f"Restored {entry.file_name} to {format_timestamp(entry.timestamp)}",
        )

    async def clear_history(self) -> ClearResult:
        """Drop every snapshot and the snapshot cache, then persist."""
        async with self._write_lock:
            cleared = len(self.store)
            self.cache.clear()
            try:
                await self.store.clear()
            except StorageError as e:
                logger.error(f"Failed to persist cleared timeline: {e}")
                return ClearResult(cleared=cleared, persisted=False, error=str(e))

        logger.info(f"Timeline history cleared ({cleared} entries)")
        return ClearResult(cleared=cleared, persisted=True)
