"""Timeline MCP tools."""

from pathlib import Path
from typing import Any

import aiofiles

from code_timeline.exceptions import NotFoundError, ValidationError
from code_timeline.models.timeline import INTERVAL_CHOICES_MS, SnapshotEntry
from code_timeline.services.timeline_service import TimelineService
from code_timeline.tools import create_error_response
from code_timeline.utils.path_filter import TrackingFilter


def _entry_summary(entry: SnapshotEntry) -> dict[str, Any]:
    return {
        "timestamp": entry.timestamp,
        "file_path": entry.file_path,
        "file_name": entry.file_name,
        "change_count": entry.change_count,
        "has_diff": entry.diff is not None,
    }


async def timeline_record_change(
    service: TimelineService,
    file_path: str,
    content: str | None = None,
    file_name: str | None = None,
    tracking_filter: TrackingFilter | None = None,
) -> dict[str, Any]:
    """Record a save of a file.

    Args:
        service: Timeline service instance
        file_path: Path of the saved file
        content: Saved text (read from disk when omitted)
        file_name: Display name (default: last path component)
        tracking_filter: Workspace filter; untracked files are skipped

    Returns:
        Recording outcome
    """
    if not file_path:
        return create_error_response(
            message="file_path cannot be empty",
            error_type="ValidationError",
        )

    if tracking_filter and not tracking_filter.is_trackable(file_path):
        return {"recorded": False, "tracked": False, "file_path": file_path}

    if content is None:
        try:
            async with aiofiles.open(file_path, encoding="utf-8", newline="") as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            return create_error_response(
                message=f"Cannot read {Path(file_path).name}: {e}",
                error_type="NotFoundError",
            )

    result = await service.record_change(file_path, content, file_name=file_name)

    response: dict[str, Any] = {
        "recorded": result.recorded,
        "tracked": True,
        "file_path": file_path,
        "line_changes": result.change_count,
        "persisted": result.persisted,
        "evicted": result.evicted,
    }
    if result.entry:
        response["entry"] = _entry_summary(result.entry)
    if result.error:
        response["warning"] = f"History not saved: {result.error}"
    return response


async def timeline_history(
    service: TimelineService,
    interval_ms: int | None = None,
    include_content: bool = False,
) -> dict[str, Any]:
    """Get the timeline grouped into time buckets.

    Args:
        service: Timeline service instance
        interval_ms: Bucket width in ms (default: configured interval)
        include_content: Include snapshot content and diff of each entry

    Returns:
        Buckets in ascending order with per-bucket change totals
    """
    try:
        buckets = service.get_aggregated_history(interval_ms)
    except ValidationError as e:
        return create_error_response(
            message=str(e),
            error_type="ValidationError",
            details={"suggested_intervals_ms": list(INTERVAL_CHOICES_MS)},
        )

    def render(entry: SnapshotEntry) -> dict[str, Any]:
        if include_content:
            return entry.to_record()
        return _entry_summary(entry)

    return {
        "interval_ms": interval_ms or service.default_interval_ms,
        "buckets": [
            {
                "timestamp": bucket.bucket_start,
                "changes": bucket.total_change_count,
                "files": bucket.file_names,
                "entries": [render(entry) for entry in bucket.entries],
            }
            for bucket in buckets
        ],
    }


async def timeline_recent(
    service: TimelineService,
    limit: int | None = None,
) -> dict[str, Any]:
    """Get the most recent snapshots, newest first.

    Args:
        service: Timeline service instance
        limit: Maximum number of snapshots (default: configured limit)

    Returns:
        Recent snapshot summaries
    """
    try:
        entries = service.get_recent(limit)
    except ValidationError as e:
        return create_error_response(
            message=str(e),
            error_type="ValidationError",
        )

    return {
        "count": len(entries),
        "entries": [_entry_summary(entry) for entry in entries],
    }


async def timeline_stats(
    service: TimelineService,
    interval_ms: int | None = None,
) -> dict[str, Any]:
    """Get files/changes/today statistics.

    Args:
        service: Timeline service instance
        interval_ms: Bucket width used for the "today" total

    Returns:
        Timeline statistics
    """
    try:
        stats = service.get_stats(interval_ms)
    except ValidationError as e:
        return create_error_response(
            message=str(e),
            error_type="ValidationError",
        )

    return stats.model_dump()


async def timeline_restore(
    service: TimelineService,
    file_path: str,
    timestamp: int,
) -> dict[str, Any]:
    """Restore a file to one of its snapshots.

    Args:
        service: Timeline service instance
        file_path: Path of the file
        timestamp: Timestamp of the snapshot to restore

    Returns:
        Restore outcome with a user-facing message
    """
    try:
        entry = service.find_entry(file_path, timestamp)
    except NotFoundError as e:
        return create_error_response(
            message=str(e),
            error_type="NotFoundError",
        )

    result = await service.restore_snapshot(entry)
    if not result.success:
        return create_error_response(
            message=result.message,
            error_type="RestoreTargetUnavailableError",
            details={"file_path": result.file_path, "timestamp": result.timestamp},
        )

    return result.model_dump()


async def timeline_clear(service: TimelineService) -> dict[str, Any]:
    """Clear all timeline history.

    Args:
        service: Timeline service instance

    Returns:
        Number of removed snapshots
    """
    result = await service.clear_history()
    response: dict[str, Any] = {
        "cleared": result.cleared,
        "persisted": result.persisted,
        "message": "Timeline history cleared!",
    }
    if result.error:
        response["warning"] = f"History not saved: {result.error}"
    return response
