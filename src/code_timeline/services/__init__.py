"""Service layer for business logic."""

from code_timeline.services.diff_service import DiffService
from code_timeline.services.restore_service import RestoreService
from code_timeline.services.snapshot_cache import SnapshotCache
from code_timeline.services.timeline_service import TimelineService

__all__ = ["DiffService", "RestoreService", "SnapshotCache", "TimelineService"]
