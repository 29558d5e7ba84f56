"""Pytest configuration and fixtures for code-timeline tests."""

from pathlib import Path

import pytest
import pytest_asyncio

from code_timeline.config.settings import Settings
from code_timeline.db.history_store import HistoryStore
from code_timeline.models.timeline import SnapshotEntry
from code_timeline.services.diff_service import DiffService
from code_timeline.services.restore_service import RestoreService
from code_timeline.services.snapshot_cache import SnapshotCache
from code_timeline.services.timeline_service import TimelineService


class FakeClock:
    """Deterministic millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    """History file inside the test's temporary directory."""
    return tmp_path / "data" / "timeline.json"


@pytest.fixture
def test_settings(storage_path: Path) -> Settings:
    """Test configuration settings."""
    return Settings(
        storage_path=str(storage_path),
        max_entries=1000,
        default_interval_ms=300_000,
        recent_limit=15,
        log_level="DEBUG",
    )


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock."""
    return FakeClock()


@pytest.fixture
def diff_service() -> DiffService:
    """Diff service."""
    return DiffService()


@pytest.fixture
def snapshot_cache() -> SnapshotCache:
    """Empty snapshot cache."""
    return SnapshotCache()


@pytest_asyncio.fixture
async def history_store(storage_path: Path) -> HistoryStore:
    """Loaded (empty) history store."""
    store = HistoryStore(storage_path)
    await store.load()
    return store


@pytest_asyncio.fixture
async def timeline_service(
    history_store: HistoryStore,
    snapshot_cache: SnapshotCache,
    diff_service: DiffService,
    clock: FakeClock,
) -> TimelineService:
    """Timeline service with a fake clock."""
    return TimelineService(
        history_store,
        cache=snapshot_cache,
        diff_service=diff_service,
        restore_service=RestoreService(),
        clock=clock,
    )


# Helper functions for tests


def make_entry(
    timestamp: int,
    change_count: int = 1,
    file_path: str = "/project/app.py",
    content: str = "print('hi')\n",
    diff: str | None = None,
) -> SnapshotEntry:
    """Build a snapshot entry with sensible defaults."""
    return SnapshotEntry(
        timestamp=timestamp,
        file_path=file_path,
        file_name=Path(file_path).name,
        content=content,
        change_count=change_count,
        diff=diff,
    )
