"""Timeline snapshot models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Bucket widths offered to the timeline display (1, 2 and 5 minutes)
INTERVAL_CHOICES_MS = (60_000, 120_000, 300_000)


class SnapshotEntry(BaseModel):
    """Full-text snapshot of one file, captured at save time.

    Serialized with camelCase keys (``filePath``, ``changeCount``...) and
    without ``diff`` when the snapshot is the first one of its file.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    timestamp: int = Field(ge=0)
    file_path: str
    file_name: str
    content: str
    change_count: int = Field(ge=1)
    diff: str | None = None

    def to_record(self) -> dict:
        """Return the JSON-ready form used in the history file."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TimeBucket(BaseModel):
    """Snapshots grouped into one fixed-width time window."""

    bucket_start: int
    total_change_count: int = 0
    entries: list[SnapshotEntry] = Field(default_factory=list)

    @property
    def file_names(self) -> list[str]:
        return [entry.file_name for entry in self.entries]


class TimelineStats(BaseModel):
    """Quick statistics over the aggregated timeline."""

    files: int = 0
    total_entries: int = 0
    total_changes: int = 0
    today_changes: int = 0


class LoadResult(BaseModel):
    """Outcome of reading the history file."""

    entries: list[SnapshotEntry] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    schema_version: int | None = None


class RecordResult(BaseModel):
    """Outcome of a save event."""

    recorded: bool
    entry: SnapshotEntry | None = None
    change_count: int = 0  # raw positional line count, 0 when unchanged
    persisted: bool = False
    evicted: int = 0
    error: str | None = None


class RestoreResult(BaseModel):
    """Outcome of restoring a snapshot."""

    success: bool
    file_path: str
    file_name: str
    timestamp: int
    message: str


class ClearResult(BaseModel):
    """Outcome of clearing the history."""

    cleared: int
    persisted: bool
    error: str | None = None
