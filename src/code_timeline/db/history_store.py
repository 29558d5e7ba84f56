"""JSON file storage for the snapshot history."""

import json
import logging
import uuid
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
from pydantic import ValidationError as PydanticValidationError

from code_timeline.exceptions import StorageError
from code_timeline.models.timeline import LoadResult, SnapshotEntry

logger = logging.getLogger(__name__)

MAX_ENTRIES = 1000


class HistoryStore:
    """Ordered, bounded list of snapshots backed by a single JSON file.

    The file holds ``{"schemaVersion": 1, "entries": [...]}``. A bare JSON
    array of entries (the layout written before the version tag existed)
    is still accepted on load.
    """

    SUPPORTED_SCHEMA_VERSIONS = [1]
    CURRENT_SCHEMA_VERSION = 1

    def __init__(
        self,
        storage_path: str | Path,
        max_entries: int = MAX_ENTRIES,
        indent: int = 2,
    ) -> None:
        """Initialize history store.

        Args:
            storage_path: History file location
            max_entries: Retention bound, oldest entries are evicted first
            indent: JSON indentation (0 for compact output)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.storage_path = Path(storage_path)
        self.max_entries = max_entries
        self.indent = indent or None
        self._entries: list[SnapshotEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def all(self) -> list[SnapshotEntry]:
        """Return a copy of the history in recording order."""
        return list(self._entries)

    def append(self, entry: SnapshotEntry) -> int:
        """Append a snapshot and evict the oldest beyond the bound.

        Args:
            entry: Snapshot to append

        Returns:
            Number of evicted entries
        """
        self._entries.append(entry)
        return self._evict()

    def _evict(self) -> int:
        overflow = len(self._entries) - self.max_entries
        if overflow <= 0:
            return 0
        del self._entries[:overflow]
        return overflow

    async def load(self) -> LoadResult:
        """Read the history file into memory.

        A missing file gives an empty history. A corrupt file gives an
        empty history and a warning; entries that fail validation are
        skipped individually. This method never raises.

        Returns:
            LoadResult with the loaded entries and any warnings
        """
        self._entries = []

        if not await aiofiles.os.path.exists(self.storage_path):
            logger.info(f"No history file at {self.storage_path}, starting empty")
            return LoadResult()

        try:
            async with aiofiles.open(self.storage_path, encoding="utf-8") as f:
                raw = await f.read()
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            message = f"Failed to load timeline from {self.storage_path}: {e}"
            logger.warning(message)
            return LoadResult(warnings=[message])

        records, schema_version, warning = self._unwrap(data)
        if warning:
            logger.warning(warning)
            return LoadResult(warnings=[warning])

        warnings: list[str] = []
        entries: list[SnapshotEntry] = []
        for index, record in enumerate(records):
            try:
                entries.append(SnapshotEntry.model_validate(record))
            except PydanticValidationError as e:
                message = f"Skipped malformed timeline entry #{index}: {e.error_count()} error(s)"
                logger.warning(message)
                warnings.append(message)

        self._entries = entries
        evicted = self._evict()
        if evicted:
            logger.info(f"Dropped {evicted} entries beyond the retention bound")

        logger.info(f"Loaded {len(self._entries)} timeline entries")
        return LoadResult(
            entries=self.all(), warnings=warnings, schema_version=schema_version
        )

    def _unwrap(self, data: Any) -> tuple[list[Any], int | None, str | None]:
        """Extract the entry records from either supported layout."""
        if isinstance(data, list):
            return data, None, None

        if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
            return [], None, f"Unexpected timeline format in {self.storage_path}"

        version = data.get("schemaVersion")
        if version not in self.SUPPORTED_SCHEMA_VERSIONS:
            return [], None, (
                f"Unsupported timeline schema version {version!r} in {self.storage_path}"
            )
        return data["entries"], version, None

    async def persist(self) -> None:
        """Write the whole history, replacing the file atomically.

        The document goes to a temporary sibling file that is then moved
        over the history file, so readers never see a partial write.

        Raises:
            StorageError: If the file cannot be written
        """
        document = {
            "schemaVersion": self.CURRENT_SCHEMA_VERSION,
            "entries": [entry.to_record() for entry in self._entries],
        }
        payload = json.dumps(document, indent=self.indent, ensure_ascii=True)

        tmp_path = self.storage_path.with_name(
            f".{self.storage_path.name}.{uuid.uuid4().hex}.tmp"
        )
        try:
            await aiofiles.os.makedirs(self.storage_path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.storage_path)
        except (OSError, UnicodeEncodeError) as e:
            await self._discard(tmp_path)
            raise StorageError(f"Failed to save timeline: {e}") from e

    async def _discard(self, tmp_path: Path) -> None:
        try:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
        except OSError as e:
            logger.debug(f"Could not remove temporary file {tmp_path}: {e}")

    async def clear(self) -> int:
        """Empty the history and persist immediately.

        Returns:
            Number of entries removed

        Raises:
            StorageError: If the empty history cannot be written; the
                in-memory history stays empty
        """
        removed = len(self._entries)
        self._entries = []
        await self.persist()
        return removed
