"""Service for restoring a file from a snapshot."""

import logging
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os

from code_timeline.exceptions import RestoreTargetUnavailableError
from code_timeline.models.timeline import SnapshotEntry

logger = logging.getLogger(__name__)


class RestoreService:
    """Overwrites live files with stored snapshot content."""

    async def restore(self, entry: SnapshotEntry) -> None:
        """Replace the whole content of the live file with the snapshot.

        This is a full overwrite, not a merge: anything in the file that
        is not in the snapshot is lost. The snapshot is written to a
        temporary sibling and moved over the file, so a failed restore
        leaves the live file as it was.

        Args:
            entry: Snapshot to restore

        Raises:
            RestoreTargetUnavailableError: If the file does not exist or
                cannot be written
        """
        target = Path(entry.file_path)
        if not await aiofiles.os.path.isfile(target):
            raise RestoreTargetUnavailableError(f"file not found: {target}")

        # Bytes, so newlines are written verbatim
        try:
            payload = entry.content.encode("utf-8")
        except UnicodeEncodeError as e:
            raise RestoreTargetUnavailableError(f"snapshot cannot be encoded: {e}") from e

        tmp_path = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, target)
        except OSError as e:
            await self._discard(tmp_path)
            raise RestoreTargetUnavailableError(str(e)) from e

        logger.info(f"Restored {entry.file_name} to snapshot {entry.timestamp}")

    async def _discard(self, tmp_path: Path) -> None:
        try:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
        except OSError as e:
            logger.debug(f"Could not remove temporary file {tmp_path}: {e}")
