"""Last-known content of each tracked file."""

from collections.abc import Iterable

from code_timeline.models.timeline import SnapshotEntry


class SnapshotCache:
    """Maps a file path to the text of its most recently recorded snapshot."""

    def __init__(self) -> None:
        self._content: dict[str, str] = {}

    def __contains__(self, file_path: str) -> bool:
        return file_path in self._content

    def __len__(self) -> int:
        return len(self._content)

    def get(self, file_path: str) -> str | None:
        """Return the last recorded text, or None if the file was never seen."""
        return self._content.get(file_path)

    def set(self, file_path: str, content: str) -> None:
        self._content[file_path] = content

    def clear(self) -> None:
        self._content.clear()

    def seed(self, entries: Iterable[SnapshotEntry]) -> None:
        """Rebuild the cache from history; the last entry per path wins.

        Args:
            entries: Snapshots in recording order
        """
        for entry in entries:
            self._content[entry.file_path] = entry.content
