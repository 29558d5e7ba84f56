"""Decides which saved files are tracked, using pathspec."""

import logging
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)


# Default patterns to exclude
DEFAULT_EXCLUDE_PATTERNS = [
    ".git/",
    "node_modules/",
    "__pycache__/",
    ".venv/",
    "venv/",
    "*.pyc",
    "*.pyo",
    ".DS_Store",
    "Thumbs.db",
]


def create_path_filter(
    root_path: Path,
    exclude_patterns: list[str] | None = None,
    use_gitignore: bool = True,
) -> pathspec.PathSpec:
    """Create the exclusion filter of a workspace root.

    Args:
        root_path: Workspace root
        exclude_patterns: Additional exclude patterns (gitignore format)
        use_gitignore: Whether to read the root's .gitignore file

    Returns:
        Configured PathSpec object
    """
    patterns = list(DEFAULT_EXCLUDE_PATTERNS)

    if exclude_patterns:
        patterns.extend(exclude_patterns)

    if use_gitignore:
        gitignore_path = root_path / ".gitignore"
        if gitignore_path.exists():
            try:
                with open(gitignore_path, encoding="utf-8") as f:
                    gitignore_patterns = [
                        p.strip()
                        for p in f.read().splitlines()
                        if p.strip() and not p.strip().startswith("#")
                    ]
                patterns.extend(gitignore_patterns)
                logger.debug(f"Loaded {len(gitignore_patterns)} patterns from .gitignore")
            except OSError as e:
                logger.warning(f"Error reading .gitignore: {e}")

    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


class TrackingFilter:
    """Accepts files inside a workspace root that no pattern excludes.

    With no roots configured every file is accepted.
    """

    def __init__(
        self,
        roots: list[str | Path] | None = None,
        exclude_patterns: list[str] | None = None,
    ) -> None:
        self.specs: dict[Path, pathspec.PathSpec] = {
            Path(root).resolve(): create_path_filter(Path(root).resolve(), exclude_patterns)
            for root in roots or []
        }

    def is_trackable(self, file_path: str | Path) -> bool:
        """Check whether a saved file belongs in the timeline.

        Args:
            file_path: Path of the saved file

        Returns:
            True if the file should be recorded
        """
        if not self.specs:
            return True

        path = Path(file_path).resolve()
        for root, spec in self.specs.items():
            if not path.is_relative_to(root):
                continue
            # Convert to POSIX path (forward slashes) for pathspec matching
            if spec.match_file(path.relative_to(root).as_posix()):
                logger.debug(f"Excluded by pattern: {path}")
                return False
            return True

        logger.debug(f"Outside every workspace root: {path}")
        return False
