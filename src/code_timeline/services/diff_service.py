"""Service for change detection between two snapshots."""

from itertools import zip_longest

from diff_match_patch import diff_match_patch


class DiffService:
    """Scores and renders the difference between two texts."""

    def __init__(self) -> None:
        """Initialize diff service."""
        self.dmp = diff_match_patch()
        # No deadline: the same pair of texts always yields the same diff
        self.dmp.Diff_Timeout = 0

    @staticmethod
    def count_changed_lines(old_text: str, new_text: str) -> int:
        """Count positions whose lines differ.

        Lines are compared position by position, a missing line reads as
        an empty string. Inserted or removed lines are not aligned, so
        everything below an insertion counts as changed.

        Args:
            old_text: Previous snapshot text
            new_text: Current text

        Returns:
            Number of differing line positions (0 when identical)
        """
        old_lines = old_text.split("\n")
        new_lines = new_text.split("\n")
        return sum(
            1
            for old_line, new_line in zip_longest(old_lines, new_lines, fillvalue="")
            if old_line != new_line
        )

    def change_magnitude(self, old_text: str, new_text: str) -> int:
        """Score how much changed between two snapshots.

        A first save (empty previous text) always scores 1, whatever the
        size of the file. Otherwise the positional line count, floored at 1.

        Args:
            old_text: Previous snapshot text ("" when none)
            new_text: Current text

        Returns:
            Change magnitude, always >= 1
        """
        if not old_text:
            return 1
        return max(self.count_changed_lines(old_text, new_text), 1)

    def render(self, old_text: str, new_text: str) -> str:
        """Render a character-level diff as HTML.

        Inserted text is wrapped in ``<ins>``, deleted text in ``<del>``;
        the payload is HTML-escaped and newlines become ``&para;<br>``.

        Args:
            old_text: Previous snapshot text
            new_text: Current text

        Returns:
            Self-contained HTML fragment
        """
        diffs = self.dmp.diff_main(old_text, new_text)
        self.dmp.diff_cleanupSemantic(diffs)
        return self.dmp.diff_prettyHtml(diffs)
