"""Tests for change scoring and diff rendering."""

from code_timeline.services.diff_service import DiffService


class TestCountChangedLines:
    """Test the positional line comparison."""

    def test_identical_texts(self, diff_service: DiffService):
        assert diff_service.count_changed_lines("a\nb\nc", "a\nb\nc") == 0

    def test_single_modified_line(self, diff_service: DiffService):
        assert diff_service.count_changed_lines("a\nb\nc", "a\nX\nc") == 1

    def test_appended_lines_count_as_changes(self, diff_service: DiffService):
        """Missing lines compare as empty strings."""
        assert diff_service.count_changed_lines("a", "a\nb\nc") == 2

    def test_removed_lines_count_as_changes(self, diff_service: DiffService):
        assert diff_service.count_changed_lines("a\nb\nc", "a") == 2

    def test_insertion_shifts_every_following_line(self, diff_service: DiffService):
        """No alignment: an insertion at the top changes every position below."""
        old = "one\ntwo\nthree"
        new = "zero\none\ntwo\nthree"

        assert diff_service.count_changed_lines(old, new) == 4

    def test_appended_empty_line_is_not_a_change(self, diff_service: DiffService):
        """A trailing empty line reads the same as a missing line."""
        assert diff_service.count_changed_lines("a\n", "a") == 0

    def test_carriage_returns_are_part_of_the_line(self, diff_service: DiffService):
        assert diff_service.count_changed_lines("a\nb", "a\r\nb") == 1


class TestChangeMagnitude:
    """Test the floored change magnitude."""

    def test_first_save_is_one_change(self, diff_service: DiffService):
        """A first save scores 1 whatever the file size."""
        big = "\n".join(f"line {i}" for i in range(500))

        assert diff_service.change_magnitude("", big) == 1

    def test_first_save_of_empty_text(self, diff_service: DiffService):
        assert diff_service.change_magnitude("", "") == 1

    def test_counts_changed_lines(self, diff_service: DiffService):
        assert diff_service.change_magnitude("a\nb\nc", "A\nB\nc") == 2

    def test_never_returns_zero(self, diff_service: DiffService):
        """Identical texts still floor to 1."""
        assert diff_service.change_magnitude("same\ntext", "same\ntext") == 1

    def test_deterministic(self, diff_service: DiffService):
        old = "alpha\nbeta\ngamma"
        new = "alpha\nBETA\ngamma\ndelta"

        results = {diff_service.change_magnitude(old, new) for _ in range(5)}

        assert results == {2}


class TestRender:
    """Test HTML diff rendering."""

    def test_marks_insertions_and_deletions(self, diff_service: DiffService):
        html = diff_service.render("Hello\nWorld", "Hello\nRadar")

        assert "<ins" in html
        assert "<del" in html
        assert "<span>Hello&para;<br></span>" in html

    def test_pure_insertion(self, diff_service: DiffService):
        html = diff_service.render("abc", "abcdef")

        assert "<ins" in html
        assert "<del" not in html
        assert "def</ins>" in html

    def test_escapes_payload(self, diff_service: DiffService):
        html = diff_service.render("<b>x & y</b>", "<i>x & y</i>")

        assert "<b>" not in html
        assert "<i>" not in html
        assert "&lt;" in html
        assert "&amp;" in html

    def test_same_input_same_output(self):
        """Two independent services render byte-identical output."""
        old = "def f(x):\n    return x + 1\n" * 50
        new = old.replace("x + 1", "x + 2", 7)

        assert DiffService().render(old, new) == DiffService().render(old, new)

    def test_semantic_cleanup_merges_noise(self, diff_service: DiffService):
        """Interleaved character edits are coalesced into whole-word edits."""
        html = diff_service.render("mouse", "sofas")

        assert html.count("<del") == 1
        assert html.count("<ins") == 1
