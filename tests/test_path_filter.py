"""Tests for the workspace tracking filter."""

from pathlib import Path

from code_timeline.utils.path_filter import TrackingFilter, create_path_filter


class TestCreatePathFilter:
    """Test PathSpec construction."""

    def test_default_excludes(self, tmp_path: Path):
        spec = create_path_filter(tmp_path)

        assert spec.match_file(".git/config")
        assert spec.match_file("node_modules/pkg/index.js")
        assert not spec.match_file("src/app.py")

    def test_reads_gitignore(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("# build output\ndist/\n*.log\n", encoding="utf-8")

        spec = create_path_filter(tmp_path)

        assert spec.match_file("dist/bundle.js")
        assert spec.match_file("debug.log")

    def test_gitignore_disabled(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("*.log\n", encoding="utf-8")

        spec = create_path_filter(tmp_path, use_gitignore=False)

        assert not spec.match_file("debug.log")


class TestTrackingFilter:
    """Test the host-side tracking decision."""

    def test_no_roots_tracks_everything(self):
        assert TrackingFilter().is_trackable("/anywhere/file.txt")

    def test_inside_root(self, tmp_path: Path):
        tracking = TrackingFilter([tmp_path])

        assert tracking.is_trackable(tmp_path / "src" / "app.py")

    def test_outside_root(self, tmp_path: Path):
        root = tmp_path / "project"
        root.mkdir()
        tracking = TrackingFilter([root])

        assert not tracking.is_trackable(tmp_path / "other" / "app.py")

    def test_excluded_pattern(self, tmp_path: Path):
        tracking = TrackingFilter([tmp_path], exclude_patterns=["*.min.js"])

        assert not tracking.is_trackable(tmp_path / "static" / "app.min.js")
        assert not tracking.is_trackable(tmp_path / ".git" / "HEAD")
        assert tracking.is_trackable(tmp_path / "static" / "app.js")
