"""
Unit tests for the filesystem walker module.

Tests directory traversal, ignore-directory pruning, path normalization,
limits, cancellation and failure handling of the PathCollector class.
"""

import os
import tempfile
import shutil
from pathlib import Path
from unittest.mock import patch
import pytest

from projectfinder.cancellation import CancellationToken, SearchCancelled
from projectfinder.models.config import FinderConfig
from projectfinder.tools.fs_walker import PathCollector, collect_paths


class TestPathCollector:
    """Test cases for the PathCollector class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_root = Path(self.temp_dir)
        self._create_test_structure()
        self.collector = PathCollector(FinderConfig())

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _create_test_structure(self):
        """Create a project tree with ignored and regular directories."""
        test_files = [
            "src/main.py",
            "src/utils/helpers.py",
            "docs/readme.md",
            "README.md",
            ".git/HEAD",
            ".git/objects/ab/cdef",
            "node_modules/left-pad/index.js",
            "target/debug/app",
            ".venv/bin/python",
            "web/node_modules/react/index.js",
        ]

        for file_path in test_files:
            full_path = self.test_root / file_path
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(f"Content of {file_path}")

    def test_collects_files_and_directories(self):
        """Both files and directories become candidates."""
        paths = self.collector.collect(self.test_root)

        assert set(paths) == {
            "README.md",
            "docs",
            "docs/readme.md",
            "src",
            "src/main.py",
            "src/utils",
            "src/utils/helpers.py",
            "web",
        }

    def test_ignored_subtrees_are_pruned(self):
        """Nothing from target, node_modules, .git or .venv is emitted."""
        paths = self.collector.collect(self.test_root)

        for path in paths:
            parts = path.split("/")
            assert not {"target", "node_modules", ".git", ".venv"} & set(parts)

        # Siblings of pruned directories survive
        assert "web" in paths
        assert "README.md" in paths

    def test_candidates_are_relative_and_canonical(self):
        """Candidates never contain the root prefix and use '/' separators."""
        paths = self.collector.collect(self.test_root)

        assert len(paths) == len(set(paths))
        for path in paths:
            assert path
            assert not path.startswith("/")
            assert self.temp_dir not in path
            assert "\\" not in path
            assert (self.test_root / path).exists()

    def test_entry_count_matches_tree_without_ignored_dirs(self):
        """N entries outside ignored directories yield exactly N candidates."""
        clean_root = self.test_root / "clean"
        for rel in ["a/b/c.txt", "a/d.txt", "e.txt", "f/g/h/i.txt"]:
            target = clean_root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("x")

        expected = set()
        for current, dirs, files in os.walk(clean_root):
            for name in dirs + files:
                expected.add(Path(current, name).relative_to(clean_root).as_posix())

        paths = collect_paths(clean_root)

        assert len(paths) == len(expected) == 9
        assert set(paths) == expected

    def test_files_named_like_ignored_dirs_are_kept(self):
        """Pruning applies to directories only."""
        (self.test_root / "docs" / "target").write_text("not a directory")

        paths = self.collector.collect(self.test_root)

        assert "docs/target" in paths

    def test_relative_root(self):
        """A relative root is walked relative to the current directory."""
        old_cwd = os.getcwd()
        try:
            os.chdir(self.test_root)
            paths = self.collector.collect("src")
        finally:
            os.chdir(old_cwd)

        assert set(paths) == {"main.py", "utils", "utils/helpers.py"}

    def test_missing_root_returns_empty(self):
        """A nonexistent root yields no candidates instead of raising."""
        assert self.collector.collect(self.test_root / "does-not-exist") == []
        assert self.collector.collect("Unknown") == []

    def test_file_root_returns_empty(self):
        """A root that is a file yields no candidates."""
        assert self.collector.collect(self.test_root / "README.md") == []

    def test_unreadable_directory_is_skipped(self):
        """Listing errors are counted and traversal continues."""
        real_walk = os.walk

        def failing_walk(top, onerror=None, **kwargs):
            onerror(PermissionError(13, "Permission denied", str(self.test_root / "locked")))
            yield from real_walk(top, onerror=onerror, **kwargs)

        with patch("projectfinder.tools.fs_walker.os.walk", side_effect=failing_walk):
            paths = self.collector.collect(self.test_root)

        assert "src/main.py" in paths
        assert self.collector.get_stats()["entries_skipped"] == 1

    def test_unreadable_root_returns_empty(self):
        """A root that cannot be listed yields no candidates."""
        def failing_walk(top, onerror=None, **kwargs):
            onerror(PermissionError(13, "Permission denied", str(top)))
            return iter(())

        with patch("projectfinder.tools.fs_walker.os.walk", side_effect=failing_walk):
            paths = self.collector.collect(self.test_root)

        assert paths == []
        assert self.collector.get_stats()["entries_skipped"] == 1

    def test_custom_ignore_dirs(self):
        """The ignore set comes from configuration."""
        collector = PathCollector(FinderConfig(ignore_dirs=["docs", "src"]))

        paths = collector.collect(self.test_root)

        assert "docs" not in paths
        assert "src/main.py" not in paths
        # .git is no longer ignored under this configuration
        assert ".git/HEAD" in paths

    def test_max_entries_truncates(self):
        """Traversal stops once the entry limit is reached."""
        collector = PathCollector(FinderConfig(limits={"max_entries": 3}))

        paths = collector.collect(self.test_root)

        assert len(paths) == 3
        assert collector.get_stats()["truncated"] is True

    def test_cancellation(self):
        """A cancelled token aborts the walk."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(SearchCancelled):
            self.collector.collect(self.test_root, cancel_token=token)

    def test_uncancelled_token_does_not_interfere(self):
        """An unused token leaves results untouched."""
        token = CancellationToken()

        assert self.collector.collect(self.test_root, cancel_token=token) == \
            PathCollector().collect(self.test_root)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_are_listed_not_followed(self):
        """Symlinked directories appear as entries but are not descended."""
        link = self.test_root / "linked_src"
        try:
            link.symlink_to(self.test_root / "src", target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks here")

        paths = self.collector.collect(self.test_root)

        assert "linked_src" in paths
        assert "linked_src/main.py" not in paths

    def test_stats_tracking(self):
        """Statistics are tracked and can be reset."""
        self.collector.collect(self.test_root)
        stats = self.collector.get_stats()

        assert stats["entries_collected"] == 8
        assert stats["directories_traversed"] > 0
        assert stats["directories_pruned"] == 5
        assert stats["entries_skipped"] == 0
        assert stats["truncated"] is False

        self.collector.reset_stats()
        assert self.collector.get_stats()["entries_collected"] == 0

    def test_relative_dir_fallback(self):
        """Directories outside the root keep their unmodified path."""
        assert PathCollector._relative_dir(Path("/a/b"), "/a/b") == ""
        assert PathCollector._relative_dir(Path("/a/b"), "/a/b/c/d") == "c/d"
        assert PathCollector._relative_dir(Path("/a/b"), "/x/y") == "/x/y"
