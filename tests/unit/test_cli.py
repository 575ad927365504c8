"""
Unit tests for the command-line entry point.
"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

from projectfinder.cli import main


class TestCli:
    """Test cases for main()."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_root = Path(self.temp_dir)
        for rel in ["src/index.ts", "abc/src_index.ts", "node_modules/x/index.js"]:
            target = self.test_root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("x")

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_prints_ranked_paths(self, capsys):
        code = main(["--root", self.temp_dir, "index"])

        assert code == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["src/index.ts", "abc/src_index.ts"]

    def test_limit(self, capsys):
        main(["--root", self.temp_dir, "--limit", "1", "index"])
        assert capsys.readouterr().out.splitlines() == ["src/index.ts"]

    def test_bad_config_exits_2(self, capsys):
        bad = self.test_root / "bad.yaml"
        bad.write_text("ignore_dirs: [\n")

        assert main(["--config", str(bad), "--root", self.temp_dir, "x"]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_unknown_root_falls_back_to_cwd(self, capsys):
        old_cwd = os.getcwd()
        try:
            os.chdir(self.test_root / "src")
            with patch("projectfinder.cli.get_project_root", return_value="Unknown"):
                main(["index"])
        finally:
            os.chdir(old_cwd)

        assert capsys.readouterr().out.splitlines() == ["index.ts"]
