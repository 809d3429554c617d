"""Tests for include compilation."""

import pytest

from qfuncs.errors import IncludeError
from qfuncs.includes import compile_includes


class TestCompileIncludes:
    def given_include_groups(self, tmp_path):
        self.includes_dir = tmp_path / "includes"
        (self.includes_dir / "b").mkdir(parents=True)
        (self.includes_dir / "a").mkdir()
        (self.includes_dir / "a" / "2.js").write_text("var a2;\n")
        (self.includes_dir / "a" / "1.js").write_text("var a1;\n")
        (self.includes_dir / "a" / "notes.txt").write_text("ignored")
        (self.includes_dir / "b" / "1.js").write_text("var b1;\n")

    def test_concatenates_groups_in_order(self, tmp_path):
        """Groups keep declared order, files are sorted by name."""
        self.given_include_groups(tmp_path)
        text = compile_includes(["b", "a"], self.includes_dir)
        assert text == "var b1;\nvar a1;\nvar a2;\n"

    def test_no_groups(self, tmp_path):
        assert compile_includes([], tmp_path) == ""

    def test_raises_for_missing_group(self, tmp_path):
        self.given_include_groups(tmp_path)
        with pytest.raises(IncludeError):
            compile_includes(["missing"], self.includes_dir)
