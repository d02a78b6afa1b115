"""Tests for the search tool."""

import pytest

from searchkit.runtime import RuntimeConfig, set_global_config
from searchkit.tools import (
    SearchTool,
    ToolExecutionError,
    ToolValidationError,
    format_search_result,
    search,
)


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text(
        "line 1\n"
        "line 2\n"
        "target line\n"
        "line 4\n"
        "line 5\n"
    )
    return str(path)


@pytest.fixture
def project(tmp_path):
    (tmp_path / "main.py").write_text("def main():\n    pass\n")
    (tmp_path / "notes.md").write_text("main ideas\n")
    (tmp_path / "README.MD").write_text("run main\n")
    sub = tmp_path / "pkg"
    sub.mkdir()
    (sub / "util.py").write_text("def helper():\n    return main()\n")
    (sub / "data.txt").write_text("nothing\n")
    return tmp_path


class TestSearchFile:
    """Test searching a single file."""

    def test_single_match(self, sample):
        result = search("target", sample)
        assert result.total_matches == 1
        assert result.total_files == 1
        match = result.matches[0]
        assert match.line == 3
        assert match.column == 1
        assert match.match_text == "target"
        assert match.line_text == "target line"
        assert match.context == []

    def test_context_lines(self, sample):
        result = search("target", sample, context=1)
        match = result.matches[0]
        assert match.context == ["line 2", "target line", "line 4"]
        assert match.context_start == 2

    def test_context_clamped_at_file_edges(self, sample):
        result = search("line 1", sample, context=3)
        match = result.matches[0]
        assert match.context_start == 1
        assert match.context == ["line 1", "line 2", "target line", "line 4"]

    def test_column_is_one_based(self, sample):
        result = search("line", sample)
        target = [m for m in result.matches if m.line == 3][0]
        assert target.column == 8

    def test_column_counts_bytes(self, tmp_path):
        path = tmp_path / "utf8.txt"
        path.write_text("héllo world\n", encoding="utf-8")
        result = search("world", str(path))
        # é is two bytes in UTF-8
        assert result.matches[0].column == 8

    def test_column_ignores_file_encoding(self, tmp_path):
        set_global_config(RuntimeConfig(encoding="utf-16"))
        path = tmp_path / "wide.txt"
        path.write_text("héllo world\n", encoding="utf-16")
        result = search("world", str(path))
        # Same offset as the UTF-8 file; no BOM bytes counted
        assert result.matches[0].column == 8

    def test_ignore_case(self, sample):
        assert search("TARGET", sample).total_matches == 0
        assert search("TARGET", sample, ignore_case=True).total_matches == 1

    def test_one_match_per_line(self, tmp_path):
        path = tmp_path / "dup.txt"
        path.write_text("ab ab ab\n")
        result = search("ab", str(path))
        assert result.total_matches == 1

    def test_missing_path(self, tmp_path):
        with pytest.raises(ToolExecutionError, match="cannot access path"):
            search("x", str(tmp_path / "missing"))

    def test_invalid_regex(self, sample):
        with pytest.raises(ToolValidationError, match="invalid regex"):
            search("(", sample)


class TestSearchDirectory:
    """Test searching a directory tree."""

    def test_non_recursive_searches_direct_children(self, project):
        result = search("main", str(project))
        files = {m.file for m in result.matches}
        assert str(project / "pkg" / "util.py") not in files
        assert result.total_files == 3

    def test_recursive(self, project):
        result = search("main", str(project), recursive=True)
        files = {m.file for m in result.matches}
        assert str(project / "pkg" / "util.py") in files
        assert result.total_files == 5

    def test_file_pattern(self, project):
        result = search("def", str(project), recursive=True, file_pattern="*.py")
        assert {m.file for m in result.matches} == {
            str(project / "main.py"),
            str(project / "pkg" / "util.py"),
        }
        assert result.total_files == 2

    def test_include_is_case_insensitive_suffix(self, project):
        result = search("main", str(project), include=[".md"])
        assert {m.file for m in result.matches} == {
            str(project / "notes.md"),
            str(project / "README.MD"),
        }

    def test_exclude(self, project):
        result = search("main", str(project), recursive=True, exclude=[".md", ".txt"])
        assert {m.file for m in result.matches} == {
            str(project / "main.py"),
            str(project / "pkg" / "util.py"),
        }
        assert result.total_files == 2

    def test_max_results(self, project):
        result = search("main", str(project), recursive=True, max_results=1)
        assert result.total_matches == 1
        assert len(result.matches) == 1
        # The walk stops after the first file with a hit
        assert result.total_files == 1

    def test_empty_directory(self, tmp_path):
        result = search("x", str(tmp_path), recursive=True)
        assert result.matches == []
        assert result.total_files == 0


class TestSearchTool:
    """Test the tool interface and formatting."""

    def test_validate_requires_path(self):
        with pytest.raises(ToolValidationError, match="path"):
            SearchTool().validate({"pattern": "x"})

    def test_validate_rejects_negative_context(self):
        with pytest.raises(ToolValidationError, match="context"):
            SearchTool().validate({"pattern": "x", "path": ".", "context": -1})

    def test_execute(self, sample):
        result = SearchTool().execute({"pattern": "target", "path": sample, "context": 2})
        assert result.matches[0].context_start == 1

    def test_to_dict_omits_empty_context(self, sample):
        data = search("target", sample).to_dict()
        assert "context" not in data["matches"][0]
        assert data["total_matches"] == 1

    def test_format_with_context(self, sample):
        text = format_search_result(search("target", sample, context=1))
        assert f"=== {sample} ===" in text
        assert ">    3  target line" in text
        assert "     2  line 2" in text

    def test_format_empty(self, sample):
        assert format_search_result(search("absent", sample)) == "No matches found (searched 1 files)"
