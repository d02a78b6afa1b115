"""Tests for the command line interface."""

import json

import pytest

from searchkit.cli import main


class TestCli:
    """Test CLI commands end to end."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: searchkit" in capsys.readouterr().out

    def test_glob(self, tree, capsys):
        assert main(["glob", "**/*.go", "--path", str(tree)]) == 0
        out = capsys.readouterr().out
        assert "Found 2 entries" in out

    def test_glob_json(self, tree, capsys):
        assert main(["glob", "*.txt", "--path", str(tree), "--info", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["count"] == 1
        assert data["matches"][0]["size"] == len("hello world")

    def test_glob_missing_path(self, tmp_path, capsys):
        assert main(["glob", "*", "--path", str(tmp_path / "missing")]) == 1
        assert "Error: path does not exist" in capsys.readouterr().err

    def test_grep(self, tree, capsys):
        assert main(["grep", "-n", "hello", str(tree / "file1.txt")]) == 0
        assert f"{tree / 'file1.txt'}:1:hello world" in capsys.readouterr().out

    def test_grep_short_v_inverts(self, tree, capsys):
        assert main(["grep", "-v", "hello", str(tree / "file1.txt"), str(tree / "file2.go")]) == 0
        out = capsys.readouterr().out
        assert "package main" in out
        assert "hello world" not in out

    def test_verbose_is_long_option_only(self, tree, capsys):
        assert main(["--verbose", "grep", "hello", str(tree / "file1.txt")]) == 0
        assert "hello world" in capsys.readouterr().out
        with pytest.raises(SystemExit) as exc:
            main(["-v", "grep", "hello", str(tree / "file1.txt")])
        assert exc.value.code == 2

    def test_grep_csv_count(self, tree, capsys):
        assert main(["grep", "-c", "-f", "csv", "package", str(tree / "**" / "*.go")]) == 0
        out = capsys.readouterr().out
        assert out.startswith("key,count")

    def test_grep_bad_regex(self, tree, capsys):
        assert main(["grep", "(", str(tree / "file1.txt")]) == 1
        assert "invalid regex" in capsys.readouterr().err

    def test_search(self, tree, capsys):
        assert main(["search", "-r", "-C", "1", "--include", ".txt", "nested", str(tree)]) == 0
        out = capsys.readouterr().out
        assert "nested file" in out

    def test_search_json(self, tree, capsys):
        assert main(["search", "--json", "package", str(tree / "file2.go")]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["total_matches"] == 1
        assert data["matches"][0]["column"] == 1

    def test_tools_list(self, capsys):
        assert main(["tools"]) == 0
        out = capsys.readouterr().out
        assert "glob" in out and "grep" in out and "search" in out

    def test_tools_detail(self, capsys):
        assert main(["tools", "grep"]) == 0
        out = capsys.readouterr().out
        assert "Tool: grep" in out
        assert "pattern (required)" in out
        assert "max_matches:" in out

    def test_tools_unknown(self, capsys):
        assert main(["tools", "nope"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            main(["glob"])
        assert exc.value.code == 2
