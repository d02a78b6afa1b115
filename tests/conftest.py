"""Pytest configuration and shared fixtures for searchkit tests."""

import os

import pytest

from searchkit.runtime import RuntimeConfig, set_global_config


@pytest.fixture(autouse=True)
def reset_runtime_config(monkeypatch):
    """Start every test from default settings, ignoring SEARCHKIT_* in the environment."""
    for var in (
        "SEARCHKIT_ENCODING",
        "SEARCHKIT_ENCODING_ERRORS",
        "SEARCHKIT_DEFAULT_PATH",
        "SEARCHKIT_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    set_global_config(RuntimeConfig())
    yield
    set_global_config(None)


def write(path, content="", mtime=None):
    """Create a file (and its parents) with the given text content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def tree(tmp_path):
    """
    A small project tree:

        file1.txt   "hello world"
        file2.go    "package main"
        subdir/file3.txt  "nested file"
        subdir/file4.go   "package sub"
    """
    write(tmp_path / "file1.txt", "hello world")
    write(tmp_path / "file2.go", "package main")
    write(tmp_path / "subdir" / "file3.txt", "nested file")
    write(tmp_path / "subdir" / "file4.go", "package sub")
    return tmp_path
