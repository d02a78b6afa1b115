"""Tests for runtime configuration."""

import codecs

import pytest

from searchkit.runtime import (
    RuntimeConfig,
    get_global_config,
    get_runtime_config,
    set_global_config,
)


class TestRuntimeConfig:
    """Test configuration construction."""

    def test_defaults(self):
        config = RuntimeConfig()
        assert config.encoding == "utf-8"
        assert config.encoding_errors == "replace"
        assert config.default_path is None
        assert config.verbose is False

    def test_unknown_encoding(self):
        with pytest.raises(LookupError):
            RuntimeConfig(encoding="no-such-codec")

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SEARCHKIT_ENCODING", "latin-1")
        monkeypatch.setenv("SEARCHKIT_ENCODING_ERRORS", "strict")
        monkeypatch.setenv("SEARCHKIT_DEFAULT_PATH", str(tmp_path))
        monkeypatch.setenv("SEARCHKIT_VERBOSE", "yes")
        config = RuntimeConfig.from_env()
        assert codecs.lookup(config.encoding).name == "iso8859-1"
        assert config.encoding_errors == "strict"
        assert config.default_path == str(tmp_path)
        assert config.verbose is True

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("SEARCHKIT_ENCODING", "latin-1")
        config = get_runtime_config(encoding="utf-8", verbose=True)
        assert config.encoding == "utf-8"
        assert config.verbose is True

    def test_invalid_override(self):
        with pytest.raises(LookupError):
            get_runtime_config(encoding_errors="no-such-handler")


class TestGlobalConfig:
    """Test the process-wide configuration."""

    def test_set_and_reset(self, monkeypatch):
        custom = RuntimeConfig(encoding_errors="ignore")
        set_global_config(custom)
        assert get_global_config() is custom

        monkeypatch.setenv("SEARCHKIT_VERBOSE", "1")
        set_global_config(None)
        assert get_global_config().verbose is True
