"""
Runtime configuration for searchkit.

Holds the settings every tool reads when it touches the filesystem: how file
content is decoded and which directory relative paths resolve against.
Provides a unified configuration that the CLI, MCP server and web server
can set once per process.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass

TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class RuntimeConfig:
    """
    Runtime configuration for search operations.

    Attributes:
        encoding: Text encoding used to read files
        encoding_errors: Decode error policy ("replace", "ignore", "strict")
        default_path: Base directory when a call gives none (None = cwd)
        verbose: Enable debug logging in the CLI and servers
    """

    encoding: str = "utf-8"
    encoding_errors: str = "replace"
    default_path: str | None = None
    verbose: bool = False

    def __post_init__(self):
        """Fail fast on an unknown codec or error handler."""
        codecs.lookup(self.encoding)
        codecs.lookup_error(self.encoding_errors)

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Build a configuration from SEARCHKIT_* environment variables.

        SEARCHKIT_ENCODING, SEARCHKIT_ENCODING_ERRORS, SEARCHKIT_DEFAULT_PATH
        and SEARCHKIT_VERBOSE override the defaults when set.
        """
        return cls(
            encoding=os.getenv("SEARCHKIT_ENCODING", "utf-8"),
            encoding_errors=os.getenv("SEARCHKIT_ENCODING_ERRORS", "replace"),
            default_path=os.getenv("SEARCHKIT_DEFAULT_PATH") or None,
            verbose=os.getenv("SEARCHKIT_VERBOSE", "").lower() in TRUTHY,
        )


def get_runtime_config(
    encoding: str | None = None,
    encoding_errors: str | None = None,
    default_path: str | None = None,
    verbose: bool = False,
) -> RuntimeConfig:
    """
    Create a runtime configuration from the environment plus overrides.

    Args:
        encoding: Override file encoding
        encoding_errors: Override decode error policy
        default_path: Override base directory
        verbose: Enable verbose output

    Returns:
        Configured RuntimeConfig instance
    """
    config = RuntimeConfig.from_env()

    if encoding:
        config.encoding = encoding
    if encoding_errors:
        config.encoding_errors = encoding_errors
    if default_path:
        config.default_path = default_path
    if verbose:
        config.verbose = True

    # Re-run the codec checks on the overridden values
    config.__post_init__()
    return config


# Global config instance (can be set by CLI/servers)
_global_config: RuntimeConfig | None = None


def set_global_config(config: RuntimeConfig | None) -> None:
    """Set the global runtime configuration. None resets to the environment default."""
    global _global_config
    _global_config = config


def get_global_config() -> RuntimeConfig:
    """Get the global runtime configuration, creating it from the environment if needed."""
    global _global_config
    if _global_config is None:
        _global_config = RuntimeConfig.from_env()
    return _global_config
