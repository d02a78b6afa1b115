"""
Glob tool for finding files by path pattern.

Resolves one or more glob patterns against a base directory, including
recursive `**` patterns, and returns the deduplicated set of matching
entries with optional file metadata.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field

from searchkit.runtime import get_global_config

from .base import Tool, ToolExecutionError, ToolValidationError
from .walk import RECURSIVE_MARKER, GlobSyntaxError, WalkEntry, expand_pattern, split_recursive_pattern

logger = logging.getLogger(__name__)

SortBy = Literal["modtime", "name", "size"]
SortOrder = Literal["asc", "desc"]


class GlobParams(BaseModel):
    """Parameters for the glob tool."""

    patterns: list[str] = Field(
        min_length=1,
        description="Array of glob patterns to match (e.g., ['**/*.py', '**/test_*.py'])",
    )
    path: str | None = Field(
        default=None,
        description="Base path to search from (defaults to current directory)",
    )
    case_sensitive: bool = Field(default=True, description="Enable case-sensitive pattern matching")
    follow_symlinks: bool = Field(default=False, description="Follow symbolic links during search")
    sort_by: SortBy | None = Field(default=None, description="Sort results by: 'modtime', 'name', or 'size'")
    sort_order: SortOrder | None = Field(default=None, description="Sort order: 'asc' or 'desc'")
    include_info: bool = Field(default=False, description="Include detailed file metadata in results")


@dataclass
class MatchEntry:
    """A filesystem entry matched by a glob pattern."""

    path: str
    name: str
    is_dir: bool
    size: int | None = None
    permissions: str | None = None  # ls-style mode string
    modified_time: int | None = None  # Unix seconds

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        out: dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "is_dir": self.is_dir,
        }
        if self.size is not None:
            out["size"] = self.size
        if self.permissions is not None:
            out["permissions"] = self.permissions
        if self.modified_time is not None:
            out["modified_time"] = self.modified_time
        return out


@dataclass
class GlobResult:
    """Result of a glob operation."""

    matches: list[MatchEntry]
    count: int
    pattern: str  # All patterns, joined for reference

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "matches": [m.to_dict() for m in self.matches],
            "count": self.count,
            "pattern": self.pattern,
        }


def validate_patterns(patterns: list[str]) -> None:
    """
    Check the shape of `**` patterns without touching the filesystem.

    Raises:
        ToolValidationError: If a pattern contains more than one `**`
    """
    for pattern in patterns:
        if RECURSIVE_MARKER in pattern:
            try:
                split_recursive_pattern(pattern)
            except GlobSyntaxError as e:
                raise ToolValidationError(str(e)) from e


def glob_paths(
    patterns: list[str],
    *,
    path: str | None = None,
    case_sensitive: bool = True,
    follow_symlinks: bool = False,
    sort_by: SortBy | None = None,
    sort_order: SortOrder | None = None,
    include_info: bool = False,
) -> GlobResult:
    """
    Find filesystem entries matching any of the given patterns.

    Args:
        patterns: Glob patterns; relative ones are joined onto path
        path: Base directory (default: configured default path, else cwd)
        case_sensitive: Match names case-sensitively
        follow_symlinks: Descend into symlinked directories for `**` patterns
        sort_by: "name", "size" or "modtime" (default: name)
        sort_order: "asc" or "desc" (default: asc)
        include_info: Populate size, permissions and modified_time

    Returns:
        GlobResult with each matching path exactly once

    Raises:
        ToolValidationError: If a `**` pattern is malformed
        ToolExecutionError: If the base path doesn't exist or a pattern fails
    """
    validate_patterns(patterns)

    if not path:
        path = get_global_config().default_path or os.getcwd()

    if not os.path.exists(path):
        raise ToolExecutionError(f"path does not exist: {path}")

    # Keyed by path so overlapping patterns yield each entry once
    found: dict[str, WalkEntry] = {}

    for pattern in patterns:
        full_pattern = pattern if os.path.isabs(pattern) else os.path.normpath(os.path.join(path, pattern))

        try:
            for entry in expand_pattern(
                full_pattern,
                case_sensitive=case_sensitive,
                follow_symlinks=follow_symlinks,
            ):
                found[os.path.normpath(entry.path)] = entry
        except (GlobSyntaxError, OSError) as e:
            raise ToolExecutionError(f"failed to glob pattern '{pattern}': {e}") from e

    entries = _sort_entries(list(found.values()), sort_by or "name", sort_order)
    matches = [_to_match_entry(entry, include_info) for entry in entries]

    logger.debug("glob %s under %s: %d matches", patterns, path, len(matches))

    return GlobResult(
        matches=matches,
        count=len(matches),
        pattern=", ".join(patterns),
    )


def _sort_entries(entries: list[WalkEntry], sort_by: str, sort_order: str | None) -> list[WalkEntry]:
    """Sort by name, size or modification time."""
    if sort_by == "size":
        key = lambda e: e.info.st_size  # noqa: E731
    elif sort_by == "modtime":
        key = lambda e: e.info.st_mtime  # noqa: E731
    else:
        key = lambda e: e.name  # noqa: E731
    return sorted(entries, key=key, reverse=sort_order == "desc")


def _to_match_entry(entry: WalkEntry, include_info: bool) -> MatchEntry:
    match = MatchEntry(path=entry.path, name=entry.name, is_dir=entry.is_dir)
    if include_info:
        match.size = entry.info.st_size
        match.permissions = stat.filemode(entry.info.st_mode)
        match.modified_time = int(entry.info.st_mtime)
    return match


class GlobTool(Tool[GlobParams]):
    """Find files using glob patterns with `**`, sorting and metadata."""

    name = "glob"
    description = (
        "Find files using advanced glob pattern matching with support for "
        "multiple patterns, sorting, and detailed file information"
    )
    params_model = GlobParams

    def check(self, params: GlobParams) -> None:
        validate_patterns(params.patterns)

    def run(self, params: GlobParams) -> GlobResult:
        return glob_paths(
            params.patterns,
            path=params.path,
            case_sensitive=params.case_sensitive,
            follow_symlinks=params.follow_symlinks,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
            include_info=params.include_info,
        )


def format_glob_result(result: GlobResult) -> str:
    """Format glob result for display."""
    if not result.matches:
        return f"No files matched {result.pattern}"

    lines = [f"Found {result.count} entries matching {result.pattern}", ""]
    for match in result.matches:
        suffix = "/" if match.is_dir else ""
        if match.size is not None:
            lines.append(f"{match.permissions}  {match.size:>10}  {match.path}{suffix}")
        else:
            lines.append(f"{match.path}{suffix}")
    return "\n".join(lines)
