"""
Search tool for finding content in a file or directory tree.

Matches every line of each scanned file against a regular expression and
returns the hits with their column and surrounding context lines, similar
to `grep -rn -C`. Directory walks can be filtered by file name glob and by
extension include/exclude lists.
"""

from __future__ import annotations

import logging
import os
import re
import stat
from dataclasses import dataclass, field
from fnmatch import fnmatchcase

from pydantic import BaseModel, Field

from searchkit.runtime import get_global_config

from .base import Tool, ToolExecutionError, ToolValidationError
from .walk import matches_extensions, walk_entries

logger = logging.getLogger(__name__)


class SearchParams(BaseModel):
    """Parameters for the search tool."""

    pattern: str = Field(min_length=1, description="Regular expression pattern to search for")
    path: str = Field(min_length=1, description="Path to search (file or directory)")
    include: list[str] = Field(
        default_factory=list,
        description="File patterns to include (e.g., ['.txt', '.md'])",
    )
    exclude: list[str] = Field(default_factory=list, description="File patterns to exclude")
    recursive: bool = Field(default=False, description="Search recursively in directories")
    ignore_case: bool = Field(default=False, description="Case-insensitive search")
    context: int = Field(default=0, ge=0, description="Number of context lines to include around matches")
    max_results: int = Field(default=0, ge=0, description="Maximum number of results to return (0 = unlimited)")
    file_pattern: str | None = Field(default=None, description="Glob pattern for files to search (e.g., '*.py')")


@dataclass
class SearchMatch:
    """A single search match with context."""

    file: str
    line: int  # 1-indexed
    column: int  # 1-indexed byte offset of the match start
    match_text: str
    line_text: str
    context: list[str] = field(default_factory=list)
    context_start: int | None = None  # Line number of context[0]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        out = {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "match_text": self.match_text,
            "line_text": self.line_text,
        }
        if self.context:
            out["context"] = list(self.context)
            out["context_start"] = self.context_start
        return out


@dataclass
class SearchResult:
    """Result of a search operation."""

    matches: list[SearchMatch]
    total_files: int  # Files actually read
    total_matches: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "matches": [m.to_dict() for m in self.matches],
            "total_files": self.total_files,
            "total_matches": self.total_matches,
        }


def compile_search_pattern(pattern: str, *, ignore_case: bool = False) -> re.Pattern:
    """
    Compile a search pattern.

    Raises:
        ToolValidationError: If the pattern does not compile
    """
    try:
        return re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    except re.error as e:
        raise ToolValidationError(f"invalid regex pattern: {e}") from e


def search(
    pattern: str,
    path: str,
    *,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    recursive: bool = False,
    ignore_case: bool = False,
    context: int = 0,
    max_results: int = 0,
    file_pattern: str | None = None,
) -> SearchResult:
    """
    Search a file or directory for a regular expression.

    Args:
        pattern: Regular expression
        path: File or directory to search
        include: Only search files whose names end with one of these
        exclude: Skip files whose names end with one of these
        recursive: Descend into subdirectories
        ignore_case: Case-insensitive matching
        context: Lines of context before/after each match
        max_results: Maximum matches to return (0 = unlimited)
        file_pattern: Glob that file base names must match

    Returns:
        SearchResult with matches and counts

    Raises:
        ToolValidationError: If the pattern does not compile
        ToolExecutionError: If the path can't be accessed or read
    """
    regex = compile_search_pattern(pattern, ignore_case=ignore_case)
    config = get_global_config()

    try:
        info = os.stat(path)
    except OSError as e:
        raise ToolExecutionError(f"cannot access path: {e}") from e

    if stat.S_ISDIR(info.st_mode):
        matches, files_searched = _search_directory(
            path,
            regex,
            include=include or [],
            exclude=exclude or [],
            recursive=recursive,
            context=context,
            max_results=max_results,
            file_pattern=file_pattern,
            encoding=config.encoding,
            errors=config.encoding_errors,
        )
    else:
        try:
            matches = _search_file(path, regex, context, config.encoding, config.encoding_errors)
        except (OSError, UnicodeDecodeError) as e:
            raise ToolExecutionError(f"cannot read file {path}: {e}") from e
        files_searched = 1

    if max_results > 0 and len(matches) > max_results:
        matches = matches[:max_results]

    return SearchResult(
        matches=matches,
        total_files=files_searched,
        total_matches=len(matches),
    )


def _search_directory(
    root: str,
    regex: re.Pattern,
    *,
    include: list[str],
    exclude: list[str],
    recursive: bool,
    context: int,
    max_results: int,
    file_pattern: str | None,
    encoding: str,
    errors: str,
) -> tuple[list[SearchMatch], int]:
    """Walk a directory and search every file that passes the filters."""
    all_matches: list[SearchMatch] = []
    files_searched = 0

    try:
        for entry in walk_entries(root, max_depth=None if recursive else 1):
            if entry.is_dir:
                continue

            name = entry.name
            if file_pattern and not fnmatchcase(name, file_pattern):
                continue
            if include and not matches_extensions(name, include):
                continue
            if exclude and matches_extensions(name, exclude):
                continue

            try:
                matches = _search_file(entry.path, regex, context, encoding, errors)
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Skipping unreadable file %s: %s", entry.path, e)
                continue

            all_matches.extend(matches)
            files_searched += 1

            # Stop issuing new files once the limit is reached
            if max_results > 0 and len(all_matches) >= max_results:
                break
    except OSError as e:
        raise ToolExecutionError(f"failed to walk {root}: {e}") from e

    return all_matches, files_searched


def _search_file(
    file_path: str,
    regex: re.Pattern,
    context_lines: int,
    encoding: str,
    errors: str,
) -> list[SearchMatch]:
    """Search one file. Raises OSError if it can't be read."""
    with open(file_path, encoding=encoding, errors=errors) as f:
        lines = [line.rstrip("\r\n") for line in f]

    matches: list[SearchMatch] = []

    for i, line in enumerate(lines):
        m = regex.search(line)
        if m is None:
            continue

        # Column is a UTF-8 byte offset whatever the file encoding
        column = len(line[: m.start()].encode("utf-8", errors="replace")) + 1

        match = SearchMatch(
            file=file_path,
            line=i + 1,
            column=column,
            match_text=m.group(0),
            line_text=line,
        )

        if context_lines > 0:
            start = max(0, i - context_lines)
            end = min(len(lines), i + context_lines + 1)
            match.context = lines[start:end]
            match.context_start = start + 1

        matches.append(match)

    return matches


class SearchTool(Tool[SearchParams]):
    """Regex content search over a file or directory with context lines."""

    name = "search"
    description = (
        "Search for content in files using regular expressions with support "
        "for filtering, context lines, and recursive search"
    )
    params_model = SearchParams

    def check(self, params: SearchParams) -> None:
        compile_search_pattern(params.pattern, ignore_case=params.ignore_case)

    def run(self, params: SearchParams) -> SearchResult:
        return search(
            params.pattern,
            params.path,
            include=params.include,
            exclude=params.exclude,
            recursive=params.recursive,
            ignore_case=params.ignore_case,
            context=params.context,
            max_results=params.max_results,
            file_pattern=params.file_pattern,
        )


def format_search_result(result: SearchResult) -> str:
    """Format search result for display."""
    if not result.matches:
        return f"No matches found (searched {result.total_files} files)"

    lines = [f"Found {result.total_matches} matches in {result.total_files} files searched", ""]

    current_file = None
    for match in result.matches:
        if match.file != current_file:
            if current_file is not None:
                lines.append("")
            lines.append(f"=== {match.file} ===")
            current_file = match.file

        if not match.context:
            lines.append(f"> {match.line:4d}:{match.column:<3d} {match.line_text}")
            continue

        for j, ctx_line in enumerate(match.context):
            num = (match.context_start or match.line) + j
            marker = ">" if num == match.line else " "
            lines.append(f"{marker} {num:4d}  {ctx_line}")
        lines.append("")

    return "\n".join(lines)
