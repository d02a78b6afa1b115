"""
Grep tool for searching file contents line by line.

Scans an explicit list of files (entries may be glob patterns, including
`**`) against one regular expression and returns matching lines, capture
groups and aggregate statistics, similar to `grep -n`.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field

from searchkit.runtime import get_global_config

from .base import Tool, ToolValidationError
from .walk import (
    RECURSIVE_MARKER,
    GlobSyntaxError,
    expand_pattern,
    has_wildcard,
    split_recursive_pattern,
    walk_entries,
)

logger = logging.getLogger(__name__)

OutputFormat = Literal["text", "json", "csv"]


class GrepParams(BaseModel):
    """Parameters for the grep tool."""

    pattern: str = Field(min_length=1, description="Regular expression pattern to search for")
    files: list[str] = Field(min_length=1, description="Files or glob patterns to search")
    recursive: bool = Field(default=False, description="Search directories recursively")
    ignore_case: bool = Field(default=False, description="Case-insensitive matching")
    word_match: bool = Field(default=False, description="Match whole words only")
    invert_match: bool = Field(default=False, description="Show lines that don't match the pattern")
    line_numbers: bool = Field(default=False, description="Include line numbers in results")
    count: bool = Field(default=False, description="Only return match counts, not actual matches")
    max_matches: int = Field(default=0, ge=0, description="Maximum number of matches to return (0 = unlimited)")
    output_format: OutputFormat = Field(default="text", description="Output format: text, json, or csv")


@dataclass
class GrepMatch:
    """A single matching (or, when inverted, non-matching) line."""

    file: str
    content: str
    line: int | None = None  # 1-indexed, only when line numbers were requested
    captures: list[str] = field(default_factory=list)  # Groups 1..n

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        out: dict[str, Any] = {"file": self.file}
        if self.line is not None:
            out["line"] = self.line
        out["content"] = self.content
        if self.captures:
            out["captures"] = list(self.captures)
        return out


@dataclass
class SearchStatistics:
    """Aggregate counts over one grep invocation."""

    files_searched: int = 0
    files_matched: int = 0
    total_matches: int = 0
    pattern_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "files_searched": self.files_searched,
            "files_matched": self.files_matched,
            "total_matches": self.total_matches,
            "pattern_counts": dict(self.pattern_counts),
        }


@dataclass
class GrepResult:
    """Result of a grep operation."""

    matches: list[GrepMatch] | None  # None when only counts were requested
    statistics: SearchStatistics
    total_matches: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        out: dict[str, Any] = {}
        if self.matches is not None:
            out["matches"] = [m.to_dict() for m in self.matches]
        out["statistics"] = self.statistics.to_dict()
        out["total_matches"] = self.total_matches
        return out


def build_pattern(pattern: str, *, ignore_case: bool = False, word_match: bool = False) -> re.Pattern:
    """
    Compile the search pattern with the requested flags.

    word_match wraps the whole pattern in word boundaries, so alternations
    like `foo|bar` are bounded as a unit.

    Raises:
        ToolValidationError: If the pattern does not compile
    """
    if word_match:
        pattern = rf"\b(?:{pattern})\b"
    flags = re.IGNORECASE if ignore_case else 0

    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ToolValidationError(f"invalid regex pattern: {e}") from e


def grep(
    pattern: str,
    files: list[str],
    *,
    recursive: bool = False,
    ignore_case: bool = False,
    word_match: bool = False,
    invert_match: bool = False,
    line_numbers: bool = False,
    count: bool = False,
    max_matches: int = 0,
) -> GrepResult:
    """
    Search files line by line for a regular expression.

    Args:
        pattern: Regular expression
        files: File paths or glob patterns (`*`, `?`, `[...]`, `**`)
        recursive: Expand directory entries to every file beneath them
        ignore_case: Case-insensitive matching
        word_match: Match whole words only
        invert_match: Return lines that do NOT match
        line_numbers: Record 1-indexed line numbers
        count: Omit matches from the result, keep statistics
        max_matches: Stop after this many matches (0 = unlimited)

    Returns:
        GrepResult with matches and statistics
    """
    regex = build_pattern(pattern, ignore_case=ignore_case, word_match=word_match)
    config = get_global_config()

    all_matches: list[GrepMatch] = []
    stats = SearchStatistics()
    files_matched: set[str] = set()

    for file_path in _expand_files(files, recursive=recursive):
        stats.files_searched += 1

        try:
            file_matches = _grep_file(
                file_path,
                regex,
                invert_match=invert_match,
                line_numbers=line_numbers,
                encoding=config.encoding,
                errors=config.encoding_errors,
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", file_path, e)
            continue

        if file_matches:
            files_matched.add(file_path)
            all_matches.extend(file_matches)

            for match in file_matches:
                key = match.captures[0] if match.captures else match.content
                stats.pattern_counts[key] = stats.pattern_counts.get(key, 0) + 1

        # The current file always finishes; trimming happens below
        if max_matches > 0 and len(all_matches) >= max_matches:
            break

    if max_matches > 0 and len(all_matches) > max_matches:
        all_matches = all_matches[:max_matches]

    stats.files_matched = len(files_matched)
    stats.total_matches = len(all_matches)

    return GrepResult(
        matches=None if count else all_matches,
        statistics=stats,
        total_matches=len(all_matches),
    )


def _expand_files(entries: list[str], *, recursive: bool) -> list[str]:
    """Turn file entries and glob patterns into a flat list of file paths."""
    files: list[str] = []

    for entry in entries:
        if has_wildcard(entry):
            try:
                files.extend(e.path for e in expand_pattern(entry) if not e.is_dir)
            except (GlobSyntaxError, OSError) as e:
                logger.debug("Skipping pattern %s: %s", entry, e)
        elif recursive and os.path.isdir(entry):
            try:
                files.extend(e.path for e in walk_entries(entry) if not e.is_dir)
            except OSError as e:
                logger.debug("Skipping directory %s: %s", entry, e)
        else:
            files.append(entry)

    return files


def _grep_file(
    file_path: str,
    regex: re.Pattern,
    *,
    invert_match: bool,
    line_numbers: bool,
    encoding: str,
    errors: str,
) -> list[GrepMatch]:
    """Scan one file. Raises OSError if it can't be read."""
    matches: list[GrepMatch] = []

    with open(file_path, encoding=encoding, errors=errors) as f:
        for i, raw_line in enumerate(f, start=1):
            line = raw_line.rstrip("\r\n")
            m = regex.search(line)

            if (m is not None) == invert_match:
                continue

            match = GrepMatch(file=file_path, content=line)
            if line_numbers:
                match.line = i
            if m is not None and m.groups():
                match.captures = [g if g is not None else "" for g in m.groups()]

            matches.append(match)

    return matches


class GrepTool(Tool[GrepParams]):
    """Line-oriented regex search with capture groups and statistics."""

    name = "grep"
    description = "Advanced pattern matching with capture groups, statistics, and flexible output formats"
    params_model = GrepParams

    def check(self, params: GrepParams) -> None:
        build_pattern(params.pattern, ignore_case=params.ignore_case, word_match=params.word_match)
        for entry in params.files:
            if RECURSIVE_MARKER in entry:
                try:
                    split_recursive_pattern(entry)
                except GlobSyntaxError as e:
                    raise ToolValidationError(str(e)) from e

    def run(self, params: GrepParams) -> GrepResult:
        return grep(
            params.pattern,
            params.files,
            recursive=params.recursive,
            ignore_case=params.ignore_case,
            word_match=params.word_match,
            invert_match=params.invert_match,
            line_numbers=params.line_numbers,
            count=params.count,
            max_matches=params.max_matches,
        )


def format_grep_result(result: GrepResult, output_format: OutputFormat = "text") -> str:
    """
    Format grep result for display.

    Args:
        result: Result to render
        output_format: "text" (file:line:content), "json" or "csv"
    """
    if output_format == "json":
        return json.dumps(result.to_dict(), indent=2)
    if output_format == "csv":
        return _format_csv(result)

    stats = result.statistics
    if result.matches is None:
        return (
            f"{result.total_matches} matches in {stats.files_matched} files "
            f"(searched {stats.files_searched} files)"
        )
    if not result.matches:
        return f"No matches found (searched {stats.files_searched} files)"

    lines = []
    for match in result.matches:
        prefix = f"{match.file}:{match.line}:" if match.line is not None else f"{match.file}:"
        lines.append(f"{prefix}{match.content}")
        if match.captures:
            lines.append(f"    captures: {match.captures}")

    lines.append("")
    lines.append(
        f"Found {result.total_matches} matches in {stats.files_matched} files "
        f"(searched {stats.files_searched} files)"
    )
    return "\n".join(lines)


def _format_csv(result: GrepResult) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    if result.matches is None:
        writer.writerow(["key", "count"])
        for key, n in result.statistics.pattern_counts.items():
            writer.writerow([key, n])
        return buf.getvalue()

    writer.writerow(["file", "line", "content", "captures"])
    for match in result.matches:
        writer.writerow([
            match.file,
            "" if match.line is None else match.line,
            match.content,
            "|".join(match.captures),
        ])
    return buf.getvalue()
