"""
Searchkit tools module.

These are the tools that let agents find files and search their contents.
Each tool is self-describing (schema), checkable without I/O (validate) and
invocable (execute); the registry dispatches them by name.

Tools are organized into categories:
- Paths: glob (find files by pattern, including recursive **)
- Content: grep (line matches with captures and statistics),
  search (matches with column and context lines)
"""

from .base import (
    Tool,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolResult,
    ToolValidationError,
)
from .glob import GlobParams, GlobResult, GlobTool, MatchEntry, format_glob_result, glob_paths
from .grep import (
    GrepMatch,
    GrepParams,
    GrepResult,
    GrepTool,
    SearchStatistics,
    build_pattern,
    format_grep_result,
    grep,
)
from .registry import ToolRegistry, create_default_registry
from .search import SearchMatch, SearchParams, SearchResult, SearchTool, format_search_result, search
from .walk import expand_recursive_glob, walk_entries

__all__ = [
    # Interface
    "Tool",
    "ToolResult",
    "ToolRegistry",
    "create_default_registry",
    # Path tools
    "glob_paths",
    "GlobTool",
    "GlobParams",
    "GlobResult",
    "MatchEntry",
    "format_glob_result",
    "expand_recursive_glob",
    "walk_entries",
    # Content tools
    "grep",
    "GrepTool",
    "GrepParams",
    "GrepMatch",
    "GrepResult",
    "SearchStatistics",
    "build_pattern",
    "format_grep_result",
    "search",
    "SearchTool",
    "SearchParams",
    "SearchMatch",
    "SearchResult",
    "format_search_result",
    # Exceptions
    "ToolError",
    "ToolValidationError",
    "ToolExecutionError",
    "ToolNotFoundError",
]
