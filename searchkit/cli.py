"""
searchkit CLI.

Commands:
    glob       Find files by glob pattern (recursive ** supported)
    grep       Search files line by line with a regular expression
    search     Search a file or directory with context lines
    tools      List tools or show a tool's parameters
    serve      Expose the tools via MCP for AI agents
    web        Start the HTTP API

Examples:
    searchkit glob '**/*.py' --path ./project --sort-by size --sort-order desc
    searchkit grep -n -i 'todo' 'src/**/*.py'
    searchkit grep -c -f csv 'user: (\\w+)' logs/*.log
    searchkit search -r -C 2 --include .py 'def main' ./project
    searchkit tools grep

Global options go before the command (searchkit --verbose grep ...); inside
grep, -v means --invert-match as in grep(1).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys


def _emit(result, text: str, as_json: bool) -> None:
    """Print a result as JSON or pre-formatted text."""
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(text)


def cmd_glob(args: argparse.Namespace) -> int:
    """Handle glob command."""
    from searchkit.tools import GlobTool, ToolError, format_glob_result

    params = {
        "patterns": args.patterns,
        "path": args.path,
        "case_sensitive": not args.ignore_case,
        "follow_symlinks": args.follow_symlinks,
        "sort_by": args.sort_by,
        "sort_order": args.sort_order,
        "include_info": args.info,
    }

    try:
        result = GlobTool().execute(params)
    except ToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _emit(result, format_glob_result(result), args.json)
    return 0


def cmd_grep(args: argparse.Namespace) -> int:
    """Handle grep command."""
    from searchkit.tools import GrepTool, ToolError, format_grep_result

    params = {
        "pattern": args.pattern,
        "files": args.files,
        "recursive": args.recursive,
        "ignore_case": args.ignore_case,
        "word_match": args.word_match,
        "invert_match": args.invert_match,
        "line_numbers": args.line_numbers,
        "count": args.count,
        "max_matches": args.max_matches,
        "output_format": args.format,
    }

    try:
        result = GrepTool().execute(params)
    except ToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_grep_result(result, args.format))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """Handle search command."""
    from searchkit.tools import SearchTool, ToolError, format_search_result

    params = {
        "pattern": args.pattern,
        "path": args.path,
        "include": args.include,
        "exclude": args.exclude,
        "recursive": args.recursive,
        "ignore_case": args.ignore_case,
        "context": args.context,
        "max_results": args.max_results,
        "file_pattern": args.file_pattern,
    }

    try:
        result = SearchTool().execute(params)
    except ToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _emit(result, format_search_result(result), args.json)
    return 0


def cmd_tools(args: argparse.Namespace) -> int:
    """Handle tools command - list tools or show one tool's parameters."""
    from searchkit.tools import ToolNotFoundError, create_default_registry

    registry = create_default_registry()

    if not args.name:
        print("Available tools:")
        for tool in registry.tools():
            print(f"  {tool.name:<8} {tool.description}")
        print()
        print("Use 'searchkit tools <name>' for details on a specific tool.")
        return 0

    try:
        info = registry.describe(args.name)
    except ToolNotFoundError:
        print(f"Tool {args.name!r} not found", file=sys.stderr)
        return 1

    schema = info["schema"]
    required = set(schema.get("required", []))

    print(f"Tool: {info['name']}")
    print(f"Description: {info['description']}")
    print()
    print("Parameters:")
    for key, prop in schema.get("properties", {}).items():
        marker = " (required)" if key in required else ""
        print(f"  {key}{marker}: {prop.get('description', '')}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle serve command."""
    import asyncio

    from searchkit.serve import run_server

    try:
        print("MCP server ready on stdio (waiting for client connection)", file=sys.stderr)
        print("Tip: This command is meant to be invoked by an MCP client.", file=sys.stderr)
        print("     Press Ctrl+C to exit.", file=sys.stderr)
        asyncio.run(run_server())
        return 0
    except KeyboardInterrupt:
        return 0


def cmd_web(args: argparse.Namespace) -> int:
    """Handle web command - start the HTTP API."""
    from searchkit.web import run_server

    try:
        run_server(host=args.host, port=args.port)
        return 0
    except KeyboardInterrupt:
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="searchkit",
        description="Filesystem pattern matching and content search for AI agents.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print debug information (skipped files, walk errors)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # glob
    glob_parser = subparsers.add_parser("glob", help="Find files by glob pattern")
    glob_parser.add_argument("patterns", nargs="+", help="Glob patterns (e.g. '**/*.py')")
    glob_parser.add_argument("--path", help="Base path (default: current directory)")
    glob_parser.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        help="Case-insensitive matching",
    )
    glob_parser.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links",
    )
    glob_parser.add_argument("--sort-by", choices=["name", "size", "modtime"], help="Sort key (default: name)")
    glob_parser.add_argument("--sort-order", choices=["asc", "desc"], help="Sort order (default: asc)")
    glob_parser.add_argument("--info", action="store_true", help="Include size, permissions and mtime")
    glob_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # grep
    grep_parser = subparsers.add_parser("grep", help="Search files line by line")
    grep_parser.add_argument("pattern", help="Regular expression")
    grep_parser.add_argument("files", nargs="+", help="Files or glob patterns")
    grep_parser.add_argument("-r", "--recursive", action="store_true", help="Search directories recursively")
    grep_parser.add_argument("-i", "--ignore-case", action="store_true", help="Case-insensitive matching")
    grep_parser.add_argument("-w", "--word-match", action="store_true", help="Match whole words only")
    grep_parser.add_argument("-v", "--invert-match", action="store_true", help="Select non-matching lines")
    grep_parser.add_argument("-n", "--line-numbers", action="store_true", help="Show line numbers")
    grep_parser.add_argument("-c", "--count", action="store_true", help="Only print counts")
    grep_parser.add_argument(
        "-m",
        "--max-matches",
        type=int,
        default=0,
        help="Stop after this many matches (default: unlimited)",
    )
    grep_parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json", "csv"],
        default="text",
        help="Output format (default: text)",
    )

    # search
    search_parser = subparsers.add_parser("search", help="Search a file or directory with context")
    search_parser.add_argument("pattern", help="Regular expression")
    search_parser.add_argument("path", help="File or directory to search")
    search_parser.add_argument(
        "--include",
        action="append",
        default=[],
        help="Only search files ending with this suffix (repeatable)",
    )
    search_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Skip files ending with this suffix (repeatable)",
    )
    search_parser.add_argument("-r", "--recursive", action="store_true", help="Descend into subdirectories")
    search_parser.add_argument("-i", "--ignore-case", action="store_true", help="Case-insensitive matching")
    search_parser.add_argument("-C", "--context", type=int, default=0, help="Lines of context (default: 0)")
    search_parser.add_argument(
        "-m",
        "--max-results",
        type=int,
        default=0,
        help="Maximum results (default: unlimited)",
    )
    search_parser.add_argument("--file-pattern", help="Glob for file names (e.g. '*.py')")
    search_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # tools
    tools_parser = subparsers.add_parser("tools", help="List tools or show a tool's parameters")
    tools_parser.add_argument("name", nargs="?", help="Tool name")

    # serve
    subparsers.add_parser("serve", help="Expose the tools via MCP over stdio")

    # web
    web_parser = subparsers.add_parser("web", help="Start the HTTP API")
    web_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    web_parser.add_argument("-p", "--port", type=int, default=8000, help="Port to bind to (default: 8000)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint."""
    from searchkit.runtime import get_runtime_config, set_global_config

    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_runtime_config(verbose=args.verbose)
    set_global_config(config)
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    handlers = {
        "glob": cmd_glob,
        "grep": cmd_grep,
        "search": cmd_search,
        "tools": cmd_tools,
        "serve": cmd_serve,
        "web": cmd_web,
    }

    if args.command is None:
        parser.print_help()
        return 0

    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
