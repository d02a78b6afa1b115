"""
MCP Server for searchkit.

Exposes the search tools to AI agents via the Model Context Protocol.
Every tool in the registry is advertised with its parameter schema, and
calls are dispatched through the registry so validation and error handling
are the same as for every other surface.

Tools:
    glob    - Find files by glob pattern (recursive ** supported)
    grep    - Line-oriented regex search with captures and statistics
    search  - Regex content search with context lines and filters
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent
from mcp.types import Tool as McpTool

from searchkit.tools import (
    GlobResult,
    GrepResult,
    SearchResult,
    ToolRegistry,
    create_default_registry,
    format_glob_result,
    format_grep_result,
    format_search_result,
)

logger = logging.getLogger(__name__)


def list_tool_specs(registry: ToolRegistry) -> list[McpTool]:
    """MCP tool listing for every registered tool."""
    return [
        McpTool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.schema(),
        )
        for tool in registry.tools()
    ]


def render_result(result: Any, arguments: dict[str, Any]) -> str:
    """Render a tool result as text for the agent."""
    if isinstance(result, GrepResult):
        return format_grep_result(result, arguments.get("output_format") or "text")
    if isinstance(result, SearchResult):
        return format_search_result(result)
    if isinstance(result, GlobResult):
        return format_glob_result(result)
    return str(result)


def dispatch(registry: ToolRegistry, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    """Invoke a tool by name and wrap the output as MCP text content."""
    arguments = arguments or {}
    outcome = registry.invoke(name, arguments)

    if not outcome.success:
        return [TextContent(type="text", text=f"Error: {outcome.error}")]

    return [TextContent(type="text", text=render_result(outcome.data, arguments))]


def create_server(registry: ToolRegistry | None = None) -> Server:
    """
    Create an MCP server for the search tools.

    Args:
        registry: Tools to expose (default: glob, grep, search)

    Returns:
        Configured MCP Server instance
    """
    registry = registry or create_default_registry()
    server = Server("searchkit")

    @server.list_tools()
    async def list_tools() -> list[McpTool]:
        return list_tool_specs(registry)

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        logger.debug("MCP call %s %s", name, arguments)
        return dispatch(registry, name, arguments)

    return server


async def run_server(registry: ToolRegistry | None = None) -> None:
    """Run the MCP server over stdio."""
    server = create_server(registry)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
