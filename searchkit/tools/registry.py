"""Tool registry: look up, describe, check and invoke tools by name."""

from __future__ import annotations

import logging
import threading
from typing import Any

from .base import Tool, ToolError, ToolNotFoundError, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    A named collection of tools.

    Usage:
        registry = create_default_registry()
        registry.describe("grep")
        result = registry.invoke("grep", {"pattern": "TODO", "files": ["**/*.py"]})
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._lock = threading.Lock()

    def register(self, tool: Tool) -> None:
        """Add a tool. Raises ToolError if the name is taken."""
        with self._lock:
            if tool.name in self._tools:
                raise ToolError(f"tool {tool.name} already registered")
            self._tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        """Remove a tool. Raises ToolNotFoundError if it isn't registered."""
        with self._lock:
            if name not in self._tools:
                raise ToolNotFoundError(f"tool {name} not found")
            del self._tools[name]

    def get(self, name: str) -> Tool:
        """Get a tool by name. Raises ToolNotFoundError if it isn't registered."""
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(f"tool {name} not found") from None

    def names(self) -> list[str]:
        """Registered tool names, sorted."""
        return sorted(self._tools)

    def tools(self) -> list[Tool]:
        """Registered tools, sorted by name."""
        return [self._tools[name] for name in self.names()]

    def count(self) -> int:
        return len(self._tools)

    def describe(self, name: str) -> dict[str, Any]:
        """Name, description and parameter schema of a tool."""
        tool = self.get(name)
        return {
            "name": tool.name,
            "description": tool.description,
            "schema": tool.schema(),
        }

    def check(self, name: str, params: Any) -> None:
        """Validate parameters for a tool without running it."""
        self.get(name).validate(params)

    def invoke(self, name: str, params: Any) -> ToolResult:
        """
        Run a tool and wrap the outcome.

        Tool failures (unknown name, bad parameters, execution errors) come
        back as ToolResult(success=False); nothing is raised for them.
        """
        try:
            tool = self.get(name)
            data = tool.execute(params)
        except ToolError as e:
            logger.info("Tool %s failed: %s", name, e)
            return ToolResult(success=False, error=str(e))

        logger.info("Tool %s completed", name)
        return ToolResult(success=True, data=data)


def create_default_registry() -> ToolRegistry:
    """Registry with the glob, grep and search tools."""
    from .glob import GlobTool
    from .grep import GrepTool
    from .search import SearchTool

    registry = ToolRegistry()
    for tool in (GlobTool(), GrepTool(), SearchTool()):
        registry.register(tool)
    return registry
