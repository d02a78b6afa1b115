"""
searchkit web server.

A FastAPI server exposing the search tools over HTTP so agents and dashboards
that don't speak MCP can discover and invoke them.

Usage:
    searchkit web                    # Start server on localhost:8000
    searchkit web -p 3000            # Custom port
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from searchkit import __version__
from searchkit.tools import (
    ToolExecutionError,
    ToolNotFoundError,
    ToolRegistry,
    ToolResult,
    ToolValidationError,
    create_default_registry,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================


class ValidationResponse(BaseModel):
    """Outcome of a parameter check."""

    valid: bool


# =============================================================================
# FastAPI App
# =============================================================================


registry: ToolRegistry = create_default_registry()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """App lifespan handler for startup/shutdown."""
    logger.info("searchkit server starting with tools: %s", ", ".join(registry.names()))
    yield
    logger.info("searchkit server shutting down")


app = FastAPI(
    title="searchkit",
    description="Filesystem pattern matching and content search tools",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_tool(name: str):
    try:
        return registry.get(name)
    except ToolNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# =============================================================================
# API Routes
# =============================================================================


@app.get("/api/tools")
def list_tools() -> list[dict[str, Any]]:
    """List every tool with its parameter schema."""
    return [registry.describe(name) for name in registry.names()]


@app.get("/api/tools/{name}")
def describe_tool(name: str) -> dict[str, Any]:
    """Describe one tool's parameters."""
    _get_tool(name)
    return registry.describe(name)


@app.post("/api/tools/{name}/validate", response_model=ValidationResponse)
def validate_tool_params(name: str, params: dict[str, Any] | None = Body(default=None)):
    """Check parameters without touching the filesystem."""
    tool = _get_tool(name)
    try:
        tool.validate(params or {})
    except ToolValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ValidationResponse(valid=True)


@app.post("/api/tools/{name}")
def invoke_tool(name: str, params: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
    """
    Invoke a tool.

    Bad parameters are 422, failures while running (missing path) are 400.
    """
    tool = _get_tool(name)
    try:
        data = tool.execute(params or {})
    except ToolValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ToolExecutionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ToolResult(success=True, data=data).to_dict()


# =============================================================================
# Server Runner
# =============================================================================


def run_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    """
    Run the searchkit web server.

    Args:
        host: Host to bind to
        port: Port to bind to
    """
    import uvicorn

    print(f"searchkit server running at http://{host}:{port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(app, host=host, port=port, log_level="warning")
