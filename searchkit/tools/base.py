"""
Tool interface and error types shared by every searchkit tool.

A tool is a named, self-describing operation an agent can invoke with a
structured parameter payload:

    tool.schema()            describe parameters (JSON Schema)
    tool.validate(params)    check parameters without touching the filesystem
    tool.execute(params)     validate, then run

Parameters are declared as pydantic models; results are dataclasses with a
to_dict() method.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

import pydantic
from pydantic import BaseModel

# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class ToolError(Exception):
    """Base exception for tool operations."""

    pass


class ToolValidationError(ToolError):
    """Raised when parameters are malformed. Never raised after I/O has begun."""

    pass


class ToolExecutionError(ToolError):
    """Raised when a tool fails while running (missing path, unreadable root)."""

    pass


class ToolNotFoundError(ToolError):
    """Raised when a tool name is not registered."""

    pass


# -----------------------------------------------------------------------------
# Result envelope
# -----------------------------------------------------------------------------


@dataclass
class ToolResult:
    """Outcome of an invocation, with failures carried as data."""

    success: bool
    data: Any = None
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data.to_dict() if hasattr(self.data, "to_dict") else self.data
        if self.error is not None:
            out["error"] = self.error
        return out


# -----------------------------------------------------------------------------
# Tool base class
# -----------------------------------------------------------------------------

P = TypeVar("P", bound=BaseModel)


class Tool(ABC, Generic[P]):
    """
    Base class for all tools.

    Subclasses set name, description and params_model, and implement run().
    Extra semantic checks (regex compilation, pattern shape) go in check(),
    which must not perform I/O.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    params_model: ClassVar[type[BaseModel]]

    def schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's parameters."""
        return self.params_model.model_json_schema()

    def parse(self, params: Any) -> P:
        """
        Decode a parameter payload into the tool's params model.

        Args:
            params: dict, params model instance, or JSON text/bytes

        Raises:
            ToolValidationError: If the payload does not satisfy the model
        """
        if isinstance(params, self.params_model):
            return params  # type: ignore[return-value]
        try:
            if isinstance(params, (str, bytes, bytearray)):
                return self.params_model.model_validate_json(params)  # type: ignore[return-value]
            return self.params_model.model_validate(params or {})  # type: ignore[return-value]
        except pydantic.ValidationError as e:
            raise ToolValidationError(f"invalid parameters: {_summarize(e)}") from e

    def check(self, params: P) -> None:
        """Semantic validation beyond the model. Must not touch the filesystem."""

    def validate(self, params: Any) -> P:
        """Run the same validation as execute() without performing I/O."""
        parsed = self.parse(params)
        self.check(parsed)
        return parsed

    def execute(self, params: Any) -> Any:
        """Validate the payload, then run the tool."""
        return self.run(self.validate(params))

    @abstractmethod
    def run(self, params: P) -> Any:
        """Run the tool against already-validated parameters."""


def _summarize(error: pydantic.ValidationError) -> str:
    """One-line summary of a pydantic validation error."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "params"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)
