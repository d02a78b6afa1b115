"""Tests for the tool registry and result envelope."""

import pytest

from searchkit.tools import (
    GlobResult,
    GlobTool,
    ToolError,
    ToolNotFoundError,
    ToolRegistry,
    ToolResult,
    ToolValidationError,
    create_default_registry,
)


class TestToolRegistry:
    """Test registration and lookup."""

    def test_default_registry(self):
        registry = create_default_registry()
        assert registry.names() == ["glob", "grep", "search"]
        assert registry.count() == 3

    def test_register_duplicate(self):
        registry = ToolRegistry()
        registry.register(GlobTool())
        with pytest.raises(ToolError, match="already registered"):
            registry.register(GlobTool())

    def test_get_unknown(self):
        with pytest.raises(ToolNotFoundError, match="tool nope not found"):
            ToolRegistry().get("nope")

    def test_unregister(self):
        registry = create_default_registry()
        registry.unregister("glob")
        assert registry.names() == ["grep", "search"]
        with pytest.raises(ToolNotFoundError):
            registry.unregister("glob")

    def test_describe(self):
        info = create_default_registry().describe("search")
        assert info["name"] == "search"
        assert "regular expressions" in info["description"]
        assert set(info["schema"]["required"]) == {"pattern", "path"}

    def test_check(self):
        registry = create_default_registry()
        registry.check("grep", {"pattern": "x", "files": ["a.txt"]})
        with pytest.raises(ToolValidationError):
            registry.check("grep", {"pattern": "x"})


class TestInvoke:
    """Test invoke() wrapping outcomes as ToolResult."""

    def test_success(self, tree):
        outcome = create_default_registry().invoke("glob", {"patterns": ["*.txt"], "path": str(tree)})
        assert outcome.success is True
        assert isinstance(outcome.data, GlobResult)
        assert outcome.error is None

    def test_validation_failure(self):
        outcome = create_default_registry().invoke("grep", {"pattern": "("})
        assert outcome.success is False
        assert outcome.data is None
        assert "invalid parameters" in outcome.error

    def test_execution_failure(self, tmp_path):
        outcome = create_default_registry().invoke("search", {"pattern": "x", "path": str(tmp_path / "missing")})
        assert outcome.success is False
        assert "cannot access path" in outcome.error

    def test_unknown_tool(self):
        outcome = create_default_registry().invoke("nope", {})
        assert outcome.success is False
        assert "not found" in outcome.error


class TestToolResult:
    """Test result serialization."""

    def test_success_to_dict(self, tree):
        data = GlobTool().execute({"patterns": ["*.go"], "path": str(tree)})
        out = ToolResult(success=True, data=data).to_dict()
        assert out["success"] is True
        assert out["data"]["count"] == 1
        assert "error" not in out

    def test_failure_to_dict(self):
        assert ToolResult(success=False, error="boom").to_dict() == {"success": False, "error": "boom"}
