"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from searchkit.web import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestToolRoutes:
    """Test tool discovery routes."""

    def test_list_tools(self, client):
        response = client.get("/api/tools")
        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["glob", "grep", "search"]

    def test_describe_tool(self, client):
        response = client.get("/api/tools/glob")
        assert response.status_code == 200
        body = response.json()
        assert body["schema"]["required"] == ["patterns"]

    def test_describe_unknown_tool(self, client):
        response = client.get("/api/tools/nope")
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]


class TestValidateRoute:
    """Test parameter checking without execution."""

    def test_valid(self, client, tmp_path):
        response = client.post(
            "/api/tools/search/validate",
            json={"pattern": "x", "path": str(tmp_path / "missing")},
        )
        assert response.status_code == 200
        assert response.json() == {"valid": True}

    def test_invalid(self, client):
        response = client.post("/api/tools/grep/validate", json={"pattern": "(", "files": ["a"]})
        assert response.status_code == 422
        assert "invalid regex" in response.json()["detail"]


class TestInvokeRoute:
    """Test tool invocation."""

    def test_invoke_grep(self, client, tree):
        response = client.post(
            "/api/tools/grep",
            json={"pattern": "package", "files": [str(tree / "**" / "*.go")], "line_numbers": True},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["total_matches"] == 2
        assert body["data"]["statistics"]["files_matched"] == 2

    def test_invoke_glob(self, client, tree):
        response = client.post("/api/tools/glob", json={"patterns": ["*.txt"], "path": str(tree)})
        assert response.status_code == 200
        assert response.json()["data"]["matches"][0]["name"] == "file1.txt"

    def test_invoke_validation_error(self, client):
        response = client.post("/api/tools/glob", json={"patterns": []})
        assert response.status_code == 422

    def test_invoke_execution_error(self, client, tmp_path):
        response = client.post("/api/tools/search", json={"pattern": "x", "path": str(tmp_path / "missing")})
        assert response.status_code == 400
        assert "cannot access path" in response.json()["detail"]

    def test_invoke_unknown_tool(self, client):
        response = client.post("/api/tools/nope", json={})
        assert response.status_code == 404
