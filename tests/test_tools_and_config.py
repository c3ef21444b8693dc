"""Tests for tool definitions, configuration and the connection check."""
import io

import pytest
from mcp import types
from pydantic import ValidationError

from softypm_core.config import DEFAULT_BASE_URL, load_settings
from softypm_mcp.check import run_check
from softypm_mcp.dispatcher import HANDLER_MAP
from softypm_mcp.server import create_server
from softypm_mcp.tools import get_tools

from conftest import make_story


class TestToolDefinitions:

    def test_every_tool_has_a_handler(self):
        names = [tool.name for tool in get_tools()]
        assert names == [
            "set_project_context",
            "get_project_info",
            "create_story",
            "update_story_status",
            "get_story",
            "list_my_stories",
        ]
        assert set(names) == set(HANDLER_MAP)

    def test_required_arguments(self):
        required = {tool.name: tool.inputSchema.get("required", []) for tool in get_tools()}
        assert required["set_project_context"] == ["project_id"]
        assert required["create_story"] == ["name"]
        assert required["update_story_status"] == ["story_id", "status"]
        assert required["get_story"] == ["story_id"]
        assert required["get_project_info"] == []
        assert required["list_my_stories"] == []

    @pytest.mark.asyncio
    async def test_create_server(self, dispatcher):
        app = create_server(dispatcher)
        assert app.name == "softypm-mcp-server"

        result = await app.request_handlers[types.ListToolsRequest](types.ListToolsRequest(method="tools/list"))
        assert [tool.name for tool in result.root.tools] == [tool.name for tool in get_tools()]

    @pytest.mark.asyncio
    async def test_call_tool_routes_to_dispatcher(self, backend, dispatcher):
        backend.add_project(42, name="Apollo")
        app = create_server(dispatcher)
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="set_project_context", arguments={"project_id": 42}),
        )

        result = await app.request_handlers[types.CallToolRequest](request)

        assert not result.root.isError
        assert result.root.content[0].type == "text"
        assert "Apollo" in result.root.content[0].text
        assert dispatcher.current_project_id == 42


class TestSettings:

    def test_defaults(self):
        settings = load_settings({})
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.api_token == ""
        assert settings.default_project_id is None
        assert settings.timeout == 30.0
        assert settings.log_level == "INFO"

    def test_from_environment(self):
        settings = load_settings({
            "SOFTYPM_BASE_URL": "https://pm.example.com/api",
            "SOFTYPM_API_TOKEN": "secret",
            "DEFAULT_PROJECT_ID": "42",
            "SOFTYPM_TIMEOUT": "5",
            "SOFTYPM_LOG_LEVEL": "debug",
        })
        assert settings.base_url == "https://pm.example.com/api"
        assert settings.api_token == "secret"
        assert settings.default_project_id == 42
        assert settings.timeout == 5.0
        assert settings.log_level == "DEBUG"

    def test_blank_default_project(self):
        assert load_settings({"DEFAULT_PROJECT_ID": ""}).default_project_id is None

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_invalid_default_project(self, value):
        with pytest.raises(ValidationError):
            load_settings({"DEFAULT_PROJECT_ID": value})

    def test_settings_are_immutable(self):
        settings = load_settings({})
        with pytest.raises(ValidationError):
            settings.api_token = "changed"


class TestConnectionCheck:

    @pytest.mark.asyncio
    async def test_unhealthy_stops_early(self, backend, client):
        backend.add("GET", "/claude-code/health", status=401, json={})
        out = io.StringIO()

        assert await run_check(client, load_settings({}), out=out) is False
        assert "Health check: FAIL" in out.getvalue()
        assert len(backend.requests) == 1

    @pytest.mark.asyncio
    async def test_healthy_without_default_project(self, backend, client):
        backend.add("GET", "/claude-code/health", json={"success": True})
        out = io.StringIO()

        assert await run_check(client, load_settings({}), out=out) is True
        assert "Skipping project tests" in out.getvalue()

    @pytest.mark.asyncio
    async def test_project_and_stories(self, backend, client):
        backend.add("GET", "/claude-code/health", json={"success": True})
        backend.add_project(42, name="Apollo")
        backend.add_structure(42, epic_stories=[make_story(1, 3, name="Wire up API")])
        out = io.StringIO()

        ok = await run_check(client, load_settings({"DEFAULT_PROJECT_ID": "42"}), out=out)

        report = out.getvalue()
        assert ok is True
        assert "Project: Apollo (ID: 42)" in report
        assert "Found 1 stories" in report
        assert "#1: Wire up API [In Progress]" in report

    @pytest.mark.asyncio
    async def test_project_access_failure(self, backend, client):
        backend.add("GET", "/claude-code/health", json={"success": True})
        backend.add("GET", "/projects/42", status=403, json={})
        out = io.StringIO()

        ok = await run_check(client, load_settings({"DEFAULT_PROJECT_ID": "42"}), out=out)

        assert ok is False
        assert "Project access: FAIL" in out.getvalue()
