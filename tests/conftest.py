"""Shared fixtures: an in-memory SoftYPM backend behind httpx.MockTransport."""
import json

import httpx
import pytest
import pytest_asyncio

from softypm_mcp.client import SoftYPMClient
from softypm_mcp.dispatcher import ToolDispatcher

BASE_URL = "https://softypm.test/api"
API_PREFIX = "/api"


class FakeBackend:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self):
        self.routes: dict[tuple[str, str], dict] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json=None, content=None, exc=None):
        self.routes[(method, path)] = {"status": status, "json": json, "content": content, "exc": exc}

    def add_project(self, project_id: int, name: str = "Demo Project", progress: float = 40):
        self.add("GET", f"/projects/{project_id}", json={
            "project": {"id": project_id, "name": name, "progress_percentage": progress}
        })

    def add_structure(self, project_id: int, epic_stories=(), project_stories=()):
        self.add("GET", f"/claude-code/projects/{project_id}/structure", json={
            "success": True,
            "data": {
                "project": {
                    "id": project_id,
                    "epics": [{"id": 1, "name": "Epic", "stories": list(epic_stories)}],
                    "stories": list(project_stories),
                }
            },
        })

    def add_story(self, story_id: int, status: int, name: str = "Write parser", **fields):
        story = {"id": story_id, "name": name, "status": status, "project_id": 42, **fields}
        self.add("GET", f"/stories/{story_id}", json={"success": True, "story": story})
        self.add("POST", f"/stories/{story_id}/status", json={"success": True})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {path}"})
        if route["exc"] is not None:
            raise route["exc"](f"simulated failure for {path}", request=request)
        if route["content"] is not None:
            return httpx.Response(route["status"], content=route["content"])
        return httpx.Response(route["status"], json=route["json"])

    @property
    def writes(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def json_of(self, request: httpx.Request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def client(backend):
    async with SoftYPMClient(
        base_url=BASE_URL,
        api_token="test-token",
        transport=httpx.MockTransport(backend.handler),
    ) as client:
        yield client


@pytest.fixture
def dispatcher(client):
    return ToolDispatcher(client)


def make_story(story_id: int, status: int, name: str = None, estimate=None) -> dict:
    story = {"id": story_id, "name": name or f"Story {story_id}", "status": status}
    if estimate is not None:
        story["estimate"] = estimate
    return story
