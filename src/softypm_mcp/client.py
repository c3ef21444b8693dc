"""HTTP gateway to the SoftYPM project-management backend.

Every method issues a single request (no retries) and returns a parsed
schema object, or raises one of the SoftYPMError kinds from errors.py:

- 401 → AuthFailureError
- 403 → AccessDeniedError
- 404 → NotFoundError
- 5xx → ServiceError
- no response → ConnectivityError
- anything else → ApiError
- malformed success body → ProtocolError

Messages are prefixed with the failing operation, e.g.
"Failed to get project 42: Resource not found."
"""
from typing import Any, Optional, Type, TypeVar
import logging

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from softypm_core.config import DEFAULT_TIMEOUT, Settings
from softypm_core.models import StoryStatus
from softypm_core.schemas import Project, Story, StoryCreate

from .errors import (
    AccessDeniedError,
    ApiError,
    AuthFailureError,
    ConnectivityError,
    NotFoundError,
    ProtocolError,
    ServiceError,
    SoftYPMError,
)

logger = logging.getLogger("softypm-mcp.client")

ModelT = TypeVar("ModelT", bound=BaseModel)

STATUS_ERRORS: dict[int, Type[SoftYPMError]] = {
    401: AuthFailureError,
    403: AccessDeniedError,
    404: NotFoundError,
}


def _backend_message(response: httpx.Response) -> Optional[str]:
    """Extract the backend's own error message from a response body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("message", "detail", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def error_from_response(response: httpx.Response, action: str) -> SoftYPMError:
    """Map a non-2xx response to an error kind."""
    status = response.status_code
    message = _backend_message(response)

    if status in STATUS_ERRORS:
        error_cls = STATUS_ERRORS[status]
    elif status >= 500:
        error_cls = ServiceError
    else:
        return ApiError(f"{action}: API Error: {message or response.reason_phrase}", detail=message)
    return error_cls(f"{action}: {error_cls.default_message}", detail=message)


class SoftYPMClient:
    """Async client for the SoftYPM REST API.

    Use as an async context manager, or call aclose() when done. Tests pass an
    httpx.MockTransport through ``transport``.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SoftYPMClient":
        return cls(
            base_url=settings.base_url,
            api_token=settings.api_token,
            timeout=settings.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SoftYPMClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, action: str, **kwargs: Any) -> tuple[httpx.Response, dict]:
        """Send one request; return the response and its JSON object body."""
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error during {method} {path}:")
            logger.error(f"  Status: {e.response.status_code}")
            logger.error(f"  URL: {e.request.url}")
            logger.error(f"  Response text: {e.response.text}")
            raise error_from_response(e.response, action) from e
        except httpx.RequestError as e:
            logger.error(f"Request error during {method} {path}: {type(e).__name__}: {e}")
            raise ConnectivityError(f"{action}: {ConnectivityError.default_message}", detail=str(e) or None) from e

        if not response.content:
            return response, {}
        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(f"{action}: response body is not valid JSON") from e
        if not isinstance(body, dict):
            raise ProtocolError(f"{action}: expected a JSON object, got {type(body).__name__}")
        return response, body

    @staticmethod
    def _parse(model: Type[ModelT], data: Any, action: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "body"
            raise ProtocolError(f"{action}: unexpected response shape ({location}: {first['msg']})") from e

    @staticmethod
    def _unwrap_story(body: dict) -> Any:
        """Story endpoints answer either {success, story|data} or the bare story."""
        if body.get("success"):
            return body.get("story") or body.get("data")
        return body

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def get_project(self, project_id: int) -> Project:
        action = f"Failed to get project {project_id}"
        _, body = await self._request("GET", f"/projects/{project_id}", action)
        project = self._parse(Project, body.get("project") or body, action)
        logger.info(f"Retrieved project {project_id}: {project.name}")
        return project

    async def get_project_stories(self, project_id: int) -> list[Story]:
        """Fetch all stories of a project, flattening epic stories then project-level stories."""
        action = f"Failed to get stories for project {project_id}"
        _, body = await self._request("GET", f"/claude-code/projects/{project_id}/structure", action)

        data = body.get("data")
        if not body.get("success") or not isinstance(data, dict):
            raise ProtocolError(f"{action}: Unable to get project stories from structure endpoint")
        project = data.get("project")
        if not isinstance(project, dict):
            raise ProtocolError(f"{action}: structure response has no project")

        raw_stories: list[Any] = []
        for epic in project.get("epics") or []:
            if isinstance(epic, dict):
                raw_stories.extend(epic.get("stories") or [])
        raw_stories.extend(project.get("stories") or [])

        stories = []
        for raw in raw_stories:
            if isinstance(raw, dict) and raw.get("project_id") is None:
                raw = {**raw, "project_id": project_id}
            stories.append(self._parse(Story, raw, action))

        logger.info(f"Retrieved {len(stories)} stories for project {project_id}")
        return stories

    async def create_story(self, request: StoryCreate) -> Story:
        """Create a story in the Backlog; the initial status is always 1."""
        action = "Failed to create story"
        payload = request.model_dump(exclude_none=True)
        payload["status"] = StoryStatus.BACKLOG.value
        _, body = await self._request("POST", "/stories", action, json=payload)

        returned = self._unwrap_story(body)
        # Partial responses are completed from what was sent
        story_data = dict(payload)
        if isinstance(returned, dict):
            story_data.update({key: value for key, value in returned.items() if value is not None})
        story = self._parse(Story, story_data, action)
        logger.info(f"Created story {story.id}: {story.name} in project {request.project_id}")
        return story

    async def get_story(self, story_id: int) -> Story:
        action = f"Failed to get story {story_id}"
        _, body = await self._request("GET", f"/stories/{story_id}", action)
        returned = self._unwrap_story(body)
        if not isinstance(returned, dict):
            raise ProtocolError(f"{action}: response has no story")
        return self._parse(Story, returned, action)

    async def update_story_status(self, story_id: int, status: int) -> None:
        """Write a story status. Performs no workflow validation."""
        action = f"Failed to update story {story_id} status"
        response, body = await self._request(
            "POST", f"/stories/{story_id}/status", action, json={"status": int(status)}
        )
        if not body.get("success") and response.status_code != 200:
            raise ApiError(f"{action}: {body.get('message') or 'Failed to update story status'}")
        logger.info(f"Updated story {story_id} status to {int(status)}")

    async def health_check(self) -> bool:
        """Probe the backend. Never raises; any failure reports unhealthy."""
        try:
            _, body = await self._request("GET", "/claude-code/health", "Health check failed")
        except Exception as e:
            logger.warning(f"Health check failed: {e}")
            return False
        return body.get("success") is True
