"""Pydantic schemas for backend records and tool arguments."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict, TypeAdapter, ValidationError, field_validator

from .models import StoryStatus, parse_status

_DATETIME = TypeAdapter(datetime)


# Backend record schemas

class ProjectClient(BaseModel):
    """Client (customer) a project is delivered for."""

    name: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class Project(BaseModel):
    """Project as returned by GET /projects/{id}."""

    id: int
    name: str
    description: Optional[str] = None
    client: Optional[ProjectClient] = None
    progress_percentage: Optional[float] = None

    model_config = ConfigDict(extra="ignore")


class Story(BaseModel):
    """Story as returned by the backend.

    Status is kept as a raw integer: the backend may hold values outside the
    Backlog/In Progress/Done workflow, and sometimes encodes them as strings.
    The id is optional only so a partial create response can still be
    reconstructed. Fields the list views never show are parsed leniently so
    one odd record does not sink a whole project listing.
    """

    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    status: Optional[int] = None
    estimate: Optional[float] = None
    epic_id: Optional[int] = None
    project_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("estimate", "epic_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _lenient_datetime(cls, value: Any) -> Optional[datetime]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            return _DATETIME.validate_python(value)
        except ValidationError:
            return None


class StoryCreate(BaseModel):
    """Request body for POST /stories (status is always forced to Backlog)."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    estimate: Optional[float] = Field(None, gt=0)
    epic_id: Optional[int] = None
    project_id: int = Field(..., gt=0)


# Tool argument schemas

class SetProjectContextArgs(BaseModel):
    project_id: int = Field(..., gt=0, strict=True, description="The project ID to set as current context")


class GetProjectInfoArgs(BaseModel):
    project_id: Optional[int] = Field(None, gt=0, strict=True, description="Project ID (optional if project context is set)")


class CreateStoryArgs(BaseModel):
    """Arguments for create_story. Stories should be 1-4 hours of work."""

    name: str = Field(..., min_length=1, description="Story title (be specific and actionable)")
    description: Optional[str] = None
    estimate: Optional[float] = Field(None, gt=0, le=8, description="Estimated hours (1-8, prefer 1-4)")
    epic_id: Optional[int] = Field(None, strict=True)
    project_id: Optional[int] = Field(None, gt=0, strict=True)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Story name is required")
        return value


class UpdateStoryStatusArgs(BaseModel):
    story_id: int = Field(..., gt=0, strict=True)
    status: StoryStatus
    notes: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> StoryStatus:
        return parse_status(value)


class GetStoryArgs(BaseModel):
    story_id: int = Field(..., gt=0, strict=True)


class ListStoriesArgs(BaseModel):
    """Arguments for list_my_stories; a status of None means all stories."""

    status: Optional[StoryStatus] = None
    project_id: Optional[int] = Field(None, gt=0, strict=True)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_filter(cls, value: Any) -> Optional[StoryStatus]:
        if value is None or (isinstance(value, str) and value.strip().lower() == "all"):
            return None
        return parse_status(value)
