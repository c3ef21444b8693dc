"""MCP tool handlers for SoftYPM story tracking.

All handlers follow a consistent pattern:
- Accept: arguments dict, SoftYPMClient, and the current session project id
- Return: tuple of (list[TextContent], Optional[int]) where the second element
  is the session project id after the call
- Validate arguments before any network call
- Use formatters for consistent output

Session state is owned by the caller (see dispatcher.ToolDispatcher); only
handle_set_project_context ever returns a different project id.
"""
from typing import Optional, Type, TypeVar
import logging

from mcp.types import TextContent
from pydantic import BaseModel, ValidationError as PydanticValidationError

from softypm_core import schemas
from softypm_core.state_machine import get_allowed_transitions, is_transition_valid

from . import formatters
from .client import SoftYPMClient
from .errors import NoContextError, ValidationError

logger = logging.getLogger("softypm-mcp.handlers")

ArgsT = TypeVar("ArgsT", bound=BaseModel)

# Estimates above this many hours are rejected with a decomposition hint
MAX_STORY_HOURS = 6


def parse_arguments(model: Type[ArgsT], arguments: Optional[dict]) -> ArgsT:
    """Validate tool arguments, raising ValidationError with a readable summary."""
    try:
        return model.model_validate(arguments or {})
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        logger.warning(f"Rejected {model.__name__}: {problems}")
        raise ValidationError(f"Invalid arguments: {problems}") from e


def resolve_project_id(explicit: Optional[int], current_project_id: Optional[int]) -> int:
    """Explicit project id wins, then the session context; otherwise NoContextError."""
    if explicit is not None:
        return explicit
    if current_project_id is not None:
        logger.info(f"Using session project context: {current_project_id}")
        return current_project_id
    raise NoContextError()


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


# ============================================================================
# Project Context Handlers
# ============================================================================

async def handle_set_project_context(
    arguments: dict,
    client: SoftYPMClient,
    current_project_id: Optional[int] = None
) -> tuple[list[TextContent], Optional[int]]:
    """Set the session project after verifying it exists and is accessible.

    The context is only replaced when the fetch succeeds; any failure
    propagates and leaves the previous context untouched.
    """
    args = parse_arguments(schemas.SetProjectContextArgs, arguments)

    project = await client.get_project(args.project_id)
    logger.info(f"Set project context to: {project.name} ({args.project_id})")

    return _text(formatters.format_project_context(project)), args.project_id


async def handle_get_project_info(
    arguments: dict,
    client: SoftYPMClient,
    current_project_id: Optional[int] = None
) -> tuple[list[TextContent], Optional[int]]:
    """Project progress, story counts and the next stories to work on."""
    args = parse_arguments(schemas.GetProjectInfoArgs, arguments)
    project_id = resolve_project_id(args.project_id, current_project_id)

    project = await client.get_project(project_id)
    stories = await client.get_project_stories(project_id)

    return _text(formatters.format_project_info(project_id, project, stories)), current_project_id


# ============================================================================
# Story Handlers
# ============================================================================

async def handle_create_story(
    arguments: dict,
    client: SoftYPMClient,
    current_project_id: Optional[int] = None
) -> tuple[list[TextContent], Optional[int]]:
    """Create a Backlog story, or warn (without creating) when the estimate is too large."""
    args = parse_arguments(schemas.CreateStoryArgs, arguments)
    project_id = resolve_project_id(args.project_id, current_project_id)

    if args.estimate is not None and args.estimate > MAX_STORY_HOURS:
        logger.info(f"Story '{args.name}' not created: estimate {args.estimate}h exceeds {MAX_STORY_HOURS}h")
        return _text(formatters.format_story_too_large(args.name, args.estimate)), current_project_id

    story = await client.create_story(schemas.StoryCreate(
        name=args.name,
        description=args.description,
        estimate=args.estimate,
        epic_id=args.epic_id,
        project_id=project_id,
    ))

    return _text(formatters.format_story_created(story, args.description, args.estimate)), current_project_id


async def handle_update_story_status(
    arguments: dict,
    client: SoftYPMClient,
    current_project_id: Optional[int] = None
) -> tuple[list[TextContent], Optional[int]]:
    """Move a story along the workflow.

    Reads the story's current status first. Moves the transition matrix does
    not list come back as a warning and nothing is written.
    """
    args = parse_arguments(schemas.UpdateStoryStatusArgs, arguments)

    story = await client.get_story(args.story_id)
    current_status = story.status

    if not is_transition_valid(current_status, args.status):
        allowed = get_allowed_transitions(current_status)
        logger.warning(
            f"Blocked transition for story {args.story_id}: {current_status} → {args.status.value}"
        )
        return _text(formatters.format_invalid_transition(current_status, args.status, allowed)), current_project_id

    await client.update_story_status(args.story_id, args.status.value)

    text = formatters.format_status_updated(story, args.story_id, current_status, args.status, args.notes)
    return _text(text), current_project_id


async def handle_get_story(
    arguments: dict,
    client: SoftYPMClient,
    current_project_id: Optional[int] = None
) -> tuple[list[TextContent], Optional[int]]:
    """Full details for one story."""
    args = parse_arguments(schemas.GetStoryArgs, arguments)
    story = await client.get_story(args.story_id)
    return _text(formatters.format_story(story)), current_project_id


async def handle_list_my_stories(
    arguments: dict,
    client: SoftYPMClient,
    current_project_id: Optional[int] = None
) -> tuple[list[TextContent], Optional[int]]:
    """List project stories, optionally filtered by status, capped for display."""
    args = parse_arguments(schemas.ListStoriesArgs, arguments)
    project_id = resolve_project_id(args.project_id, current_project_id)

    stories = await client.get_project_stories(project_id)
    if args.status is not None:
        stories = [s for s in stories if s.status == args.status]

    if not stories:
        return _text(formatters.format_no_stories(args.status)), current_project_id

    logger.info(f"Listing {len(stories)} stories for project {project_id}")
    return _text(formatters.format_story_list(stories, args.status)), current_project_id
