"""Formatting functions for MCP tool responses.

All tools answer with a single markdown text payload meant for direct display
to the host agent.
"""
from typing import Optional

from softypm_core.models import StoryStatus, status_label
from softypm_core.schemas import Project, Story

# Number of stories shown by list_my_stories before truncating
LIST_DISPLAY_LIMIT = 10
# Number of "next to work on" suggestions in get_project_info
NEXT_STORY_LIMIT = 3


def format_hours(value: Optional[float]) -> str:
    """Render an estimate without a trailing '.0' (3.0 → '3', 2.5 → '2.5')."""
    if value is None:
        return "?"
    return f"{value:g}"


def format_progress(project: Project) -> str:
    return f"{project.progress_percentage or 0:g}"


def format_story_ref(story: Story) -> str:
    story_id = story.id if story.id is not None else "?"
    return f"#{story_id}: {story.name}"


def format_project_context(project: Project) -> str:
    """Confirmation for set_project_context."""
    return (
        f"✅ Project context set to: {project.name} (ID: {project.id})\n\n"
        f"You are now acting as both DEVELOPER and PROJECT MANAGER for this project. Remember to:\n\n"
        f"🔄 **Workflow**: Always move stories Backlog(1) → In Progress(3) → Done(5)\n"
        f"📏 **Story Size**: Keep stories 1-4 hours, create new ones for additional work\n"
        f"📊 **Track Progress**: Update story status as you work\n\n"
        f"Project Progress: {format_progress(project)}% complete"
    )


def format_project_info(project_id: int, project: Project, stories: list[Story]) -> str:
    """Project summary with per-status counts and next-story suggestions."""
    backlog = [s for s in stories if s.status == StoryStatus.BACKLOG]
    in_progress = [s for s in stories if s.status == StoryStatus.IN_PROGRESS]
    done = [s for s in stories if s.status == StoryStatus.DONE]

    if in_progress:
        next_lines = [
            f"• {format_story_ref(s)} ({format_hours(s.estimate)}h)"
            for s in in_progress[:NEXT_STORY_LIMIT]
        ]
    else:
        next_lines = [
            f"• {format_story_ref(s)} ({format_hours(s.estimate)}h) - Move to In Progress first"
            for s in backlog[:NEXT_STORY_LIMIT]
        ]
    next_text = "\n".join(next_lines) if next_lines else "• No open stories - create one to get started"

    return (
        f"📊 **{project.name}** (Project #{project_id})\n\n"
        f"**Progress**: {format_progress(project)}% complete\n"
        f"**Stories**: {len(done)} done, {len(in_progress)} in progress, {len(backlog)} in backlog\n\n"
        f"**🚀 Next Stories to Work On:**\n"
        f"{next_text}\n\n"
        f"**Remember**: \n"
        f"- Move stories to \"In Progress\" before starting work\n"
        f"- Create new stories for any additional work discovered\n"
        f"- Keep stories 1-4 hours each for best tracking"
    )


def format_story_too_large(name: str, estimate: float) -> str:
    """Warning returned instead of creating a story estimated over six hours."""
    return (
        f"⚠️ **Story Too Large**: \"{name}\" is estimated at {format_hours(estimate)} hours.\n\n"
        f"Stories should be 1-4 hours for best tracking. Consider breaking this down into smaller stories:\n\n"
        f"**Example breakdown:**\n"
        f"• Create core functionality (3h)\n"
        f"• Add validation and error handling (2h)\n"
        f"• Write tests (2h)\n"
        f"• Update documentation (1h)\n\n"
        f"Would you like to create a smaller, more focused story instead?"
    )


def format_story_created(story: Story, description: Optional[str], estimate: Optional[float]) -> str:
    estimate_text = format_hours(estimate) if estimate is not None else "Not estimated"
    return (
        f"✅ **Story Created**: #{story.id if story.id is not None else '?'} - {story.name}\n\n"
        f"📝 **Description**: {description or 'No description provided'}\n"
        f"⏱️ **Estimate**: {estimate_text} hours\n"
        f"📊 **Status**: {StoryStatus.BACKLOG.label} (ready to start)\n\n"
        f"**Next step**: Use `update_story_status` to move it to \"In Progress\" when you start working on it."
    )


def format_invalid_transition(
    current_status: Optional[int],
    requested: StoryStatus,
    allowed: list[StoryStatus],
) -> str:
    """Warning for a status change the workflow does not permit."""
    allowed_text = ", ".join(s.label for s in allowed) or "None"
    return (
        f"⚠️ **Invalid Workflow Transition**\n\n"
        f"Cannot move story from \"{status_label(current_status)}\" to \"{requested.label}\"\n\n"
        f"**Valid workflow**: Backlog (1) → In Progress (3) → Done (5)\n\n"
        f"Current status: {status_label(current_status)}\n"
        f"Valid next steps: {allowed_text}"
    )


def format_status_updated(
    story: Story,
    story_id: int,
    old_status: Optional[int],
    new_status: StoryStatus,
    notes: Optional[str] = None,
) -> str:
    message = (
        f"✅ **Story Updated**: #{story_id} - {story.name}\n\n"
        f"📊 **Status**: {status_label(old_status)} → {new_status.label}"
    )
    if notes:
        message += f"\n📝 **Notes**: {notes}"

    if new_status == StoryStatus.IN_PROGRESS:
        message += (
            "\n\n🔨 **Now In Progress** - You are actively working on this story. "
            "Remember to move it to \"Done\" when completed."
        )
    elif new_status == StoryStatus.DONE:
        message += "\n\n🎉 **Story Completed!** - Great work! This story is now marked as done."
    return message


def format_story(story: Story) -> str:
    """Full story details with a status-appropriate hint."""
    estimate_text = format_hours(story.estimate) if story.estimate is not None else "Not estimated"
    created = story.created_at
    created_text = f"{created:%B} {created.day}, {created.year}" if created else "Unknown"

    if story.status == StoryStatus.BACKLOG:
        hint = "💡 **Next**: Move to \"In Progress\" when you start working"
    elif story.status == StoryStatus.IN_PROGRESS:
        hint = "🔨 **Active**: Currently in progress"
    else:
        hint = "✅ **Complete**: This story is done"

    story_id = story.id if story.id is not None else "?"
    return (
        f"📋 **Story #{story_id}**: {story.name}\n\n"
        f"📝 **Description**: {story.description or 'No description'}\n"
        f"📊 **Status**: {status_label(story.status)}\n"
        f"⏱️ **Estimate**: {estimate_text} hours\n"
        f"📅 **Created**: {created_text}\n\n"
        f"{hint}"
    )


def format_story_summary(story: Story) -> str:
    """Compact one-liner for list views."""
    estimate_suffix = f" ({format_hours(story.estimate)}h)" if story.estimate else ""
    return f"• {format_story_ref(story)} [{status_label(story.status)}]{estimate_suffix}"


def format_story_list(stories: list[Story], status_filter: Optional[StoryStatus] = None) -> str:
    """List of stories capped at LIST_DISPLAY_LIMIT entries with an overflow count."""
    filter_label = f" ({status_filter.label})" if status_filter else ""
    lines = "\n".join(format_story_summary(s) for s in stories[:LIST_DISPLAY_LIMIT])
    text = f"📋 **Stories**{filter_label}:\n\n{lines}"

    hidden = len(stories) - LIST_DISPLAY_LIMIT
    if hidden > 0:
        text += f"\n\n... and {hidden} more"
    return text


def format_no_stories(status_filter: Optional[StoryStatus] = None) -> str:
    if status_filter:
        return f"📋 **No Stories Found** with status \"{status_filter.label}\""
    return "📋 **No Stories Found** (filter: all)"
