"""MCP tool definitions for SoftYPM.

The input schemas mirror the pydantic argument models in softypm_core.schemas;
the handlers re-validate every call against those models.
"""

from mcp.types import Tool

PROJECT_ID_PROPERTY = {
    "type": "integer",
    "minimum": 1,
    "description": "Project ID (optional if project context is set)"
}


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for SoftYPM story tracking."""
    return [
        # ============================================================================
        # Project Context Tools
        # ============================================================================
        Tool(
            name="set_project_context",
            description="Set the current project context for all subsequent operations. "
                       "The project is fetched first; the context only changes if it exists and you have access. "
                       "get_project_info, create_story and list_my_stories default to this project "
                       "unless an explicit project_id is given.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {
                        "type": "integer",
                        "minimum": 1,
                        "description": "The project ID to set as current context"
                    }
                },
                "required": ["project_id"]
            }
        ),
        Tool(
            name="get_project_info",
            description="Get current project information, stories, and progress. "
                       "Suggests the next stories to work on (in progress first, then backlog).",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": PROJECT_ID_PROPERTY
                }
            }
        ),
        # ============================================================================
        # Story Tools
        # ============================================================================
        Tool(
            name="create_story",
            description="Create a new story in the current project. Stories should be 1-4 hours of work. "
                       "New stories always start in Backlog. Estimates above 6 hours are not created; "
                       "break the work down instead.",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "minLength": 1,
                        "description": "Story title (be specific and actionable)"
                    },
                    "description": {
                        "type": "string",
                        "description": "Detailed description of the work to be done"
                    },
                    "estimate": {
                        "type": "number",
                        "exclusiveMinimum": 0,
                        "maximum": 8,
                        "description": "Estimated hours (1-8, prefer 1-4 for good stories)"
                    },
                    "epic_id": {
                        "type": "integer",
                        "description": "Epic ID to assign this story to (optional)"
                    },
                    "project_id": PROJECT_ID_PROPERTY
                },
                "required": ["name"]
            }
        ),
        Tool(
            name="update_story_status",
            description="Update story status following proper workflow: Backlog(1) → In Progress(3) → Done(5). "
                       "Allowed moves: Backlog → In Progress; In Progress → Done or Backlog; "
                       "Done → Backlog or In Progress. Other moves return a warning and change nothing.",
            inputSchema={
                "type": "object",
                "properties": {
                    "story_id": {
                        "type": "integer",
                        "minimum": 1,
                        "description": "The story ID to update"
                    },
                    "status": {
                        "type": ["string", "integer"],
                        "enum": ["1", "3", "5", 1, 3, 5],
                        "description": "1=Backlog, 3=In Progress, 5=Done. Always follow workflow order."
                    },
                    "notes": {
                        "type": "string",
                        "description": "Optional progress notes"
                    }
                },
                "required": ["story_id", "status"]
            }
        ),
        Tool(
            name="get_story",
            description="Get details for a specific story",
            inputSchema={
                "type": "object",
                "properties": {
                    "story_id": {
                        "type": "integer",
                        "minimum": 1,
                        "description": "The story ID to retrieve"
                    }
                },
                "required": ["story_id"]
            }
        ),
        Tool(
            name="list_my_stories",
            description="List stories in current project, optionally filtered by status. "
                       "Shows at most 10 stories with a count of the rest.",
            inputSchema={
                "type": "object",
                "properties": {
                    "status": {
                        "type": ["string", "integer"],
                        "enum": ["1", "3", "5", "all", 1, 3, 5],
                        "description": "Filter by status: 1=Backlog, 3=In Progress, 5=Done, all=All stories (default)"
                    },
                    "project_id": PROJECT_ID_PROPERTY
                }
            }
        ),
    ]
