"""Tool dispatcher holding the per-session project context."""
from typing import Any, Optional
import logging
import traceback

from mcp.shared.exceptions import McpError
from mcp.types import TextContent

from . import handlers
from .client import SoftYPMClient
from .errors import ToolExecutionError, UnknownToolError

logger = logging.getLogger("softypm-mcp.dispatcher")

# Map tool names to handler functions
HANDLER_MAP = {
    "set_project_context": handlers.handle_set_project_context,
    "get_project_info": handlers.handle_get_project_info,
    "create_story": handlers.handle_create_story,
    "update_story_status": handlers.handle_update_story_status,
    "get_story": handlers.handle_get_story,
    "list_my_stories": handlers.handle_list_my_stories,
}


class ToolDispatcher:
    """Runs tool calls for one client session.

    Owns the session's current project id: it starts as the configured
    default (or None) and only changes after set_project_context succeeds.
    Calls are handled one at a time.
    """

    def __init__(self, client: SoftYPMClient, default_project_id: Optional[int] = None):
        self.client = client
        self.current_project_id = default_project_id

    async def call(self, name: str, arguments: Optional[dict[str, Any]]) -> list[TextContent]:
        logger.info(f"Tool call: {name} with arguments: {arguments}")

        handler = HANDLER_MAP.get(name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            raise UnknownToolError(name)

        try:
            content, project_id = await handler(dict(arguments or {}), self.client, self.current_project_id)
        except McpError:
            # Validation, missing context: already protocol-level errors
            raise
        except Exception as e:
            logger.error(f"Error during {name} call: {type(e).__name__}: {e}")
            logger.debug(f"  Traceback:\n{traceback.format_exc()}")
            raise ToolExecutionError(f"Tool execution failed: {e}") from e

        if project_id != self.current_project_id:
            logger.info(f"Updated session project context: {self.current_project_id} → {project_id}")
            self.current_project_id = project_id

        return content
