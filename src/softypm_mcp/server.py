"""SoftYPM MCP Server - Expose story tracking to AI assistants over stdio."""
import sys
import asyncio
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    Tool,
    TextContent,
)

from softypm_core.config import Settings, get_settings

from . import tools
from .client import SoftYPMClient
from .dispatcher import ToolDispatcher

logger = logging.getLogger("softypm-mcp")


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the MCP stream."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True
    )


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build the MCP server bound to one dispatcher (one session)."""
    app = Server("softypm-mcp-server")

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """List available MCP tools for story tracking."""
        return tools.get_tools()

    @app.call_tool()
    async def call_tool(name: str, arguments: Any) -> list[TextContent]:
        """Handle MCP tool calls by delegating to the session dispatcher."""
        return await dispatcher.call(name, arguments)

    return app


async def serve(settings: Settings) -> None:
    """Run the MCP server on stdio until the host disconnects."""
    logger.info(f"MCP Server starting with SOFTYPM_BASE_URL: {settings.base_url}")
    if not settings.api_token:
        logger.warning("SOFTYPM_API_TOKEN is not set; backend calls will be rejected")
    if settings.default_project_id is not None:
        logger.info(f"Default project context: {settings.default_project_id}")

    async with SoftYPMClient.from_settings(settings) as client:
        dispatcher = ToolDispatcher(client, default_project_id=settings.default_project_id)
        app = create_server(dispatcher)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("SoftYPM MCP server running on stdio")
            await app.run(read_stream, write_stream, app.create_initialization_options())


def main() -> None:
    """Console entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
