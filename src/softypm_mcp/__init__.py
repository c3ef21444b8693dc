"""SoftYPM MCP Server - Model Context Protocol integration.

This package lets AI assistants track their work as SoftYPM stories.

Modules:
- server: stdio MCP server implementation
- dispatcher: per-session tool dispatch and project context
- handlers: Tool implementation handlers
- tools: MCP tool definitions
- formatters: Response formatting utilities
- client: HTTP gateway to the SoftYPM backend
- errors: Error taxonomy
- check: Connection check CLI
"""

__version__ = "1.0.0"

from . import formatters
from . import tools
from . import handlers

__all__ = ["formatters", "tools", "handlers", "__version__"]
