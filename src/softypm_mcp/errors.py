"""Error taxonomy for the SoftYPM MCP server.

Gateway errors (raised by client.SoftYPMClient) describe what went wrong
talking to the backend. Dispatcher errors are MCP protocol errors surfaced
to the host agent.
"""
from typing import Optional

from mcp.shared.exceptions import McpError
from mcp.types import (
    ErrorData,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
)


# ============================================================================
# Backend Gateway Errors
# ============================================================================

class SoftYPMError(Exception):
    """Base class for failures talking to the SoftYPM backend."""

    default_message = "Request failed."

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.detail = detail
        text = message or self.default_message
        if detail and detail not in text:
            text = f"{text} ({detail})"
        super().__init__(text)


class ApiError(SoftYPMError):
    """Backend reported an error not covered by a more specific kind."""

    default_message = "API Error"


class AuthFailureError(SoftYPMError):
    """HTTP 401."""

    default_message = "Authentication failed. Please check your API token."


class AccessDeniedError(SoftYPMError):
    """HTTP 403."""

    default_message = "Access denied. You may not have permission to access this resource."


class NotFoundError(SoftYPMError):
    """HTTP 404."""

    default_message = "Resource not found."


class ServiceError(SoftYPMError):
    """HTTP 5xx."""

    default_message = "SoftYPM server error. Please try again later."


class ConnectivityError(SoftYPMError):
    """No response received (connection refused, DNS failure, timeout)."""

    default_message = "Unable to connect to SoftYPM. Please check your internet connection."


class ProtocolError(SoftYPMError):
    """A nominally successful response did not have the expected shape."""

    default_message = "Unexpected response from SoftYPM."


# ============================================================================
# Dispatcher (protocol-level) Errors
# ============================================================================

class ToolError(McpError):
    """MCP error raised at the tool boundary."""

    code = INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(ErrorData(code=self.code, message=message))
        self.message = message


class ValidationError(ToolError):
    """Tool arguments are missing or malformed."""

    code = INVALID_PARAMS


class NoContextError(ToolError):
    """No explicit project id and no session project context."""

    code = INVALID_REQUEST

    def __init__(self, message: str = "No project context set. Use set_project_context first or provide project_id."):
        super().__init__(message)


class UnknownToolError(ToolError):
    code = METHOD_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.tool_name = name


class ToolExecutionError(ToolError):
    """Uniform wrapper for any other failure while executing a tool."""

    code = INTERNAL_ERROR
