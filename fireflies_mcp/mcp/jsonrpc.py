"""JSON-RPC 2.0 helpers for the MCP SSE transport.

Envelope builders, the standard error codes, and the exceptions raised by
method handlers. Every handler failure is reported on the wire with
INTERNAL_ERROR; the exception classes only exist to tell failures apart in logs.

See: https://www.jsonrpc.org/specification
"""

from typing import Any

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000  # Base for application-specific errors


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Create a JSON-RPC 2.0 success response.

    Args:
        id: Request ID (must match the request)
        result: The result payload

    Returns:
        JSON-RPC 2.0 response dict
    """
    return {"jsonrpc": "2.0", "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str) -> dict:
    """Create a JSON-RPC 2.0 error response.

    Args:
        id: Request ID (can be None for parse errors)
        code: Error code (negative integer)
        message: Human-readable error message

    Returns:
        JSON-RPC 2.0 error response dict
    """
    return {"jsonrpc": "2.0", "id": id, "error": {"code": code, "message": message}}


class MCPError(Exception):
    """Base class for failures raised while handling an MCP method."""

    code: int = INTERNAL_ERROR


class MethodNotFoundError(MCPError):
    """The envelope named a method this server does not implement."""

    def __init__(self, method: Any):
        super().__init__(f"Unknown method: {method}")
        self.method = method


class ToolNotFoundError(MCPError):
    """tools/call named a tool missing from the catalog."""

    def __init__(self, name: Any):
        super().__init__(f"Unknown tool: {name}")
        self.name = name
