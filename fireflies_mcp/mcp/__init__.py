"""MCP (Model Context Protocol) transport module.

This module contains the components of the MCP SSE transport:
- Session registry (session id -> open stream)
- Stream lifecycle (endpoint event, keep-alive, teardown)
- Message dispatcher (JSON-RPC method routing)
- Delivery channel (replies onto the originating stream)
- Tool definitions for tools/list
- JSON-RPC 2.0 helpers

The HTTP routes that wire these together live in mcp_transport.py.
"""

from .delivery import DeliveryChannel
from .dispatcher import MessageDispatcher, ToolInvoker
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    MCPError,
    MethodNotFoundError,
    ToolNotFoundError,
    jsonrpc_error,
    jsonrpc_response,
)
from .sessions import Session, SessionRegistry, SessionStream, StreamClosedError
from .stream import SSE_HEADERS, StreamLifecycleManager
from .tool_defs import TOOL_CATEGORIES, TOOL_DEFINITIONS, TOOL_NAMES

__all__ = [
    # Sessions and streams
    "Session",
    "SessionRegistry",
    "SessionStream",
    "StreamClosedError",
    "StreamLifecycleManager",
    "SSE_HEADERS",
    # Dispatch and delivery
    "MessageDispatcher",
    "ToolInvoker",
    "DeliveryChannel",
    # Tool definitions
    "TOOL_DEFINITIONS",
    "TOOL_CATEGORIES",
    "TOOL_NAMES",
    # JSON-RPC helpers
    "jsonrpc_response",
    "jsonrpc_error",
    "MCPError",
    "MethodNotFoundError",
    "ToolNotFoundError",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "SERVER_ERROR",
]
