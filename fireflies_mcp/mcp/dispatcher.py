"""JSON-RPC method dispatch for the MCP SSE transport.

The dispatcher turns one parsed envelope into at most one reply envelope and
hands that reply to the delivery channel. Transport-level validation (unknown
session, unparseable body) happens before an envelope ever reaches it.

Every failure raised while a method runs is caught here and reported as a
JSON-RPC error with code INTERNAL_ERROR, so one failing request never
disturbs the stream or other sessions. Notifications never get a reply,
not even an error.
"""

import json
import logging
from collections.abc import Iterable
from typing import Any, Protocol

from .. import __version__
from ..models import JSONRPCRequest
from .delivery import DeliveryChannel
from .jsonrpc import (
    INTERNAL_ERROR,
    MCPError,
    MethodNotFoundError,
    ToolNotFoundError,
    jsonrpc_error,
    jsonrpc_response,
)
from .tool_defs import TOOL_DEFINITIONS

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "fireflies-mcp-server"

# Marker for methods that acknowledge without any reply
_NO_REPLY = object()


class ToolInvoker(Protocol):
    """Executes a named tool against the upstream API."""

    async def invoke_tool(self, name: str, arguments: dict[str, Any]) -> Any: ...


class MessageDispatcher:
    """Routes JSON-RPC envelopes to method handlers and delivers the replies."""

    def __init__(
        self,
        tool_invoker: ToolInvoker | None,
        delivery: DeliveryChannel,
        tools: Iterable[dict[str, Any]] = TOOL_DEFINITIONS,
    ):
        self.tool_invoker = tool_invoker
        self.delivery = delivery
        self.tools = list(tools)
        self._tool_names = {t["name"] for t in self.tools}

    async def dispatch(self, session_id: str, request: JSONRPCRequest) -> None:
        """Handle ``request`` and push its reply, if any, to ``session_id``."""
        reply = await self.handle(request)
        if reply is not None:
            self.delivery.deliver(session_id, reply)

    async def handle(self, request: JSONRPCRequest) -> dict | None:
        """Run the method named by ``request``.

        Returns:
            The reply envelope, or None for notifications and
            fire-and-forget methods.
        """
        try:
            result = await self._call_method(request)
        except Exception as e:
            if request.is_notification:
                logger.debug(f"Notification {request.method!r} failed, no reply sent: {e}")
                return None
            logger.warning(f"{request.method} (id={request.id!r}) failed: {type(e).__name__}: {e}")
            code = e.code if isinstance(e, MCPError) else INTERNAL_ERROR
            return jsonrpc_error(request.id, code, str(e) or type(e).__name__)

        if request.is_notification or result is _NO_REPLY:
            return None
        return jsonrpc_response(request.id, result)

    async def _call_method(self, request: JSONRPCRequest) -> Any:
        method = request.method

        if method == "initialize":
            return {
                "protocolVersion": PROTOCOL_VERSION,
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
                "capabilities": {"tools": {}},
            }
        elif method == "notifications/initialized":
            return _NO_REPLY
        elif method == "tools/list":
            return {"tools": self.tools}
        elif method == "tools/call":
            return await self._call_tool(request.params)
        elif method == "ping":
            return {}
        else:
            raise MethodNotFoundError(method)

    async def _call_tool(self, params: Any) -> dict:
        """Handle MCP tools/call: run the tool and wrap its result as text content."""
        params = params if isinstance(params, dict) else {}
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        if tool_name not in self._tool_names:
            raise ToolNotFoundError(tool_name)

        result = await self.tool_invoker.invoke_tool(tool_name, arguments)
        return {
            "content": [{"type": "text", "text": json.dumps(result, indent=2, default=str)}],
        }
