"""Pydantic models for the MCP server request/response schemas."""

from .jsonrpc import JSONRPCRequest
from .responses import AcceptedResponse, HealthResponse

__all__ = [
    "JSONRPCRequest",
    "AcceptedResponse",
    "HealthResponse",
]
