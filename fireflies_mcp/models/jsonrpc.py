"""JSON-RPC envelope models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class JSONRPCRequest(BaseModel):
    """One inbound JSON-RPC 2.0 request or notification.

    A request without an ``id`` member is a notification and never gets a
    reply. An explicit ``"id": null`` is still a request.
    """

    model_config = ConfigDict(extra="allow")

    jsonrpc: str = Field(default="2.0", description="Protocol version marker")
    id: Any = Field(default=None, description="Correlation token echoed in the reply")
    method: str = Field(..., description="Method name, matched exactly")
    params: Any = Field(default=None, description="Method params, any JSON value")

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set
