"""Response models for the HTTP endpoints."""

from pydantic import BaseModel, Field


class AcceptedResponse(BaseModel):
    """Synchronous acknowledgment of a submission."""

    status: str = Field(default="accepted")


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: str = Field(..., description="Service status")
    sessions: int = Field(..., ge=0, description="Open SSE sessions")
    version: str = Field(..., description="Server version")
    tools: int = Field(..., ge=0, description="Number of tools in the catalog")
