"""FastAPI dependency injection functions.

The transport components are built once per application by ``create_app``
and stored on ``app.state``; these dependencies hand them to endpoints so
tests can swap any of them out.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query
from fastapi import Request as FastAPIRequest

from ..mcp import MessageDispatcher, SessionRegistry, StreamLifecycleManager


def get_registry(request: FastAPIRequest) -> SessionRegistry:
    return request.app.state.registry


def get_dispatcher(request: FastAPIRequest) -> MessageDispatcher:
    return request.app.state.dispatcher


def get_stream_manager(request: FastAPIRequest) -> StreamLifecycleManager:
    return request.app.state.stream_manager


async def require_session(
    registry: Annotated[SessionRegistry, Depends(get_registry)],
    session_id: Annotated[str | None, Query(alias="sessionId")] = None,
) -> str:
    """Resolve the ``sessionId`` query parameter to a live session.

    Raises:
        HTTPException: 400 if the id is missing or not registered
    """
    if not session_id or session_id not in registry:
        raise HTTPException(status_code=400, detail="Invalid sessionId")
    return session_id
