"""MCP SSE transport routes.

Two endpoints make up one logical connection:

    GET  /sse                      -> event stream; first frame is the
                                      ``endpoint`` event carrying the
                                      submission address
    POST /messages?sessionId=<id>  -> one JSON-RPC envelope per request

A submission is acknowledged with 202 as soon as it is accepted. The JSON-RPC
reply is produced after the acknowledgment has been sent and arrives as a
``message`` event on the session's stream, never in the POST response body.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from .api.deps import get_dispatcher, get_stream_manager, require_session
from .mcp import SSE_HEADERS, MessageDispatcher, StreamLifecycleManager
from .models import AcceptedResponse, JSONRPCRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["MCP Transport"])


@router.get("/sse")
async def open_stream(
    request: Request,
    manager: Annotated[StreamLifecycleManager, Depends(get_stream_manager)],
) -> StreamingResponse:
    """Open a session stream.

    Config example (Claude Desktop / Cursor):
    ```json
    {"mcpServers": {"fireflies": {"url": "http://localhost:3000/sse"}}}
    ```
    """
    return StreamingResponse(
        manager.event_stream(request),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/messages", status_code=202, response_model=AcceptedResponse)
async def submit_message(
    request: Request,
    background_tasks: BackgroundTasks,
    session_id: Annotated[str, Depends(require_session)],
    dispatcher: Annotated[MessageDispatcher, Depends(get_dispatcher)],
) -> AcceptedResponse:
    """Accept one JSON-RPC envelope for the session named by ``sessionId``.

    Batch arrays are not supported; the body must be a single JSON object
    with a string ``method``.
    """
    body = await request.body()
    try:
        envelope = JSONRPCRequest.model_validate_json(body)
    except ValidationError:
        logger.info(f"Rejected malformed submission for session {session_id}")
        raise HTTPException(status_code=400, detail="Invalid request")

    background_tasks.add_task(dispatcher.dispatch, session_id, envelope)
    return AcceptedResponse()
