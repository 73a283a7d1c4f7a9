"""Stream lifecycle for the MCP SSE transport.

Each GET on the stream endpoint becomes one session:

1. a fresh session id is registered together with an outbound frame queue
2. the first frame is an ``endpoint`` event naming the submission address
3. a keep-alive comment is queued on a fixed interval so idle proxies do not
   drop the connection
4. when the response ends for any reason (client disconnect, network error,
   server shutdown) the keep-alive task is cancelled and the session is
   removed from the registry

Closing the stream is the only way a session ends.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

from starlette.requests import Request

from .sessions import SessionRegistry, SessionStream, StreamClosedError
from .sse import KEEPALIVE_FRAME, format_event

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


class StreamLifecycleManager:
    """Creates, keeps alive, and tears down one stream per client connection."""

    def __init__(
        self,
        registry: SessionRegistry,
        keepalive_interval: float = 30.0,
        messages_path: str = "/messages",
    ):
        self.registry = registry
        self.keepalive_interval = keepalive_interval
        self.messages_path = messages_path

    def endpoint_for(self, request: Request, session_id: str) -> str:
        """Submission address advertised to the client for ``session_id``."""
        root_path = request.scope.get("root_path", "")
        return f"{root_path}{self.messages_path}?sessionId={session_id}"

    async def _keepalive(self, stream: SessionStream) -> None:
        while True:
            await asyncio.sleep(self.keepalive_interval)
            try:
                stream.send(KEEPALIVE_FRAME)
            except StreamClosedError:
                return

    def close_all(self) -> int:
        """Close every open stream so its response ends; used on server shutdown.

        Returns:
            Number of sessions closed
        """
        sessions = self.registry.sessions()
        for session in sessions:
            session.stream.close()
            self.registry.remove(session.id)
        return len(sessions)

    async def event_stream(self, request: Request) -> AsyncGenerator[str, None]:
        """Yield SSE frames for one session until the connection goes away."""
        stream = SessionStream()
        session_id = self.registry.create(stream)
        opened_at = self.registry.session(session_id).created_at
        keepalive = asyncio.create_task(self._keepalive(stream))
        logger.info(f"Session opened: {session_id} ({len(self.registry)} open)")

        try:
            yield format_event("endpoint", self.endpoint_for(request, session_id))
            while True:
                frame = await stream.next_frame()
                if frame is None:
                    break
                yield frame
                # Disconnects normally cancel the response; the keep-alive tick
                # bounds how long a half-open connection can linger.
                if frame == KEEPALIVE_FRAME and await request.is_disconnected():
                    break
        finally:
            keepalive.cancel()
            stream.close()
            self.registry.remove(session_id)
            lifetime = (datetime.now(UTC) - opened_at).total_seconds()
            logger.info(
                f"Session closed: {session_id} after {lifetime:.1f}s ({len(self.registry)} open)"
            )
