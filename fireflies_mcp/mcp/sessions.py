"""Session registry for the MCP SSE transport.

A session pairs one open event stream with the identifier a client echoes
back on every submission. The registry is the only place sessions live;
it is created once per application and injected wherever it is needed.

All operations are synchronous and never await, so on a single event loop
they cannot interleave with each other and need no lock.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


class StreamClosedError(Exception):
    """Raised when writing to a stream that has already been closed."""


class SessionStream:
    """Outbound frame queue drained by one SSE response.

    Writers call ``send`` without blocking; the response generator awaits
    ``next_frame``. Once closed, further writes raise StreamClosedError and
    ``next_frame`` returns None after the queued frames are drained.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, frame: str) -> None:
        if self._closed:
            raise StreamClosedError("stream is closed")
        self._queue.put_nowait(frame)

    async def next_frame(self) -> str | None:
        return await self._queue.get()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Wake a reader blocked in next_frame
        self._queue.put_nowait(None)


@dataclass
class Session:
    """Server-side record of one open stream."""

    id: str
    stream: SessionStream
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


def new_session_id() -> str:
    """Generate a session id from the OS random source (UUID4)."""
    return str(uuid.uuid4())


class SessionRegistry:
    """Process-wide map of session id -> open stream."""

    def __init__(self, id_factory: Callable[[], str] = new_session_id):
        self._sessions: dict[str, Session] = {}
        self._id_factory = id_factory

    def create(self, stream: SessionStream) -> str:
        """Register ``stream`` under a freshly generated id and return the id."""
        session_id = self._id_factory()
        while session_id in self._sessions:
            logger.warning("Session id collision, regenerating")
            session_id = self._id_factory()
        self._sessions[session_id] = Session(id=session_id, stream=stream)
        return session_id

    def get(self, session_id: str | None) -> SessionStream | None:
        """Return the stream for ``session_id``, or None if it is not open."""
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        return session.stream if session else None

    def session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def sessions(self) -> list[Session]:
        """Snapshot of all open sessions."""
        return list(self._sessions.values())

    def remove(self, session_id: str) -> None:
        """Drop a session. Removing an unknown id is a no-op."""
        self._sessions.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
