"""Delivery of JSON-RPC replies onto session streams.

Delivery is best effort: a reply addressed to a session that has gone away
is dropped. Nothing is retried, queued, or buffered for later reconnects.
"""

import json
import logging
from typing import Any

from .sessions import SessionRegistry, StreamClosedError
from .sse import format_event

logger = logging.getLogger(__name__)


class DeliveryChannel:
    """Writes encoded envelopes to the stream named by a session id."""

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def deliver(self, session_id: str, envelope: dict[str, Any]) -> bool:
        """Push ``envelope`` as a ``message`` event to ``session_id``.

        Returns:
            True if a frame was written, False if the reply was dropped.
        """
        stream = self.registry.get(session_id)
        if stream is None:
            logger.debug(f"Dropping reply id={envelope.get('id')!r}: session {session_id} is gone")
            return False

        frame = format_event("message", json.dumps(envelope, separators=(",", ":"), default=str))
        try:
            stream.send(frame)
        except StreamClosedError:
            logger.debug(f"Dropping reply id={envelope.get('id')!r}: stream {session_id} closed")
            return False
        return True
