"""Request context middleware.

Tags every HTTP response with a request id and baseline security headers
using the pure ASGI pattern, so long-lived event streams pass through
unbuffered.
"""

import logging
import time
from uuid import uuid4

logger = logging.getLogger(__name__)


class RequestContextMiddleware:
    """
    Add tracing and security headers to all responses.

    Headers added:
        - X-Request-Id: Unique request identifier for tracing
        - X-Content-Type-Options: nosniff
        - X-Frame-Options: DENY

    The response status and time-to-first-byte are logged at DEBUG.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid4())
        start_time = time.perf_counter()

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                headers.append((b"x-content-type-options", b"nosniff"))
                headers.append((b"x-frame-options", b"DENY"))
                message = {**message, "headers": headers}

                latency_ms = int((time.perf_counter() - start_time) * 1000)
                logger.debug(
                    f"{scope['method']} {scope['path']} -> {message['status']} "
                    f"in {latency_ms}ms [{request_id}]"
                )
            await send(message)

        await self.app(scope, receive, send_with_headers)
