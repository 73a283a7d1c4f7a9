"""Tests for the SSE stream lifecycle."""

import asyncio
from urllib.parse import parse_qs, urlsplit

import pytest

from fireflies_mcp.mcp import DeliveryChannel, SessionRegistry, StreamLifecycleManager
from fireflies_mcp.mcp.sse import KEEPALIVE_FRAME

from .conftest import FakeRequest


def parse_endpoint(frame: str) -> tuple[str, str]:
    """Return (path, session id) from an ``endpoint`` event frame."""
    event_line, data_line = frame.strip("\n").split("\n")
    assert event_line == "event: endpoint"
    url = urlsplit(data_line.removeprefix("data: "))
    return url.path, parse_qs(url.query)["sessionId"][0]


async def next_frame(stream) -> str:
    return await asyncio.wait_for(stream.__anext__(), timeout=2)


class TestStreamOpen:
    """Test session creation on stream open."""

    async def test_first_frame_is_endpoint(self, registry: SessionRegistry) -> None:
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        events = manager.event_stream(FakeRequest())

        try:
            path, session_id = parse_endpoint(await next_frame(events))

            assert path == "/messages"
            assert registry.get(session_id) is not None
        finally:
            await events.aclose()

    async def test_endpoint_honors_root_path(self, registry: SessionRegistry) -> None:
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        events = manager.event_stream(FakeRequest(root_path="/fireflies"))

        try:
            path, _ = parse_endpoint(await next_frame(events))

            assert path == "/fireflies/messages"
        finally:
            await events.aclose()

    async def test_each_stream_gets_new_session(self, registry: SessionRegistry) -> None:
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        first = manager.event_stream(FakeRequest())
        second = manager.event_stream(FakeRequest())

        try:
            _, first_id = parse_endpoint(await next_frame(first))
            _, second_id = parse_endpoint(await next_frame(second))

            assert first_id != second_id
            assert len(registry) == 2  # noqa: PLR2004
        finally:
            await first.aclose()
            await second.aclose()


class TestStreamFrames:
    """Test frames written after the endpoint event."""

    async def test_keepalive_is_emitted(self, registry: SessionRegistry) -> None:
        manager = StreamLifecycleManager(registry, keepalive_interval=0.01)
        events = manager.event_stream(FakeRequest())

        try:
            await next_frame(events)

            assert await next_frame(events) == KEEPALIVE_FRAME
            assert await next_frame(events) == KEEPALIVE_FRAME
        finally:
            await events.aclose()

    async def test_delivered_reply_is_streamed(self, registry: SessionRegistry) -> None:
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        events = manager.event_stream(FakeRequest())

        try:
            _, session_id = parse_endpoint(await next_frame(events))
            DeliveryChannel(registry).deliver(
                session_id, {"jsonrpc": "2.0", "id": 1, "result": {}}
            )

            assert await next_frame(events) == (
                'event: message\ndata: {"jsonrpc":"2.0","id":1,"result":{}}\n\n'
            )
        finally:
            await events.aclose()


class TestStreamClose:
    """Test teardown when the connection ends."""

    async def test_close_removes_session(self, registry: SessionRegistry) -> None:
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        events = manager.event_stream(FakeRequest())
        _, session_id = parse_endpoint(await next_frame(events))
        stream = registry.get(session_id)

        await events.aclose()

        assert session_id not in registry
        assert stream.closed
        assert DeliveryChannel(registry).deliver(session_id, {"id": 1}) is False

    async def test_keepalive_stops_after_close(self, registry: SessionRegistry) -> None:
        manager = StreamLifecycleManager(registry, keepalive_interval=0.01)
        tasks_before = asyncio.all_tasks()
        events = manager.event_stream(FakeRequest())
        _, session_id = parse_endpoint(await next_frame(events))
        stream = registry.get(session_id)

        await events.aclose()
        await asyncio.sleep(0.05)

        assert asyncio.all_tasks() - tasks_before == set()
        assert stream.closed

    async def test_disconnect_detected_on_keepalive(self, registry: SessionRegistry) -> None:
        """A half-open connection is torn down at the next keep-alive tick."""
        request = FakeRequest()
        manager = StreamLifecycleManager(registry, keepalive_interval=0.01)
        events = manager.event_stream(request)
        _, session_id = parse_endpoint(await next_frame(events))

        request.disconnected = True
        assert await next_frame(events) == KEEPALIVE_FRAME
        with pytest.raises(StopAsyncIteration):
            await next_frame(events)

        assert session_id not in registry

    async def test_cancelled_response_removes_session(self, registry: SessionRegistry) -> None:
        """Cancellation while waiting for a frame (client disconnect) runs teardown."""
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        events = manager.event_stream(FakeRequest())

        async def consume() -> None:
            async for _ in events:
                pass

        task = asyncio.create_task(consume())
        while len(registry) == 0:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await events.aclose()

        assert len(registry) == 0

    async def test_close_all_ends_open_streams(self, registry: SessionRegistry) -> None:
        """Server shutdown ends every open stream and empties the registry."""
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        first = manager.event_stream(FakeRequest())
        second = manager.event_stream(FakeRequest())
        await next_frame(first)
        await next_frame(second)

        assert manager.close_all() == 2  # noqa: PLR2004

        assert len(registry) == 0
        with pytest.raises(StopAsyncIteration):
            await next_frame(first)
        with pytest.raises(StopAsyncIteration):
            await next_frame(second)

    async def test_close_all_flushes_queued_reply(self, registry: SessionRegistry) -> None:
        """A reply delivered just before shutdown is still written."""
        manager = StreamLifecycleManager(registry, keepalive_interval=60)
        events = manager.event_stream(FakeRequest())
        _, session_id = parse_endpoint(await next_frame(events))
        DeliveryChannel(registry).deliver(session_id, {"jsonrpc": "2.0", "id": 7, "result": {}})

        manager.close_all()

        assert (await next_frame(events)).startswith("event: message\n")
        with pytest.raises(StopAsyncIteration):
            await next_frame(events)
