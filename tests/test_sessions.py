"""Tests for the session registry and session streams."""

import asyncio

import pytest

from fireflies_mcp.mcp import SessionRegistry, SessionStream, StreamClosedError


class TestSessionRegistry:
    """Test create/get/remove semantics."""

    def test_create_registers_stream(self) -> None:
        """A created session resolves to the stream it was created with."""
        registry = SessionRegistry()
        stream = SessionStream()

        session_id = registry.create(stream)

        assert registry.get(session_id) is stream
        assert session_id in registry
        assert len(registry) == 1

    def test_ids_are_unique(self) -> None:
        """Every create() returns a fresh id."""
        registry = SessionRegistry()
        ids = {registry.create(SessionStream()) for _ in range(200)}

        assert len(ids) == 200

    def test_ids_are_not_sequential(self) -> None:
        """Ids are random tokens, not counters."""
        registry = SessionRegistry()
        first = registry.create(SessionStream())
        second = registry.create(SessionStream())

        assert not first.isdigit()
        assert len(first) == 36  # noqa: PLR2004
        assert first != second

    def test_collision_regenerates_id(self) -> None:
        """A colliding id from the factory is replaced, never overwritten."""
        ids = iter(["dup", "dup", "fresh"])
        registry = SessionRegistry(id_factory=lambda: next(ids))
        first_stream = SessionStream()

        first = registry.create(first_stream)
        second = registry.create(SessionStream())

        assert first == "dup"
        assert second == "fresh"
        assert registry.get("dup") is first_stream

    def test_get_unknown_returns_none(self) -> None:
        registry = SessionRegistry()

        assert registry.get("never-issued") is None
        assert registry.get(None) is None
        assert registry.get("") is None

    def test_remove_is_idempotent(self) -> None:
        """Removing twice, or removing an unknown id, is a no-op."""
        registry = SessionRegistry()
        session_id = registry.create(SessionStream())

        registry.remove(session_id)
        registry.remove(session_id)
        registry.remove("never-issued")

        assert registry.get(session_id) is None
        assert len(registry) == 0

    def test_session_records_creation_time(self) -> None:
        registry = SessionRegistry()
        session_id = registry.create(SessionStream())

        session = registry.session(session_id)

        assert session is not None
        assert session.id == session_id
        assert session.created_at.tzinfo is not None


class TestSessionStream:
    """Test the outbound frame queue."""

    async def test_frames_come_out_in_order(self) -> None:
        stream = SessionStream()
        stream.send("one")
        stream.send("two")

        assert await stream.next_frame() == "one"
        assert await stream.next_frame() == "two"

    def test_send_after_close_raises(self) -> None:
        stream = SessionStream()
        stream.close()

        assert stream.closed
        with pytest.raises(StreamClosedError):
            stream.send("late")

    async def test_close_wakes_waiting_reader(self) -> None:
        """A reader blocked on an empty stream gets None once the stream closes."""
        stream = SessionStream()
        reader = asyncio.create_task(stream.next_frame())
        await asyncio.sleep(0)

        stream.close()

        assert await asyncio.wait_for(reader, timeout=1) is None

    async def test_queued_frames_drain_before_close_marker(self) -> None:
        stream = SessionStream()
        stream.send("last")
        stream.close()
        stream.close()

        assert await stream.next_frame() == "last"
        assert await stream.next_frame() is None
