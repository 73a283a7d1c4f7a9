"""Shared fixtures for the MCP transport tests."""

import asyncio
import json
from typing import Any

import pytest
from fastapi.testclient import TestClient

from fireflies_mcp.config import Settings
from fireflies_mcp.mcp import DeliveryChannel, MessageDispatcher, SessionRegistry
from fireflies_mcp.server import create_app


class FakeToolInvoker:
    """In-memory stand-in for the Fireflies client."""

    def __init__(self, result: Any = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.delays: dict[str, float] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def invoke_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        self.calls.append((name, arguments))
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if self.error is not None:
            raise self.error
        return self.result


class RecordingStream:
    """Stream double that keeps every frame written to it."""

    def __init__(self) -> None:
        self.frames: list[str] = []
        self.closed = False

    def send(self, frame: str) -> None:
        self.frames.append(frame)

    def close(self) -> None:
        self.closed = True

    def messages(self) -> list[dict]:
        """Decode the JSON payloads of all ``message`` events."""
        decoded = []
        for frame in self.frames:
            lines = frame.strip("\n").split("\n")
            assert lines[0] == "event: message"
            decoded.append(json.loads(lines[1].removeprefix("data: ")))
        return decoded


class FakeRequest:
    """Minimal request exposing what the stream manager reads."""

    def __init__(self, root_path: str = "", disconnected: bool = False):
        self.scope = {"type": "http", "root_path": root_path}
        self.disconnected = disconnected

    async def is_disconnected(self) -> bool:
        return self.disconnected


@pytest.fixture
def tool_invoker() -> FakeToolInvoker:
    return FakeToolInvoker(result={"user_id": "u1", "email": "ada@example.com"})


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def delivery(registry: SessionRegistry) -> DeliveryChannel:
    return DeliveryChannel(registry)


@pytest.fixture
def dispatcher(tool_invoker: FakeToolInvoker, delivery: DeliveryChannel) -> MessageDispatcher:
    return MessageDispatcher(tool_invoker, delivery)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        fireflies_api_key="test-key",
        keepalive_interval_seconds=60.0,
        cors_allowed_origins="http://localhost:5173",
    )


@pytest.fixture
def app(test_settings: Settings, tool_invoker: FakeToolInvoker):
    return create_app(test_settings, tool_invoker=tool_invoker)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
