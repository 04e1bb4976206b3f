"""Client test fixtures: a fake flag server behind httpx.MockTransport and fake channels."""
from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from billboard_service.client.api import FlagsApiClient
from billboard_service.client.storage import LocalStorage
from billboard_service.features.flags.schemas import FlagSet


class FakeFlagServer:
    """In-process stand-in for the ``/api`` endpoints."""

    def __init__(self) -> None:
        self.flags = FlagSet.defaults()
        self.requests: list[tuple[str, str, Any]] = []
        self.fail = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body))
        if self.fail:
            return httpx.Response(503, json={"detail": "unavailable"})
        if request.url.path == "/api/flags":
            return httpx.Response(200, json=self.flags.to_wire())
        if request.url.path == "/api/track":
            return httpx.Response(200, json={"success": True})
        if request.method == "PUT" and request.url.path.startswith("/api/flags/"):
            name = request.url.path.rsplit("/", 1)[-1]
            self.flags = FlagSet.model_validate({**self.flags.to_wire(), name: body["value"]})
            return httpx.Response(200, json=self.flags.to_wire())
        return httpx.Response(404, json={"detail": "not found"})

    def bodies(self, path: str) -> list[Any]:
        return [body for _, p, body in self.requests if p == path]

    def events(self) -> list[str]:
        return [body["eventName"] for body in self.bodies("/api/track")]


class FakeChannel:
    """Async-iterable channel fed from a queue; ``None`` ends it like a close."""

    def __init__(self) -> None:
        self.queue: asyncio.Queue[str | None] = asyncio.Queue()
        self.closed = False

    def push(self, message: dict[str, Any] | str) -> None:
        self.queue.put_nowait(message if isinstance(message, str) else json.dumps(message))

    def drop(self) -> None:
        self.queue.put_nowait(None)

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        item = await self.queue.get()
        if item is None:
            raise StopAsyncIteration
        return item

    async def close(self) -> None:
        self.closed = True
        self.drop()


class ChannelOpener:
    """Hands out the scripted channels in order; an exception entry makes that open fail."""

    def __init__(self, *outcomes: FakeChannel | Exception) -> None:
        self.outcomes = list(outcomes)
        self.urls: list[str] = []

    async def __call__(self, url: str) -> FakeChannel:
        self.urls.append(url)
        outcome = self.outcomes.pop(0) if self.outcomes else ConnectionRefusedError("no server")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


async def wait_until(predicate, timeout: float = 1.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            pytest.fail("condition not reached")
        await asyncio.sleep(0.005)


@pytest.fixture
def flag_server():
    return FakeFlagServer()


@pytest.fixture
async def api(flag_server):
    client = FlagsApiClient("http://billboard.test", transport=httpx.MockTransport(flag_server.handler))
    yield client
    await client.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
def make_channel():
    return FakeChannel


@pytest.fixture
def make_opener():
    return ChannelOpener


@pytest.fixture
def eventually():
    return wait_until
