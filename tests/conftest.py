"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings that keep tests off the network and the real home directory
    - Provider Fixtures: in-memory flag provider and snapshot service
    - Application Fixtures: FastAPI app with its lifespan running, and an HTTP client
    - WebSocket Fixtures: AsyncMock sockets that look open to the relay
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterator
import os
from unittest.mock import AsyncMock

from httpx import ASGITransport, AsyncClient
import pytest
from starlette.websockets import WebSocketState

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("FLAGS_PROVIDER", "memory")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("BILLBOARD_SERVER_URL", "http://127.0.0.1:9")
os.environ.setdefault("BILLBOARD_WS_URL", "ws://127.0.0.1:9/ws")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Reload settings per test and keep client storage inside tmp_path."""
    from billboard_service.core.settings import clear_all_caches

    monkeypatch.setenv("BILLBOARD_STORAGE_PATH", str(tmp_path / "storage.json"))
    # The app lifespan would otherwise reconfigure the root logger under pytest
    monkeypatch.setattr("billboard_service.app.lifespan.setup_logging", lambda *a, **k: None)
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Provider Fixtures
# ============================================================================


@pytest.fixture
def provider():
    """Writable in-memory provider with every flag at its default."""
    from billboard_service.infra.flags import InMemoryFlagProvider

    return InMemoryFlagProvider()


@pytest.fixture
def snapshot_service(provider):
    from billboard_service.features.flags.service import FlagSnapshotService

    return FlagSnapshotService(provider)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(provider):
    """FastAPI application with the lifespan running.

    The in-memory ``provider`` fixture is injected so tests can flip flags.
    """
    from billboard_service.app.main import create_app

    application = create_app(flag_provider=provider)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app through ASGITransport.

    Example:
        async def test_flags(client):
            response = await client.post("/api/flags", json={"context": None})
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# WebSocket Fixtures
# ============================================================================


def make_websocket(*, open_: bool = True) -> AsyncMock:
    """AsyncMock WebSocket whose states read as connected (or closed)."""
    ws = AsyncMock()
    state = WebSocketState.CONNECTED if open_ else WebSocketState.DISCONNECTED
    ws.client_state = state
    ws.application_state = state
    return ws


@pytest.fixture
def websocket_factory():
    return make_websocket
