"""Tests for the flag REST endpoints."""
from __future__ import annotations

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
import pytest

from billboard_service.core.settings import clear_all_caches
from billboard_service.features.flags.router import router as flags_router

DEFAULT_WIRE = {
    "enable-image-uploads": False,
    "theme-selection": False,
    "show-feature-flag-info": True,
}


# ──────────────────────────────────────────────────────────────
# POST /api/flags
# ──────────────────────────────────────────────────────────────


class TestEvaluateFlags:
    async def test_without_body_returns_defaults(self, client):
        response = await client.post("/api/flags")

        assert response.status_code == 200
        assert response.json() == DEFAULT_WIRE

    async def test_null_context(self, client, provider):
        provider.set_flag("theme-selection", True)

        response = await client.post("/api/flags", json={"context": None})

        assert response.status_code == 200
        assert response.json()["theme-selection"] is True

    async def test_with_billboard_context(self, client, provider):
        provider.set_flag("enable-image-uploads", True)
        context = {"key": "billboard-4821", "anonymous": False, "billboardCode": "4821"}

        response = await client.post("/api/flags", json={"context": context})

        assert response.status_code == 200
        assert response.json() == {**DEFAULT_WIRE, "enable-image-uploads": True}

    async def test_always_returns_every_flag(self, client, provider):
        provider.close()

        response = await client.post("/api/flags", json={"context": None})

        assert response.status_code == 200
        assert response.json() == DEFAULT_WIRE

    async def test_inconsistent_context_is_rejected(self, client):
        context = {"key": "billboard-4821", "anonymous": True, "billboardCode": "4821"}

        response = await client.post("/api/flags", json={"context": context})

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["type"] == "validation-error"

    async def test_defaults_before_lifespan(self):
        app = FastAPI()
        app.include_router(flags_router, prefix="/api")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post("/api/flags", json={"context": None})

        assert response.json() == DEFAULT_WIRE


# ──────────────────────────────────────────────────────────────
# POST /api/track
# ──────────────────────────────────────────────────────────────


class TestTrack:
    async def test_forwards_event(self, client, provider):
        body = {
            "eventName": "content_posted",
            "context": {"key": "billboard-4821", "anonymous": False, "billboardCode": "4821"},
        }

        response = await client.post("/api/track", json=body)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        event, ctx = provider.events[-1]
        assert event == "content_posted"
        assert ctx.key == "billboard-4821"

    async def test_provider_failure_reports_false(self, client, provider):
        provider.close()

        response = await client.post("/api/track", json={"eventName": "app_initialized"})

        assert response.status_code == 200
        assert response.json() == {"success": False}

    async def test_missing_event_name(self, client):
        response = await client.post("/api/track", json={"context": None})

        assert response.status_code == 422


# ──────────────────────────────────────────────────────────────
# Vocabulary and writes
# ──────────────────────────────────────────────────────────────


class TestFlagAdministration:
    async def test_vocabulary(self, client):
        response = await client.get("/api/flags/vocabulary")

        assert response.status_code == 200
        names = [item["name"] for item in response.json()["flags"]]
        assert names == list(DEFAULT_WIRE)

    async def test_set_flag(self, client, provider):
        response = await client.put("/api/flags/enable-image-uploads", json={"value": True})

        assert response.status_code == 200
        assert response.json()["enable-image-uploads"] is True
        assert provider.values()["enable-image-uploads"] is True

    async def test_set_unknown_flag(self, client):
        response = await client.put("/api/flags/beta-banner", json={"value": True})

        assert response.status_code == 404
        assert response.json()["type"] == "flag-not-found"

    async def test_set_flag_broadcasts_snapshot(self, app, client, websocket_factory):
        ws = websocket_factory()
        await app.state.connection_manager.connect(ws)

        await client.put("/api/flags/theme-selection", json={"value": True})
        await app.state.flag_bridge.drain()

        ws.send_text.assert_awaited_once()
        payload = ws.send_text.await_args.args[0]
        assert '"type": "flags_update"' in payload
        assert '"theme-selection": true' in payload


@pytest.fixture
def writes_disabled(monkeypatch):
    monkeypatch.setenv("FLAGS_ADMIN_ENABLED", "false")
    clear_all_caches()


async def test_set_flag_when_writes_disabled(writes_disabled, client, provider):
    response = await client.put("/api/flags/theme-selection", json={"value": True})

    assert response.status_code == 409
    assert response.json()["type"] == "flag-writes-disabled"
    assert "theme-selection" not in provider.values()


async def test_metrics_endpoint(client):
    await client.post("/api/flags", json={"context": None})

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "websocket_connections" in response.text
    assert "flag_evaluation_failures_total" in response.text
