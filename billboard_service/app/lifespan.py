"""Application lifespan management.

Startup Order:
1. Logging
2. Flag provider (unless one was injected into ``app.state``)
3. Snapshot service
4. Connection manager and flag bridge, when the WebSocket channel is enabled

Shutdown Order: Reverse of startup (what starts first, shuts down last)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from billboard_service.core.settings import (
    get_app_settings,
    get_flag_settings,
    get_websocket_settings,
)
from billboard_service.features.flags.service import FlagSnapshotService
from billboard_service.infra.flags import create_flag_provider
from billboard_service.infra.logging.config import setup_logging
from billboard_service.infra.realtime import ConnectionManager, FlagBridge

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from billboard_service.infra.flags import FlagProvider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the flag provider and the relay; tear them down on shutdown.

    Everything the routes need is stored on ``app.state``:
    ``flag_provider``, ``flag_service``, ``connection_manager`` and
    ``flag_bridge``.
    """
    setup_logging()

    app_settings = get_app_settings()
    ws_settings = get_websocket_settings()

    provider: FlagProvider | None = getattr(app.state, "flag_provider", None)
    owns_provider = provider is None
    if provider is None:
        provider = create_flag_provider(get_flag_settings())

    service = FlagSnapshotService(provider)
    app.state.flag_provider = provider
    app.state.flag_service = service

    manager: ConnectionManager | None = None
    bridge: FlagBridge | None = None
    if ws_settings.enabled:
        manager = ConnectionManager(
            max_connections=ws_settings.max_connections,
            send_timeout=ws_settings.send_timeout,
        )
        bridge = FlagBridge(provider, service, manager)
        await bridge.start()
    else:
        logger.info("WebSocket flag channel disabled via configuration")
    app.state.connection_manager = manager
    app.state.flag_bridge = bridge

    logger.info(
        "Application startup complete",
        extra={
            "service": app_settings.service_name,
            "environment": app_settings.environment,
            "websocket_enabled": ws_settings.enabled,
        },
    )

    try:
        yield
    finally:
        if bridge is not None:
            await bridge.stop()
        if manager is not None:
            await manager.stop()
        if owns_provider:
            provider.close()
            app.state.flag_provider = None
        app.state.flag_service = None
        app.state.connection_manager = None
        app.state.flag_bridge = None
        logger.info("Application shutdown complete", extra={"service": app_settings.service_name})
