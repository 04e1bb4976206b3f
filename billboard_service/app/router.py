"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from billboard_service.core.settings import get_app_settings, get_websocket_settings
from billboard_service.features.flags.router import router as flags_router
from billboard_service.features.metrics.router import router as metrics_router
from billboard_service.features.realtime.router import router as realtime_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from billboard_service.core.settings.app import AppSettings
    from billboard_service.core.settings.websocket import WebSocketSettings

logger = logging.getLogger(__name__)


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings | None = None,
    websocket_settings: WebSocketSettings | None = None,
) -> None:
    """Include every feature router.

    Args:
        app: FastAPI application instance.
        app_settings: Application settings; loaded when omitted.
        websocket_settings: WebSocket settings; loaded when omitted.
    """
    app_settings = app_settings or get_app_settings()
    websocket_settings = websocket_settings or get_websocket_settings()
    api_prefix = app_settings.api_prefix

    # Observability endpoints (no prefix)
    app.include_router(metrics_router, tags=["observability"])

    app.include_router(flags_router, prefix=api_prefix, tags=["flags"])

    # The channel route stays registered when disabled so clients get a 1013 close
    app.include_router(realtime_router, prefix=websocket_settings.path, tags=["realtime"])

    logger.debug(
        "Routers configured",
        extra={"api_prefix": api_prefix, "websocket_path": websocket_settings.path},
    )
