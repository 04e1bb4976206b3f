"""WebSocket router for the realtime flag channel.

Endpoints:
- GET /ws: WebSocket connection endpoint
- GET /ws/stats: Connection statistics
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect, status
from fastapi.responses import JSONResponse

from billboard_service.core.settings import get_websocket_settings
from billboard_service.features.realtime.schemas import ConnectionStats
from billboard_service.infra.logging import log_context

if TYPE_CHECKING:
    from billboard_service.infra.realtime import ConnectionManager

logger = logging.getLogger(__name__)
router = APIRouter(tags=["realtime"])


@router.websocket("")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Flag channel endpoint.

    Message Protocol:
        Server → Client:
        - {"type": "flags_update", "flags": {...}}

        Client → Server: none. Incoming frames are read and discarded so
        the close handshake is noticed.
    """
    manager: ConnectionManager | None = getattr(websocket.app.state, "connection_manager", None)

    if not get_websocket_settings().enabled:
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER, reason="WebSocket disabled")
        return

    if manager is None:
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER, reason="Server not ready")
        return

    client = websocket.client
    try:
        connection_id = await manager.connect(
            websocket,
            metadata={"client": f"{client.host}:{client.port}" if client else None},
        )
    except ConnectionRefusedError as e:
        logger.warning("WebSocket connection refused", extra={"reason": str(e)})
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER, reason=str(e))
        return

    try:
        with log_context(connection_id=connection_id):
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

    except WebSocketDisconnect:
        logger.debug("WebSocket client disconnected normally")

    except Exception as e:
        logger.exception("WebSocket error", extra={"connection_id": connection_id, "error": str(e)})

    finally:
        await manager.disconnect(connection_id)


@router.get(
    "/stats",
    response_model=ConnectionStats,
    summary="Get WebSocket connection statistics",
    description="Returns the number of open flag channels.",
)
async def get_stats(request: Request) -> ConnectionStats | JSONResponse:
    """Get current WebSocket connection statistics."""
    manager: ConnectionManager | None = getattr(request.app.state, "connection_manager", None)
    if manager is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "WebSocket manager not initialized"},
        )

    settings = get_websocket_settings()
    return ConnectionStats(
        enabled=settings.enabled,
        total_connections=manager.connection_count,
        max_connections=settings.max_connections,
    )
