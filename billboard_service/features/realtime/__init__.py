"""Realtime feature: the server-to-client flag channel.

Usage:
    # In your FastAPI app
    from billboard_service.features.realtime import router
    app.include_router(router, prefix="/ws")

    # Connect via WebSocket
    ws://localhost:3000/ws
"""

from billboard_service.features.realtime.router import router

__all__ = ["router"]
