"""Realtime infrastructure for the flag relay.

This module provides the core infrastructure for pushing flag changes:
- ConnectionManager: Track the active WebSocket channels and broadcast to them
- FlagBridge: Turn provider update notifications into broadcasts

Usage:
    from billboard_service.infra.realtime import ConnectionManager, FlagBridge

    manager = ConnectionManager()
    bridge = FlagBridge(provider, service, manager)
    await bridge.start()
"""

from billboard_service.infra.realtime.flag_bridge import FlagBridge
from billboard_service.infra.realtime.manager import (
    BroadcastResult,
    ConnectionInfo,
    ConnectionManager,
    is_open,
)

__all__ = [
    "BroadcastResult",
    "ConnectionInfo",
    "ConnectionManager",
    "FlagBridge",
    "is_open",
]
