"""WebSocket connection manager for the flag relay.

This module provides a connection manager that:
- Tracks the active set of flag channels on this instance
- Broadcasts one serialized message to every open channel concurrently
- Isolates per-channel send failures from the rest of a broadcast
- Provides metrics for observability

The active set is mutated only by ``connect`` and ``disconnect``; a failed
send is reported, and the channel's own endpoint removes it when the socket
closes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import json
import logging
import time
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from starlette.websockets import WebSocketState

from billboard_service.infra.metrics.prometheus import (
    flag_broadcast_deliveries_total,
    flag_broadcast_recipients,
    flag_broadcasts_total,
    websocket_connection_duration_seconds,
    websocket_connections,
)

if TYPE_CHECKING:
    from fastapi import WebSocket

logger = logging.getLogger(__name__)

SENT = "sent"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class ConnectionInfo:
    """Metadata about a WebSocket connection."""

    connection_id: str
    websocket: WebSocket
    metadata: dict[str, Any] = field(default_factory=dict)
    connected_at: float = field(default_factory=time.time)


@dataclass(frozen=True)
class BroadcastResult:
    """Per-channel outcome counts of one broadcast."""

    sent: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def attempted(self) -> int:
        return self.sent + self.skipped + self.failed


def is_open(websocket: WebSocket) -> bool:
    """True when both sides of the socket are still connected."""
    return (
        websocket.client_state == WebSocketState.CONNECTED
        and websocket.application_state == WebSocketState.CONNECTED
    )


class ConnectionManager:
    """Manages the relay's active WebSocket channels.

    Example:
        manager = ConnectionManager(max_connections=500)

        # In WebSocket endpoint
        connection_id = await manager.connect(websocket)
        try:
            ...  # drain incoming frames until the client goes away
        finally:
            await manager.disconnect(connection_id)

        # On provider update
        await manager.broadcast({"type": "flags_update", "flags": {...}})
    """

    def __init__(self, max_connections: int = 10000, send_timeout: float = 0.0) -> None:
        """Initialize the connection manager.

        Args:
            max_connections: Channels accepted before new ones are refused.
            send_timeout: Per-channel send timeout in seconds; 0 waits forever.
        """
        self._max_connections = max_connections
        self._send_timeout = send_timeout
        # connection_id -> ConnectionInfo
        self._connections: dict[str, ConnectionInfo] = {}

    async def connect(self, websocket: WebSocket, metadata: dict[str, Any] | None = None) -> str:
        """Accept a new WebSocket connection and add it to the active set.

        No initial snapshot is pushed; clients use ``POST /flags`` for that.

        Returns:
            Unique connection ID

        Raises:
            ConnectionRefusedError: If max connections reached
        """
        if len(self._connections) >= self._max_connections:
            logger.warning(
                "Connection refused: max connections reached",
                extra={"max": self._max_connections},
            )
            raise ConnectionRefusedError("Maximum connections reached")

        await websocket.accept()

        connection_id = str(uuid4())
        self._connections[connection_id] = ConnectionInfo(
            connection_id=connection_id,
            websocket=websocket,
            metadata=metadata or {},
        )
        websocket_connections.set(len(self._connections))

        logger.info(
            "WebSocket connected",
            extra={"connection_id": connection_id, "total_connections": len(self._connections)},
        )
        return connection_id

    async def disconnect(self, connection_id: str) -> bool:
        """Remove a connection from the active set.

        Idempotent: removing an unknown or already removed ID is a no-op.

        Returns:
            True if the connection was removed by this call.
        """
        conn_info = self._connections.pop(connection_id, None)
        if conn_info is None:
            return False

        duration = time.time() - conn_info.connected_at
        websocket_connections.set(len(self._connections))
        websocket_connection_duration_seconds.observe(duration)

        logger.info(
            "WebSocket disconnected",
            extra={
                "connection_id": connection_id,
                "duration_seconds": round(duration, 3),
                "total_connections": len(self._connections),
            },
        )
        return True

    async def broadcast(self, message: dict[str, Any]) -> BroadcastResult:
        """Send a message to every channel in the active set.

        The message is serialized once. Channels that are not open are
        skipped, and a failed send never aborts delivery to the others.

        Args:
            message: Message to send (will be JSON serialized)

        Returns:
            Counts of sent, skipped and failed deliveries.
        """
        payload = json.dumps(message)
        targets = list(self._connections.values())

        outcomes = await asyncio.gather(*(self._deliver(conn_info, payload) for conn_info in targets))

        result = BroadcastResult(
            sent=outcomes.count(SENT),
            skipped=outcomes.count(SKIPPED),
            failed=outcomes.count(FAILED),
        )
        flag_broadcasts_total.inc()
        flag_broadcast_recipients.observe(result.sent)
        for outcome, count in ((SENT, result.sent), (SKIPPED, result.skipped), (FAILED, result.failed)):
            if count:
                flag_broadcast_deliveries_total.labels(outcome=outcome).inc(count)

        logger.info(
            "Broadcast delivered",
            extra={
                "message_type": message.get("type"),
                "recipients": result.sent,
                "skipped": result.skipped,
                "failed": result.failed,
            },
        )
        return result

    def get_connection(self, connection_id: str) -> ConnectionInfo | None:
        """Get connection info by ID."""
        return self._connections.get(connection_id)

    @property
    def connection_count(self) -> int:
        """Total number of active connections."""
        return len(self._connections)

    async def stop(self) -> None:
        """Close all open channels and clear the active set."""
        closed = 0
        for conn_info in list(self._connections.values()):
            if not is_open(conn_info.websocket):
                continue
            try:
                await conn_info.websocket.close(code=1001, reason="Server shutdown")
                closed += 1
            except Exception as e:
                logger.debug(
                    "Error closing WebSocket on shutdown",
                    extra={"connection_id": conn_info.connection_id, "error": str(e)},
                )

        self._connections.clear()
        websocket_connections.set(0)
        logger.info("Connection manager stopped", extra={"connections_closed": closed})

    # Private methods

    async def _deliver(self, conn_info: ConnectionInfo, payload: str) -> str:
        if not is_open(conn_info.websocket):
            return SKIPPED

        try:
            if self._send_timeout > 0:
                await asyncio.wait_for(conn_info.websocket.send_text(payload), self._send_timeout)
            else:
                await conn_info.websocket.send_text(payload)
        except Exception as e:
            logger.warning(
                "Failed to send message to connection",
                extra={
                    "connection_id": conn_info.connection_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return FAILED
        return SENT
