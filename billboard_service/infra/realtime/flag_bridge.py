"""Flag provider to WebSocket bridge.

This module forwards provider update notifications to connected clients.

Architecture:
    Provider update → Flag Bridge → Snapshot (default context) → Connection Manager → Clients

The provider may call back from its own thread. The bridge hands the
notification to the event loop and returns immediately, so a slow client
never blocks the provider. Broadcasts run one at a time in the order the
provider emitted them.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from billboard_service.features.flags.schemas import FlagsUpdateMessage

if TYPE_CHECKING:
    from billboard_service.features.flags.service import FlagSnapshotService
    from billboard_service.infra.flags import FlagProvider

    from .manager import BroadcastResult, ConnectionManager

logger = logging.getLogger(__name__)


class FlagBridge:
    """Broadcasts a fresh default-context snapshot on every provider update.

    Every client receives the anonymous-context snapshot, not one evaluated
    for its own billboard code.

    Example:
        bridge = FlagBridge(provider, service, manager)
        await bridge.start()
        ...
        await bridge.stop()
    """

    def __init__(
        self,
        provider: FlagProvider,
        service: FlagSnapshotService,
        manager: ConnectionManager,
    ) -> None:
        self._provider = provider
        self._service = service
        self._manager = manager
        self._loop: asyncio.AbstractEventLoop | None = None
        self._running = False
        self._subscribed = False
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[BroadcastResult]] = set()

    async def start(self) -> None:
        """Subscribe to provider updates on the running loop."""
        if self._running:
            return
        self._loop = asyncio.get_running_loop()
        self._running = True
        if not self._subscribed:
            self._provider.on_update(self.notify)
            self._subscribed = True
        logger.info("Flag bridge started")

    def notify(self, flag_key: str) -> None:
        """Provider callback. Safe to call from any thread; never blocks."""
        loop = self._loop
        if not self._running or loop is None:
            return
        try:
            loop.call_soon_threadsafe(self._schedule, flag_key)
        except RuntimeError:
            logger.debug("Event loop closed, dropping flag update", extra={"flag": flag_key})

    async def broadcast_snapshot(self, flag_key: str | None = None) -> BroadcastResult:
        """Evaluate the default-context snapshot and send it to every channel."""
        async with self._lock:
            flags = self._service.snapshot(None)
            logger.debug("Broadcasting flag snapshot", extra={"flag": flag_key})
            return await self._manager.broadcast(FlagsUpdateMessage(flags=flags).to_wire())

    async def drain(self) -> None:
        """Wait until every scheduled broadcast has finished."""
        await asyncio.sleep(0)
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
            await asyncio.sleep(0)

    async def stop(self) -> None:
        """Stop forwarding updates and cancel pending broadcasts."""
        self._running = False
        for task in list(self._tasks):
            task.cancel()
        for task in list(self._tasks):
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks.clear()
        logger.info("Flag bridge stopped")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _schedule(self, flag_key: str) -> None:
        if not self._running:
            return
        task = asyncio.create_task(self.broadcast_snapshot(flag_key))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
