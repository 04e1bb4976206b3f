"""Client sync agent.

Keeps the session's FlagSet current through the realtime channel, falling
back to polling when the channel cannot be opened.

States:
    DISCONNECTED -> CONNECTING -> CONNECTED
    CONNECTED --close--> CONNECTING --wait reconnect_delay--> (retry open)
    any failed open -> POLLING (terminal until ``stop``)

Polling never upgrades back to the channel, and a live channel never runs
alongside a polling loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
import contextlib
from enum import StrEnum
import json
import logging
from typing import TYPE_CHECKING, Protocol

from websockets.exceptions import ConnectionClosed

from billboard_service.features.flags.schemas import FlagSet, FlagsUpdateMessage

if TYPE_CHECKING:
    from .api import ApiResult, FlagsApiClient
    from .reconciler import UIReconciler
    from .session import ClientSession

logger = logging.getLogger(__name__)


class SyncState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    POLLING = "polling"


class Channel(Protocol):
    """The part of a websockets client connection the agent uses."""

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...

    async def close(self) -> None: ...


ChannelOpener = Callable[[str], Awaitable[Channel]]


async def open_websocket(url: str) -> Channel:
    """Open the realtime channel with ``websockets``."""
    from websockets.asyncio.client import connect

    return await connect(url)


class SyncAgent:
    """Owns the client's one realtime channel or its polling loop.

    Example:
        agent = SyncAgent(session, api, reconciler, ws_url="ws://localhost:3000/ws")
        await agent.start()
        ...
        await agent.refresh()  # after the billboard code changed
        ...
        await agent.stop()
    """

    def __init__(
        self,
        session: ClientSession,
        api: FlagsApiClient,
        reconciler: UIReconciler,
        *,
        ws_url: str,
        reconnect_delay: float = 3.0,
        poll_interval: float = 5.0,
        channel_opener: ChannelOpener | None = None,
    ) -> None:
        self._session = session
        self._api = api
        self._reconciler = reconciler
        self._ws_url = ws_url
        self._reconnect_delay = reconnect_delay
        self._poll_interval = poll_interval
        self._open_channel = channel_opener or open_websocket

        self._state = SyncState.DISCONNECTED
        self._channel: Channel | None = None
        self._channel_task: asyncio.Task[None] | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._stopping = False
        self.open_attempts = 0

    @property
    def state(self) -> SyncState:
        return self._state

    async def start(self) -> SyncState:
        """Open the channel, or start polling if that fails."""
        if self._state is not SyncState.DISCONNECTED:
            return self._state
        self._stopping = False

        channel = await self._open()
        if channel is None:
            self._start_polling()
        else:
            self._channel_task = asyncio.create_task(self._run_channel(channel))
        return self._state

    async def stop(self) -> None:
        """Close the channel and cancel background loops."""
        self._stopping = True
        for task in (self._channel_task, self._poll_task):
            if task is not None and task is not asyncio.current_task():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._channel_task = None
        self._poll_task = None

        if self._channel is not None:
            channel, self._channel = self._channel, None
            try:
                await channel.close()
            except Exception as e:
                logger.debug("Error closing flag channel", extra={"error": str(e)})

        self._state = SyncState.DISCONNECTED
        logger.info("Sync agent stopped")

    async def refresh(self) -> ApiResult[FlagSet]:
        """One-shot snapshot for the current context, in any state.

        On failure the session falls back to the default FlagSet.
        """
        result = await self._api.fetch_flags(self._session.build_context())
        if result.ok and result.value is not None:
            self._apply(result.value, announce=False)
        else:
            logger.warning("Flag refresh failed, using defaults", extra={"error": str(result.error)})
            self._apply(FlagSet.defaults(), announce=False)
        return result

    async def poll_once(self) -> bool:
        """Fetch a snapshot and apply it only if it differs by value.

        Returns:
            True if the session's flags were replaced.
        """
        result = await self._api.fetch_flags(self._session.build_context())
        if not result.ok or result.value is None:
            logger.warning("Polling error", extra={"error": str(result.error)})
            return False
        if result.value == self._session.flags:
            return False
        self._apply(result.value, announce=True)
        return True

    def handle_message(self, raw: str | bytes) -> bool:
        """Apply a pushed snapshot. Returns False for messages it ignores."""
        try:
            message = FlagsUpdateMessage.model_validate(json.loads(raw))
        except ValueError as e:
            logger.warning("Ignoring malformed channel message", extra={"error": str(e)})
            return False
        self._apply(message.flags, announce=True)
        return True

    # Private methods

    async def _open(self) -> Channel | None:
        self._state = SyncState.CONNECTING
        self.open_attempts += 1
        try:
            channel = await self._open_channel(self._ws_url)
        except Exception as e:
            logger.warning(
                "Flag channel unavailable, falling back to polling",
                extra={"url": self._ws_url, "error": str(e), "error_type": type(e).__name__},
            )
            return None
        self._channel = channel
        self._state = SyncState.CONNECTED
        logger.info("Flag channel connected", extra={"url": self._ws_url})
        return channel

    async def _run_channel(self, channel: Channel | None) -> None:
        while channel is not None:
            await self._consume(channel)
            self._channel = None
            if self._stopping:
                return

            self._state = SyncState.CONNECTING
            logger.info(
                "Flag channel closed, reconnecting",
                extra={"delay_seconds": self._reconnect_delay},
            )
            await asyncio.sleep(self._reconnect_delay)
            channel = await self._open()

        self._start_polling()

    async def _consume(self, channel: Channel) -> None:
        try:
            async for raw in channel:
                self.handle_message(raw)
        except ConnectionClosed as e:
            logger.info("Flag channel dropped", extra={"code": e.rcvd.code if e.rcvd else None})
        except Exception as e:
            logger.warning("Flag channel error", extra={"error": str(e), "error_type": type(e).__name__})

    def _start_polling(self) -> None:
        if self._stopping or self._poll_task is not None:
            return
        self._state = SyncState.POLLING
        logger.warning("Polling for flag updates", extra={"interval_seconds": self._poll_interval})
        self._poll_task = asyncio.create_task(self._poll_loop())

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            await self.poll_once()

    def _apply(self, flags: FlagSet, *, announce: bool) -> None:
        self._session.flags = flags
        state = self._reconciler.apply(flags, self._session.content_type)
        self._session.content_type = state.content_type
        if announce:
            self._reconciler.announce_flags_update(flags)
