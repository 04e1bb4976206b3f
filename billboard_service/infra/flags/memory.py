"""In-process flag provider.

Holds flag values in a dict seeded from settings. Used in development, in
tests, and whenever no remote provider is configured.
"""

from __future__ import annotations

from collections import deque
import logging
import threading
from typing import TYPE_CHECKING

from billboard_service.core.exceptions import FlagProviderError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from billboard_service.features.flags.schemas import EvaluationContext

    from .base import UpdateCallback

logger = logging.getLogger(__name__)


class InMemoryFlagProvider:
    """Writable provider backed by a dict.

    Values are global: every context sees the same value. Listeners are
    notified only when ``set_flag`` actually changes a value.

    Example:
        provider = InMemoryFlagProvider({"theme-selection": True})
        provider.on_update(lambda key: print("changed", key))
        provider.set_flag("enable-image-uploads", True)
    """

    def __init__(self, initial_values: Mapping[str, bool] | None = None, max_events: int = 1000) -> None:
        self._values: dict[str, bool] = dict(initial_values or {})
        self._listeners: list[UpdateCallback] = []
        self._lock = threading.Lock()
        self._closed = False
        self.events: deque[tuple[str, EvaluationContext]] = deque(maxlen=max_events)

    def evaluate(self, flag_key: str, context: EvaluationContext, default: bool) -> bool:
        if self._closed:
            msg = "Provider is closed"
            raise FlagProviderError(msg, flag_key=flag_key)
        with self._lock:
            return self._values.get(flag_key, default)

    def on_update(self, callback: UpdateCallback) -> None:
        with self._lock:
            self._listeners.append(callback)

    def track(self, event_name: str, context: EvaluationContext) -> None:
        if self._closed:
            msg = "Provider is closed"
            raise FlagProviderError(msg)
        self.events.append((event_name, context))
        logger.debug("Tracked event", extra={"event_name": event_name, "context_key": context.key})

    def set_flag(self, flag_key: str, value: bool) -> bool:
        with self._lock:
            if self._values.get(flag_key) is value:
                return False
            self._values[flag_key] = value
            listeners = list(self._listeners)

        logger.info("Flag value changed", extra={"flag": flag_key, "value": value})
        for listener in listeners:
            try:
                listener(flag_key)
            except Exception:
                logger.exception("Flag update listener failed", extra={"flag": flag_key})
        return True

    def values(self) -> dict[str, bool]:
        with self._lock:
            return dict(self._values)

    def close(self) -> None:
        with self._lock:
            self._listeners.clear()
        self._closed = True


__all__ = ["InMemoryFlagProvider"]
