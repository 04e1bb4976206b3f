"""LaunchDarkly flag provider.

The SDK is imported lazily so it is only required when
``FLAGS_PROVIDER=launchdarkly`` (install the ``launchdarkly`` extra).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from billboard_service.core.exceptions import FlagProviderError

if TYPE_CHECKING:
    from billboard_service.features.flags.schemas import EvaluationContext

    from .base import UpdateCallback

logger = logging.getLogger(__name__)


class LaunchDarklyFlagProvider:
    """Adapter over ``ldclient.LDClient``.

    Update notifications come from the SDK's flag tracker, which calls
    listeners on an SDK-owned thread.
    """

    def __init__(self, sdk_key: str, start_wait: float = 5.0, client: Any | None = None) -> None:
        """Create or wrap an SDK client.

        Args:
            sdk_key: Server-side SDK key.
            start_wait: Seconds to block waiting for the SDK to initialize.
            client: Pre-built ``LDClient``; skips SDK construction when given.
        """
        if client is None:
            from ldclient import LDClient
            from ldclient.config import Config

            client = LDClient(config=Config(sdk_key), start_wait=start_wait)
        self._client = client

        if not self._client.is_initialized():
            logger.warning(
                "LaunchDarkly client not initialized, flags will use defaults until it connects",
                extra={"start_wait": start_wait},
            )
        else:
            logger.info("LaunchDarkly client initialized")

    @staticmethod
    def build_context(context: EvaluationContext) -> Any:
        """Translate an evaluation context into an SDK context."""
        from ldclient import Context

        builder = Context.builder(context.key).anonymous(context.anonymous)
        if context.billboard_code is not None:
            builder.set("billboardCode", context.billboard_code)
        return builder.build()

    def evaluate(self, flag_key: str, context: EvaluationContext, default: bool) -> bool:
        try:
            return self._client.variation(flag_key, self.build_context(context), default)
        except Exception as e:
            msg = f"LaunchDarkly evaluation failed: {e}"
            raise FlagProviderError(msg, flag_key=flag_key) from e

    def on_update(self, callback: UpdateCallback) -> None:
        def listener(change: Any) -> None:
            callback(change.key)

        self._client.flag_tracker.add_listener(listener)

    def track(self, event_name: str, context: EvaluationContext) -> None:
        try:
            self._client.track(event_name, self.build_context(context))
        except Exception as e:
            msg = f"LaunchDarkly track failed: {e}"
            raise FlagProviderError(msg) from e

    def close(self) -> None:
        self._client.close()


__all__ = ["LaunchDarklyFlagProvider"]
