"""Provider selection from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .memory import InMemoryFlagProvider

if TYPE_CHECKING:
    from billboard_service.core.settings.flags import FlagSettings

    from .base import FlagProvider

logger = logging.getLogger(__name__)


def create_flag_provider(settings: FlagSettings | None = None) -> FlagProvider:
    """Build the provider named by ``settings.provider``.

    Args:
        settings: Flag settings. Loaded via get_flag_settings() when omitted.
    """
    if settings is None:
        from billboard_service.core.settings import get_flag_settings

        settings = get_flag_settings()

    if settings.provider == "launchdarkly":
        from .launchdarkly import LaunchDarklyFlagProvider

        # FlagSettings guarantees the key is present for this provider
        sdk_key = settings.sdk_key.get_secret_value() if settings.sdk_key else ""
        logger.info("Using LaunchDarkly flag provider")
        return LaunchDarklyFlagProvider(sdk_key, start_wait=settings.start_wait)

    logger.info(
        "Using in-memory flag provider",
        extra={"seeded_flags": sorted(settings.initial_values)},
    )
    return InMemoryFlagProvider(settings.initial_values)


__all__ = ["create_flag_provider"]
