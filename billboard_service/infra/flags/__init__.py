"""Flag provider adapters.

Usage:
    from billboard_service.infra.flags import create_flag_provider

    provider = create_flag_provider()
    provider.evaluate("theme-selection", EvaluationContext.default(), False)
"""

from __future__ import annotations

from .base import FlagProvider, UpdateCallback, WritableFlagProvider
from .factory import create_flag_provider
from .launchdarkly import LaunchDarklyFlagProvider
from .memory import InMemoryFlagProvider

__all__ = [
    "FlagProvider",
    "InMemoryFlagProvider",
    "LaunchDarklyFlagProvider",
    "UpdateCallback",
    "WritableFlagProvider",
    "create_flag_provider",
]
