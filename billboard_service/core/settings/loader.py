"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from billboard_service.core.settings.loader import get_app_settings

    settings = get_app_settings()  # First call: loads and validates
    settings = get_app_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    clear_all_caches()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .client import ClientSettings
from .flags import FlagSettings
from .logs import LoggingSettings
from .websocket import WebSocketSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_websocket_settings() -> WebSocketSettings:
    """Get cached WebSocket settings.

    Returns:
        Validated and frozen WebSocketSettings instance.
    """
    return WebSocketSettings()


@lru_cache(maxsize=1)
def get_flag_settings() -> FlagSettings:
    """Get cached flag provider settings.

    Returns:
        Validated and frozen FlagSettings instance.
    """
    return FlagSettings()


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    """Get cached client settings.

    Returns:
        Validated and frozen ClientSettings instance.
    """
    return ClientSettings()


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when you need to force reload settings.
    In production, prefer process restarts over cache clearing.
    """
    get_app_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_websocket_settings.cache_clear()
    get_flag_settings.cache_clear()
    get_client_settings.cache_clear()
