"""Modular Pydantic Settings v2 configuration.

One frozen settings model per concern, each with its own environment prefix:

- APP_        application identity, API prefix, bind address
- LOG_        logging
- WS_         realtime relay
- FLAGS_      flag provider selection and credentials
- BILLBOARD_  client sync agent and local store

Import settings via cached loaders:
    from billboard_service.core.settings import get_app_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .client import ClientSettings
from .flags import FlagSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_client_settings,
    get_flag_settings,
    get_logging_settings,
    get_websocket_settings,
)
from .logs import LoggingSettings
from .websocket import WebSocketSettings

__all__ = [
    "AppSettings",
    "ClientSettings",
    "FlagSettings",
    "LoggingSettings",
    "WebSocketSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_client_settings",
    "get_flag_settings",
    "get_logging_settings",
    "get_websocket_settings",
]
