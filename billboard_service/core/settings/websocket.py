"""WebSocket configuration settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebSocketSettings(BaseSettings):
    """Realtime relay settings.

    Environment variables use WS_ prefix.
    Example: WS_MAX_CONNECTIONS=500
    """

    enabled: bool = Field(
        default=True,
        description="Enable the realtime flag channel",
    )

    path: str = Field(
        default="/ws",
        pattern=r"^/.*$",
        description="Mount path of the realtime router",
    )

    max_connections: int = Field(
        default=10000,
        ge=1,
        le=100000,
        description="Maximum concurrent channels per instance",
    )

    send_timeout: float = Field(
        default=0.0,
        ge=0,
        le=60,
        description="Per-channel send timeout in seconds during a broadcast (0 to disable)",
    )

    model_config = SettingsConfigDict(
        env_prefix="WS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
