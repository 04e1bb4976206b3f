"""Billboard client settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the client-side sync agent and local store.

    Environment variables use BILLBOARD_ prefix.
    Example: BILLBOARD_SERVER_URL=http://localhost:3000
    """

    server_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the billboard service",
    )

    api_prefix: str = Field(
        default="/api",
        pattern=r"^/.*$",
        description="API prefix the service mounts its routes under",
    )

    ws_url: str = Field(
        default="ws://localhost:3000/ws",
        description="URL of the realtime flag channel",
    )

    reconnect_delay: float = Field(
        default=3.0,
        ge=0,
        le=300,
        description="Seconds to wait before reopening a dropped channel",
    )

    poll_interval: float = Field(
        default=5.0,
        gt=0,
        le=3600,
        description="Seconds between snapshot requests in polling mode",
    )

    request_timeout: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="HTTP request timeout in seconds",
    )

    storage_path: Path = Field(
        default=Path.home() / ".billboard" / "storage.json",
        description="File backing the client's local storage",
    )

    model_config = SettingsConfigDict(
        env_prefix="BILLBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
