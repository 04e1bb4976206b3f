"""Feature flag provider settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderKind = Literal["memory", "launchdarkly"]


class FlagSettings(BaseSettings):
    """Flag provider selection and credentials.

    Environment variables use FLAGS_ prefix.
    Example: FLAGS_PROVIDER=launchdarkly, FLAGS_SDK_KEY=sdk-xxxx
    """

    provider: ProviderKind = Field(
        default="memory",
        description="Flag evaluation backend (memory|launchdarkly)",
    )

    sdk_key: SecretStr | None = Field(
        default=None,
        description="LaunchDarkly server-side SDK key",
    )

    initial_values: dict[str, bool] = Field(
        default_factory=dict,
        description="Seed values for the in-memory provider (JSON object)",
    )

    start_wait: float = Field(
        default=5.0,
        ge=0,
        le=60,
        description="Seconds to wait for the remote provider to initialize",
    )

    admin_enabled: bool = Field(
        default=True,
        description="Allow flag writes through the HTTP API on writable providers",
    )

    model_config = SettingsConfigDict(
        env_prefix="FLAGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def require_sdk_key(self) -> FlagSettings:
        """A remote provider cannot start without credentials."""
        if self.provider == "launchdarkly" and self.sdk_key is None:
            msg = "FLAGS_SDK_KEY is required when FLAGS_PROVIDER=launchdarkly"
            raise ValueError(msg)
        return self
