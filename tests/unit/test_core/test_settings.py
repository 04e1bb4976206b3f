"""Unit tests for the modular settings models."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from billboard_service.core.settings import (
    AppSettings,
    ClientSettings,
    FlagSettings,
    LoggingSettings,
    WebSocketSettings,
    clear_all_caches,
    get_app_settings,
    get_flag_settings,
)


@pytest.mark.unit
class TestAppSettings:
    """Test suite for AppSettings."""

    def test_defaults(self):
        settings = AppSettings()

        assert settings.service_name == "billboard-service"
        assert settings.environment == "test"  # From env var in conftest
        assert settings.api_prefix == "/api"
        assert settings.port == 3000

    def test_frozen(self):
        settings = AppSettings()

        with pytest.raises(ValidationError):
            settings.port = 8000

    def test_disable_docs_hides_urls(self, monkeypatch):
        monkeypatch.setenv("APP_DISABLE_DOCS", "true")

        settings = AppSettings()

        assert settings.get_docs_url() is None
        assert settings.get_openapi_url() is None

    def test_loader_caches_until_cleared(self, monkeypatch):
        first = get_app_settings()
        assert get_app_settings() is first

        monkeypatch.setenv("APP_PORT", "4000")
        clear_all_caches()

        assert get_app_settings().port == 4000


@pytest.mark.unit
class TestLoggingSettings:
    """Test suite for LoggingSettings."""

    def test_json_flag_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_JSON", "true")

        assert LoggingSettings().json_logs is True

    def test_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert LoggingSettings().level == "DEBUG"

    def test_file_path_ignored_when_file_logging_disabled(self):
        settings = LoggingSettings(file_enabled=False, file_path=Path("x.log"))

        assert settings.effective_file_path is None
        assert settings.to_logging_kwargs()["file_path"] is None

    def test_logging_kwargs_fall_back_to_root_level(self):
        kwargs = LoggingSettings(level="WARNING").to_logging_kwargs()

        assert kwargs["log_level"] == "WARNING"
        assert kwargs["console_level"] == "WARNING"
        assert kwargs["file_level"] == "WARNING"


@pytest.mark.unit
class TestFlagSettings:
    """Test suite for FlagSettings."""

    def test_memory_provider_by_default(self):
        settings = get_flag_settings()

        assert settings.provider == "memory"
        assert settings.admin_enabled is True

    def test_initial_values_parsed_from_json(self, monkeypatch):
        monkeypatch.setenv("FLAGS_INITIAL_VALUES", '{"enable-image-uploads": true}')

        assert FlagSettings().initial_values == {"enable-image-uploads": True}

    def test_launchdarkly_requires_sdk_key(self):
        with pytest.raises(ValidationError, match="FLAGS_SDK_KEY"):
            FlagSettings(provider="launchdarkly")

    def test_sdk_key_is_secret(self):
        settings = FlagSettings(provider="launchdarkly", sdk_key="sdk-123")

        assert "sdk-123" not in repr(settings)
        assert settings.sdk_key.get_secret_value() == "sdk-123"


@pytest.mark.unit
class TestClientAndWebSocketSettings:
    def test_client_timing_defaults(self):
        settings = ClientSettings()

        assert settings.reconnect_delay == 3.0
        assert settings.poll_interval == 5.0

    def test_poll_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            ClientSettings(poll_interval=0)

    def test_websocket_defaults(self):
        settings = WebSocketSettings()

        assert settings.enabled is True
        assert settings.path == "/ws"
        assert settings.send_timeout == 0.0
