"""
Unit tests for payshares.federation.app.config
"""

import pytest
from pydantic import ValidationError

from payshares.federation.app.config import (
    FEDERATION_RESPONSE_MAX_SIZE,
    PAYSHARES_TOML_MAX_SIZE,
    Settings,
)


class TestSettings:
    """Test suite for Settings loading and validation."""

    def test_defaults(self, monkeypatch):
        for name in (
            "ALLOW_HTTP",
            "TOML_MAX_SIZE",
            "FEDERATION_RESPONSE_MAX_SIZE",
            "HTTP_TIMEOUT",
            "SENTRY_DSN",
            "DEBUG",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.allow_http is False
        assert settings.toml_max_size == PAYSHARES_TOML_MAX_SIZE == 102400
        assert settings.federation_response_max_size == FEDERATION_RESPONSE_MAX_SIZE == 102400
        assert settings.sentry_dsn is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("ALLOW_HTTP", "true")
        monkeypatch.setenv("TOML_MAX_SIZE", "2048")

        settings = Settings()

        assert settings.allow_http is True
        assert settings.toml_max_size == 2048

    @pytest.mark.parametrize("field", ["toml_max_size", "federation_response_max_size"])
    def test_size_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(http_timeout=-1)

    def test_settings_are_frozen(self, settings):
        with pytest.raises(ValidationError):
            settings.allow_http = True


class TestIsAllowHttp:
    def test_uses_setting_without_override(self, settings, insecure_settings):
        assert settings.is_allow_http() is False
        assert insecure_settings.is_allow_http() is True

    def test_override_takes_precedence(self, settings, insecure_settings):
        assert settings.is_allow_http(True) is True
        assert insecure_settings.is_allow_http(False) is False
