"""
Configuration Module for the Payshares federation resolver

This module defines the configuration system for the resolver, using Pydantic for
settings validation. A Settings instance is created once by the caller (the command
line entry point, or an embedding application) and passed explicitly into every
resolution call. There is no module level mutable state.

The configuration follows these principles:
1. Environment-based configuration with safe defaults
2. Strong validation and typing through Pydantic
3. Explicit threading of settings into every call, with per-call overrides

Key configuration areas include:
- Transport security (plain http is refused unless explicitly allowed)
- Response size ceilings for payshares.toml and federation responses
- HTTP timeouts for the command line session
- Monitoring and logging
"""

import logging
from typing import Final, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


PAYSHARES_TOML_MAX_SIZE: Final = 100 * 1024
"""Maximum size in bytes of a payshares.toml file."""

FEDERATION_RESPONSE_MAX_SIZE: Final = 100 * 1024
"""Maximum size in bytes of a response from a federation server."""


class Settings(BaseSettings):
    """
    Settings for the federation resolver.

    Values are loaded from environment variables, with defaults that are safe for
    production use. Settings are immutable once created; use ``model_copy(update=...)``
    to derive a variant.
    """

    model_config = SettingsConfigDict(frozen=True)

    debug: bool = False
    """
    Enable verbose logging.
    Set with DEBUG=true environment variable.
    """

    allow_http: bool = False
    """
    Allow connecting to http (non-TLS) servers. This must be false in production.
    Individual calls may override it with their own ``allow_http`` argument.
    Set with ALLOW_HTTP environment variable.
    """

    toml_max_size: int = PAYSHARES_TOML_MAX_SIZE
    """
    Maximum accepted size in bytes of a domain's payshares.toml file.
    Set with TOML_MAX_SIZE environment variable.
    """

    federation_response_max_size: int = FEDERATION_RESPONSE_MAX_SIZE
    """
    Maximum accepted size in bytes of a federation server response.
    Set with FEDERATION_RESPONSE_MAX_SIZE environment variable.
    """

    http_timeout: float = 30.0
    """
    Total timeout in seconds for HTTP requests made by the command line tool.
    Set with HTTP_TIMEOUT environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    @field_validator("toml_max_size", "federation_response_max_size")
    @classmethod
    def validate_max_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("response size limits must be positive")
        return v

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout must be positive")
        return v

    def is_allow_http(self, override: Optional[bool] = None) -> bool:
        """
        Return the effective allow-http flag for a call.

        Args:
            override: Per-call value; takes precedence when not None

        Returns:
            bool: True when plain http connections are permitted
        """
        if override is not None:
            return override
        return self.allow_http
