"""
Shared test configuration and fixtures for federation resolver tests.
"""

import pytest

from payshares.federation.app.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Production-like settings, independent of the test environment."""
    return Settings(allow_http=False, debug=False, sentry_dsn=None)


@pytest.fixture
def insecure_settings() -> Settings:
    """Settings with plain http allowed process wide."""
    return Settings(allow_http=True, debug=False, sentry_dsn=None)
