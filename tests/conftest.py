"""Pytest configuration for all tests."""

import pytest
import structlog

from templatesync.core.config import get_settings


@pytest.fixture(autouse=True)
def _isolate_settings_and_logging(monkeypatch):
    """Give every test fresh settings and an empty logging context."""
    for name in ("TEMPLATESYNC_API_KEY", "TEMPLATESYNC_ENVIRONMENT", "TEMPLATESYNC_STRICT_DELETE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
    yield
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
    # CLI tests point structlog at a captured stderr that is closed afterwards
    structlog.reset_defaults()
