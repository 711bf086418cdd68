"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests. Tests control config exclusively through monkeypatch.setenv().
"""

import pytest

import dependencies
from config import get_settings


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Pin the secret and rebuild cached settings-derived singletons per test."""
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    get_settings.cache_clear()
    dependencies.get_nonce_provider.cache_clear()
    yield
    get_settings.cache_clear()
    dependencies.get_nonce_provider.cache_clear()


@pytest.fixture
def broken_bytes():
    """Byte source that behaves like a platform without entropy."""

    def _source(n: int) -> bytes:
        raise OSError("entropy source unavailable")

    return _source
