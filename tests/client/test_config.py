"""Unit tests for the Foo client configuration.

This module tests foo_client/config.py:
- ClientSettings defaults and validation
- Immutability
- Loading from FOO_API_* environment variables
"""

import pytest
from pydantic import ValidationError

from foo_client import config
from foo_client.config import (
    BASE_URL,
    DEFAULT_DIAL_TIMEOUT,
    DEFAULT_KEEPALIVE_INTERVAL,
    ClientSettings,
)

ENV_VARS = [
    "FOO_API_BASE_URL",
    "FOO_API_DIAL_TIMEOUT",
    "FOO_API_KEEPALIVE_INTERVAL",
    "FOO_API_HTTP2",
    "FOO_API_PREFER_HTTP2",
    "FOO_API_RETRY_ENABLED",
    "FOO_API_MAX_RETRIES",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FOO_API_* variables and stop .env files from being loaded."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    return monkeypatch


class TestClientSettings:
    """Tests for ClientSettings."""

    def test_defaults(self) -> None:
        """Defaults target the fixed endpoint with Cloud Run timing."""
        settings = ClientSettings()

        assert settings.base_url == BASE_URL == "https://api.foo.com"
        assert settings.dial_timeout == DEFAULT_DIAL_TIMEOUT == 3600.0
        assert settings.keepalive_interval == DEFAULT_KEEPALIVE_INTERVAL == 10.0
        assert settings.prefer_http2 is True
        assert settings.retry_enabled is False
        assert settings.max_retries == 3

    def test_frozen(self) -> None:
        """Settings cannot be changed after construction."""
        settings = ClientSettings()
        with pytest.raises(ValidationError):
            settings.dial_timeout = 1.0

    @pytest.mark.parametrize(
        "fields",
        [{"dial_timeout": 0}, {"keepalive_interval": -1}, {"max_retries": -1}],
    )
    def test_invalid_values(self, fields: dict) -> None:
        """Non-positive timings and negative retries are rejected."""
        with pytest.raises(ValidationError):
            ClientSettings(**fields)


class TestFromEnv:
    """Tests for ClientSettings.from_env."""

    def test_defaults_when_unset(self, clean_env) -> None:
        """With no variables set the defaults apply."""
        assert ClientSettings.from_env() == ClientSettings()

    def test_reads_variables(self, clean_env) -> None:
        """Every setting can be overridden from the environment."""
        clean_env.setenv("FOO_API_BASE_URL", "http://localhost:8080")
        clean_env.setenv("FOO_API_DIAL_TIMEOUT", "30")
        clean_env.setenv("FOO_API_KEEPALIVE_INTERVAL", "5")
        clean_env.setenv("FOO_API_HTTP2", "false")
        clean_env.setenv("FOO_API_RETRY_ENABLED", "true")
        clean_env.setenv("FOO_API_MAX_RETRIES", "5")

        settings = ClientSettings.from_env()

        assert settings == ClientSettings(
            base_url="http://localhost:8080",
            dial_timeout=30.0,
            keepalive_interval=5.0,
            prefer_http2=False,
            retry_enabled=True,
            max_retries=5,
        )

    def test_invalid_variable(self, clean_env) -> None:
        """Unparseable values raise ValidationError."""
        clean_env.setenv("FOO_API_DIAL_TIMEOUT", "forever")

        with pytest.raises(ValidationError):
            ClientSettings.from_env()

    def test_loads_dotenv(self, clean_env) -> None:
        """from_env loads the .env file before reading variables."""
        calls = []

        def fake_load_dotenv() -> bool:
            calls.append(True)
            clean_env.setenv("FOO_API_MAX_RETRIES", "7")
            return True

        clean_env.setattr(config, "load_dotenv", fake_load_dotenv)

        assert ClientSettings.from_env().max_retries == 7
        assert calls == [True]
