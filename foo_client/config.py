"""Configuration for the Foo client.

Settings are an immutable pydantic model so that one instance can be shared
by every thread using the client. ``ClientSettings.from_env`` reads them
from the environment, loading a ``.env`` file first if one exists.

Environment variables:
    FOO_API_BASE_URL: Base endpoint (default: https://api.foo.com).
    FOO_API_DIAL_TIMEOUT: Connection establishment timeout in seconds.
    FOO_API_KEEPALIVE_INTERVAL: TCP keep-alive probe interval in seconds.
    FOO_API_HTTP2: Whether to negotiate HTTP/2 ("true"/"false").
    FOO_API_RETRY_ENABLED: Whether to retry reuse disconnects ("true"/"false").
    FOO_API_MAX_RETRIES: Maximum retry attempts when retry is enabled.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# Fixed base endpoint of the Foo API
BASE_URL = "https://api.foo.com"

# Cloud Run's maximum request timeout; a dial that takes longer can never succeed
DEFAULT_DIAL_TIMEOUT = 60 * 60.0  # seconds

DEFAULT_KEEPALIVE_INTERVAL = 10.0  # seconds

_ENV_PREFIX = "FOO_API_"


class ClientSettings(BaseModel):
    """Immutable settings for the Foo client.

    Attributes:
        base_url: The base endpoint all paths are resolved against.
        dial_timeout: Maximum time in seconds to establish a connection.
        keepalive_interval: Seconds between keep-alive probes on idle
            connections.
        prefer_http2: Negotiate HTTP/2 when the server supports it.
        retry_enabled: Retry reuse disconnects and retryable envelopes.
        max_retries: Maximum number of retry attempts.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(BASE_URL, description="Base endpoint")
    dial_timeout: float = Field(DEFAULT_DIAL_TIMEOUT, gt=0, description="Dial timeout in seconds")
    keepalive_interval: float = Field(
        DEFAULT_KEEPALIVE_INTERVAL, gt=0, description="Keep-alive probe interval in seconds"
    )
    prefer_http2: bool = Field(True, description="Attempt HTTP/2 negotiation")
    retry_enabled: bool = Field(False, description="Enable the retry policy")
    max_retries: int = Field(3, ge=0, description="Maximum retry attempts")

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Build settings from ``FOO_API_*`` environment variables.

        Unset variables keep their defaults.

        Returns:
            The loaded settings.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        load_dotenv()
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{_ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        # prefer_http2 is exposed as FOO_API_HTTP2
        http2 = os.environ.get(f"{_ENV_PREFIX}HTTP2")
        if http2 is not None:
            values["prefer_http2"] = http2
        return cls.model_validate(values)
