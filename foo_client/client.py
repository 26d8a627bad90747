"""Main Foo client class.

FooClient owns the single HTTPClient that every sub-client shares and
exposes the resource operations as namespaced sub-clients.

Example:
    Basic usage::

        from foo_client import Foo, FooClient

        with FooClient() as client:
            client.foos.create(Foo(id="foo-1"))
"""

from typing import Any

import httpx

from foo_client._foos import FoosClient
from foo_client._http import HTTPClient
from foo_client.config import ClientSettings
from foo_client.retry import RetryPolicy


class FooClient:
    """Synchronous client for the Foo API.

    Builds one HTTPClient at construction and passes it to every sub-client.
    The instance can be shared between threads.

    Attributes:
        settings: The immutable settings the client was built from.

    Example:
        Loading settings from the environment::

            client = FooClient.from_env()
            try:
                client.foos.create(Foo(id="foo-1"))
            finally:
                client.close()
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the Foo client.

        Args:
            settings: Client settings (default: ClientSettings()).
            transport: Custom HTTP transport (e.g., MockTransport for testing).
        """
        self._settings = settings or ClientSettings()

        # Create the shared HTTP client
        self._http = HTTPClient(
            base_url=self._settings.base_url,
            dial_timeout=self._settings.dial_timeout,
            keepalive_interval=self._settings.keepalive_interval,
            prefer_http2=self._settings.prefer_http2,
            transport=transport,
        )

        self._retry_policy: RetryPolicy | None = None
        if self._settings.retry_enabled:
            self._retry_policy = RetryPolicy(max_retries=self._settings.max_retries)

        self._foos: FoosClient | None = None

    @classmethod
    def from_env(cls, transport: httpx.BaseTransport | None = None) -> "FooClient":
        """Create a client from ``FOO_API_*`` environment variables.

        Args:
            transport: Custom HTTP transport.

        Returns:
            A new client.
        """
        return cls(settings=ClientSettings.from_env(), transport=transport)

    def __enter__(self) -> "FooClient":
        """Enter context manager.

        Returns:
            The client instance.
        """
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close the client."""
        self.close()

    def close(self) -> None:
        """Close the client and release pooled connections."""
        self._http.close()

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def foos(self) -> FoosClient:
        """Access Foo resource operations.

        Returns:
            The FoosClient sub-client.
        """
        if self._foos is None:
            self._foos = FoosClient(self._http, retry_policy=self._retry_policy)
        return self._foos
