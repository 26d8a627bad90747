"""Foo resource sub-client for the Foo API.

This module provides FoosClient for the /foos endpoints.

This is an internal module. Import from `foo_client` instead.
"""

from urllib.parse import quote

from pydantic import ValidationError

from foo_client._base import BaseClient
from foo_client.exceptions import DecodeError
from foo_client.models import APIResult, Foo


def _parse_foo(result: APIResult) -> Foo:
    """Parse the Foo carried by a successful result.

    Raises:
        DecodeError: If the body is not a Foo.
    """
    try:
        return Foo.model_validate(result.data)
    except ValidationError as e:
        raise DecodeError(
            message=f"Response body is not a Foo: {e.error_count()} validation error(s)",
            status_code=result.status_code,
            cause=e,
        ) from e


class FoosClient(BaseClient):
    """Synchronous client for the Foo endpoints (/foos).

    Every method either returns a typed result or raises one of the
    classified errors from ``foo_client.exceptions``. A 200 response that
    carries a non-empty error envelope is a failure.

    Example:
        with FooClient() as client:
            foo = client.foos.create(Foo(id="foo-1"))
            foo = client.foos.get("foo-1")
            client.foos.delete("foo-1")
    """

    _BASE_PATH = "/foos"

    def _item_path(self, foo_id: str) -> str:
        return f"{self._BASE_PATH}/{quote(foo_id, safe='')}"

    def create(self, foo: Foo) -> Foo:
        """Create a Foo.

        Args:
            foo: The Foo to create.

        Returns:
            The Foo echoed by the server, or ``foo`` itself when the
            response body does not carry one.

        Raises:
            ReuseDisconnectError: If the connection was torn down; the call
                may be retried.
            APIError: If the app or the load balancer reported a failure.
        """
        result = self._post(self._BASE_PATH, json=foo)
        if isinstance(result.data, dict) and "id" in result.data:
            return _parse_foo(result)
        return foo

    def get(self, foo_id: str) -> Foo:
        """Get a Foo by ID.

        Args:
            foo_id: ID of the Foo.

        Returns:
            The Foo.

        Raises:
            APIError: If the Foo does not exist or the request failed.
            DecodeError: If the response is not a Foo.
        """
        result = self._get(self._item_path(foo_id))
        return _parse_foo(result)

    def update(self, foo: Foo) -> Foo:
        """Replace a Foo.

        Args:
            foo: The new state of the Foo; its ``id`` selects the target.

        Returns:
            The Foo echoed by the server, or ``foo`` itself.

        Raises:
            APIError: If the request failed.
        """
        result = self._put(self._item_path(foo.id), json=foo)
        if isinstance(result.data, dict) and "id" in result.data:
            return _parse_foo(result)
        return foo

    def delete(self, foo_id: str) -> None:
        """Delete a Foo.

        Args:
            foo_id: ID of the Foo.

        Raises:
            APIError: If the request failed.
        """
        self._delete(self._item_path(foo_id))
