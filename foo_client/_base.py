"""Base class for all sub-clients.

Every resource operation runs the same pipeline: build the request, execute
it on the shared HTTPClient, classify transport failures, and normalize the
response into an APIResult whose error envelope decides success or failure.

This is an internal module and should not be imported directly by users.
"""

import logging
from typing import TYPE_CHECKING, Any

import httpx

from foo_client._classify import is_reuse_disconnect
from foo_client._decode import normalize_response
from foo_client.exceptions import APIError, DecodeError, ReuseDisconnectError, TransportError
from foo_client.models import APIResult
from foo_client.retry import call_with_retry

if TYPE_CHECKING:
    from foo_client._http import HTTPClient, HttpMethod
    from foo_client.retry import RetryPolicy

logger = logging.getLogger(__name__)


def _api_error(result: APIResult) -> APIError:
    """Build the APIError describing a failed result."""
    envelope = result.envelope
    if envelope is None:
        return APIError(
            message=f"HTTP {result.status_code} error",
            status_code=result.status_code,
        )
    return APIError(
        message=envelope.message or f"HTTP {result.status_code} error",
        status_code=result.status_code,
        code=envelope.code,
        status=envelope.status or None,
        details=envelope.details,
        envelope=envelope,
    )


class BaseClient:
    """Base class for resource sub-clients.

    Attributes:
        _http: The shared HTTP client for making requests.
        _retry_policy: Retry policy applied to every call, or None.
    """

    def __init__(
        self,
        http_client: "HTTPClient",
        retry_policy: "RetryPolicy | None" = None,
    ) -> None:
        """Initialize the sub-client.

        Args:
            http_client: The shared HTTP client instance.
            retry_policy: Opt-in retry policy; None means never retry.
        """
        self._http = http_client
        self._retry_policy = retry_policy

    def _call_once(self, method: "HttpMethod", path: str, payload: Any = None) -> APIResult:
        """Run one request through the pipeline.

        Raises:
            SerializationError: If the payload cannot be encoded.
            MalformedRequestError: If the request cannot be built.
            ReuseDisconnectError: If the peer tore down the connection or stream.
            TransportError: For any other transport failure.
            DecodeError: If the body cannot be decompressed or is not valid JSON.
            APIError: If the response reports a failure.
        """
        request = self._http.build(method, path, payload)
        url = str(request.url)

        try:
            response = self._http.execute(request)
        except httpx.TransportError as e:
            if is_reuse_disconnect(e):
                logger.warning(f"Peer closed connection during {method} {url}: {e!r}")
                raise ReuseDisconnectError(
                    message=f"Connection or stream closed by peer during {method} {path}",
                    url=url,
                    cause=e,
                ) from e
            raise TransportError(
                message=f"{method} {path} failed: {e}",
                url=url,
                cause=e,
            ) from e
        except httpx.DecodingError as e:
            raise DecodeError(
                message=f"Response body of {method} {path} could not be decoded: {e}",
                cause=e,
            ) from e

        result = normalize_response(response)
        if result.is_failure:
            raise _api_error(result)
        return result

    def _call(self, method: "HttpMethod", path: str, payload: Any = None) -> APIResult:
        """Run a request, retrying per the policy when one is set."""
        if self._retry_policy is None:
            return self._call_once(method, path, payload)
        return call_with_retry(
            self._call_once, method, path, payload, policy=self._retry_policy
        )

    def _get(self, path: str, json: Any = None) -> APIResult:
        """Make a GET request (a body is allowed)."""
        return self._call("GET", path, json)

    def _post(self, path: str, json: Any = None) -> APIResult:
        """Make a POST request."""
        return self._call("POST", path, json)

    def _put(self, path: str, json: Any = None) -> APIResult:
        """Make a PUT request."""
        return self._call("PUT", path, json)

    def _delete(self, path: str, json: Any = None) -> APIResult:
        """Make a DELETE request (a body is allowed)."""
        return self._call("DELETE", path, json)
