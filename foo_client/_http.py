"""Internal HTTP handling for the Foo client.

This module provides the two lowest layers every operation goes through:
- build_request: turns a method, path and payload into an httpx.Request
- HTTPClient: the long-lived, connection-reusing transport all requests
  share

Neither layer interprets failures or retries; see ``foo_client._classify``
and ``foo_client._decode`` for that.

This is an internal module and should not be imported directly by users.
"""

import json
import logging
import re
import socket
from typing import Any, Literal

import httpx
from pydantic import BaseModel

from foo_client.config import BASE_URL, DEFAULT_DIAL_TIMEOUT, DEFAULT_KEEPALIVE_INTERVAL
from foo_client.exceptions import MalformedRequestError, SerializationError

logger = logging.getLogger(__name__)

# HTTP methods used by the sub-clients
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

JSON_CONTENT_TYPE = "application/json"

# RFC 9110 token characters
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def _serialize_payload(payload: Any) -> bytes:
    """Encode a payload as a JSON body.

    Args:
        payload: A pydantic model, a JSON-encodable value, or None.

    Returns:
        The encoded body, empty for a None payload.

    Raises:
        SerializationError: If the payload cannot be encoded.
    """
    if payload is None:
        return b""
    try:
        if isinstance(payload, BaseModel):
            return payload.model_dump_json().encode()
        return json.dumps(payload, allow_nan=False).encode()
    except (TypeError, ValueError) as e:
        raise SerializationError(
            message=f"Cannot encode {type(payload).__name__} payload as JSON: {e}",
            payload_type=type(payload).__name__,
            cause=e,
        ) from e


def build_request(
    method: str,
    path: str,
    payload: Any = None,
    *,
    base_url: str = BASE_URL,
) -> httpx.Request:
    """Build an outbound request against the base endpoint.

    The JSON content type is set on every request, including GET and
    DELETE: the Foo API accepts a body on any method.

    Args:
        method: The HTTP method, case-insensitive.
        path: Absolute path, resolved against base_url.
        payload: Body to encode as JSON, or None for an empty body.
        base_url: The base endpoint.

    Returns:
        A fully built request, ready for HTTPClient.execute.

    Raises:
        SerializationError: If the payload cannot be encoded.
        MalformedRequestError: If the method, path or URL is invalid.
    """
    if not isinstance(method, str) or not _METHOD_RE.fullmatch(method):
        raise MalformedRequestError(
            message=f"Invalid HTTP method: {method!r}",
            method=str(method),
            path=path,
        )
    if not path.startswith("/"):
        raise MalformedRequestError(
            message=f"Path must start with '/': {path!r}",
            method=method,
            path=path,
        )

    try:
        url = httpx.URL(f"{base_url.rstrip('/')}{path}")
    except httpx.InvalidURL as e:
        raise MalformedRequestError(
            message=f"Invalid request URL: {e}",
            method=method,
            path=path,
        ) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise MalformedRequestError(
            message=f"Invalid request URL: {url}",
            method=method,
            path=path,
        )

    body = _serialize_payload(payload)
    return httpx.Request(
        method.upper(),
        url,
        headers={"Content-Type": JSON_CONTENT_TYPE},
        content=body,
    )


def _keepalive_socket_options(interval: float) -> list[tuple[int, int, int]]:
    """Socket options enabling TCP keep-alive probes every ``interval`` seconds."""
    seconds = max(1, int(interval))
    options = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]
    # TCP_KEEPIDLE on Linux, TCP_KEEPALIVE on macOS
    idle = getattr(socket, "TCP_KEEPIDLE", None) or getattr(socket, "TCP_KEEPALIVE", None)
    if idle is not None:
        options.append((socket.IPPROTO_TCP, idle, seconds))
    if hasattr(socket, "TCP_KEEPINTVL"):
        options.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, seconds))
    return options


class HTTPClient:
    """Shared transport for all Foo API requests.

    Wraps one httpx.Client whose pool reuses connections and, when the
    server supports it, multiplexes requests over HTTP/2. Build it once and
    hand it to every sub-client; httpx synchronizes the pool internally, so
    it is safe to use from many threads at once. Its configuration cannot be
    changed after construction.

    Attributes:
        base_url: The base endpoint all paths are resolved against.
        dial_timeout: Maximum time in seconds to establish a connection.
        keepalive_interval: Seconds between TCP keep-alive probes.
        prefer_http2: Whether HTTP/2 is negotiated when available.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        dial_timeout: float = DEFAULT_DIAL_TIMEOUT,
        keepalive_interval: float = DEFAULT_KEEPALIVE_INTERVAL,
        prefer_http2: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: The base endpoint.
            dial_timeout: Maximum time in seconds to establish a connection.
                No other timeout applies to a request.
            keepalive_interval: Seconds between TCP keep-alive probes.
            prefer_http2: Negotiate HTTP/2, falling back to HTTP/1.1.
            transport: Custom transport (e.g., MockTransport for testing).
        """
        self._base_url = base_url.rstrip("/")
        self._dial_timeout = dial_timeout
        self._keepalive_interval = keepalive_interval
        self._prefer_http2 = prefer_http2

        if transport is None:
            transport = httpx.HTTPTransport(
                http2=prefer_http2,
                socket_options=_keepalive_socket_options(keepalive_interval),
            )

        self._client = httpx.Client(
            timeout=httpx.Timeout(None, connect=dial_timeout),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def dial_timeout(self) -> float:
        return self._dial_timeout

    @property
    def keepalive_interval(self) -> float:
        return self._keepalive_interval

    @property
    def prefer_http2(self) -> bool:
        return self._prefer_http2

    def close(self) -> None:
        """Close the HTTP client and release pooled connections."""
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close client."""
        self.close()

    def build(self, method: str, path: str, payload: Any = None) -> httpx.Request:
        """Build a request against this client's base URL.

        See build_request for details.
        """
        return build_request(method, path, payload, base_url=self._base_url)

    def execute(self, request: httpx.Request) -> httpx.Response:
        """Send a built request and read the full response.

        Blocks until the response body has been received or the transport
        fails. Opens a new connection or reuses a pooled one; never retries.

        Args:
            request: A request produced by build_request.

        Returns:
            The response, with its body already read.

        Raises:
            httpx.TransportError: Any DNS, dial, TLS or protocol failure,
                unchanged, for the caller to classify.
            httpx.DecodingError: If the body fails its Content-Encoding.
        """
        logger.debug(f"Sending {request.method} {request.url}")
        response = self._client.send(request)
        logger.debug(
            f"{request.method} {request.url} -> {response.status_code} "
            f"({response.http_version})"
        )
        return response
