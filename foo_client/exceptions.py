"""Exception hierarchy for the Foo API client.

Every failure the client can produce is classified into one of the types
below, so callers can tell fatal errors from retry candidates and from
failures reported by the service itself.

Exception Hierarchy:
    FooClientError (base)
    ├── SerializationError - Payload could not be encoded as JSON
    ├── MalformedRequestError - Request could not be constructed
    ├── TransportError - Network, TLS or protocol failure
    │   └── ReuseDisconnectError - Connection/stream torn down by the peer
    ├── DecodeError - Response body was not the expected JSON
    └── APIError - Error envelope or non-2xx status from the app or balancer

Example:
    Separating retry candidates from fatal errors::

        try:
            client.foos.create(Foo(id="foo-1"))
        except ReuseDisconnectError:
            # Same request is safe to send again on a fresh connection
            ...
        except APIError as e:
            print(f"API error {e.code}: {e.message}")
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from foo_client.models import ErrorEnvelope


class FooClientError(Exception):
    """Base exception for all Foo client errors.

    Attributes:
        message: Human-readable error description.
        retryable: Whether re-issuing the same request may succeed.
    """

    retryable = False

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class SerializationError(FooClientError):
    """The request payload could not be encoded as JSON.

    This is a programming error on the caller's side and is never retried.

    Attributes:
        payload_type: Name of the type that failed to encode.
        cause: The underlying encoder exception.
    """

    def __init__(
        self,
        message: str,
        payload_type: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.payload_type = payload_type
        self.cause = cause
        super().__init__(message)


class MalformedRequestError(FooClientError):
    """The outbound request could not be constructed.

    Raised for invalid method names, relative paths and URLs that do not
    parse. Indicates a programming error and is never retried.

    Attributes:
        method: The method that was requested.
        path: The path that was requested.
    """

    def __init__(
        self,
        message: str,
        method: str | None = None,
        path: str | None = None,
    ) -> None:
        self.method = method
        self.path = path
        super().__init__(message)


class TransportError(FooClientError):
    """The request failed below the HTTP layer.

    Covers DNS resolution, dial, TLS and protocol failures. The original
    httpx exception is kept in ``cause`` (and chained as ``__cause__``).

    Attributes:
        message: Human-readable error description.
        url: The URL of the failed request.
        cause: The underlying transport exception.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            url: The URL of the failed request.
            cause: The underlying transport exception.
        """
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including URL if available."""
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class ReuseDisconnectError(TransportError):
    """The peer tore down the connection or stream carrying the request.

    Raised for HTTP/2 GOAWAY, stream resets and abrupt connection resets.
    The failure says nothing about the request itself, so the same logical
    request may be sent again on a fresh connection. The client never does
    that on its own; see ``foo_client.retry`` for an opt-in policy.
    """

    retryable = True


class DecodeError(FooClientError):
    """The response body could not be interpreted.

    Raised when the body is not valid JSON at all, or when a successful
    response does not carry the resource shape the operation expects. This
    points at contract drift with the server and is not retried.

    Attributes:
        status_code: HTTP status code of the response, if one was received.
        body: The raw response body.
        cause: The underlying parser exception.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: bytes | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including status code if available."""
        if self.status_code is not None:
            return f"[HTTP {self.status_code}] {self.message}"
        return self.message


class APIError(FooClientError):
    """The app or the load balancer reported a failure.

    Raised when the decoded error envelope is non-empty, whatever the HTTP
    status code was, or when the status code is not 2xx. Whether to retry
    depends on ``code`` and is left to the caller.

    Attributes:
        message: Error message from the envelope (or a generic one).
        status_code: HTTP status code from the response.
        code: Numeric code from the envelope (0 if absent).
        status: Canonical status name from the envelope, if any.
        details: Details list from the envelope.
        envelope: The decoded envelope, or None when the body had none.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        code: int = 0,
        status: str | None = None,
        details: list[Any] | None = None,
        envelope: "ErrorEnvelope | None" = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message from the envelope.
            status_code: HTTP status code from the response.
            code: Numeric code from the envelope.
            status: Canonical status name from the envelope.
            details: Details list from the envelope.
            envelope: The decoded envelope.
        """
        self.status_code = status_code
        self.code = code
        self.status = status
        self.details = details or []
        self.envelope = envelope
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including status and envelope codes."""
        base = f"[HTTP {self.status_code}] {self.message}"
        if self.code:
            base = f"[HTTP {self.status_code}] [code {self.code}] {self.message}"
        return base
