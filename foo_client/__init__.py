"""Foo API Client Library.

This package provides a Python client for the Foo REST API, which runs on
Cloud Run behind a load balancer. Responses can come from either of them and
pooled connections can be dropped at any time, so the client focuses on
classifying every failure precisely:

- transport failures where the peer tore down the connection or the HTTP/2
  stream (retryable) versus any other transport failure,
- failures reported in an error envelope, even behind a 200 status,
- fatal request construction and decoding errors.

Example:
    Synchronous usage::

        from foo_client import Foo, FooClient, ReuseDisconnectError

        with FooClient() as client:
            try:
                client.foos.create(Foo(id="foo-1"))
            except ReuseDisconnectError:
                ...  # safe to send again

Exports:
    FooClient: Client for the Foo REST API.
    ClientSettings: Immutable client configuration.
    RetryPolicy, call_with_retry: Opt-in retry on top of classification.

    Exceptions:
        FooClientError: Base exception for all client errors.
        SerializationError: Payload could not be encoded.
        MalformedRequestError: Request could not be built.
        TransportError: Network, TLS or protocol failure.
        ReuseDisconnectError: Connection or stream closed by the peer.
        DecodeError: Response body was not the expected JSON.
        APIError: The app or load balancer reported a failure.
"""

from foo_client._classify import is_reuse_disconnect, register_reuse_disconnect_shape
from foo_client._decode import decode_response_body, normalize_response
from foo_client._foos import FoosClient
from foo_client._http import HTTPClient, build_request
from foo_client.client import FooClient
from foo_client.config import BASE_URL, ClientSettings
from foo_client.exceptions import (
    APIError,
    DecodeError,
    FooClientError,
    MalformedRequestError,
    ReuseDisconnectError,
    SerializationError,
    TransportError,
)
from foo_client.models import APIResult, ErrorEnvelope, ErrorItem, Foo
from foo_client.retry import RetryPolicy, call_with_retry

__all__ = [
    # Main client
    "FooClient",
    "FoosClient",
    "ClientSettings",
    "BASE_URL",
    # Core pipeline
    "HTTPClient",
    "build_request",
    "is_reuse_disconnect",
    "register_reuse_disconnect_shape",
    "decode_response_body",
    "normalize_response",
    # Retry
    "RetryPolicy",
    "call_with_retry",
    # Models
    "APIResult",
    "ErrorEnvelope",
    "ErrorItem",
    "Foo",
    # Exceptions
    "FooClientError",
    "SerializationError",
    "MalformedRequestError",
    "TransportError",
    "ReuseDisconnectError",
    "DecodeError",
    "APIError",
]
