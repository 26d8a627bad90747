"""Response decoding for the Foo client.

The service runs behind a load balancer, and either of them may answer a
call with its own status code conventions. The status code alone therefore
cannot tell success from failure; the decoded error envelope can.

This is an internal module and should not be imported directly by users.
"""

import json
from typing import Any

import httpx
from pydantic import ValidationError

from foo_client.exceptions import DecodeError
from foo_client.models import APIResult, ErrorEnvelope

__all__ = [
    "decode_response_body",
    "normalize_response",
]


def _parse_json(body: bytes, status_code: int | None = None) -> Any:
    """Parse a JSON body, returning None for an empty one.

    Raises:
        DecodeError: If the body is not valid JSON.
    """
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError as e:
        raise DecodeError(
            message=f"Response body is not valid JSON: {e}",
            status_code=status_code,
            body=body,
            cause=e,
        ) from e


def _envelope_from(data: Any) -> ErrorEnvelope | None:
    """Build an envelope from parsed JSON, or None if it is not an object.

    Decoding is lenient per field: a null or mistyped field is left at its
    default instead of discarding the whole envelope, so ``{"code": 13,
    "message": null}`` still reports code 13.
    """
    if not isinstance(data, dict):
        return None

    # Google APIs wrap the envelope as {"error": {...}}
    inner = data.get("error")
    if isinstance(inner, dict):
        data = inner

    fields = {key: value for key, value in data.items() if value is not None}
    while True:
        try:
            return ErrorEnvelope.model_validate(fields)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err["loc"]}
            if not bad & fields.keys():
                raise
            for key in bad:
                fields.pop(key, None)


def decode_response_body(body: bytes) -> ErrorEnvelope | None:
    """Decode a response body as an error envelope.

    A body that parses but carries no error fields, such as ``{}``, yields
    an empty envelope. Valid JSON that is not an object yields None.
    Neither is an error.

    Args:
        body: The raw response body.

    Returns:
        The decoded envelope, or None if the body is not one.

    Raises:
        DecodeError: If the body is not valid JSON at all.
    """
    return _envelope_from(_parse_json(body))


def normalize_response(response: httpx.Response) -> APIResult:
    """Normalize a received response into an APIResult.

    The body is decoded whatever the status code, so answers from the app
    and from the load balancer end up in the same shape.

    Args:
        response: A response whose body has been read.

    Returns:
        The normalized outcome.

    Raises:
        DecodeError: If the body is not valid JSON.
    """
    data = _parse_json(response.content, status_code=response.status_code)
    return APIResult(
        status_code=response.status_code,
        http_version=response.http_version,
        data=data,
        envelope=_envelope_from(data),
    )
