"""Wire models for the Foo API client.

Defines the error envelope shared by the application and the load balancer,
the canonical per-call outcome, and the Foo resource itself.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "APIResult",
    "ErrorEnvelope",
    "ErrorItem",
    "Foo",
]


class ErrorItem(BaseModel):
    """One entry of the legacy ``errors`` list in a Google-style error.

    Attributes:
        reason: Machine-readable reason, e.g. "backendError".
        message: Human-readable message for this entry.
    """

    model_config = ConfigDict(extra="ignore")

    reason: str = ""
    message: str = ""


class ErrorEnvelope(BaseModel):
    """Structured error body (Google API error mapping).

    Both the service and the load balancer in front of it answer with this
    shape. Every field is optional. Only ``code``, ``message`` and ``errors``
    report an error: a resource body that happens to carry a ``status`` or
    ``details`` field still decodes to an empty envelope, which means "no
    error".

    See https://cloud.google.com/apis/design/errors#error_mapping

    Attributes:
        code: Numeric error code (HTTP or canonical RPC code).
        message: Developer-facing error message.
        status: Canonical status name, e.g. "UNAVAILABLE".
        details: Additional error details.
        errors: Legacy per-error entries.
    """

    model_config = ConfigDict(extra="ignore")

    code: int = Field(0, description="Numeric error code")
    message: str = Field("", description="Error message")
    status: str = Field("", description="Canonical status name")
    details: list[Any] = Field(default_factory=list, description="Error details")
    errors: list[ErrorItem] = Field(default_factory=list, description="Legacy error entries")

    @field_validator("details", mode="before")
    @classmethod
    def _details_as_list(cls, value: Any) -> Any:
        """Accept a single detail object or string in place of a list."""
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]

    @property
    def is_empty(self) -> bool:
        """Whether the envelope reports no error.

        ``status`` and ``details`` only qualify an error, so on their own
        they do not make the envelope non-empty.
        """
        return not (self.code or self.message or self.errors)


class APIResult(BaseModel):
    """Normalized outcome of one received response.

    Produced for every response, whichever layer sent it, so operation
    methods interpret app and load-balancer answers the same way.

    Attributes:
        status_code: HTTP status code.
        http_version: Negotiated protocol, e.g. "HTTP/2" or "HTTP/1.1".
        data: Parsed JSON body, or None for an empty body.
        envelope: Decoded error envelope, or None if the body was not one.
    """

    status_code: int
    http_version: str = "HTTP/1.1"
    data: Any = None
    envelope: ErrorEnvelope | None = None

    @property
    def is_failure(self) -> bool:
        """Whether the response reports a failure.

        A non-empty envelope is authoritative even on a 2xx status, since
        the load balancer can mask a failure behind 200.
        """
        if self.envelope is not None and not self.envelope.is_empty:
            return True
        return not 200 <= self.status_code < 300


class Foo(BaseModel):
    """The Foo resource.

    Fields beyond ``id`` are kept as-is so that whatever the API defines
    survives a round trip through the client.

    Attributes:
        id: Unique identifier of the Foo.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Unique identifier")
