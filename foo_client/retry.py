"""Opt-in retry policy layered on top of the Foo client.

The client itself never retries. It only classifies failures:
ReuseDisconnectError for connections or streams torn down by the peer, and
APIError for failures reported in an error envelope. This module turns that
classification into a retry loop with exponential backoff for callers that
want one.

Example:
    Retrying a single call::

        from foo_client.retry import RetryPolicy, call_with_retry

        policy = RetryPolicy(max_retries=5)
        foo = call_with_retry(client.foos.create, Foo(id="foo-1"), policy=policy)
"""

import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from foo_client.exceptions import APIError, FooClientError, ReuseDisconnectError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default backoff settings for retry logic
DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds

# Envelope codes worth retrying: canonical UNAVAILABLE and HTTP 503
RETRYABLE_ENVELOPE_CODES = frozenset({14, 503})


def _calculate_backoff(
    attempt: int,
    base: float = DEFAULT_RETRY_BACKOFF_BASE,
    maximum: float = DEFAULT_RETRY_BACKOFF_MAX,
) -> float:
    """Calculate exponential backoff delay for retry attempts.

    Uses base * 2^attempt, capped at ``maximum`` seconds.

    Args:
        attempt: The retry attempt number (0-indexed).
        base: Base delay in seconds.
        maximum: Upper bound on the delay in seconds.

    Returns:
        The delay in seconds before the next retry.
    """
    delay = base * (2 ** attempt)
    return min(delay, maximum)


class RetryPolicy(BaseModel):
    """When and how often to re-issue a failed call.

    Attributes:
        max_retries: Maximum number of retries after the first attempt.
        backoff_base: Delay before the first retry, in seconds.
        backoff_max: Upper bound on any delay, in seconds.
        retryable_codes: Envelope (or, lacking one, HTTP status) codes that
            make an APIError retryable.
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(3, ge=0)
    backoff_base: float = Field(DEFAULT_RETRY_BACKOFF_BASE, ge=0)
    backoff_max: float = Field(DEFAULT_RETRY_BACKOFF_MAX, ge=0)
    retryable_codes: frozenset[int] = RETRYABLE_ENVELOPE_CODES

    def should_retry(self, exc: BaseException) -> bool:
        """Whether a failed call may be retried.

        Args:
            exc: The exception the call raised.

        Returns:
            True for reuse disconnects and for API errors whose code is
            in retryable_codes.
        """
        if isinstance(exc, ReuseDisconnectError):
            return True
        if isinstance(exc, APIError):
            code = exc.code or exc.status_code
            return code in self.retryable_codes
        return False

    def backoff(self, attempt: int) -> float:
        """Delay in seconds before retry number ``attempt`` (0-indexed)."""
        return _calculate_backoff(attempt, self.backoff_base, self.backoff_max)


def call_with_retry(
    func: Callable[..., T],
    *args: Any,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> T:
    """Call ``func`` and retry it as long as the policy allows.

    Every attempt is a complete new call, so each one builds a fresh request
    and may land on a fresh connection.

    Args:
        func: The operation to call.
        *args: Positional arguments for func.
        policy: The retry policy (default: RetryPolicy()).
        sleep: Function used to wait between attempts.
        **kwargs: Keyword arguments for func.

    Returns:
        Whatever func returns on its first successful attempt.

    Raises:
        FooClientError: The last error, once retries are exhausted or the
            error is not retryable.
    """
    policy = policy or RetryPolicy()

    for attempt in range(policy.max_retries + 1):
        try:
            return func(*args, **kwargs)
        except FooClientError as e:
            if attempt >= policy.max_retries or not policy.should_retry(e):
                raise
            delay = policy.backoff(attempt)
            logger.info(
                f"Retrying after {type(e).__name__}: {e} "
                f"(retry {attempt + 1}/{policy.max_retries} in {delay:.2f}s)"
            )
            sleep(delay)

    # Should not reach here
    raise RuntimeError("Unexpected error in retry loop")
