"""Unit tests for the opt-in retry policy.

This module tests foo_client/retry.py:

1. _calculate_backoff: exponential growth and cap
2. RetryPolicy.should_retry: which classified errors are retried
3. call_with_retry: the loop, its limits and its logging
"""

import logging

import pytest

from foo_client.exceptions import (
    APIError,
    DecodeError,
    MalformedRequestError,
    ReuseDisconnectError,
    TransportError,
)
from foo_client.models import ErrorEnvelope
from foo_client.retry import (
    DEFAULT_RETRY_BACKOFF_BASE,
    DEFAULT_RETRY_BACKOFF_MAX,
    RetryPolicy,
    _calculate_backoff,
    call_with_retry,
)


class TestCalculateBackoff:
    """Tests for the _calculate_backoff helper function."""

    def test_first_attempt_uses_base(self) -> None:
        """First attempt (0) uses the base delay."""
        assert _calculate_backoff(0) == DEFAULT_RETRY_BACKOFF_BASE

    def test_specific_values(self) -> None:
        """Delay doubles with each attempt until capped."""
        assert _calculate_backoff(0) == 0.5
        assert _calculate_backoff(1) == 1.0
        assert _calculate_backoff(2) == 2.0
        assert _calculate_backoff(5) == 16.0
        assert _calculate_backoff(6) == DEFAULT_RETRY_BACKOFF_MAX

    def test_custom_base_and_max(self) -> None:
        """Custom base and cap are honored."""
        assert _calculate_backoff(2, base=1.0) == 4.0
        assert _calculate_backoff(10, base=1.0, maximum=5.0) == 5.0


class TestShouldRetry:
    """Tests for RetryPolicy.should_retry."""

    def test_reuse_disconnect(self) -> None:
        """Reuse disconnects are always retried."""
        assert RetryPolicy().should_retry(ReuseDisconnectError("goaway")) is True

    @pytest.mark.parametrize(
        "error",
        [
            TransportError("dns"),
            DecodeError("not json"),
            MalformedRequestError("bad method"),
            ValueError("unrelated"),
        ],
    )
    def test_fatal_errors(self, error: Exception) -> None:
        """Other transport, decode and request errors are not retried."""
        assert RetryPolicy().should_retry(error) is False

    def test_unavailable_envelope(self) -> None:
        """Canonical UNAVAILABLE (14) in the envelope is retried."""
        error = APIError("unavailable", status_code=200, code=14, envelope=ErrorEnvelope(code=14))
        assert RetryPolicy().should_retry(error) is True

    def test_503_status_without_envelope_code(self) -> None:
        """Without an envelope code the HTTP status decides."""
        assert RetryPolicy().should_retry(APIError("HTTP 503 error", status_code=503)) is True

    def test_internal_behind_200(self) -> None:
        """Code 13 is not retried by default."""
        assert RetryPolicy().should_retry(APIError("internal", status_code=200, code=13)) is False

    def test_custom_codes(self) -> None:
        """retryable_codes can be customized."""
        policy = RetryPolicy(retryable_codes=frozenset({13}))
        assert policy.should_retry(APIError("internal", status_code=200, code=13)) is True


class TestCallWithRetry:
    """Tests for call_with_retry."""

    def test_returns_first_success(self) -> None:
        """A successful call is returned without sleeping."""
        sleeps: list[float] = []
        assert call_with_retry(lambda x: x * 2, 21, sleep=sleeps.append) == 42
        assert sleeps == []

    def test_retries_until_success(self) -> None:
        """Retryable errors are retried with exponential backoff."""
        outcomes = [ReuseDisconnectError("goaway"), ReuseDisconnectError("reset"), "ok"]
        sleeps: list[float] = []

        def func() -> str:
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        result = call_with_retry(func, policy=RetryPolicy(max_retries=3), sleep=sleeps.append)

        assert result == "ok"
        assert sleeps == [0.5, 1.0]

    def test_raises_last_error_when_exhausted(self) -> None:
        """After max_retries the last error is re-raised."""
        calls = 0

        def func() -> None:
            nonlocal calls
            calls += 1
            raise ReuseDisconnectError(f"attempt {calls}")

        with pytest.raises(ReuseDisconnectError, match="attempt 3"):
            call_with_retry(func, policy=RetryPolicy(max_retries=2), sleep=lambda _: None)

        assert calls == 3

    def test_fatal_error_not_retried(self) -> None:
        """Non-retryable errors propagate immediately."""
        calls = 0

        def func() -> None:
            nonlocal calls
            calls += 1
            raise TransportError("dns")

        with pytest.raises(TransportError):
            call_with_retry(func, sleep=lambda _: None)

        assert calls == 1

    def test_zero_retries(self) -> None:
        """max_retries=0 means a single attempt."""
        def func() -> None:
            raise ReuseDisconnectError("goaway")

        with pytest.raises(ReuseDisconnectError):
            call_with_retry(func, policy=RetryPolicy(max_retries=0), sleep=lambda _: None)

    def test_passes_arguments(self) -> None:
        """Positional and keyword arguments reach the function."""
        def func(a: int, b: int = 0) -> int:
            return a + b

        assert call_with_retry(func, 1, b=2, sleep=lambda _: None) == 3

    def test_logs_retries(self, caplog) -> None:
        """Each retry is logged at INFO."""
        outcomes = [ReuseDisconnectError("goaway"), "ok"]

        def func() -> str:
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        with caplog.at_level(logging.INFO, logger="foo_client.retry"):
            call_with_retry(func, sleep=lambda _: None)

        assert "Retrying after ReuseDisconnectError" in caplog.text


class TestRetryPolicyModel:
    """Tests for RetryPolicy validation."""

    def test_defaults(self) -> None:
        """Defaults match the module constants."""
        policy = RetryPolicy()

        assert policy.max_retries == 3
        assert policy.backoff(0) == DEFAULT_RETRY_BACKOFF_BASE
        assert policy.retryable_codes == frozenset({14, 503})

    def test_negative_retries_rejected(self) -> None:
        """max_retries cannot be negative."""
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)

    def test_frozen(self) -> None:
        """Policies are immutable."""
        policy = RetryPolicy()
        with pytest.raises(ValueError):
            policy.max_retries = 5
