"""
Tests for retry logic and circuit breaker.
"""

import pytest
import time
from resumatch.retry import (
    exponential_backoff,
    CircuitBreaker,
    CircuitOpenError,
    should_retry_http_status,
    RetryError,
)


class TestExponentialBackoff:
    """Test exponential backoff decorator."""

    def test_success_on_first_try(self):
        call_count = [0]

        @exponential_backoff(max_retries=3, base_delay=0.01)
        def succeeds():
            call_count[0] += 1
            return "success"

        assert succeeds() == "success"
        assert call_count[0] == 1

    def test_retry_then_succeed(self):
        call_count = [0]

        @exponential_backoff(max_retries=3, base_delay=0.01)
        def fails_twice():
            call_count[0] += 1
            if call_count[0] < 3:
                raise ConnectionError("Temporary failure")
            return "success"

        assert fails_twice() == "success"
        assert call_count[0] == 3

    def test_all_retries_exhausted(self):
        call_count = [0]

        @exponential_backoff(max_retries=2, base_delay=0.01)
        def always_fails():
            call_count[0] += 1
            raise ValueError("Always fails")

        with pytest.raises(RetryError) as exc_info:
            always_fails()

        assert call_count[0] == 3  # Initial + 2 retries
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_zero_retries(self):
        @exponential_backoff(max_retries=0, base_delay=0.01)
        def always_fails():
            raise ConnectionError("down")

        with pytest.raises(RetryError):
            always_fails()

    def test_only_catches_specified_exceptions(self):
        call_count = [0]

        @exponential_backoff(max_retries=3, base_delay=0.01, exceptions=(ConnectionError,))
        def raises_value_error():
            call_count[0] += 1
            raise ValueError("Not retryable")

        with pytest.raises(ValueError):
            raises_value_error()

        assert call_count[0] == 1

    def test_exponential_delay_with_cap(self):
        delays = []

        @exponential_backoff(
            max_retries=4,
            base_delay=0.01,
            max_delay=0.03,
            exponential_base=2.0,
            on_retry=lambda attempt, exc, delay: delays.append((attempt, delay)),
        )
        def always_fails():
            raise ConnectionError("Test")

        with pytest.raises(RetryError):
            always_fails()

        assert delays == [(1, 0.01), (2, 0.02), (3, 0.03), (4, 0.03)]


class TestCircuitBreaker:
    """Test circuit breaker pattern."""

    @staticmethod
    def _fail():
        raise ConnectionError("Test failure")

    def test_closed_state_allows_calls(self):
        breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=1)

        assert breaker.call(lambda: "success") == "success"
        assert breaker.state == CircuitBreaker.CLOSED

    def test_opens_after_threshold(self):
        breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=60)

        for _ in range(3):
            with pytest.raises(ConnectionError):
                breaker.call(self._fail)

        assert breaker.state == CircuitBreaker.OPEN

        with pytest.raises(CircuitOpenError, match="Circuit breaker is OPEN"):
            breaker.call(self._fail)

    def test_half_open_failure_reopens(self):
        breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=0.1)

        for _ in range(2):
            with pytest.raises(ConnectionError):
                breaker.call(self._fail)

        time.sleep(0.15)

        with pytest.raises(ConnectionError):
            breaker.call(self._fail)
        assert breaker.state == CircuitBreaker.OPEN

    def test_closes_on_success_in_half_open(self):
        breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=0.1)

        for _ in range(2):
            with pytest.raises(ConnectionError):
                breaker.call(self._fail)

        time.sleep(0.15)

        assert breaker.call(lambda: "success") == "success"
        assert breaker.state == CircuitBreaker.CLOSED
        assert breaker.failure_count == 0

    def test_manual_reset(self):
        breaker = CircuitBreaker(failure_threshold=1)

        with pytest.raises(ConnectionError):
            breaker.call(self._fail)
        assert breaker.state == CircuitBreaker.OPEN

        breaker.reset()
        assert breaker.state == CircuitBreaker.CLOSED
        assert breaker.failure_count == 0


class TestHttpStatus:
    def test_http_status_retry_logic(self):
        for status in (408, 429, 500, 502, 503, 504):
            assert should_retry_http_status(status)
        for status in (200, 400, 401, 403, 404):
            assert not should_retry_http_status(status)
