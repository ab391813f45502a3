"""Tests for the producer circuit breaker."""

import time

import pytest

from quickstream.core.circuit_breaker import CircuitBreaker, CircuitBreakerState


class TestCircuitBreaker:
    """Test suite for CircuitBreaker class."""

    def test_starts_closed(self):
        cb = CircuitBreaker()
        assert cb.state == CircuitBreakerState.Closed
        assert cb.failure_count == 0
        assert cb.can_execute() is True

    def test_stays_closed_below_threshold(self):
        cb = CircuitBreaker(failure_threshold=3)
        cb.record_failure()
        cb.record_failure()
        assert cb.state == CircuitBreakerState.Closed
        assert cb.can_execute() is True

    def test_opens_at_threshold_and_blocks_calls(self):
        cb = CircuitBreaker(failure_threshold=2)
        cb.record_failure()
        cb.record_failure()
        assert cb.state == CircuitBreakerState.Open
        assert cb.can_execute() is False

    def test_success_resets(self):
        cb = CircuitBreaker(failure_threshold=3)
        cb.record_failure()
        cb.record_success()
        assert cb.failure_count == 0
        assert cb.state == CircuitBreakerState.Closed

    def test_half_open_after_recovery_timeout(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0.05)
        cb.record_failure()
        assert cb.can_execute() is False

        time.sleep(0.08)

        assert cb.can_execute() is True
        assert cb.state == CircuitBreakerState.HalfOpen

    def test_failure_while_half_open_reopens(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0.05)
        cb.record_failure()
        time.sleep(0.08)
        cb.can_execute()

        cb.record_failure()
        assert cb.state == CircuitBreakerState.Open
        assert cb.failure_count == 2

    def test_failed_trial_call_reopens_below_threshold(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=0.05)
        for _ in range(3):
            cb.record_failure()
        time.sleep(0.08)
        assert cb.can_execute() is True

        cb.failure_count = 0
        cb.record_failure()
        assert cb.state == CircuitBreakerState.Open

    def test_retry_after_counts_down_while_open(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=30.0)
        assert cb.retry_after() == 0.0
        cb.record_failure()
        assert 29.0 < cb.retry_after() <= 30.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
