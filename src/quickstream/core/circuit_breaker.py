import logging
import time
from enum import Enum

from quickstream.core.metrics import metrics

logger = logging.getLogger(__name__)


class CircuitBreakerState(Enum):
    Closed = "closed"
    Open = "open"
    HalfOpen = "half_open"


class CircuitBreaker:
    """Stops calling a failing producer backend until it has had time to recover.

    One breaker guards one producer; ``name`` labels its log lines and
    the trip counter. While open, ``retry_after`` tells callers how long
    until a trial call is let through.
    """

    def __init__(
        self, name: str = "producer", failure_threshold: int = 3, recovery_timeout: float = 30.0
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.last_failure_time = 0.0
        self.state = CircuitBreakerState.Closed

    def retry_after(self) -> float:
        if self.state != CircuitBreakerState.Open:
            return 0.0
        return max(0.0, self.recovery_timeout - (time.time() - self.last_failure_time))

    def can_execute(self) -> bool:
        if self.state == CircuitBreakerState.Open:
            if self.retry_after() == 0.0:
                self.state = CircuitBreakerState.HalfOpen
                logger.info("Circuit breaker for %s is HALF_OPEN; allowing a trial call", self.name)
                return True
            return False
        return True

    def record_success(self) -> None:
        if self.state == CircuitBreakerState.HalfOpen:
            logger.info("Circuit breaker for %s closed after a successful trial call", self.name)
        self.failure_count = 0
        self.state = CircuitBreakerState.Closed

    def record_failure(self) -> None:
        """Record a failed producer call. A failed trial call reopens at once."""
        self.failure_count += 1
        self.last_failure_time = time.time()
        if self.state == CircuitBreakerState.Open:
            return
        if (
            self.state == CircuitBreakerState.HalfOpen
            or self.failure_count >= self.failure_threshold
        ):
            self.state = CircuitBreakerState.Open
            metrics.record_circuit_trip(self.name)
            logger.warning(
                "Circuit breaker for %s tripped to OPEN after %d failure(s); retry in %.0fs",
                self.name,
                self.failure_count,
                self.recovery_timeout,
            )
