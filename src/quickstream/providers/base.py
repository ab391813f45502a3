"""Abstract base class for fragment producers."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from quickstream.core.circuit_breaker import CircuitBreaker
from quickstream.core.retry import RetryPolicy
from quickstream.domain.models import ProducerChunk


class FragmentProducer(ABC):
    """Base class for text-generation backends.

    ``produce`` returns a lazy, finite, non-restartable sequence of chunks.
    Chunks may carry no content; filtering is the adapter's job. The
    sequence may raise at any point, including before the first chunk,
    and must release its resources when closed early.
    """

    def __init__(
        self,
        circuit_breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self._circuit_breaker = circuit_breaker or CircuitBreaker()
        self._retry_policy = retry_policy or RetryPolicy()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the producer."""
        ...

    @abstractmethod
    def produce(self, query: str) -> AsyncIterator[ProducerChunk]: ...

    @abstractmethod
    async def invoke(self, query: str) -> str | None:
        """Return the complete output for ``query`` in one piece."""
        ...

    def is_available(self) -> bool:
        """Check if producer is available (circuit breaker allows execution)."""
        return self._circuit_breaker.can_execute()

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        """Expose circuit breaker for health checks (read-only)."""
        return self._circuit_breaker
