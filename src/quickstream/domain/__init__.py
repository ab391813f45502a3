"""quickstream domain layer."""

from quickstream.domain.models import (
    Fragment,
    ProducerChunk,
    StreamSession,
)

from quickstream.domain.exceptions import (
    QuickstreamError,
    ProducerError,
    ProducerUnavailableError,
    ProducerRateLimitError,
    CircuitOpenError,
    SubscriptionError,
    FrameDecodeError,
)

__all__ = [
    # Models
    "Fragment",
    "ProducerChunk",
    "StreamSession",
    # Exceptions
    "QuickstreamError",
    "ProducerError",
    "ProducerUnavailableError",
    "ProducerRateLimitError",
    "CircuitOpenError",
    "SubscriptionError",
    "FrameDecodeError",
]
