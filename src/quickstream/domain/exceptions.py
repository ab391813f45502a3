"""
Domain-level exceptions.

Hierarchical exceptions allow catching at different granularities.
"""


class QuickstreamError(Exception):
    """Base exception for all quickstream errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "message": self.message,
            "details": self.details,
            "type": type(self).__name__,
        }


# =============================================================================
# PRODUCER EXCEPTIONS
# =============================================================================

class ProducerError(QuickstreamError):
    """The text-generation backend failed. Terminal for the current sequence."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.provider = provider
        self.status_code = status_code

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["provider"] = self.provider
        result["status_code"] = self.status_code
        return result


class ProducerUnavailableError(ProducerError):
    """Backend is temporarily unavailable (timeout, 5xx, connection error)."""
    pass


class ProducerRateLimitError(ProducerError):
    """Backend rate limit exceeded (429)."""
    pass


class CircuitOpenError(QuickstreamError):
    """Circuit breaker is open."""
    pass


# =============================================================================
# CLIENT EXCEPTIONS
# =============================================================================

class SubscriptionError(QuickstreamError):
    """A stream subscription ended abnormally on the client side."""
    pass


class FrameDecodeError(SubscriptionError):
    """A received frame payload is not a JSON-encoded string."""

    def __init__(self, message: str, payload: str, details: dict | None = None):
        super().__init__(message, details)
        self.payload = payload
