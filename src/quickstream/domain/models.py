"""
Domain models shared by the server and the client.

No external dependencies - only Python standard library.
"""

import time
import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProducerChunk:
    """One element of a producer's raw output. Content may be missing."""
    content: str | None = None


@dataclass(frozen=True)
class Fragment:
    """A non-empty piece of generated text. Position in the sequence is its only identity."""
    text: str

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("Fragment text must be non-empty")


@dataclass
class StreamSession:
    """State of one stream request, created per request and passed down explicitly.

    ``cancel()`` is the session's cancellation token: the drain loop
    checks it after every frame and stops pulling from the producer.
    """
    query: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    started_at: float = field(default_factory=time.perf_counter)
    frames_sent: int = 0
    cancelled: bool = False

    def elapsed(self) -> float:
        """Seconds since the session was created (monotonic clock)."""
        return time.perf_counter() - self.started_at

    def cancel(self) -> None:
        self.cancelled = True
