"""
Stream subscription state machine.

IDLE -> CONNECTING (subscribe) -> STREAMING (first fragment)
-> CLOSED_CLEAN (server ended the stream, or close() was called)
or CLOSED_ERROR (transport failure, bad frame, server error notice).
"""

import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from enum import Enum

from quickstream.client.buffer import TextBuffer
from quickstream.client.sources import FrameSource
from quickstream.domain.exceptions import SubscriptionError

logger = logging.getLogger(__name__)

RenderCallback = Callable[[str], None]
FirstFragmentCallback = Callable[[float], None]


class SubscriptionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    CLOSED_CLEAN = "closed_clean"
    CLOSED_ERROR = "closed_error"


class StreamSubscription:
    """One client session: drains a frame source into its own text buffer.

    ``on_render`` receives the full display text after every fragment;
    ``on_first_fragment`` receives the first-fragment latency in
    milliseconds, once. Nothing is retried: a failed subscription stays
    in CLOSED_ERROR.
    """

    def __init__(
        self,
        query: str,
        source: FrameSource,
        on_render: RenderCallback | None = None,
        on_first_fragment: FirstFragmentCallback | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.query = query
        self.buffer = TextBuffer()
        self.state = SubscriptionState.IDLE
        self.error: SubscriptionError | None = None
        self.first_fragment_ms: float | None = None
        self._source = source
        self._on_render = on_render
        self._on_first_fragment = on_first_fragment
        self._clock = clock
        self._started_at: float | None = None

    @property
    def closed(self) -> bool:
        return self.state in (SubscriptionState.CLOSED_CLEAN, SubscriptionState.CLOSED_ERROR)

    @property
    def display(self) -> str:
        return self.buffer.display

    def start(self) -> None:
        """Record the latency baseline and reset the buffer."""
        if self.state is not SubscriptionState.IDLE:
            raise RuntimeError(f"Subscription already started ({self.state.value})")
        self._started_at = self._clock()
        self.buffer.reset()
        self.state = SubscriptionState.CONNECTING

    def __aiter__(self) -> AsyncIterator[str]:
        return self.updates()

    async def updates(self) -> AsyncIterator[str]:
        """Yield the display text after each received fragment."""
        if self.state is SubscriptionState.IDLE:
            self.start()
        if self.closed:
            return

        try:
            async with aclosing(self._source.events(self.query)) as events:
                async for event in events:
                    if self.closed:
                        break
                    if not event.terminated:
                        raise SubscriptionError(
                            f"Stream ended with a server notice: {event.data}",
                            details={"notice": event.data},
                        )
                    if event.event != "message":
                        continue
                    if self._receive(event.data):
                        yield self.buffer.display
        except SubscriptionError as exc:
            self._fail(exc)
        finally:
            if not self.closed:
                self.state = SubscriptionState.CLOSED_CLEAN
                logger.info(
                    "Stream closed after %d fragment(s)",
                    len(self.buffer),
                )
            await self._source.aclose()

    async def run(self) -> SubscriptionState:
        """Drain the subscription to its terminal state."""
        async for _ in self.updates():
            pass
        return self.state

    async def aclose(self) -> None:
        """Stop listening. Closing a closed subscription is a no-op."""
        if self.closed:
            return
        self.state = SubscriptionState.CLOSED_CLEAN
        await self._source.aclose()

    def _receive(self, payload: str) -> bool:
        received_at = self._clock()
        first = self.buffer.is_empty
        if not self.buffer.append(payload):
            return False

        if first:
            self.first_fragment_ms = (received_at - self._started_at) * 1000
            self.state = SubscriptionState.STREAMING
            if self._on_first_fragment is not None:
                self._on_first_fragment(self.first_fragment_ms)
        if self._on_render is not None:
            self._on_render(self.buffer.display)
        return True

    def _fail(self, exc: SubscriptionError) -> None:
        if self.closed:
            logger.debug("Ignoring error on closed subscription: %s", exc)
            return
        self.error = exc
        self.state = SubscriptionState.CLOSED_ERROR
        logger.warning("Stream connection error: %s", exc)
