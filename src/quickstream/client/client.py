"""HTTP client for a quickstream server."""

import logging
import time
from dataclasses import dataclass

import httpx

from quickstream.client.sources import FrameSource, HttpFrameSource
from quickstream.client.subscription import (
    FirstFragmentCallback,
    RenderCallback,
    StreamSubscription,
)

logger = logging.getLogger(__name__)

NO_RESPONSE_MESSAGE = "No response generated, try again later"
FETCH_ERROR_MESSAGE = "An error occurred. Please try again later."


@dataclass(frozen=True)
class ReferenceResult:
    """Outcome of one single-shot request."""
    text: str
    elapsed_ms: float
    ok: bool = True


class StreamClient:
    """Opens stream subscriptions and single-shot requests against one server.

    Every ``subscribe`` call gets its own frame source and text buffer, so
    concurrent subscriptions never share state.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:5000",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if http_client is None:
            # No read timeout: a stream may sit idle between fragments.
            timeout = httpx.Timeout(connect=5.0, read=None, write=10.0, pool=5.0)
            http_client = httpx.AsyncClient(base_url=base_url, timeout=timeout)
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = http_client

    async def __aenter__(self) -> "StreamClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def subscribe(
        self,
        query: str,
        on_render: RenderCallback | None = None,
        on_first_fragment: FirstFragmentCallback | None = None,
        source: FrameSource | None = None,
    ) -> StreamSubscription:
        """Start a session for ``query``. The latency clock starts here."""
        subscription = StreamSubscription(
            query,
            source or HttpFrameSource(self._client),
            on_render=on_render,
            on_first_fragment=on_first_fragment,
        )
        subscription.start()
        return subscription

    async def close(self, subscription: StreamSubscription) -> None:
        await subscription.aclose()

    async def fetch(self, query: str) -> ReferenceResult:
        """Request the complete result in one response (``/normal``)."""
        start = time.perf_counter()
        try:
            response = await self._client.get("/normal", params={"query": query})
        except httpx.HTTPError:
            logger.exception("Error fetching normal response")
            return ReferenceResult(
                FETCH_ERROR_MESSAGE, (time.perf_counter() - start) * 1000, ok=False
            )
        elapsed_ms = (time.perf_counter() - start) * 1000

        if not response.text:
            return ReferenceResult(NO_RESPONSE_MESSAGE, elapsed_ms, ok=False)
        return ReferenceResult(response.text, elapsed_ms)
