"""Frame sources feeding a subscription: the HTTP event stream, or anything else."""

import logging
from collections.abc import AsyncGenerator
from typing import Protocol

import httpx

from quickstream.domain.exceptions import SubscriptionError
from quickstream.streaming.framing import SSEDecoder, SSEEvent

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """One-way supply of events for a single subscription."""

    def events(self, query: str) -> AsyncGenerator[SSEEvent, None]: ...

    async def aclose(self) -> None: ...


class HttpFrameSource:
    """Reads the ``/stream`` endpoint of a running server."""

    def __init__(self, client: httpx.AsyncClient, path: str = "/stream") -> None:
        self._client = client
        self._path = path
        self._response: httpx.Response | None = None

    async def events(self, query: str) -> AsyncGenerator[SSEEvent, None]:
        headers = {"Accept": "text/event-stream", "Cache-Control": "no-cache"}
        try:
            async with self._client.stream(
                "GET", self._path, params={"query": query}, headers=headers
            ) as response:
                self._response = response
                if response.status_code != 200:
                    raise SubscriptionError(
                        f"Stream request failed with status {response.status_code}",
                        details={"status_code": response.status_code},
                    )
                content_type = response.headers.get("content-type", "")
                if not content_type.startswith("text/event-stream"):
                    raise SubscriptionError(
                        "Response is not an event stream",
                        details={"content_type": content_type},
                    )

                decoder = SSEDecoder()
                async for text in response.aiter_text():
                    for event in decoder.feed(text):
                        yield event
                trailing = decoder.flush()
                if trailing is not None:
                    yield trailing
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise SubscriptionError(f"Stream connection failed: {exc}") from exc
        finally:
            self._response = None

    async def aclose(self) -> None:
        if self._response is not None:
            logger.debug("Closing stream response")
            await self._response.aclose()
