"""
Stream Transport Server.

Drains a fragment sequence onto a single event-stream response, one
frame per fragment, and ends the response on completion or failure.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

import anyio
from starlette.requests import ClientDisconnect
from starlette.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from quickstream.core.metrics import metrics
from quickstream.domain.exceptions import ProducerError
from quickstream.domain.models import StreamSession
from quickstream.streaming.adapter import FragmentProducerAdapter
from quickstream.streaming.framing import encode_diagnostic, encode_frame

logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def open_stream(session: StreamSession, adapter: FragmentProducerAdapter) -> AsyncIterator[str]:
    """Yield one frame per fragment, in producer order.

    Each frame is handed to the transport before the next fragment is
    requested. A producer failure becomes one diagnostic frame. A
    cancelled session stops the drain and closes the producer sequence
    without exhausting it.
    """
    metrics.session_opened()
    outcome = "completed"
    fragments = adapter.fragments(session.query)
    try:
        async for fragment in fragments:
            if session.frames_sent == 0:
                metrics.record_first_frame(adapter.name, session.elapsed())
                logger.info("First frame after %.1fms", session.elapsed() * 1000)
            session.frames_sent += 1
            metrics.record_frame(adapter.name)
            yield encode_frame(fragment)
            if session.cancelled:
                outcome = "disconnected"
                break
    except ProducerError as exc:
        outcome = "failed"
        logger.exception(
            "Streaming error after %d frame(s) from %s: %s",
            session.frames_sent,
            exc.provider,
            exc,
        )
        yield encode_diagnostic()
    except (GeneratorExit, asyncio.CancelledError):
        outcome = "disconnected"
        raise
    finally:
        with anyio.CancelScope(shield=True):
            await fragments.aclose()
        metrics.session_closed(outcome)
        logger.info("Stream %s (%s, %d frame(s))", session.id, outcome, session.frames_sent)


class EventStreamResponse(StreamingResponse):
    """Event-stream response bound to one session.

    Header set is fixed at construction, before any body byte is sent.
    A client that goes away mid-stream cancels the session; the failed
    write is not propagated any further.
    """

    media_type = "text/event-stream"

    def __init__(self, session: StreamSession, adapter: FragmentProducerAdapter) -> None:
        self._frames = open_stream(session, adapter)
        super().__init__(self._frames, media_type=self.media_type, headers=STREAM_HEADERS)
        self.session = session

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except (ClientDisconnect, OSError):
            logger.info("Client disconnected from stream %s", self.session.id)
        finally:
            self.session.cancel()
            with anyio.CancelScope(shield=True):
                await self._frames.aclose()
