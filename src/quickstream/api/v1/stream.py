"""Streaming endpoint and the single-shot reference endpoint."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from quickstream.api.dependencies import get_producer
from quickstream.core.context import get_session_id
from quickstream.core.metrics import metrics
from quickstream.domain.exceptions import ProducerError
from quickstream.domain.models import StreamSession
from quickstream.providers.base import FragmentProducer
from quickstream.streaming.adapter import FragmentProducerAdapter
from quickstream.streaming.transport import EventStreamResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stream"])

NO_ANSWER_MESSAGE = "No answer was generated."
REFERENCE_ERROR_MESSAGE = "An error occurred while generating the summary."


@router.get(
    "/stream",
    response_class=EventStreamResponse,
    summary="Stream generated text",
    description="Server-Sent Events: one `data: <json string>` frame per generated "
    "fragment. The response ends when generation ends. On failure a plain-text "
    "notice is sent as the last `data:` line.",
)
async def stream(
    query: str = "",
    producer: FragmentProducer = Depends(get_producer),
) -> EventStreamResponse:
    # The query is forwarded to the producer as-is, empty or not.
    session = StreamSession(query=query, id=get_session_id())
    logger.info("Opening stream via %s (query: %d chars)", producer.name, len(query))
    return EventStreamResponse(session, FragmentProducerAdapter(producer))


@router.get(
    "/normal",
    response_class=PlainTextResponse,
    summary="Generate text in one response",
    description="Baseline for latency comparison. Always answers 200; on failure "
    "the body is a plain-text notice instead of the result.",
)
async def normal(
    query: str = "",
    producer: FragmentProducer = Depends(get_producer),
) -> PlainTextResponse:
    adapter = FragmentProducerAdapter(producer)
    try:
        answer = await adapter.complete(query)
    except ProducerError:
        logger.exception("Error invoking %s", producer.name)
        metrics.record_reference("failed")
        return PlainTextResponse(REFERENCE_ERROR_MESSAGE)

    if answer is None:
        metrics.record_reference("empty")
        return PlainTextResponse(NO_ANSWER_MESSAGE)

    metrics.record_reference("completed")
    return PlainTextResponse(answer)
