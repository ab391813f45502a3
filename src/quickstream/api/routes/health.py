"""
Health check endpoint.

Reports the producer backend and its circuit breaker state.
"""

import logging
import time
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request

from quickstream import __version__
from quickstream.api.dependencies import get_producer
from quickstream.api.schemas.health import CircuitBreakerCheck, HealthResponse, ProducerCheck
from quickstream.providers.base import FragmentProducer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Operations"])


@router.get("/health", summary="System health check")
async def health_check(
    request: Request,
    producer: FragmentProducer = Depends(get_producer),
) -> HealthResponse:
    """Return overall health: ``degraded`` while the producer's breaker is open."""
    available = producer.is_available()
    cb = producer.circuit_breaker
    last_failure = None
    if cb.last_failure_time > 0:
        last_failure = datetime.fromtimestamp(cb.last_failure_time, tz=UTC)
    breaker = CircuitBreakerCheck(
        state=cb.state.value.upper(),
        failure_count=cb.failure_count,
        last_failure=last_failure,
    )

    start_time = getattr(request.app.state, "start_time", time.time())

    return HealthResponse(
        status="healthy" if available else "degraded",
        version=__version__,
        timestamp=datetime.now(UTC),
        uptime_seconds=round(time.time() - start_time, 1),
        producer=ProducerCheck(name=producer.name, circuit_breaker=breaker),
    )
