"""Health response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class CircuitBreakerCheck(BaseModel):
    """Circuit breaker state for the producer backend."""

    state: Literal["CLOSED", "OPEN", "HALF_OPEN"]
    failure_count: int
    last_failure: datetime | None = None


class ProducerCheck(BaseModel):
    """Which producer serves streams and whether it is accepting calls."""

    name: str
    circuit_breaker: CircuitBreakerCheck


class HealthResponse(BaseModel):
    """Full health check response."""

    status: Literal["healthy", "degraded"]
    version: str
    timestamp: datetime
    uptime_seconds: float
    producer: ProducerCheck
