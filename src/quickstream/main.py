"""
quickstream: incremental text delivery over Server-Sent Events.

Application entry point. Configures middleware, registers routes,
and manages the application lifespan (startup/shutdown).
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from quickstream import __version__
from quickstream.api.routes.health import router as health_router
from quickstream.api.v1.stream import router as stream_router
from quickstream.core.circuit_breaker import CircuitBreaker
from quickstream.core.config import Settings, get_settings
from quickstream.core.logging_config import configure_logging
from quickstream.core.retry import RetryPolicy
from quickstream.middleware.trace import TraceMiddleware
from quickstream.providers.base import FragmentProducer
from quickstream.providers.echo import EchoProducer
from quickstream.providers.openai import OpenAIProducer

# Configure logging with session id injection before anything else
configure_logging(get_settings().log_level)

logger = logging.getLogger(__name__)


def build_producer(settings: Settings) -> FragmentProducer:
    """Pick the producer backend from configuration."""
    name = "openai" if settings.openai_api_key else "echo"
    circuit_breaker = CircuitBreaker(
        name=name,
        failure_threshold=settings.circuit.failure_threshold,
        recovery_timeout=settings.circuit.recovery_timeout,
    )
    retry_policy = RetryPolicy(
        max_attempts=settings.retry.max_attempts,
        base_delay=settings.retry.base_delay,
        max_delay=settings.retry.max_delay,
    )
    if settings.openai_api_key:
        producer: FragmentProducer = OpenAIProducer(circuit_breaker, retry_policy)
        logger.info("Using OpenAI producer (model=%s)", settings.model)
    else:
        producer = EchoProducer(
            delay=settings.echo_delay_seconds,
            circuit_breaker=circuit_breaker,
            retry_policy=retry_policy,
        )
        logger.info("No OPENAI_API_KEY configured; streams will use the echo producer")
    return producer


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    app.state.start_time = time.time()
    app.state.producer = build_producer(get_settings())
    logger.info("quickstream started (version %s)", __version__)
    yield
    logger.info("quickstream shutdown complete")


app = FastAPI(
    title="quickstream",
    description=(
        "Streams generated text to the browser as Server-Sent Events so the first "
        "words show up long before generation finishes. A single-shot endpoint is "
        "kept alongside for latency comparison."
    ),
    version=__version__,
    openapi_tags=[
        {"name": "Stream", "description": "Streaming and single-shot text generation."},
        {"name": "Operations", "description": "Health checks and metrics."},
    ],
    lifespan=lifespan,
)

# Middleware: last added = outermost (first to execute on request)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(TraceMiddleware)

app.include_router(stream_router)
app.include_router(health_router)

metrics_app = make_asgi_app()
app.mount("/prometheus", metrics_app)
