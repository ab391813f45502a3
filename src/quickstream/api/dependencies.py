"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from quickstream.core.config import get_settings
from quickstream.providers.base import FragmentProducer
from quickstream.providers.echo import EchoProducer


def get_producer(request: Request) -> FragmentProducer:
    """Return the producer configured at startup, or the offline echo producer."""
    producer = getattr(request.app.state, "producer", None)
    if producer is None:
        producer = EchoProducer(delay=get_settings().echo_delay_seconds)
        request.app.state.producer = producer
    return producer
