"""Streaming transport: framing, producer adaptation and the drain loop."""

from quickstream.streaming.adapter import FragmentProducerAdapter
from quickstream.streaming.framing import (
    DIAGNOSTIC_MESSAGE,
    SSEDecoder,
    SSEEvent,
    decode_payload,
    encode_diagnostic,
    encode_frame,
)
from quickstream.streaming.transport import EventStreamResponse, open_stream

__all__ = [
    "DIAGNOSTIC_MESSAGE",
    "EventStreamResponse",
    "FragmentProducerAdapter",
    "SSEDecoder",
    "SSEEvent",
    "decode_payload",
    "encode_diagnostic",
    "encode_frame",
    "open_stream",
]
