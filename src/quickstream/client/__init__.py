"""Stream Client: subscribe to a quickstream server and render text as it arrives."""

from quickstream.client.buffer import TextBuffer, clean_text, format_elapsed
from quickstream.client.client import ReferenceResult, StreamClient
from quickstream.client.sources import FrameSource, HttpFrameSource
from quickstream.client.subscription import StreamSubscription, SubscriptionState

__all__ = [
    "FrameSource",
    "HttpFrameSource",
    "ReferenceResult",
    "StreamClient",
    "StreamSubscription",
    "SubscriptionState",
    "TextBuffer",
    "clean_text",
    "format_elapsed",
]
