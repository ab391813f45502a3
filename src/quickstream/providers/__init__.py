"""Fragment producer backends."""

from quickstream.providers.base import FragmentProducer
from quickstream.providers.echo import EchoProducer
from quickstream.providers.openai import OpenAIProducer

__all__ = ["FragmentProducer", "EchoProducer", "OpenAIProducer"]
