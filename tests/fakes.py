"""Scripted stand-ins for a producer backend and a client frame source."""

import asyncio

from quickstream.domain.models import ProducerChunk
from quickstream.providers.base import FragmentProducer
from quickstream.streaming.framing import SSEEvent


class ScriptedProducer(FragmentProducer):
    """Yields the given contents in order, then optionally raises ``error``."""

    def __init__(self, contents, error=None, delay=0.0, answer=None, name="scripted"):
        super().__init__()
        self.contents = list(contents)
        self.error = error
        self.delay = delay
        self.answer = answer
        self._name = name
        self.queries: list[str] = []
        self.pulled = 0
        self.finished = False
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    async def produce(self, query):
        self.queries.append(query)
        try:
            for content in self.contents:
                await asyncio.sleep(self.delay)
                self.pulled += 1
                yield ProducerChunk(content=content)
            if self.error is not None:
                raise self.error
            self.finished = True
        finally:
            self.closed = True

    async def invoke(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.answer


class FakeFrameSource:
    """Frame source that replays events without a network."""

    def __init__(self, events, error=None, delay=0.0):
        self._events = list(events)
        self.error = error
        self.delay = delay
        self.query = None
        self.closed = False

    async def events(self, query):
        self.query = query
        for event in self._events:
            await asyncio.sleep(self.delay)
            yield event if isinstance(event, SSEEvent) else SSEEvent(data=event)
        if self.error is not None:
            raise self.error

    async def aclose(self):
        self.closed = True
