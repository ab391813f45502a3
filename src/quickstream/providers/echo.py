"""Offline producer used when no backend credential is configured."""

import asyncio
import re
from collections.abc import AsyncIterator

from quickstream.core.circuit_breaker import CircuitBreaker
from quickstream.core.retry import RetryPolicy
from quickstream.domain.models import ProducerChunk
from quickstream.providers.base import FragmentProducer


class EchoProducer(FragmentProducer):
    """Echoes the query back as ``You said: <query>``, one word at a time."""

    def __init__(
        self,
        delay: float = 0.05,
        circuit_breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        super().__init__(circuit_breaker, retry_policy)
        self._delay = delay

    @property
    def name(self) -> str:
        return "echo"

    @staticmethod
    def _reply(query: str) -> str:
        return f"You said: {query}"

    async def produce(self, query: str) -> AsyncIterator[ProducerChunk]:
        # Keep the whitespace attached to each word so joins reproduce the reply.
        for word in re.findall(r"\S+\s*|\s+", self._reply(query)):
            yield ProducerChunk(content=word)
            await asyncio.sleep(self._delay)

    async def invoke(self, query: str) -> str | None:
        await asyncio.sleep(self._delay)
        return self._reply(query)
