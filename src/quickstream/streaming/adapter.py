"""Fragment Producer Adapter: turns a raw producer into clean fragment sequences."""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from quickstream.domain.exceptions import ProducerError, QuickstreamError
from quickstream.domain.models import Fragment
from quickstream.providers.base import FragmentProducer

logger = logging.getLogger(__name__)


class FragmentProducerAdapter:
    """Wraps a producer so callers only ever see non-empty fragments or one ProducerError."""

    def __init__(self, producer: FragmentProducer) -> None:
        self._producer = producer

    @property
    def name(self) -> str:
        return self._producer.name

    def _wrap(self, exc: Exception) -> ProducerError:
        if isinstance(exc, ProducerError):
            return exc
        if isinstance(exc, QuickstreamError):
            return ProducerError(exc.message, self.name, details=exc.details)
        return ProducerError(f"{self.name} producer failed: {exc}", self.name)

    async def fragments(self, query: str) -> AsyncIterator[Fragment]:
        """Yield the producer's output for ``query``, skipping empty chunks.

        Closing this generator early closes the producer's sequence too.
        """
        skipped = 0
        try:
            async with aclosing(self._producer.produce(query)) as chunks:
                async for chunk in chunks:
                    if not chunk.content:
                        skipped += 1
                        continue
                    yield Fragment(chunk.content)
        except Exception as exc:
            error = self._wrap(exc)
            if error is exc:
                raise
            raise error from exc
        if skipped:
            logger.debug("Skipped %d empty chunk(s) from %s", skipped, self.name)

    async def complete(self, query: str) -> str | None:
        """Materialize the producer's entire output in one call."""
        try:
            return await self._producer.invoke(query)
        except Exception as exc:
            error = self._wrap(exc)
            if error is exc:
                raise
            raise error from exc
