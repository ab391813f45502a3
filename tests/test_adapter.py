"""Tests for the Fragment Producer Adapter."""

import pytest

from fakes import ScriptedProducer
from quickstream.domain.exceptions import (
    CircuitOpenError,
    ProducerError,
    ProducerUnavailableError,
)
from quickstream.streaming.adapter import FragmentProducerAdapter


async def _collect(adapter, query="q"):
    return [fragment.text async for fragment in adapter.fragments(query)]


class TestFragments:
    @pytest.mark.anyio
    async def test_empty_and_missing_content_are_skipped(self):
        producer = ScriptedProducer(["a", "", "b", None, "c"])
        assert await _collect(FragmentProducerAdapter(producer)) == ["a", "b", "c"]

    @pytest.mark.anyio
    async def test_query_is_forwarded_as_is(self):
        producer = ScriptedProducer(["x"])
        await _collect(FragmentProducerAdapter(producer), query="")
        assert producer.queries == [""]

    @pytest.mark.anyio
    async def test_arbitrary_failure_becomes_producer_error(self):
        producer = ScriptedProducer(["a"], error=RuntimeError("socket closed"))
        adapter = FragmentProducerAdapter(producer)
        received = []
        with pytest.raises(ProducerError) as exc_info:
            async for fragment in adapter.fragments("q"):
                received.append(fragment.text)
        assert received == ["a"]
        assert exc_info.value.provider == "scripted"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.anyio
    async def test_producer_errors_pass_through_unchanged(self):
        error = ProducerUnavailableError("down", "scripted", 503)
        producer = ScriptedProducer([], error=error)
        with pytest.raises(ProducerUnavailableError) as exc_info:
            await _collect(FragmentProducerAdapter(producer))
        assert exc_info.value is error

    @pytest.mark.anyio
    async def test_open_circuit_is_reported_as_producer_error(self):
        producer = ScriptedProducer([], error=CircuitOpenError("Circuit breaker is open"))
        with pytest.raises(ProducerError, match="Circuit breaker is open"):
            await _collect(FragmentProducerAdapter(producer))

    @pytest.mark.anyio
    async def test_early_close_closes_producer(self):
        producer = ScriptedProducer(["a", "b", "c"])
        fragments = FragmentProducerAdapter(producer).fragments("q")
        first = await fragments.__anext__()
        await fragments.aclose()

        assert first.text == "a"
        assert producer.closed is True
        assert producer.finished is False
        assert producer.pulled == 1


class TestComplete:
    @pytest.mark.anyio
    async def test_returns_full_answer(self):
        producer = ScriptedProducer([], answer="the whole thing")
        assert await FragmentProducerAdapter(producer).complete("q") == "the whole thing"

    @pytest.mark.anyio
    async def test_failure_becomes_producer_error(self):
        producer = ScriptedProducer([], error=TimeoutError("slow"))
        with pytest.raises(ProducerError):
            await FragmentProducerAdapter(producer).complete("q")
