"""Tests for the FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from fakes import ScriptedProducer
from quickstream.api.dependencies import get_producer
from quickstream.api.v1.stream import NO_ANSWER_MESSAGE, REFERENCE_ERROR_MESSAGE
from quickstream.main import app
from quickstream.streaming.framing import DIAGNOSTIC_MESSAGE

client = TestClient(app)


@pytest.fixture
def use_producer():
    """Route requests to a scripted producer for the duration of a test."""

    def _use(producer):
        app.dependency_overrides[get_producer] = lambda: producer
        return producer

    yield _use
    app.dependency_overrides.clear()


class TestStreamEndpoint:
    """Test suite for GET /stream."""

    def test_event_stream_headers(self, use_producer):
        use_producer(ScriptedProducer(["hi"]))
        response = client.get("/stream", params={"query": "hello"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "text/event-stream; charset=utf-8"
        assert response.headers["cache-control"] == "no-cache"
        assert response.headers["connection"] == "keep-alive"
        assert "x-request-id" in response.headers

    def test_frames_in_producer_order(self, use_producer):
        use_producer(ScriptedProducer(["Hel", "", "lo", None, ' "world"\n']))
        response = client.get("/stream", params={"query": "hello"})
        assert response.text == 'data: "Hel"\n\ndata: "lo"\n\ndata: " \\"world\\"\\n"\n\n'

    def test_query_forwarded_url_decoded(self, use_producer):
        producer = use_producer(ScriptedProducer(["ok"]))
        client.get("/stream", params={"query": "a & b = c?"})
        assert producer.queries == ["a & b = c?"]

    def test_missing_query_is_forwarded_as_empty(self, use_producer):
        producer = use_producer(ScriptedProducer(["ok"]))
        response = client.get("/stream")
        assert response.status_code == 200
        assert producer.queries == [""]

    def test_zero_fragments_closes_with_empty_body(self, use_producer):
        use_producer(ScriptedProducer([]))
        response = client.get("/stream", params={"query": "q"})
        assert response.status_code == 200
        assert response.text == ""

    def test_producer_failure_ends_with_diagnostic(self, use_producer):
        use_producer(ScriptedProducer(["partial"], error=RuntimeError("boom")))
        response = client.get("/stream", params={"query": "q"})
        assert response.status_code == 200
        assert response.text == 'data: "partial"\n\ndata: ' + DIAGNOSTIC_MESSAGE

    def test_streamed_lines(self, use_producer):
        use_producer(ScriptedProducer(["one", "two"]))
        with client.stream("GET", "/stream", params={"query": "q"}) as response:
            lines = [line for line in response.iter_lines() if line]
        assert lines == ['data: "one"', 'data: "two"']

    def test_echo_fallback_without_backend(self):
        response = client.get("/stream", params={"query": "ping"})
        assert response.status_code == 200
        assert response.text.startswith('data: "You ')


class TestNormalEndpoint:
    """Test suite for the single-shot reference endpoint."""

    def test_returns_complete_answer(self, use_producer):
        use_producer(ScriptedProducer([], answer="Full answer."))
        response = client.get("/normal", params={"query": "q"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Full answer."

    def test_missing_answer(self, use_producer):
        use_producer(ScriptedProducer([], answer=None))
        response = client.get("/normal", params={"query": "q"})
        assert response.text == NO_ANSWER_MESSAGE

    def test_failure_is_still_200(self, use_producer):
        use_producer(ScriptedProducer([], error=RuntimeError("down")))
        response = client.get("/normal", params={"query": "q"})
        assert response.status_code == 200
        assert response.text == REFERENCE_ERROR_MESSAGE


class TestHealthEndpoint:
    def test_health_reports_producer(self, use_producer):
        use_producer(ScriptedProducer([]))
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["producer"]["name"] == "scripted"
        assert data["producer"]["circuit_breaker"]["state"] == "CLOSED"

    def test_open_breaker_is_degraded(self, use_producer):
        producer = use_producer(ScriptedProducer([]))
        for _ in range(producer.circuit_breaker.failure_threshold):
            producer.circuit_breaker.record_failure()
        data = client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["producer"]["circuit_breaker"]["state"] == "OPEN"

    def test_prometheus_metrics_exposed(self, use_producer):
        use_producer(ScriptedProducer(["x"]))
        client.get("/stream", params={"query": "q"})
        response = client.get("/prometheus/")
        assert response.status_code == 200
        assert "quickstream_frames_total" in response.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
