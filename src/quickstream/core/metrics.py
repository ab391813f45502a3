"""Prometheus metrics for stream sessions and the reference path."""

from prometheus_client import Counter, Gauge, Histogram

quickstream_sessions_total = Counter(
    "quickstream_sessions_total", "Total number of stream sessions opened"
)

quickstream_active_sessions = Gauge(
    "quickstream_active_sessions", "Number of stream sessions currently draining"
)

quickstream_frames_total = Counter(
    "quickstream_frames_total", "Total number of content frames written", ["producer"]
)

quickstream_stream_outcomes_total = Counter(
    "quickstream_stream_outcomes_total",
    "Stream sessions by terminal outcome",
    ["outcome"],
)

quickstream_first_frame_seconds = Histogram(
    "quickstream_first_frame_seconds",
    "Server-side delay between session start and the first content frame",
    ["producer"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

quickstream_reference_requests_total = Counter(
    "quickstream_reference_requests_total",
    "Single-shot reference requests by outcome",
    ["outcome"],
)

quickstream_circuit_breaker_trips_total = Counter(
    "quickstream_circuit_breaker_trips_total",
    "Total number of circuit breaker trips",
    ["producer"],
)


class StreamMetrics:
    def session_opened(self) -> None:
        quickstream_sessions_total.inc()
        quickstream_active_sessions.inc()

    def session_closed(self, outcome: str) -> None:
        quickstream_active_sessions.dec()
        quickstream_stream_outcomes_total.labels(outcome=outcome).inc()

    def record_frame(self, producer: str) -> None:
        quickstream_frames_total.labels(producer=producer).inc()

    def record_first_frame(self, producer: str, delay: float) -> None:
        quickstream_first_frame_seconds.labels(producer=producer).observe(delay)

    def record_reference(self, outcome: str) -> None:
        quickstream_reference_requests_total.labels(outcome=outcome).inc()

    def record_circuit_trip(self, producer: str) -> None:
        quickstream_circuit_breaker_trips_total.labels(producer=producer).inc()


metrics = StreamMetrics()
