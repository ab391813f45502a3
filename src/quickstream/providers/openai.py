import json
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

import httpx

from quickstream.core.circuit_breaker import CircuitBreaker
from quickstream.core.config import get_settings
from quickstream.core.retry import RetryPolicy
from quickstream.domain.exceptions import (
    CircuitOpenError,
    ProducerError,
    ProducerRateLimitError,
    ProducerUnavailableError,
)
from quickstream.domain.models import ProducerChunk
from quickstream.providers.base import FragmentProducer

logger = logging.getLogger(__name__)


def is_transient(exc: Exception) -> bool:
    """Rate limits, gateway errors and network failures may clear on their own."""
    return isinstance(exc, (ProducerRateLimitError, ProducerUnavailableError, httpx.TransportError))


class OpenAIProducer(FragmentProducer):
    """Chat-completions producer. The query is sent as a single user message."""

    def __init__(
        self,
        circuit_breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(circuit_breaker, retry_policy)
        settings = get_settings()
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is not set")
        self._api_key = settings.openai_api_key
        self._base_url = settings.openai_base_url.rstrip("/")
        self._model = settings.model
        self._temperature = settings.temperature
        self._timeout = httpx.Timeout(
            connect=5.0, read=settings.request_timeout_seconds, write=10.0, pool=5.0
        )
        self._transport = transport

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )

    def _payload(self, query: str, stream: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": query}],
            "temperature": self._temperature,
        }
        if stream:
            payload["stream"] = True
        return payload

    @staticmethod
    def _raise_for_status(status_code: int, body: str, retry_after: str | None) -> None:
        if status_code == 429:
            raise ProducerRateLimitError(
                "Rate limit exceeded",
                "openai",
                429,
                {"retry_after": retry_after or "unknown"},
            )
        if status_code in (502, 503, 504):
            raise ProducerUnavailableError("OpenAI service unavailable", "openai", status_code)
        if status_code != 200:
            raise ProducerError(
                f"Request failed with status {status_code}",
                "openai",
                status_code,
                {"response": body},
            )

    def _check_circuit(self) -> None:
        if not self._circuit_breaker.can_execute():
            raise CircuitOpenError(
                message="Circuit breaker is open - producer unavailable",
                details={
                    "provider": "openai",
                    "retry_after_seconds": round(self._circuit_breaker.retry_after(), 1),
                },
            )

    async def produce(self, query: str) -> AsyncIterator[ProducerChunk]:
        """Stream a completion with circuit breaker protection."""
        self._check_circuit()

        try:
            async with aclosing(self._do_stream(query)) as chunks:
                async for chunk in chunks:
                    yield chunk
            self._circuit_breaker.record_success()
        except Exception:
            self._circuit_breaker.record_failure()
            raise

    async def _do_stream(self, query: str) -> AsyncIterator[ProducerChunk]:
        async with self._client() as client:
            async with client.stream(
                "POST", "/chat/completions", json=self._payload(query, stream=True)
            ) as resp:
                if resp.status_code != 200:
                    await resp.aread()
                    self._raise_for_status(
                        resp.status_code, resp.text, resp.headers.get("retry-after")
                    )

                async for line in resp.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data_str = line[6:]
                    if data_str == "[DONE]":
                        break
                    try:
                        data = json.loads(data_str)
                    except json.JSONDecodeError:
                        logger.debug("Skipping undecodable upstream line: %r", data_str)
                        continue
                    choices = data.get("choices") or []
                    if choices:
                        delta = choices[0].get("delta") or {}
                        yield ProducerChunk(content=delta.get("content"))

    async def _do_completion(self, query: str) -> str | None:
        async with self._client() as client:
            response = await client.post(
                "/chat/completions", json=self._payload(query, stream=False)
            )
            self._raise_for_status(
                response.status_code, response.text, response.headers.get("retry-after")
            )
            data = response.json()
            choices = data.get("choices") or []
            if not choices:
                return None
            return (choices[0].get("message") or {}).get("content")

    async def invoke(self, query: str) -> str | None:
        self._check_circuit()

        try:
            result = await self._retry_policy.execute_with_retry(
                self._do_completion, query, retry_if=is_transient
            )
            self._circuit_breaker.record_success()
            return result
        except Exception:
            self._circuit_breaker.record_failure()
            raise

