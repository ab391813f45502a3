"""
Request tracing middleware.

Assigns a session id to every request and makes it available to the
whole async call chain (and every log line) through contextvars.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from quickstream.core.context import set_session_id

logger = logging.getLogger(__name__)


class TraceMiddleware(BaseHTTPMiddleware):
    """Middleware that tags each request with a session id.

    On every incoming request:
    - Extracts or generates a session id (X-Request-ID header).
    - Stores it in the ContextVar for the async call chain.
    - Adds X-Request-ID and X-Response-Time to the response headers.

    For event streams X-Response-Time is the time until headers were
    ready, not the lifetime of the stream.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        set_session_id(session_id)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

        response.headers["X-Request-ID"] = session_id
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"

        logger.info(
            "%s %s -> %d (%.2fms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )

        return response
