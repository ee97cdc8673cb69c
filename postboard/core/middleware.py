"""Request ID middleware for request correlation.

Every request gets an ``X-Request-ID`` (taken from the incoming header or
generated), stored in ``request.state`` and in a context variable so log
records can carry it. One access log line is written per response.
"""

from __future__ import annotations

from contextvars import ContextVar
import logging
import time
from typing import Awaitable
from typing import Callable
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Generate or propagate a request ID and log each response."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            latency_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s -> %s in %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                latency_ms,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)


def get_request_id() -> str:
    """Return the current request ID, or an empty string outside a request."""
    return request_id_var.get()
