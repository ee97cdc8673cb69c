"""Rate limiting configuration and setup.

Uses slowapi to enforce per-client budgets keyed by peer address. Every
route carries its budget explicitly: ``default_limit`` for posts, keys and
health, the stricter ``secure_limit`` for authentication. Budgets are read
from settings on each request.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.responses import Response

from postboard.core.config import get_settings
from postboard.core.errors import RateLimited
from postboard.core.errors import RouteError
from postboard.core.errors import error_response

_RATE_LIMIT_HEADERS = ("x-ratelimit-", "retry-after")

limiter = Limiter(
    key_func=get_remote_address,
    headers_enabled=True,
    enabled=get_settings().rate_limit_enabled,
)


def _default_budget() -> str:
    return get_settings().rate_limit_default


def _secure_budget() -> str:
    return get_settings().rate_limit_secure


def _limited(budget: Callable[[], str]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        if not limiter.enabled:
            return func
        return limiter.limit(budget)(func)

    return decorate


# Decorated endpoints must accept ``request: Request`` and ``response: Response``.
default_limit = _limited(_default_budget)
secure_limit = _limited(_secure_budget)


def rate_limit_headers(request: Request) -> dict[str, str]:
    """Headers the limiter wants on a rejection (limit, remaining, reset, retry-after)."""
    app_limiter: Limiter | None = getattr(request.app.state, "limiter", None)
    current_limit = getattr(request.state, "view_rate_limit", None)
    if app_limiter is None or current_limit is None:
        return {}

    scratch = app_limiter._inject_headers(Response(), current_limit)
    return {
        name: value
        for name, value in scratch.headers.items()
        if name.lower().startswith(_RATE_LIMIT_HEADERS)
    }


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Forward the limiter's rejection through the shared error envelope."""
    error = RateLimited(
        f"Rate limit exceeded: {exc.detail}",
        headers=rate_limit_headers(request),
        status_code=exc.status_code,
    )
    return error_response(RouteError.promote(error))
