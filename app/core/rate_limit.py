"""Rate limiting middleware for the book routes.

The limiter instance lives on `app.state.rate_limiter`, created by the app
factory, so its counters are scoped to one application instance. Clients are
identified by their network address.

The check runs as HTTP middleware, before routing and body parsing, so every
request under /api/books is counted: malformed bodies, unknown sub-paths and
unsupported methods included.

Usage:
    app.middleware("http")(rate_limit_middleware)
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request, Response

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import AppSettings, settings
from app.core.errors import RateLimitedAppError
from app.core.exception_handlers import app_error_handler

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Slow down."
RATE_LIMITED_PREFIX = "/api/books"


def build_rate_limiter(app_settings: AppSettings | None = None) -> AbstractRateLimiter:
    """Create the limiter described by configuration."""

    cfg = app_settings or settings.app
    return InMemoryFixedWindowRateLimiter(
        limit=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
    )


def is_rate_limited_path(path: str) -> bool:
    """True for /api/books and anything below it, not for /api/booksfoo."""
    return path == RATE_LIMITED_PREFIX or path.startswith(RATE_LIMITED_PREFIX + "/")


def build_rate_limit_key(request: Request) -> str:
    """Build the limiter key for the current request.

    Returns:
        Namespaced key derived from the client address.
    """

    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def rate_limit_middleware(request: Request, call_next) -> Response:
    """Enforce the per-client quota on the book routes.

    Consumes one unit from the client's budget and answers 429 with the
    API's error body once the window is exhausted; auth and handlers are
    never reached for a throttled request.
    """

    if not settings.app.rate_limit_enabled or not is_rate_limited_path(request.url.path):
        return await call_next(request)

    limiter: AbstractRateLimiter = request.app.state.rate_limiter
    key = build_rate_limit_key(request)

    result = limiter.consume(key)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={"key_hash": _hash_limiter_key(key), "remaining": result.remaining},
        )
        return await call_next(request)

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "limit": result.limit,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    # Middleware sits outside the app's exception middleware, so render directly
    exc = RateLimitedAppError(
        code="rate_limited",
        message=RATE_LIMIT_MESSAGE,
        headers=result.as_headers() if settings.app.rate_limit_include_headers else None,
    )
    return await app_error_handler(request, exc)
