"""HTTP middleware for request logging and correlation.

Every request/response pair:
- gets a request id (incoming X-Request-ID header or a fresh UUID), stored in
  contextvars so all logs of the request carry it
- produces exactly one access log line with method, path, status and elapsed time
- is answered with X-Request-ID and X-Request-Duration-ms headers

The middleware only observes; it never rejects or rewrites a request.

Usage:
    app.middleware("http")(request_logging_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from app.core.config import settings
from app.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


def _original_path(request: Request) -> str:
    """Path plus query string, as the client sent it."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _log_request(request: Request, status_code: int, duration_ms: float) -> None:
    method = request.method
    path = _original_path(request)
    logger.info(
        "[%s] %s -> %d (%.0fms)",
        method,
        path,
        status_code,
        duration_ms,
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
        },
    )


async def request_logging_middleware(request: Request, call_next) -> Response:
    """Log and correlate a single HTTP request.

    If the downstream stack raises, the request is logged as a 500 and the
    exception propagates to the registered exception handler.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    # Outlives the context var for the 500 handler, which runs outside this middleware
    request.state.request_id = request_id
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception:
        _log_request(request, 500, (time.perf_counter() - start) * 1000)
        clear_request_id()
        raise

    duration_ms = (time.perf_counter() - start) * 1000
    _log_request(request, response.status_code, duration_ms)
    clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
