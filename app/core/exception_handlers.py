"""Global exception handlers for consistent error responses.

Every error response of the API has the body ``{"error": "<message>"}``:
- AppError subclasses → their own status code (400, 401, 403, 404, 409, 429)
- Request validation errors → 400
- Framework HTTP errors (unknown route, wrong method) → their status code
- Unexpected Exception → generic 500 (safety net, details only in logs)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import AppError
from app.core.logging import get_request_id

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong on the server."


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with the status code its class declares."""

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_id": get_request_id(),
        },
    )
    return error_response(exc.status_code, exc.message, exc.headers)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    parts = [part for part in first.get("loc", ()) if part != "body"]
    if first.get("type") == "json_invalid":
        # Decode errors locate by character offset, which means nothing to clients
        parts = [part for part in parts if not isinstance(part, int)]
    location = ".".join(str(part) for part in parts)
    reason = first.get("msg", "invalid value")
    return f"Invalid request: {location}: {reason}" if location else f"Invalid request: {reason}"


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Turn FastAPI's 422 validation failures into 400 BadRequest."""

    message = _describe_validation_error(exc)
    logger.warning(
        "request_validation_failed",
        extra={
            "error_count": len(exc.errors()),
            "error_message": message,
            "request_path": request.url.path,
        },
    )
    return error_response(400, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors in the API's error shape."""

    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs type, message and traceback server-side; the client only sees a
    generic message.
    """

    # The logging middleware has already returned, so its context var is cleared
    request_id = getattr(request.state, "request_id", None) or get_request_id()

    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": request_id,
        },
    )
    headers = {settings.log.request_id_header: request_id} if request_id else None
    return error_response(500, INTERNAL_ERROR_MESSAGE, headers)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(validation_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
