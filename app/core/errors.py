"""Application-level exception types.

Every client-facing failure of the books API is one of these errors. Each
class carries the HTTP status it is rendered with, so the exception handler
does not need to know about individual error kinds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(eq=False)
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message returned to the client.
        headers: Optional extra response headers.
    """

    status_code: ClassVar[int] = 400

    code: str
    message: str
    headers: dict[str, str] | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input is malformed or invalid."""

    status_code = 400


class UnauthorizedAppError(AppError):
    """Raised when no credential is presented."""

    status_code = 401


class ForbiddenAppError(AppError):
    """Raised when the credential lacks the required privilege."""

    status_code = 403


class NotFoundAppError(AppError):
    """Raised when a lookup misses."""

    status_code = 404


class ConflictAppError(AppError):
    """Raised when a create would duplicate an existing book."""

    status_code = 409


class RateLimitedAppError(AppError):
    """Raised when a client exhausts its request quota."""

    status_code = 429
