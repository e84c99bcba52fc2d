"""Bearer token guards for the books API.

Two independent checks, used as FastAPI dependencies:
- require_auth: some Authorization header must be present (its value is not verified)
- require_admin: the header must equal "Bearer <admin_token>"

This is a shared-secret placeholder, not an identity system.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Header

from app.core.config import settings
from app.core.errors import ForbiddenAppError, UnauthorizedAppError

logger = logging.getLogger(__name__)


def _hash_credential(credential: str) -> str:
    """Short, non-reversible fingerprint of a credential for logs."""
    return hashlib.sha256(credential.encode()).hexdigest()[:16]


def admin_credential() -> str:
    """Return the exact Authorization value accepted on admin routes."""
    return f"Bearer {settings.app.admin_token}"


def check_admin_credential(credential: str | None) -> None:
    """Validate that a credential carries admin privileges.

    Pure validation logic without FastAPI dependencies for easy testing.

    Raises:
        ForbiddenAppError: If the credential is not the admin bearer token.
    """
    if credential != admin_credential():
        logger.warning(
            "auth.admin_denied",
            extra={
                "credential_present": bool(credential),
                "credential_hash": _hash_credential(credential) if credential else None,
            },
        )
        raise ForbiddenAppError(
            code="admin_required",
            message="Forbidden. Admin access required.",
        )


async def require_auth(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """FastAPI dependency requiring an Authorization header.

    Usage:
        @router.post("/books", dependencies=[Depends(require_auth)])

    Returns:
        The raw credential, unchanged.

    Raises:
        UnauthorizedAppError: 401 if the header is missing or empty.
    """
    if not authorization:
        logger.warning("auth.missing_token", extra={"credential_present": False})
        raise UnauthorizedAppError(
            code="missing_token",
            message="Unauthorized. No token provided.",
        )

    logger.debug("auth.token_present", extra={"credential_hash": _hash_credential(authorization)})
    return authorization


async def require_admin(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """FastAPI dependency requiring the admin bearer token.

    Raises:
        ForbiddenAppError: 403 unless Authorization equals "Bearer <admin_token>".
    """
    check_admin_credential(authorization)
    logger.info("auth.admin_granted")
