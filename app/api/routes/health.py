from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_book_service
from app.services.book_service import BookService

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(service: Annotated[BookService, Depends(get_book_service)]) -> dict:
    """Health check endpoint.

    Not rate limited and not authenticated, so load balancers can poll it.

    Returns:
        dict: {"status": "ok", "books": <number of stored books>}.
    """

    return {"status": "ok", "books": service.count()}
