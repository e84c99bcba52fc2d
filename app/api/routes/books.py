from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from app.adapters.storage.base import BookRecord
from app.api.dependencies import get_book_create, get_book_service, get_book_update
from app.core.auth import require_admin, require_auth
from app.schemas.book import Book, BookCreate, BookUpdate, ErrorResponse
from app.services.book_service import BookService, parse_book_id

router = APIRouter(
    prefix="/api/books",
    tags=["Books"],
    responses={429: {"model": ErrorResponse, "description": "Rate limit exceeded."}},
)

Service = Annotated[BookService, Depends(get_book_service)]
CreatePayload = Annotated[BookCreate, Depends(get_book_create)]
UpdatePayload = Annotated[BookUpdate, Depends(get_book_update)]


def _json_body(model: type[BaseModel]) -> dict:
    """OpenAPI request body for payloads parsed by a dependency."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


@router.get("", response_model=list[Book])
async def list_books(service: Service, page: str | None = None, limit: str | None = None) -> list[BookRecord]:
    """List books, one page at a time.

    `page` and `limit` default to 1 and 10; values that are not positive
    integers fall back to those defaults.
    """
    return service.list_books(page=page, limit=limit)


# Registered before "/{book_id}" so "search" is never read as an id.
@router.get(
    "/search",
    response_model=list[Book],
    responses={
        400: {"model": ErrorResponse, "description": "Neither title nor author given."},
        404: {"model": ErrorResponse, "description": "No book matches."},
    },
)
async def search_books(service: Service, title: str | None = None, author: str | None = None) -> list[BookRecord]:
    """Case-insensitive substring search on title and/or author."""
    return service.search_books(title=title, author=author)


@router.get(
    "/{book_id}",
    response_model=Book,
    responses={404: {"model": ErrorResponse, "description": "Book not found."}},
)
async def get_book(book_id: str, service: Service) -> BookRecord:
    return service.get_book(parse_book_id(book_id))


@router.post(
    "",
    response_model=Book,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=_json_body(BookCreate),
    dependencies=[Depends(require_auth)],
    responses={
        400: {"model": ErrorResponse, "description": "Id supplied or title/author missing."},
        401: {"model": ErrorResponse, "description": "No token provided."},
        409: {"model": ErrorResponse, "description": "Same title and author already exist."},
    },
)
async def create_book(payload: CreatePayload, service: Service) -> BookRecord:
    """Create a book. The id is assigned by the server."""
    return service.create_book(payload)


@router.put(
    "/{book_id}",
    response_model=Book,
    openapi_extra=_json_body(BookUpdate),
    dependencies=[Depends(require_auth)],
    responses={
        400: {"model": ErrorResponse, "description": "Body id differs from path id."},
        401: {"model": ErrorResponse, "description": "No token provided."},
        404: {"model": ErrorResponse, "description": "Book not found."},
    },
)
async def update_book(book_id: str, payload: UpdatePayload, service: Service) -> BookRecord:
    """Partially update a book; empty fields keep their current value."""
    return service.update_book(parse_book_id(book_id), payload)


@router.delete(
    "/reset",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_auth), Depends(require_admin)],
    responses={
        401: {"model": ErrorResponse, "description": "No token provided."},
        403: {"model": ErrorResponse, "description": "Admin token required."},
    },
)
async def reset_books(service: Service) -> Response:
    """Delete every book."""
    service.reset_books()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_auth), Depends(require_admin)],
    responses={
        401: {"model": ErrorResponse, "description": "No token provided."},
        403: {"model": ErrorResponse, "description": "Admin token required."},
        404: {"model": ErrorResponse, "description": "Book not found."},
    },
)
async def delete_book(book_id: str, service: Service) -> Response:
    service.delete_book(parse_book_id(book_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
