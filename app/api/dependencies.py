"""Request-scoped accessors for objects owned by the application instance.

Book bodies are parsed here rather than as plain body parameters: FastAPI
parses body parameters before any dependency runs, which would let a
malformed body answer 400 ahead of the auth guard.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from app.adapters.storage.base import AbstractBookStore
from app.schemas.book import BookCreate, BookUpdate
from app.services.book_service import BookService

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_book_store(request: Request) -> AbstractBookStore:
    return request.app.state.book_store


def get_book_service(request: Request) -> BookService:
    return request.app.state.book_service


async def _read_json(request: Request) -> Any:
    """Decode the request body; an empty body reads as an empty object."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RequestValidationError(
            [
                {
                    "type": "json_invalid",
                    "loc": ("body", getattr(exc, "pos", 0)),
                    "msg": "JSON decode error",
                    "input": {},
                }
            ]
        ) from exc


async def _parse_body(request: Request, model: type[ModelT]) -> ModelT:
    data = await _read_json(request)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = [{**error, "loc": ("body", *error["loc"])} for error in exc.errors(include_url=False)]
        raise RequestValidationError(errors) from exc


async def get_book_create(request: Request) -> BookCreate:
    return await _parse_body(request, BookCreate)


async def get_book_update(request: Request) -> BookUpdate:
    return await _parse_body(request, BookUpdate)
