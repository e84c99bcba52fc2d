"""Pydantic schemas for book requests and responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class Book(BaseModel):
    """A book as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Identifier assigned by the server.")
    title: str = Field(..., description="Book title.")
    author: str = Field(..., description="Book author.")


class BookCreate(BaseModel):
    """Body of POST /api/books.

    `id` is accepted by the schema only so that the service can reject it with
    a precise message instead of silently dropping it.
    """

    id: Any = Field(default=None, description="Must be omitted; ids are server-assigned.")
    title: str | None = Field(default=None, description="Book title (required).")
    author: str | None = Field(default=None, description="Book author (required).")


class BookUpdate(BaseModel):
    """Body of PUT /api/books/{id}. Empty or missing fields are left unchanged."""

    id: StrictInt | None = Field(
        default=None,
        description="Optional; when present it must equal the id in the path.",
    )
    title: str | None = Field(default=None, description="New title.")
    author: str | None = Field(default=None, description="New author.")


class ErrorResponse(BaseModel):
    """Error body shared by every failing endpoint."""

    error: str = Field(..., description="Human-readable error message.")
