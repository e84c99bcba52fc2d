"""Book catalogue operations.

`BookService` holds the rules of the books API on top of an injected
`AbstractBookStore`: pagination, search, duplicate detection and the partial
update policy. Every rule violation is raised as an `AppError` subclass; the
HTTP layer only translates those into responses.
"""

from __future__ import annotations

import logging

from app.adapters.storage.base import AbstractBookStore, BookRecord
from app.core.errors import ConflictAppError, NotFoundAppError, ValidationAppError
from app.schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)

BOOK_NOT_FOUND = "Book not found"


def parse_positive_int(raw: str | None, default: int) -> int:
    """Parse a query parameter as a positive integer.

    Missing, non-numeric and non-positive values fall back to `default`.

    Examples:
        >>> parse_positive_int("3", 1)
        3
        >>> parse_positive_int("abc", 1)
        1
        >>> parse_positive_int("0", 10)
        10
    """
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def parse_book_id(raw: str) -> int | None:
    """Parse a path id; returns None for anything that is not an integer."""
    try:
        return int(raw)
    except ValueError:
        return None


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


class BookService:
    """CRUD and search over a book store."""

    def __init__(self, store: AbstractBookStore, *, default_page: int = 1, default_page_size: int = 10) -> None:
        self._store = store
        self._default_page = default_page
        self._default_page_size = default_page_size

    def list_books(self, page: str | None = None, limit: str | None = None) -> list[BookRecord]:
        """Return one page of books.

        Args:
            page: Raw 1-based page number from the query string.
            limit: Raw page size from the query string.
        """
        page_number = parse_positive_int(page, self._default_page)
        page_size = parse_positive_int(limit, self._default_page_size)
        offset = (page_number - 1) * page_size
        return self._store.list(offset=offset, limit=page_size)

    def search_books(self, title: str | None = None, author: str | None = None) -> list[BookRecord]:
        """Case-insensitive substring search; every given field must match.

        Raises:
            ValidationAppError: If neither title nor author is given.
            NotFoundAppError: If nothing matches.
        """
        if not title and not author:
            raise ValidationAppError(
                code="search_criteria_missing",
                message="Please provide at least a title or author for search",
            )

        def matches(book: BookRecord) -> bool:
            if title and not _contains(book.title, title):
                return False
            if author and not _contains(book.author, author):
                return False
            return True

        found = self._store.filter(matches)
        logger.info(
            "books.searched",
            extra={"has_title": bool(title), "has_author": bool(author), "matches": len(found)},
        )
        if not found:
            raise NotFoundAppError(code="no_search_results", message="Books not found for search")
        return found

    def get_book(self, book_id: int | None) -> BookRecord:
        book = self._store.get(book_id) if book_id is not None else None
        if book is None:
            raise NotFoundAppError(code="book_not_found", message=BOOK_NOT_FOUND)
        return book

    def create_book(self, payload: BookCreate) -> BookRecord:
        """Create a book from a client payload.

        Raises:
            ValidationAppError: If an id is supplied or title/author are missing.
            ConflictAppError: If a book with the same title and author exists.
        """
        if payload.id is not None:
            raise ValidationAppError(
                code="id_not_allowed",
                message="ID must not be provided when creating a book",
            )
        if not payload.title or not payload.author:
            raise ValidationAppError(
                code="missing_fields",
                message="Both title and author are required.",
            )

        title, author = payload.title, payload.author
        duplicates = self._store.filter(
            lambda b: b.title.casefold() == title.casefold() and b.author.casefold() == author.casefold()
        )
        if duplicates:
            raise ConflictAppError(
                code="duplicate_book",
                message="A book with the same title and author already exists",
            )

        book = self._store.insert(title=title, author=author)
        logger.info("books.created", extra={"book_id": book.id})
        return book

    def update_book(self, book_id: int | None, payload: BookUpdate) -> BookRecord:
        """Apply a partial update; empty fields keep their stored value.

        Raises:
            ValidationAppError: If the body id differs from the path id.
            NotFoundAppError: If no book has that id.
        """
        if payload.id is not None and payload.id != book_id:
            raise ValidationAppError(
                code="id_immutable",
                message="Updating book ID is not allowed.",
            )

        book = None
        if book_id is not None:
            book = self._store.update(
                book_id,
                title=payload.title or None,
                author=payload.author or None,
            )
        if book is None:
            raise NotFoundAppError(code="book_not_found", message=BOOK_NOT_FOUND)

        logger.info("books.updated", extra={"book_id": book.id})
        return book

    def delete_book(self, book_id: int | None) -> None:
        if book_id is None or not self._store.delete(book_id):
            raise NotFoundAppError(code="book_not_found", message=BOOK_NOT_FOUND)
        logger.info("books.deleted", extra={"book_id": book_id})

    def reset_books(self) -> None:
        removed = len(self._store)
        self._store.clear()
        logger.warning("books.reset", extra={"removed": removed})

    def count(self) -> int:
        return len(self._store)
