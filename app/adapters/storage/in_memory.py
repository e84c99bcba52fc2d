"""In-memory book store.

Books live in a plain list in insertion order. Ids come from a counter that
only moves forward, so an id is never handed out twice, not even after the
store is cleared.
"""

from __future__ import annotations

import logging
from typing import Iterable

from app.adapters.storage.base import AbstractBookStore, BookPredicate, BookRecord

logger = logging.getLogger(__name__)


SEED_BOOKS: tuple[tuple[str, str], ...] = (
    ("1984", "George Orwell"),
    ("The Hobbit", "J.R.R. Tolkien"),
)


class InMemoryBookStore(AbstractBookStore):
    """List-backed store. Not thread-safe."""

    def __init__(self, seed: Iterable[tuple[str, str]] = ()) -> None:
        self._books: list[BookRecord] = []
        self._last_id = 0
        for title, author in seed:
            self.insert(title=title, author=author)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryBookStore(size={len(self._books)}, last_id={self._last_id})"

    def _index_of(self, book_id: int) -> int | None:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None

    def list(self, *, offset: int = 0, limit: int | None = None) -> list[BookRecord]:
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if limit is None:
            return self._books[offset:]
        if limit < 0:
            raise ValueError("limit must be >= 0")
        return self._books[offset : offset + limit]

    def filter(self, predicate: BookPredicate) -> list[BookRecord]:
        return [book for book in self._books if predicate(book)]

    def get(self, book_id: int) -> BookRecord | None:
        index = self._index_of(book_id)
        return None if index is None else self._books[index]

    def insert(self, *, title: str, author: str) -> BookRecord:
        self._last_id += 1
        book = BookRecord(id=self._last_id, title=title, author=author)
        self._books.append(book)
        logger.debug("store.inserted", extra={"book_id": book.id, "size": len(self._books)})
        return book

    def update(
        self,
        book_id: int,
        *,
        title: str | None = None,
        author: str | None = None,
    ) -> BookRecord | None:
        book = self.get(book_id)
        if book is None:
            return None
        if title is not None:
            book.title = title
        if author is not None:
            book.author = author
        return book

    def delete(self, book_id: int) -> bool:
        index = self._index_of(book_id)
        if index is None:
            return False
        del self._books[index]
        logger.debug("store.deleted", extra={"book_id": book_id, "size": len(self._books)})
        return True

    def clear(self) -> None:
        removed = len(self._books)
        self._books.clear()
        logger.debug("store.cleared", extra={"removed": removed})

    def __len__(self) -> int:
        return len(self._books)
