"""Book store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable


@dataclass
class BookRecord:
    """A stored book. `id` is assigned by the store and never changes."""

    id: int
    title: str
    author: str


BookPredicate = Callable[[BookRecord], bool]


class AbstractBookStore(ABC):
    """Ordered collection of books, owned by the store.

    Implementations are not required to be thread-safe; callers serialize
    access (the API runs handlers on a single event loop).
    """

    @abstractmethod
    def list(self, *, offset: int = 0, limit: int | None = None) -> list[BookRecord]:
        """Return books in insertion order, sliced by offset/limit."""
        raise NotImplementedError

    @abstractmethod
    def filter(self, predicate: BookPredicate) -> list[BookRecord]:
        """Return every book matching predicate, in insertion order."""
        raise NotImplementedError

    @abstractmethod
    def get(self, book_id: int) -> BookRecord | None:
        raise NotImplementedError

    @abstractmethod
    def insert(self, *, title: str, author: str) -> BookRecord:
        """Append a new book and assign it a fresh id."""
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        book_id: int,
        *,
        title: str | None = None,
        author: str | None = None,
    ) -> BookRecord | None:
        """Overwrite the given fields in place; None leaves a field untouched.

        Returns:
            The updated book, or None when no book has that id.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, book_id: int) -> bool:
        """Remove a book. Returns False when no book has that id."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Remove every book."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError
