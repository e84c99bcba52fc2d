"""Book storage adapters.

Routes and services depend on `AbstractBookStore`; each application instance
owns its own store so tests never share state.
"""

from app.adapters.storage.base import AbstractBookStore, BookRecord
from app.adapters.storage.in_memory import SEED_BOOKS, InMemoryBookStore

__all__ = ["AbstractBookStore", "BookRecord", "InMemoryBookStore", "SEED_BOOKS"]
