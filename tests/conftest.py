"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any import of `app`, because settings are
read once at import time.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("APP_ADMIN_TOKEN", "admin-token")
os.environ.setdefault("APP_SEED_BOOKS", "true")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("APP_RATE_LIMIT_REQUESTS", "15")
os.environ.setdefault("APP_RATE_LIMIT_WINDOW_SECONDS", "60")
os.environ.setdefault("LOG_LEVEL", "INFO")

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.storage.in_memory import SEED_BOOKS, InMemoryBookStore
from app.core.app_factory import create_app


@pytest.fixture
def clock() -> Mock:
    """Controllable time source for the rate limiter."""
    return Mock(return_value=1000.0)


@pytest.fixture
def store() -> InMemoryBookStore:
    """Store seeded with the two sample books (ids 1 and 2)."""
    return InMemoryBookStore(seed=SEED_BOOKS)


@pytest.fixture
def limiter(clock: Mock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(limit=15, window_seconds=60, clock=clock)


@pytest.fixture
def app(store: InMemoryBookStore, limiter: InMemoryFixedWindowRateLimiter) -> FastAPI:
    """Fresh application instance with its own store and limiter."""
    return create_app(book_store=store, rate_limiter=limiter)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Any bearer token passes the auth check."""
    return {"Authorization": "Bearer user-token"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": "Bearer admin-token"}
