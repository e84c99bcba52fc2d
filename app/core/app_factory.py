"""Application factory for the books API.

Builds a fully wired FastAPI app: logging, middleware, exception handlers,
routers, and the per-instance book store and rate limiter. Tests call
`create_app()` for every case so no state leaks between them.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.storage.base import AbstractBookStore
from app.adapters.storage.in_memory import SEED_BOOKS, InMemoryBookStore
from app.api.routes import books_router, health_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_logging_middleware
from app.core.openapi import apply_openapi_customizations
from app.core.rate_limit import build_rate_limiter, rate_limit_middleware
from app.services.book_service import BookService


def _parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(
    *,
    book_store: AbstractBookStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        book_store: Store to serve; defaults to a fresh in-memory store,
            seeded unless APP_SEED_BOOKS=false.
        rate_limiter: Limiter for the book routes; defaults to one built
            from the rate limit settings.

    Returns:
        Configured app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Books API",
        description=(
            "In-memory book catalogue with paginated listing, search, "
            "token-gated writes, admin-only deletes and per-client rate limiting."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    if book_store is None:
        book_store = InMemoryBookStore(seed=SEED_BOOKS if settings.app.seed_books else ())
    app.state.book_store = book_store
    app.state.book_service = BookService(
        book_store,
        default_page=settings.app.default_page,
        default_page_size=settings.app.default_page_size,
    )
    if rate_limiter is None:
        rate_limiter = build_rate_limiter(settings.app)
    app.state.rate_limiter = rate_limiter

    # Middleware: the last one added runs first. Logging wraps CORS, which
    # wraps the rate limiter, so preflights are never counted.
    app.middleware("http")(rate_limit_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_origins(settings.app.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware)

    setup_exception_handlers(app)

    app.include_router(books_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
