"""Rate limiting adapters.

The HTTP layer depends on `AbstractRateLimiter` only, so the in-memory
limiter can be replaced by a shared store without touching the routes.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = ["AbstractRateLimiter", "InMemoryFixedWindowRateLimiter", "RateLimitResult"]
