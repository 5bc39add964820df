"""Rate limiting toolkit."""

from .rate_limiter import ChatRateLimiter  # noqa: F401

__all__ = ["ChatRateLimiter"]
