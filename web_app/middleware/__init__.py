"""Middleware for the nanolink web app."""

from .logging import LoggingMiddleware
from .ratelimit import FixedWindowRateLimiter, RateLimitMiddleware, RedisRateLimiter
from .security import SecurityHeadersMiddleware

__all__ = [
    "LoggingMiddleware",
    "FixedWindowRateLimiter",
    "RateLimitMiddleware",
    "RedisRateLimiter",
    "SecurityHeadersMiddleware",
]
