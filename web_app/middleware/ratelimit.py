"""Per-client fixed-window rate limiting.

Counters live in process by default. When several instances serve
the same site, ``RedisRateLimiter`` shares them through Redis.
"""

import logging
import time
from typing import Callable, Dict, Optional

import redis.asyncio as redis
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from nanolink.common.logging_config import get_logger

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


def client_key(request: Request) -> str:
    """Identify the client: first X-Forwarded-For hop, then X-Real-IP, then the peer address."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


class FixedWindowRateLimiter:
    """In-process fixed window counter.

    Windows are aligned to multiples of ``window_seconds``; all counters are
    discarded when a new window begins, so memory stays bounded by the
    number of clients seen in one window.
    """

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.time):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._window_start: Optional[int] = None
        self._counts: Dict[str, int] = {}

    async def allow(self, key: str) -> bool:
        """Count one request for ``key``; False once the limit is exceeded."""
        window_start = int(self._clock() // self.window_seconds) * self.window_seconds
        if window_start != self._window_start:
            self._window_start = window_start
            self._counts.clear()

        count = self._counts.get(key, 0)
        if count >= self.limit:
            return False
        self._counts[key] = count + 1
        return True

    async def close(self) -> None:
        self._counts.clear()


class RedisRateLimiter:
    """Fixed window counter shared through Redis (INCR + EXPIRE).

    If Redis is unreachable the request is allowed and the failure logged.
    """

    KEY_PREFIX = "nanolink:ratelimit"

    def __init__(
        self,
        limit: int,
        window_seconds: int,
        redis_url: Optional[str] = None,
        client: Optional[redis.Redis] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.time,
    ):
        if client is None and redis_url is None:
            raise ValueError("redis_url or client is required")
        self.limit = limit
        self.window_seconds = window_seconds
        self.logger = logger or get_logger("ratelimit")
        self._clock = clock
        self.client = client or redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )

    def _key(self, key: str) -> str:
        window = int(self._clock() // self.window_seconds)
        return f"{self.KEY_PREFIX}:{key}:{window}"

    async def allow(self, key: str) -> bool:
        redis_key = self._key(key)
        try:
            count = await self.client.incr(redis_key)
            if count == 1:
                await self.client.expire(redis_key, self.window_seconds)
        except redis.RedisError as e:
            self.logger.error(f"Rate limit check failed, allowing request: {e}")
            return True
        return count <= self.limit

    async def close(self) -> None:
        await self.client.aclose()
        self.logger.info("Redis connection closed")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients over their request budget with 429."""

    EXEMPT_PATHS = {"/", "/favicon.ico", "/static"}

    def __init__(self, app, limiter, logger: logging.Logger = None):
        super().__init__(app)
        self.limiter = limiter
        self.logger = logger or get_logger("web")

    def _is_exempt(self, path: str) -> bool:
        return path in self.EXEMPT_PATHS or path.startswith("/static/")

    async def dispatch(self, request: Request, call_next: Callable):
        if self._is_exempt(request.url.path):
            return await call_next(request)

        key = client_key(request)
        if not await self.limiter.allow(key):
            self.logger.debug(f"Rate limit exceeded for {key} on {request.method} {request.url.path}")
            return JSONResponse(
                {"error": RATE_LIMIT_MESSAGE},
                status_code=429,
                headers={"Retry-After": str(self.limiter.window_seconds)},
            )

        return await call_next(request)
