"""
Fixed-window rate limiting for anonymous endpoints.

Counters are keyed by ``{name}_{client_ip}``. The first hit in a window
starts the counter with a TTL equal to the window; the window resets only
when that TTL lapses. Counters are process-local, so several app instances
each count separately.
"""
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request, Response, status

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


class RateLimitStore(ABC):
    @abstractmethod
    def hit(self, key: str, window_seconds: float) -> int:
        """Increment the counter for ``key`` and return the new count."""


class InMemoryRateLimitStore(RateLimitStore):
    """Dict of ``key -> (count, expires_at)`` guarded by a lock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._counters: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, window_seconds: float) -> int:
        now = self.clock()
        with self._lock:
            count, expires_at = self._counters.get(key, (0, 0.0))
            if expires_at <= now:
                count, expires_at = 0, now + window_seconds
            count += 1
            self._counters[key] = (count, expires_at)
            self._purge(now)
            return count

    def _purge(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._counters.items() if expires_at <= now]
        for key in expired:
            del self._counters[key]


class RateLimiter:
    """
    FastAPI dependency enforcing ``limit`` requests per ``window_seconds``.

    Use as ``Depends(limiter)``. Rejected requests get a 429 and never reach
    the endpoint; allowed ones carry ``X-RateLimit-Limit`` and
    ``X-RateLimit-Remaining`` headers.
    """

    def __init__(self, store: RateLimitStore, name: str, limit: int, window_seconds: float):
        self.store = store
        self.name = name
        self.limit = limit
        self.window_seconds = window_seconds

    def check(self, client_ip: str) -> Tuple[bool, int]:
        """Count one request from ``client_ip``. Returns (allowed, remaining)."""
        count = self.store.hit(f"{self.name}_{client_ip}", self.window_seconds)
        return count <= self.limit, max(self.limit - count, 0)

    def __call__(self, request: Request, response: Response) -> None:
        client_ip = request.client.host if request.client else "unknown"
        allowed, remaining = self.check(client_ip)
        if not allowed:
            logger.warning(f"Rate limit '{self.name}' exceeded for {client_ip}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=RATE_LIMIT_MESSAGE,
            )
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
