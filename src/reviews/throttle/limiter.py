"""Sliding-window rate limiter over a pluggable store.

Checking never evicts; stale entries are removed by ``sweep``, which the
application runs on a schedule.
"""

import contextlib
import time

from reviews.errors import RateLimitExceeded
from reviews.throttle.store_port import RateLimitStore
from reviews.utils.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    def __init__(self, name: str, store: RateLimitStore, limit: int, window_seconds: float, message: str):
        self.name = name
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self.message = message

    def check(self, key: str, now: float | None = None) -> None:
        """Raise ``RateLimitExceeded`` if ``key`` has used up its window."""
        now = time.time() if now is None else now
        if self.store.count_since(key, now - self.window_seconds) >= self.limit:
            logger.info("Rate limit exceeded", limiter=self.name, key=key)
            raise RateLimitExceeded({"rate_limit": [self.message]})

    def record(self, key: str, now: float | None = None) -> None:
        self.store.add(key, time.time() if now is None else now)

    def hit(self, key: str, now: float | None = None) -> None:
        """Check and record in one step."""
        now = time.time() if now is None else now
        self.check(key, now)
        self.record(key, now)

    @contextlib.contextmanager
    def counting_failures(self, key: str):
        """Refuse once ``key`` has used up its window; only attempts that raise are recorded."""
        self.check(key)
        try:
            yield
        except Exception:
            self.record(key)
            raise

    def sweep(self, now: float | None = None) -> int:
        """Evict entries older than two windows."""
        now = time.time() if now is None else now
        evicted = self.store.evict_before(now - 2 * self.window_seconds)
        logger.debug("Rate limit sweep", limiter=self.name, evicted=evicted)
        return evicted
