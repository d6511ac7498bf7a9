"""Process-local rate-limit store."""

import threading

from reviews.throttle.store_port import RateLimitStore


class InMemoryRateLimitStore(RateLimitStore):
    def __init__(self):
        self._hits: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def add(self, key: str, timestamp: float) -> None:
        with self._lock:
            self._hits.setdefault(key, []).append(timestamp)

    def count_since(self, key: str, since: float) -> int:
        with self._lock:
            return sum(1 for ts in self._hits.get(key, ()) if ts >= since)

    def evict_before(self, cutoff: float) -> int:
        evicted = 0
        with self._lock:
            for key in list(self._hits):
                kept = [ts for ts in self._hits[key] if ts >= cutoff]
                evicted += len(self._hits[key]) - len(kept)
                if kept:
                    self._hits[key] = kept
                else:
                    del self._hits[key]
        return evicted

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._hits)
