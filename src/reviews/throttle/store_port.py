"""Rate-limit store port: where request timestamps per client key live.

The in-memory store suits a single process; a shared store (Redis or a
database table) can implement the same interface for multi-instance
deployments.
"""

from abc import ABC, abstractmethod


class RateLimitStore(ABC):
    @abstractmethod
    def add(self, key: str, timestamp: float) -> None:
        """Record one hit for ``key``."""
        ...

    @abstractmethod
    def count_since(self, key: str, since: float) -> int:
        """Number of hits recorded for ``key`` at or after ``since``."""
        ...

    @abstractmethod
    def evict_before(self, cutoff: float) -> int:
        """Drop hits older than ``cutoff``; returns how many were dropped."""
        ...
