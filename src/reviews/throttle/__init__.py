"""Named rate limiters.

``api``:      general request budget per client address.
``auth``:     failed signups and logins per client, five per 15 minutes.
``email``:    verification emails requested per client, ten per hour.
``feedback``: one feedback submission per client per minute.
"""

from reviews.throttle.limiter import RateLimiter
from reviews.throttle.memory_store import InMemoryRateLimitStore
from reviews.throttle.store_port import RateLimitStore

LIMITS = {
    "api": (250, 15 * 60, "Too many requests from this IP, please try again later"),
    "auth": (5, 15 * 60, "Too many authentication attempts, please try again after 15 minutes"),
    "email": (10, 60 * 60, "Too many verification emails sent, please try again later"),
    "feedback": (1, 60, "Please wait before submitting again."),
}

_limiters: dict[str, RateLimiter] = {}
_store_factory = InMemoryRateLimitStore


def configure_store(factory) -> None:
    """Use ``factory()`` to build the store of every limiter created from now on."""
    global _store_factory
    _store_factory = factory
    _limiters.clear()


def get_rate_limiter(name: str) -> RateLimiter:
    if name not in _limiters:
        if name not in LIMITS:
            raise ValueError(f"Unknown rate limiter: {name}")
        limit, window, message = LIMITS[name]
        store: RateLimitStore = _store_factory()
        _limiters[name] = RateLimiter(name, store, limit, window, message)
    return _limiters[name]


def sweep_all(now: float | None = None) -> int:
    return sum(limiter.sweep(now) for limiter in list(_limiters.values()))


def reset_rate_limiters() -> None:
    """Forget every limiter and its history (useful for testing)."""
    global _store_factory
    _store_factory = InMemoryRateLimitStore
    _limiters.clear()
