"""Tests for the sliding-window rate limiter and its store."""

import pytest
from reviews.errors import RateLimitExceeded
from reviews.throttle import LIMITS, configure_store, get_rate_limiter, sweep_all
from reviews.throttle.limiter import RateLimiter
from reviews.throttle.memory_store import InMemoryRateLimitStore


def _limiter(limit=2, window=60):
    return RateLimiter("test", InMemoryRateLimitStore(), limit, window, "Slow down")


class TestRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = _limiter()
        limiter.hit("1.2.3.4", now=100)
        limiter.hit("1.2.3.4", now=101)
        with pytest.raises(RateLimitExceeded) as exc:
            limiter.hit("1.2.3.4", now=102)
        assert exc.value.messages == {"rate_limit": ["Slow down"]}

    def test_keys_are_independent(self):
        limiter = _limiter(limit=1)
        limiter.hit("a", now=100)
        limiter.hit("b", now=100)

    def test_window_slides(self):
        limiter = _limiter(limit=1, window=60)
        limiter.hit("a", now=100)
        limiter.hit("a", now=161)

    def test_check_does_not_record(self):
        limiter = _limiter(limit=1)
        limiter.check("a", now=100)
        limiter.check("a", now=100)
        limiter.record("a", now=100)
        with pytest.raises(RateLimitExceeded):
            limiter.check("a", now=101)

    def test_sweep_evicts_entries_older_than_two_windows(self):
        limiter = _limiter(window=60)
        limiter.record("a", now=100)
        limiter.record("b", now=200)
        assert limiter.sweep(now=230) == 1
        assert limiter.store.keys() == ["b"]

    def test_counting_failures_records_only_errors(self):
        limiter = _limiter(limit=1)
        with limiter.counting_failures("a"):
            pass
        assert limiter.store.keys() == []

        with pytest.raises(ValueError):
            with limiter.counting_failures("a"):
                raise ValueError("bad password")

        with pytest.raises(RateLimitExceeded):
            with limiter.counting_failures("a"):
                pass


class TestRegistry:
    def test_named_limiters_use_configured_limits(self):
        limiter = get_rate_limiter("feedback")
        assert (limiter.limit, limiter.window_seconds) == LIMITS["feedback"][:2]
        assert get_rate_limiter("feedback") is limiter

    @pytest.mark.parametrize(
        "name, limit, window",
        [("auth", 5, 15 * 60), ("email", 10, 60 * 60)],
    )
    def test_signup_and_email_limits(self, name, limit, window):
        limiter = get_rate_limiter(name)
        assert (limiter.limit, limiter.window_seconds) == (limit, window)

    def test_unknown_limiter(self):
        with pytest.raises(ValueError):
            get_rate_limiter("uploads")

    def test_configured_store_factory(self):
        stores = []

        def factory():
            stores.append(InMemoryRateLimitStore())
            return stores[-1]

        configure_store(factory)
        assert get_rate_limiter("api").store is stores[0]

    def test_sweep_all(self):
        get_rate_limiter("feedback").record("a", now=0)
        get_rate_limiter("api").record("a", now=0)
        assert sweep_all(now=10_000) == 2
