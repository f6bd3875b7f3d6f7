"""
Unit tests for core.rate_limit module.
"""
from vgen.core.rate_limit import FixedWindowRateLimiter


class TestFixedWindowRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = FixedWindowRateLimiter(max_hits=3, window_seconds=60)
        assert [limiter.hit("1.2.3.4") for _ in range(4)] == [True, True, True, False]

    def test_keys_are_independent(self):
        limiter = FixedWindowRateLimiter(max_hits=1, window_seconds=60)
        assert limiter.hit("a") is True
        assert limiter.hit("b") is True
        assert limiter.hit("a") is False

    def test_instances_do_not_share_counters(self):
        first = FixedWindowRateLimiter(max_hits=1, window_seconds=60)
        second = FixedWindowRateLimiter(max_hits=1, window_seconds=60)
        assert first.hit("a") is True
        assert second.hit("a") is True

    def test_remaining(self):
        limiter = FixedWindowRateLimiter(max_hits=5, window_seconds=60)
        limiter.hit("a")
        limiter.hit("a")
        assert limiter.remaining("a") == 3

    def test_retry_after(self):
        limiter = FixedWindowRateLimiter(max_hits=1, window_seconds=900)
        assert limiter.retry_after("a") == 0
        limiter.hit("a")
        assert 890 <= limiter.retry_after("a") <= 900

    def test_reset(self):
        limiter = FixedWindowRateLimiter(max_hits=1, window_seconds=60)
        limiter.hit("a")
        limiter.hit("b")
        limiter.reset("a")
        assert limiter.hit("a") is True
        assert limiter.hit("b") is False
        limiter.reset()
        assert limiter.hit("b") is True
