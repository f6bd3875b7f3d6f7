# vgen/core/rate_limit.py
"""
Fixed-window rate limiters (app-wide and auth routes), backed by `limits`.

One instance is created per application (see main.create_app) and stored on
app.state, so every app and every test gets its own in-memory counter table.
"""
import time

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter as _FixedWindowStrategy


class FixedWindowRateLimiter:
    """
    Count hits per key inside fixed windows of `window_seconds`.

    A key's window starts on its first hit; once the window elapses the
    counter starts over.
    """

    def __init__(self, max_hits: int, window_seconds: int, namespace: str = "auth"):
        self.max_hits = max_hits
        self.window_seconds = window_seconds
        self._item = RateLimitItemPerSecond(max_hits, window_seconds, namespace=namespace)
        self._storage = MemoryStorage()
        self._strategy = _FixedWindowStrategy(self._storage)

    def hit(self, key: str) -> bool:
        """Record one attempt for `key`. Returns False when the limit is exceeded."""
        return self._strategy.hit(self._item, key)

    def remaining(self, key: str) -> int:
        return self._strategy.get_window_stats(self._item, key).remaining

    def retry_after(self, key: str) -> int:
        """Seconds until the current window for `key` resets (0 if none)."""
        stats = self._strategy.get_window_stats(self._item, key)
        return max(0, int(stats.reset_time - time.time()))

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self._storage.reset()
        else:
            self._strategy.clear(self._item, key)
