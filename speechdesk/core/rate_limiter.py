"""Per-client sliding window request counter.

Each key keeps the timestamps of its requests from the last ``window``
seconds, so the budget refills one request at a time instead of all at once.
"""

import time
from collections import deque
from collections.abc import Callable


class SlidingWindowRateLimiter:
    def __init__(
        self,
        limit: int,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_prune = clock()

    def __len__(self) -> int:
        return len(self._hits)

    def check(self, key: str) -> tuple[bool, dict[str, str]]:
        """Record a request for ``key`` and report whether it fits the budget.

        Rejected requests are not recorded, so a client hammering the proxy
        does not push its own reset time further out.
        """
        now = self._clock()
        if now - self._last_prune >= self.window:
            self._prune(now)

        hits = self._hits.setdefault(key, deque())
        self._expire(hits, now)

        allowed = len(hits) < self.limit
        if allowed:
            hits.append(now)

        # The oldest hit leaving the window frees the next slot
        reset_in = max(0.0, hits[0] + self.window - now) if hits else 0.0
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.limit - len(hits)),
            "X-RateLimit-Reset": str(int(reset_in + 0.999)),
        }
        if not allowed:
            headers["Retry-After"] = str(max(1, int(reset_in + 0.999)))
        return allowed, headers

    def clear(self) -> None:
        self._hits.clear()

    def _prune(self, now: float) -> None:
        self._last_prune = now
        idle = []
        for key, hits in self._hits.items():
            self._expire(hits, now)
            if not hits:
                idle.append(key)
        for key in idle:
            del self._hits[key]

    def _expire(self, hits: deque[float], now: float) -> None:
        cutoff = now - self.window
        while hits and hits[0] <= cutoff:
            hits.popleft()
