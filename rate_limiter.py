import math
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional


class SlidingWindowRateLimiter:
    """
    Per-client request ceiling over a sliding time window.

    Each client key keeps the timestamps of its accepted requests; a request
    is accepted while fewer than `max_requests` of them fall inside the last
    `window_secs` seconds. A key is dropped as soon as its window is empty,
    and every `sweep_every` calls to `allow` all idle keys are swept, so the
    table only holds clients seen within the last window.
    """

    def __init__(
        self,
        max_requests: int,
        window_secs: float,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = 1000,
    ):
        self.max_requests = max_requests
        self.window_secs = window_secs
        self.sweep_every = max(1, sweep_every)
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._calls = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of clients currently tracked."""
        with self._lock:
            return len(self._hits)

    def _live_hits(self, key: str, now: float) -> Optional[Deque[float]]:
        hits = self._hits.get(key)
        if hits is None:
            return None
        while hits and now - hits[0] >= self.window_secs:
            hits.popleft()
        if not hits:
            del self._hits[key]
            return None
        return hits

    def _sweep(self, now: float) -> None:
        for key in list(self._hits):
            self._live_hits(key, now)

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            self._calls += 1
            if self._calls % self.sweep_every == 0:
                self._sweep(now)
            hits = self._live_hits(key, now)
            if (len(hits) if hits else 0) >= self.max_requests:
                return False
            if hits is None:
                hits = self._hits[key] = deque()
            hits.append(now)
            return True

    def retry_after(self, key: str) -> int:
        """Whole seconds until `key` may send another request (0 if it may now)."""
        with self._lock:
            now = self._clock()
            hits = self._live_hits(key, now)
            if not hits or len(hits) < self.max_requests:
                return 0
            return max(1, math.ceil(hits[0] + self.window_secs - now))

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._calls = 0
