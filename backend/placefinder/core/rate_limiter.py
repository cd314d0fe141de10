import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable

from placefinder.core.errors import RateLimitError
from placefinder.core.logger import logs


@dataclass(frozen=True)
class RateLimitState:
    limit: int
    remaining: int
    reset_after: float


class SlidingWindowRateLimiter:
    """
    Per-client sliding-window log: at most `limit` accepted requests in any
    rolling `window_seconds` interval. Rejected requests are not recorded.
    """

    def __init__(
        self,
        limit: int = 60,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = 10_000,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, timestamps: deque, now: float) -> None:
        cutoff = now - self.window_seconds
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()

    def _sweep(self, now: float) -> None:
        for key in list(self._hits):
            self._prune(self._hits[key], now)
            if not self._hits[key]:
                del self._hits[key]

    def hit(self, key: str) -> RateLimitState:
        """Record one request for `key`. Raises RateLimitError when the window is full."""
        with self._lock:
            now = self._clock()
            if len(self._hits) > self._sweep_threshold:
                self._sweep(now)

            timestamps = self._hits.setdefault(key, deque())
            self._prune(timestamps, now)

            if len(timestamps) >= self.limit:
                retry_after = timestamps[0] + self.window_seconds - now
                logs.log(logging.WARNING, f"Rate limit exceeded for {key}", extra={"retry_after": round(retry_after, 2)})
                raise RateLimitError(retry_after=retry_after, limit=self.limit)

            timestamps.append(now)
            return RateLimitState(
                limit=self.limit,
                remaining=self.limit - len(timestamps),
                reset_after=timestamps[0] + self.window_seconds - now,
            )

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
