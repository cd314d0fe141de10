"""
In-memory LRU cache with TTL expiration.
Holds raw Places text-search payloads across requests in the same worker.
"""
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional


class TTLCache:
    """TTL-aware LRU cache. Entries older than the TTL are never returned."""

    def __init__(self, max_size: int = 500, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._cache: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def _live_entry(self, key: str) -> Optional[tuple[float, Any]]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if self._clock() - entry[0] >= self._ttl:
            del self._cache[key]
            return None
        return entry

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self.misses += 1
                return None
            self._cache.move_to_end(key)
            self.hits += 1
            return entry[1]

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            self._cache[key] = (self._clock(), value)
            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> dict:
        total = self.hits + self.misses
        return {
            "size": len(self._cache),
            "max_size": self._max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / total * 100, 1) if total > 0 else 0.0,
        }
