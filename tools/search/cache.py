"""Thread-safe bounded TTL cache for search payloads."""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: float


def normalize_key(text: str) -> str:
    """Cache key for a query: trimmed and lowercased."""
    return text.strip().lower()


class SearchCache:
    """
    In-memory LRU cache with TTL (Time To Live).

    Keys are normalized query text. An entry is valid only while
    now - stored_at < ttl; expired entries count as misses and are dropped
    when read. When max_entries is exceeded the least recently used entry
    is evicted. threading.Lock guards access under FastAPI's thread pool.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            ttl_seconds: Time to live in seconds for cached entries
            max_entries: Upper bound on stored entries
            clock: Monotonic time source (injectable for tests)
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, text: str) -> Any | None:
        """
        Get cached value if present and not expired.

        Returns:
            Cached value, or None on a miss
        """
        key = normalize_key(text)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self._ttl:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry.value

    def set(self, text: str, value: Any) -> None:
        key = normalize_key(text)
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
