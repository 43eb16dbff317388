"""Bounded Time-To-Live (TTL) response cache with 5-minute expiry."""
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import logging
import threading
import time

from .cache_key import generate_response_cache_key

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000
DEFAULT_TTL_MS = 300_000


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    """A single cached response and the time (ms since epoch) it was stored."""

    key: str
    value: Any
    inserted_at: int


class ResponseCache:
    """
    In-memory response cache bounded by capacity and time-to-live (TTL).

    Entries are keyed by (message, model, language). Expired entries are
    removed lazily when read; when the cache is full the oldest *inserted*
    entry is evicted (FIFO). Reads never change eviction order.

    Thread-safe: each operation holds the lock for its whole
    check-evict-insert or read-check-expire sequence.

    Attributes:
        capacity: Maximum number of entries (default: 1000)
        ttl_ms: Time-to-live in milliseconds (default: 300000 = 5 minutes)

    Example:
        >>> cache = ResponseCache(capacity=1000, ttl_ms=300000)
        >>> cache.set("Explain photosynthesis", "sonar-pro", "en", "Photosynthesis is...")
        >>> cache.get("Explain photosynthesis", "sonar-pro", "en")
        'Photosynthesis is...'
        >>> cache.get("Explain photosynthesis", "sonar-pro", "hi") is None
        True
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the response cache.

        Args:
            capacity: Maximum number of entries held at once
            ttl_ms: Maximum entry age in milliseconds
            clock: Zero-argument callable returning the current time in ms
                (defaults to the wall clock; tests inject a fake one)
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if ttl_ms < 0:
            raise ValueError(f"ttl_ms must not be negative, got {ttl_ms}")

        self.capacity = capacity
        self.ttl_ms = ttl_ms
        self._clock = clock or _wall_clock_ms
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    @staticmethod
    def derive_key(message: Any, model: Any, language: Any) -> str:
        """Return the cache key for a (message, model, language) triple."""
        return generate_response_cache_key(message, model, language)

    def _is_expired(self, entry: CacheEntry, now: int) -> bool:
        return now - entry.inserted_at > self.ttl_ms

    def get(self, message: Any, model: Any, language: Any) -> Optional[Any]:
        """
        Retrieve a cached response if it exists and hasn't expired.

        Args:
            message: Message text
            model: Model identifier
            language: Language code

        Returns:
            Cached value if present and TTL not exceeded, None otherwise

        Thread-safe.
        """
        key = self.derive_key(message, model, language)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._is_expired(entry, self._clock()):
                # Expired, remove and report a miss
                del self._entries[key]
                self._expirations += 1
                self._misses += 1
                logger.debug(f"Response cache entry expired: {key}")
                return None

            self._hits += 1
            return entry.value

    def set(self, message: Any, model: Any, language: Any, value: Any) -> None:
        """
        Store a response with the current timestamp.

        When the cache is at capacity the earliest-inserted entry is evicted
        first, whether or not it is still fresh. Overwriting an existing key
        keeps its position and refreshes value and timestamp.

        Args:
            message: Message text
            model: Model identifier
            language: Language code
            value: Response payload to cache (opaque to the cache)

        Thread-safe.
        """
        key = self.derive_key(message, model, language)
        with self._lock:
            if len(self._entries) >= self.capacity:
                oldest_key, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Response cache full ({self.capacity}), evicted {oldest_key}")

            self._entries[key] = CacheEntry(key=key, value=value, inserted_at=self._clock())

    def delete(self, message: Any, model: Any, language: Any) -> bool:
        """
        Manually invalidate one cached response.

        Returns:
            True if an entry was removed

        Thread-safe.
        """
        key = self.derive_key(message, model, language)
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        """
        Clear all cache entries.

        Returns:
            Number of entries removed

        Thread-safe.
        """
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            return removed

    def size(self) -> int:
        """
        Get current number of entries, including expired ones not yet read.

        Returns:
            Count of cached entries
        """
        with self._lock:
            return len(self._entries)

    def prune_expired(self) -> int:
        """
        Remove all expired entries from cache.

        Returns:
            Number of entries removed

        Thread-safe.
        """
        with self._lock:
            now = self._clock()
            expired_keys = [
                key for key, entry in self._entries.items() if self._is_expired(entry, now)
            ]

            for key in expired_keys:
                del self._entries[key]

            self._expirations += len(expired_keys)
            return len(expired_keys)

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with size, capacity, ttl_ms and the cumulative hit, miss,
            eviction and expiration counters

        Example:
            >>> stats = cache.stats()
            >>> print(f"Cache: {stats['size']}/{stats['capacity']} items")
            Cache: 5/1000 items
        """
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "ttl_ms": self.ttl_ms,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }

    def reset_stats(self) -> None:
        """Zero the hit, miss, eviction and expiration counters."""
        with self._lock:
            self._hits = 0
            self._misses = 0
            self._evictions = 0
            self._expirations = 0
