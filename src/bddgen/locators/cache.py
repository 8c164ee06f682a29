"""
Thread-safe memo of winning locator strategies.

One StrategyCache is shared by every resolver in a test session. Entries map a
candidate list's cache key to the index of the strategy that last resolved.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Counters for cache effectiveness."""

    hits: int
    misses: int
    invalidations: int
    size: int


class StrategyCache:
    """
    Lock-guarded map from cache key to winning strategy index.

    Invalidation is compare-and-remove: a thread that saw a stale index only
    removes the entry if it still holds that index, so it cannot discard a
    fresher result written by another thread meanwhile.
    """

    def __init__(self, enabled: bool = True) -> None:
        self._entries: dict[str, int] = {}
        self._lock = threading.Lock()
        self._enabled = enabled
        self._hits = 0
        self._misses = 0
        self._invalidations = 0
        self._log = logger.bind(component="strategy_cache")

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Turn caching on or off; turning it off drops all entries."""
        with self._lock:
            self._enabled = enabled
            if not enabled:
                self._entries.clear()
        self._log.info("Strategy cache toggled", enabled=enabled)

    def lookup(self, key: str) -> int | None:
        """Winning index for a key, or None."""
        with self._lock:
            if not self._enabled:
                return None
            index = self._entries.get(key)
            if index is None:
                self._misses += 1
            else:
                self._hits += 1
            return index

    def store(self, key: str, index: int) -> None:
        """Remember the winning index for a key (atomic replace)."""
        with self._lock:
            if self._enabled:
                self._entries[key] = index

    def invalidate(self, key: str, expected_index: int | None = None) -> bool:
        """
        Remove a stale entry.

        Args:
            key: Cache key to remove
            expected_index: Only remove if the entry still holds this index

        Returns:
            True if an entry was removed
        """
        with self._lock:
            current = self._entries.get(key)
            if current is None:
                return False
            if expected_index is not None and current != expected_index:
                return False
            del self._entries[key]
            self._invalidations += 1
            return True

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()
        self._log.debug("Strategy cache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                invalidations=self._invalidations,
                size=len(self._entries),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
