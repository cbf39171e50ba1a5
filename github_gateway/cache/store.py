# =============================================================================
# GitHub Gateway - Cache Store
# =============================================================================
"""
Cache store contract and the in-process implementation.

The gateway only needs ``get``/``set``/``remove`` with a per-entry TTL.
Stores own their concurrency control so the gateway never locks.
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheStore(Protocol):
    """Key-value store with per-entry expiry."""

    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when absent or expired."""
        ...

    async def set(self, key: str, value: Any, ttl: timedelta) -> None:
        """Store a value for the given time-to-live."""
        ...

    async def remove(self, key: str) -> None:
        """Remove a key if present."""
        ...


@dataclass
class CacheEntry:
    """
    A cached value with its absolute expiry.

    Attributes:
        data: The cached value.
        expires_at: Clock reading after which the entry is stale.
    """

    data: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if the entry has outlived its TTL."""
        return now >= self.expires_at


class MemoryCacheStore:
    """
    In-process cache store.

    Expiry is evaluated lazily when a key is read; there is no background
    sweeper. A lock guards the dictionary so the store is also safe to
    share between threads.

    Example:
        cache = MemoryCacheStore()
        await cache.set("labels_acme_widgets", labels, timedelta(hours=1))
        labels = await cache.get("labels_acme_widgets")
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize the store.

        Args:
            clock: Monotonic time source in seconds; injectable for tests.
        """
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock

    async def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            return entry.data

    async def set(self, key: str, value: Any, ttl: timedelta) -> None:
        entry = CacheEntry(data=value, expires_at=self._clock() + ttl.total_seconds())
        with self._lock:
            self._entries[key] = entry

    async def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> int:
        """
        Clear all cache entries.

        Returns:
            Number of entries cleared.
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Membership ignores expiry; use ``get`` for a TTL-aware check."""
        with self._lock:
            return key in self._entries
