"""Bounded in-memory TTL cache with FIFO eviction.

Entries expire lazily: staleness is only checked when a key is read, so a
stale entry keeps its slot until it is read, deleted, or evicted to make
room. When a new key would push the cache past ``max_size``, the entry
inserted earliest is dropped, whatever its TTL or how recently it was read.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL = 300.0


@dataclass
class CacheEntry:
    """A stored value with the clock reading it was stored at."""

    value: Any
    stored_at: float
    ttl: float

    def is_stale(self, now: float) -> bool:
        return self.ttl <= 0 or now - self.stored_at > self.ttl


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters for a cache instance."""

    size: int
    max_size: int
    hits: int
    misses: int
    evictions: int
    expirations: int


class BoundedTTLCache:
    """Key/value cache holding at most ``max_size`` entries, each with its own TTL.

    All operations are guarded by a single lock, so one instance can be
    shared between request-handling threads.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl: float = DEFAULT_TTL,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        self._max_size = max_size
        self._default_ttl = default_ttl
        self._clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0
        self._generation = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def generation(self) -> int:
        """Counter bumped by every explicit removal (delete, remove, clear, drain)."""
        with self._lock:
            return self._generation

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``.

        A new key arriving at capacity evicts the oldest inserted entry first.
        Overwriting an existing key replaces its value, timestamp and TTL but
        keeps its place in the eviction order. A ``ttl`` of zero or less makes
        the entry stale straight away.
        """
        entry = CacheEntry(
            value=value,
            stored_at=self._clock(),
            ttl=self._default_ttl if ttl is None else ttl,
        )
        with self._lock:
            self._insert(key, entry)

    def set_if_generation(self, key: str, value: Any, generation: int, ttl: float | None = None) -> bool:
        """Store ``value`` only if nothing was removed since ``generation`` was read.

        Read-through loaders use this so a result computed before a concurrent
        invalidation is dropped instead of cached. Returns whether it was stored.
        """
        entry = CacheEntry(
            value=value,
            stored_at=self._clock(),
            ttl=self._default_ttl if ttl is None else ttl,
        )
        with self._lock:
            if generation != self._generation:
                return False
            self._insert(key, entry)
            return True

    def _insert(self, key: str, entry: CacheEntry) -> None:
        # Caller holds the lock.
        if key not in self._store and len(self._store) >= self._max_size:
            self._store.popitem(last=False)
            self._evictions += 1
        self._store[key] = entry

    def get(self, key: str, default: Any = None) -> Any:
        """Return the fresh value for ``key``, or ``default`` if absent or stale."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return default
            if entry.is_stale(self._clock()):
                del self._store[key]
                self._expirations += 1
                self._misses += 1
                return default
            self._hits += 1
            return entry.value

    def delete(self, key: str) -> None:
        self.remove(key)

    def remove(self, key: str) -> bool:
        """Delete ``key`` and report whether it was stored."""
        with self._lock:
            self._generation += 1
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self.drain()

    def drain(self) -> list[str]:
        """Remove every entry and return the keys that were stored."""
        with self._lock:
            self._generation += 1
            removed = list(self._store)
            self._store.clear()
            return removed

    def size(self) -> int:
        """Number of stored entries, including stale ones not yet read."""
        with self._lock:
            return len(self._store)

    def keys(self) -> list[str]:
        """Stored keys, oldest insertion first."""
        with self._lock:
            return list(self._store)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._store),
                max_size=self._max_size,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._store.get(key)  # type: ignore[call-overload]
            if entry is None:
                return False
            if entry.is_stale(self._clock()):
                del self._store[key]  # type: ignore[arg-type]
                self._expirations += 1
                return False
            return True

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return (
            f"BoundedTTLCache(max_size={self._max_size}, default_ttl={self._default_ttl}, "
            f"size={self.size()})"
        )
