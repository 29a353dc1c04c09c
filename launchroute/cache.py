"""Size-bounded in-memory cache with optional per-entry TTL.

Eviction is oldest-write first: reads never refresh an entry's position,
only writes do. This keeps frequently read but never re-verified entries
from pinning the cache.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

K = TypeVar("K")
V = TypeVar("V")


@dataclass
class CacheStats:
    """Counters exposed for monitoring."""

    name: str
    size: int
    capacity: int
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    clears: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        total = self.total_requests
        return self.hits / total if total > 0 else 0.0

    @property
    def utilization(self) -> float:
        return self.size / self.capacity if self.capacity > 0 else 0.0

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "size": self.size,
            "capacity": self.capacity,
            "hits": self.hits,
            "misses": self.misses,
            "hitRate": self.hit_rate,
            "sets": self.sets,
            "deletes": self.deletes,
            "clears": self.clears,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "utilization": self.utilization,
        }


class BoundedCache(Generic[K, V]):
    """Mapping with a hard size bound and optional expiry per entry.

    Usage:
        cache: BoundedCache[str, int] = BoundedCache("pairs", max_size=100)
        cache.set("0xabc", 1)              # never expires
        cache.set("0xdef", 2, ttl=60.0)    # expires after 60s
        cache.get("0xabc")
    """

    def __init__(
        self,
        name: str,
        max_size: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be greater than 0")
        self.name = name
        self.max_size = max_size
        self._clock = clock
        # key -> (value, expires_at or None)
        self._entries: OrderedDict[K, tuple[V, float | None]] = OrderedDict()
        self._stats = CacheStats(name=name, size=0, capacity=max_size)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return self.peek(key) is not None  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    def _expired(self, expires_at: float | None) -> bool:
        return expires_at is not None and self._clock() >= expires_at

    def peek(self, key: K) -> V | None:
        """Get a live value without touching hit/miss counters."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._expired(expires_at):
            return None
        return value

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None

        value, expires_at = entry
        if self._expired(expires_at):
            del self._entries[key]
            self._stats.expirations += 1
            self._stats.misses += 1
            return None

        self._stats.hits += 1
        return value

    def set(self, key: K, value: V, ttl: float | None = None) -> None:
        """Store a value; `ttl=None` keeps it until evicted or deleted."""
        expires_at = self._clock() + ttl if ttl is not None else None
        if key in self._entries:
            del self._entries[key]
        self._entries[key] = (value, expires_at)
        self._stats.sets += 1

        while len(self._entries) > self.max_size:
            evicted_key, _ = self._entries.popitem(last=False)
            self._stats.evictions += 1
            logger.debug("cache_evicted", cache=self.name, key=str(evicted_key))

    def delete(self, key: K) -> bool:
        if key in self._entries:
            del self._entries[key]
            self._stats.deletes += 1
            return True
        return False

    def clear(self) -> None:
        self._entries.clear()
        self._stats.clears += 1

    def keys(self) -> list[K]:
        """Keys of live entries, oldest write first."""
        return [k for k, (_, exp) in self._entries.items() if not self._expired(exp)]

    def items(self) -> list[tuple[K, V]]:
        return [(k, v) for k, (v, exp) in self._entries.items() if not self._expired(exp)]

    def remaining_ttl(self, key: K) -> float | None:
        """Seconds until expiry, None for permanent or missing entries."""
        entry = self._entries.get(key)
        if entry is None or entry[1] is None:
            return None
        return max(entry[1] - self._clock(), 0.0)

    def cleanup(self) -> int:
        """Drop expired entries and return how many were removed."""
        expired = [k for k, (_, exp) in self._entries.items() if self._expired(exp)]
        for key in expired:
            del self._entries[key]
        self._stats.expirations += len(expired)
        return len(expired)

    def stats(self) -> CacheStats:
        self._stats.size = len(self._entries)
        return CacheStats(**vars(self._stats))

    def reset_stats(self) -> None:
        self._stats = CacheStats(name=self.name, size=len(self._entries), capacity=self.max_size)


__all__ = ["BoundedCache", "CacheStats"]
