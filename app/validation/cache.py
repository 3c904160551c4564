"""Result cache — bounded, time-to-live store of Outcomes, one per validator kind.

``ResultCache`` is a single namespace; ``CacheRegistry`` holds one
``ResultCache`` per validator kind so namespaces never share keys or
eviction budgets.

Policy (deterministic):
  - TTL counts from the last WRITE. Reads never refresh ``written_at``.
  - Eviction is least-recently-used. A hit moves the key to the most-recent
    end of an ``OrderedDict`` (O(1) ``move_to_end``). When a new key would
    exceed ``max_entries``, expired entries are purged first and then the
    least-recently-used entry is evicted.

Thread-safety:
  All map access happens under an internal ``threading.Lock``; callers need
  no external locking. ``compute()`` runs OUTSIDE the lock, so two concurrent
  misses for the same key may both compute. That is acceptable: rules are
  pure, both computations yield the same Outcome, and the last write wins.

Failure policy:
  Cache operations never fail the caller. If storing raises, the error is
  logged and the freshly computed Outcome is returned (the cache degrades to
  recomputation, never to a wrong answer).
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Hashable, Optional

from app.errors import ConfigurationError
from app.models.outcome import Outcome
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """One stored Outcome and the monotonic time (seconds) it was written."""

    key: Hashable
    value: Outcome
    written_at: float


@dataclass
class CacheStats:
    """Counters for one namespace, reported by ``/health``."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
        }


class ResultCache:
    """Bounded TTL + LRU cache of Outcomes for a single namespace.

    Args:
        ttl_seconds: Entry lifetime from its last write. Must be > 0.
        max_entries: Maximum number of entries held. Must be > 0.
        clock:       Monotonic clock in seconds. Injectable for tests.
        name:        Namespace name, used in log lines.

    Raises:
        ConfigurationError: On a non-positive TTL or capacity.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
        name: str = "default",
    ) -> None:
        if ttl_seconds <= 0:
            raise ConfigurationError(f"cache TTL must be positive (namespace '{name}')")
        if max_entries <= 0:
            raise ConfigurationError(f"cache max entries must be positive (namespace '{name}')")
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry] = OrderedDict()
        # Same keys in write order; expired keys always form a prefix
        self._written: OrderedDict[Hashable, None] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = CacheStats()

    # ── Public API ────────────────────────────────────────────────────────────

    def get_or_compute(self, key: Hashable, compute: Callable[[], Outcome]) -> Outcome:
        """Return the cached Outcome for ``key`` or compute, store and return it.

        ``compute`` is not invoked on a hit and is invoked exactly once on a
        miss or expiry.
        """
        cached = self._get(key)
        if cached is not None:
            return cached
        value = compute()
        try:
            self._set(key, value)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Result cache store failed — returning uncached result",
                namespace=self.name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._written.clear()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        """True when ``key`` holds a live (unexpired) entry. Does not touch recency."""
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._is_expired(entry, self._clock())

    # ── Internals ─────────────────────────────────────────────────────────────

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.written_at >= self.ttl_seconds

    def _get(self, key: Hashable) -> Optional[Outcome]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return None
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                del self._written[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                return None
            self._entries.move_to_end(key)  # mark as recently used
            self._stats.hits += 1
            return entry.value

    def _set(self, key: Hashable, value: Outcome) -> None:
        with self._lock:
            now = self._clock()
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_entries:
                self._purge_expired(now)
                while len(self._entries) >= self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)  # least-recently-used
                    del self._written[evicted]
                    self._stats.evictions += 1
            self._entries[key] = CacheEntry(key=key, value=value, written_at=now)
            self._written[key] = None
            self._written.move_to_end(key)

    def _purge_expired(self, now: float) -> None:
        """Drop expired entries, oldest write first. Stops at the first live one."""
        while self._written:
            oldest = next(iter(self._written))
            if not self._is_expired(self._entries[oldest], now):
                break
            del self._written[oldest]
            del self._entries[oldest]
            self._stats.expirations += 1


class CacheRegistry:
    """Namespaced collection of ResultCaches — one per validator kind.

    Usage::

        registry = CacheRegistry()
        registry.register("email", ttl_seconds=10, max_entries=10_000)
        outcome = registry.get_or_compute("email", "abc@mail.com", compute)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._namespaces: dict[str, ResultCache] = {}

    def register(self, namespace: str, ttl_seconds: float, max_entries: int) -> ResultCache:
        """Create the cache for ``namespace``.

        Raises:
            ConfigurationError: If the namespace already exists or the budget is invalid.
        """
        if namespace in self._namespaces:
            raise ConfigurationError(f"cache namespace '{namespace}' is already registered")
        cache = ResultCache(
            ttl_seconds=ttl_seconds,
            max_entries=max_entries,
            clock=self._clock,
            name=namespace,
        )
        self._namespaces[namespace] = cache
        return cache

    def get_or_compute(
        self,
        namespace: str,
        key: Hashable,
        compute: Callable[[], Outcome],
    ) -> Outcome:
        return self._namespaces[namespace].get_or_compute(key, compute)

    def clear(self) -> None:
        for cache in self._namespaces.values():
            cache.clear()

    def stats(self) -> dict[str, dict[str, int]]:
        return {
            name: {**cache.stats.as_dict(), "size": len(cache)}
            for name, cache in self._namespaces.items()
        }

    def __contains__(self, namespace: str) -> bool:
        return namespace in self._namespaces
