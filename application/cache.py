"""
Explicit plan cache.

Replaces implicit, globally shared client-side caches with one object that
is created by the engine factory and handed to the use cases that need it.

Declared keys:
- ``microcycle:<id>``  fully loaded microcycle tree
- ``catalog:<id>``     exercise catalog entry
- ``student:<id>``     a student's mesocycle list

Entries carry tags (``mesocycle:<id>``, ``student:<id>``) so writes can
invalidate everything they touch:
- a mesocycle status change invalidates the student's tag
- a new microcycle invalidates the mesocycle's tag

Every namespace has its own TTL. The cache is bounded; when full, expired
entries go first, then the oldest ones.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional

from domain.models import EntityId

logger = logging.getLogger(__name__)


class CacheNamespace(str, Enum):
    """Kinds of cached data, each with its own TTL."""

    MICROCYCLE = "microcycle"
    CATALOG = "catalog"
    STUDENT = "student"


@dataclass(frozen=True)
class CacheKey:
    """Namespaced cache key."""

    namespace: CacheNamespace
    entity_id: str

    @classmethod
    def microcycle(cls, microcycle_id: EntityId) -> "CacheKey":
        return cls(CacheNamespace.MICROCYCLE, str(microcycle_id))

    @classmethod
    def catalog(cls, exercise_id: EntityId) -> "CacheKey":
        return cls(CacheNamespace.CATALOG, str(exercise_id))

    @classmethod
    def student(cls, student_id: EntityId) -> "CacheKey":
        return cls(CacheNamespace.STUDENT, str(student_id))

    def __str__(self) -> str:
        return f"{self.namespace.value}:{self.entity_id}"


def mesocycle_tag(mesocycle_id: EntityId) -> str:
    return f"mesocycle:{mesocycle_id}"


def student_tag(student_id: EntityId) -> str:
    return f"student:{student_id}"


@dataclass
class CacheEntry:
    """Cache entry with TTL support."""

    value: Any
    created_at: float
    tags: FrozenSet[str] = field(default_factory=frozenset)


DEFAULT_TTL_SECONDS: Dict[CacheNamespace, float] = {
    CacheNamespace.MICROCYCLE: 300.0,  # 5 minutes
    CacheNamespace.CATALOG: 1800.0,  # 30 minutes
    CacheNamespace.STUDENT: 300.0,
}


class PlanCache:
    """
    Thread-safe TTL cache for plan reads.

    Usage:
        >>> cache = PlanCache()
        >>> key = CacheKey.microcycle(42)
        >>> cache.set(key, week, tags=[mesocycle_tag(week.mesocycle_id)])
        >>> cache.get(key)
        >>> cache.invalidate_mesocycle(week.mesocycle_id)
    """

    def __init__(
        self,
        ttl_seconds: Optional[Dict[CacheNamespace, float]] = None,
        max_entries: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Per-namespace TTL overrides
            max_entries: Maximum number of entries kept
            clock: Monotonic time source (injectable for tests)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl = {**DEFAULT_TTL_SECONDS, **(ttl_seconds or {})}
        self._max_entries = max_entries
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, key: CacheKey, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self._ttl[key.namespace]

    def get(self, key: CacheKey) -> Optional[Any]:
        """
        Get a value if present and not expired.

        Returns:
            Cached value, or None on miss/expiry
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(key, entry, self._clock()):
                del self._entries[key]
                return None
            logger.debug(f"Plan cache hit for {key}")
            return entry.value

    def set(self, key: CacheKey, value: Any, *, tags: Iterable[str] = ()) -> None:
        """Store a value, evicting old entries if the cache is full."""
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_entries:
                self._evict()
            self._entries[key] = CacheEntry(
                value=value,
                created_at=self._clock(),
                tags=frozenset(tags),
            )

    def _evict(self) -> None:
        """Drop expired entries, then the oldest one if still full."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if self._is_expired(k, e, now)]
        for key in expired:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k].created_at)
            del self._entries[oldest]

    def invalidate(self, key: CacheKey) -> bool:
        """Remove one key. Returns True if it was cached."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_tag(self, tag: str) -> int:
        """Remove every entry carrying ``tag``. Returns the number removed."""
        with self._lock:
            doomed = [k for k, e in self._entries.items() if tag in e.tags]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.debug(f"Invalidated {len(doomed)} plan cache entries tagged {tag}")
        return len(doomed)

    def invalidate_student(self, student_id: EntityId) -> int:
        """Trigger for any write to a student's plan."""
        removed = int(self.invalidate(CacheKey.student(student_id)))
        return removed + self.invalidate_tag(student_tag(student_id))

    def invalidate_mesocycle(self, mesocycle_id: EntityId) -> int:
        """Trigger for any structural write inside a mesocycle."""
        return self.invalidate_tag(mesocycle_tag(mesocycle_id))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
