"""
In-process cache of extracted node records.

Entries are keyed by node id and carry an optional expiry. Expired entries
count as misses for `get`, but stay available through `get_stale` until
they are purged or evicted, so a failed re-extraction can still fall back on
the last known record. An optional `max_entries` bound evicts the least
recently used entries first.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from design_extraction.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    """A cached record and the monotonic time it expires at."""

    value: Any
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class ResultCache:
    """Key/value store of extracted records with TTL and LRU bounds."""

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the cache.

        Args:
            default_ttl: Seconds an entry stays fresh; None never expires
            max_entries: Maximum number of entries kept; None is unbounded
            clock: Monotonic time source in seconds
        """
        if default_ttl is not None and default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        if max_entries is not None and max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")

        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the fresh value for `key`, or None on a miss or expiry."""
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            self.misses += 1
            return None

        self._entries.move_to_end(key)
        self.hits += 1
        return entry.value

    def get_stale(self, key: str) -> Optional[Any]:
        """Return the last stored value for `key`, ignoring expiry."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Store `value` under `key`.

        Args:
            key: Node id
            value: Extracted record
            ttl: Seconds until expiry; defaults to the cache's default TTL
        """
        ttl = self.default_ttl if ttl is None else ttl
        expires_at = self._clock() + ttl if ttl is not None else None

        self._entries[key] = CacheEntry(value=value, expires_at=expires_at)
        self._entries.move_to_end(key)

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"Evicted cache entry {evicted_key}")

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def stats(self) -> Dict[str, Any]:
        lookups = self.hits + self.misses
        return {
            "entries": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hits / lookups if lookups else 0.0,
        }

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and not entry.is_expired(self._clock())

    def __len__(self) -> int:
        return len(self._entries)
