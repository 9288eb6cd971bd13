"""Result cache: fingerprint -> jobs with a read-time TTL.

Staleness is checked on ``get``; stale entries stay resident until the next
``put`` for the same fingerprint overwrites them, or until capacity eviction
drops the oldest insertion.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Sequence

from src.core.schemas import CacheEntry, Job

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60


class ResultCache:
    """In-memory TTL cache of scrape results, one instance per process.

    Usage::

        cache = ResultCache(ttl_seconds=1800)
        entry = cache.get(query.fingerprint)
        if entry is None:
            ...  # scrape
            cache.put(query.fingerprint, jobs, total_count=len(jobs))

    All methods are synchronous and never await, so concurrent asyncio
    requests cannot interleave inside one call. Concurrent puts for the same
    fingerprint are last-writer-wins.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, fingerprint: str) -> CacheEntry | None:
        """Return the entry for ``fingerprint`` unless missing or older than the TTL."""
        entry = self._entries.get(fingerprint)
        if entry is None:
            logger.debug("Cache miss for '%s'", fingerprint)
            return None
        age = self._clock() - entry.created_at
        if age > self._ttl:
            logger.debug("Cache entry for '%s' is stale (%.0fs old)", fingerprint, age)
            return None
        return entry

    def put(self, fingerprint: str, jobs: Sequence[Job], total_count: int) -> CacheEntry:
        """Store a fresh entry, replacing any existing one for ``fingerprint``."""
        entry = CacheEntry(
            jobs=tuple(jobs), total_count=total_count, created_at=self._clock(),
        )
        self._entries.pop(fingerprint, None)
        self._entries[fingerprint] = entry
        self._evict_overflow()
        logger.debug("Cached %d jobs for '%s'", len(entry.jobs), fingerprint)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def _evict_overflow(self) -> None:
        if self._max_entries is None:
            return
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry '%s' (capacity %d)", evicted, self._max_entries)
