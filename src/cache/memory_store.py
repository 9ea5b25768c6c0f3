# src/cache/memory_store.py — v1
"""Bounded in-memory tier holding decoded icons.

Evicts least-recently-used entries until both the entry-count and the
aggregate byte limits hold. A single lock covers the whole structure; every
operation is O(1) apart from eviction, so the lock is never held for long.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from favicache.cache.base_cache_store import BaseImageStore
from favicache.cache.models import CachedImageEntry

logger = logging.getLogger(__name__)


class MemoryImageStore(BaseImageStore[CachedImageEntry]):
    """LRU cache of CachedImageEntry objects with count and byte limits."""

    def __init__(self, max_entries: int = 100, max_bytes: int = 50 * 1024 * 1024) -> None:
        if max_entries <= 0 or max_bytes <= 0:
            raise ValueError("max_entries and max_bytes must be > 0")
        self._entries: OrderedDict[str, CachedImageEntry] = OrderedDict()
        self._max_entries = max_entries
        self._max_bytes = max_bytes
        self._total_bytes = 0
        self._lock = threading.Lock()

    async def get(self, key: str) -> CachedImageEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
            return entry

    async def put(self, key: str, value: CachedImageEntry) -> None:
        with self._lock:
            self._remove(key)
            if value.approximate_byte_size > self._max_bytes:
                logger.debug(
                    "Entry %s too large for memory tier (%d > %d bytes)",
                    key, value.approximate_byte_size, self._max_bytes,
                )
                return
            self._entries[key] = value
            self._total_bytes += value.approximate_byte_size
            self._evict()

    async def delete(self, key: str) -> None:
        with self._lock:
            self._remove(key)

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._total_bytes = 0

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def total_bytes(self) -> int:
        with self._lock:
            return self._total_bytes

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _remove(self, key: str) -> None:
        """Drop key; caller holds the lock."""
        old = self._entries.pop(key, None)
        if old is not None:
            self._total_bytes -= old.approximate_byte_size

    def _evict(self) -> None:
        """Evict oldest entries until both limits hold; caller holds the lock."""
        while self._entries and (
            len(self._entries) > self._max_entries
            or self._total_bytes > self._max_bytes
        ):
            evicted_key, evicted = self._entries.popitem(last=False)
            self._total_bytes -= evicted.approximate_byte_size
            logger.debug("Evicted %s from memory tier", evicted_key)
