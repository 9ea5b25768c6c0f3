# src/service/favicon_service.py — v1
"""Favicon service: single entry point for icon lookup and caching.

Usage:
    service = create_favicon_service(settings)
    async with service:
        icon = await service.fetch_icon("https://example.com/page")
        color = service.extract_dominant_color(icon) if icon else None

Lookup order for one identifier:
  1. Normalize to a cache key (host); invalid identifiers yield None.
  2. Memory tier; a hit returns the cached PNG bytes.
  3. Disk tier; a hit is decoded, promoted to memory and returned.
  4. Source chain, tried strictly in priority order; the first body that
     survives normalization wins.
  5. Write-through to disk, then memory, then return.

A miss is never cached, so calling again after a total failure retries the
whole chain. Concurrent lookups for the same key share one in-flight task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from favicache.cache.cache_factory import create_disk_store, create_memory_store
from favicache.cache.disk_store import DiskImageStore
from favicache.cache.keys import InvalidIdentifier, split_identifier
from favicache.cache.memory_store import MemoryImageStore
from favicache.cache.models import CachedImageEntry, CacheStats
from favicache.config.settings import Settings
from favicache.fetch.base_fetcher import BaseFetcher
from favicache.imaging.color import DominantColor, extract_dominant_color_from_bytes
from favicache.imaging.normalizer import (
    CANONICAL_SIZE,
    UndecodableImage,
    decode_image,
    normalize_image,
)
from favicache.logging.context import (
    clear_context,
    set_request_context,
    set_source_context,
)
from favicache.sources.chain import build_sources

logger = logging.getLogger(__name__)


class FaviconService:
    """Two-tier favicon cache backed by a prioritized network source chain."""

    def __init__(
        self,
        fetcher: BaseFetcher,
        memory_store: MemoryImageStore,
        disk_store: DiskImageStore,
        canonical_size: int = CANONICAL_SIZE,
        prefetch_concurrency: int = 4,
    ) -> None:
        self._fetcher = fetcher
        self._memory = memory_store
        self._disk = disk_store
        self._canonical_size = canonical_size
        self._prefetch_concurrency = max(1, prefetch_concurrency)
        self._in_flight: dict[str, asyncio.Task[bytes | None]] = {}
        self._stats = CacheStats()

    async def __aenter__(self) -> FaviconService:
        await self._fetcher.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the fetcher's network resources. Safe to call twice."""
        await self._fetcher.stop()

    # --- Public API ---

    @property
    def memory_store(self) -> MemoryImageStore:
        return self._memory

    @property
    def disk_store(self) -> DiskImageStore:
        return self._disk

    @property
    def stats(self) -> CacheStats:
        """Snapshot of lookup counters."""
        return self._stats.model_copy()

    async def fetch_icon(self, identifier: str) -> bytes | None:
        """Return canonical PNG bytes of the icon for identifier, or None.

        None covers both an identifier without a host and a site for which
        no source produced a decodable image.
        """
        try:
            key, scheme = split_identifier(identifier)
        except InvalidIdentifier as e:
            self._stats.invalid_identifiers += 1
            logger.debug("Rejected identifier: %s", e)
            return None

        set_request_context(key)
        try:
            entry = await self._memory.get(key)
            if entry is not None:
                self._stats.memory_hits += 1
                logger.debug("Memory hit for %s", key)
                return entry.data

            task = self._in_flight.get(key)
            if task is None:
                task = asyncio.create_task(self._load(key, scheme))
                self._in_flight[key] = task
                task.add_done_callback(lambda _t, k=key: self._in_flight.pop(k, None))
            else:
                logger.debug("Joining in-flight lookup for %s", key)

            return await asyncio.shield(task)
        finally:
            clear_context()

    async def prefetch_icons(self, identifiers: Iterable[str]) -> dict[str, bytes | None]:
        """Fetch many identifiers concurrently, bounded by prefetch_concurrency.

        Returns:
            Mapping of each distinct input identifier to its icon bytes or None.
        """
        unique = list(dict.fromkeys(identifiers))
        semaphore = asyncio.Semaphore(self._prefetch_concurrency)

        async def _one(identifier: str) -> tuple[str, bytes | None]:
            async with semaphore:
                return identifier, await self.fetch_icon(identifier)

        results = await asyncio.gather(*(_one(i) for i in unique))
        found = sum(1 for _, data in results if data is not None)
        logger.info("Prefetched icons: %d/%d found", found, len(unique))
        return dict(results)

    def extract_dominant_color(self, data: bytes) -> DominantColor | None:
        """Dominant color of encoded icon bytes; None if they don't decode."""
        return extract_dominant_color_from_bytes(data)

    async def clear_cache(self) -> None:
        """Drop both tiers. Intended for explicit user action only."""
        await self._memory.clear()
        await self._disk.clear()
        logger.info("Favicon cache cleared")

    # --- Internals ---

    async def _load(self, key: str, scheme: str) -> bytes | None:
        data = await self._load_from_disk(key)
        if data is not None:
            return data
        return await self._load_from_network(key, scheme)

    async def _load_from_disk(self, key: str) -> bytes | None:
        data = await self._disk.get(key)
        if data is None:
            return None

        try:
            image = decode_image(data)
        except UndecodableImage as e:
            logger.warning("Discarding corrupt disk cache entry %s: %s", key, e)
            await self._disk.delete(key)
            return None

        await self._memory.put(key, CachedImageEntry.from_image(key, image, data))
        self._stats.disk_hits += 1
        logger.debug("Disk hit for %s", key)
        return data

    async def _load_from_network(self, key: str, scheme: str) -> bytes | None:
        candidates = build_sources(key, scheme, size=self._canonical_size * 2)

        for candidate in candidates:
            set_source_context(candidate.name)
            try:
                raw = await self._fetcher.fetch(candidate)
            except Exception:
                logger.warning(
                    "Fetcher raised for %s", candidate.location_url, exc_info=True
                )
                continue
            if raw is None:
                logger.debug("Source %s unavailable", candidate.name)
                continue

            try:
                normalized = normalize_image(raw, size=self._canonical_size)
            except UndecodableImage as e:
                logger.debug("Source %s returned undecodable data: %s", candidate.name, e)
                continue

            await self._disk.put(key, normalized.data)
            await self._memory.put(
                key, CachedImageEntry.from_image(key, normalized.image, normalized.data)
            )
            self._stats.network_fetches += 1
            logger.debug("Fetched %s from %s", key, candidate.name)
            return normalized.data

        set_source_context(None)
        self._stats.misses += 1
        logger.info("No icon found for %s after %d sources", key, len(candidates))
        return None


def create_favicon_service(
    settings: Settings | None = None,
    fetcher: BaseFetcher | None = None,
) -> FaviconService:
    """Build a FaviconService from settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        fetcher: Network fetcher override (tests inject fakes here).
            Defaults to an HttpFetcher configured from settings.
    """
    settings = settings or Settings()
    if fetcher is None:
        from favicache.fetch.http_fetcher import HttpFetcher

        fetcher = HttpFetcher.from_settings(settings)

    return FaviconService(
        fetcher=fetcher,
        memory_store=create_memory_store(settings),
        disk_store=create_disk_store(settings),
        canonical_size=settings.canonical_size,
        prefetch_concurrency=settings.prefetch_concurrency,
    )
