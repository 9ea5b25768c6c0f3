# src/cache/cache_factory.py — v1
"""Factories building both cache tiers from Settings."""

from __future__ import annotations

from favicache.cache.disk_store import DiskImageStore
from favicache.cache.memory_store import MemoryImageStore
from favicache.config.settings import Settings


def create_memory_store(settings: Settings | None = None) -> MemoryImageStore:
    """Instantiate the memory tier with the configured limits.

    Args:
        settings: Application settings. Defaults to 100 entries / 50 MiB.
    """
    if settings is None:
        return MemoryImageStore()
    return MemoryImageStore(
        max_entries=settings.memory_max_entries,
        max_bytes=settings.memory_max_bytes,
    )


def create_disk_store(settings: Settings | None = None) -> DiskImageStore:
    """Instantiate the disk tier rooted at the configured cache directory.

    Args:
        settings: Application settings. Defaults to ~/.cache/favicache/Favicons.
    """
    settings = settings or Settings()
    return DiskImageStore(cache_dir=settings.resolved_cache_dir)
