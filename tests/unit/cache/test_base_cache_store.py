# tests/unit/cache/test_base_cache_store.py — v1
"""Tests for cache/base_cache_store.py — BaseImageStore ABC."""

from __future__ import annotations

import pytest

from favicache.cache.base_cache_store import BaseImageStore
from favicache.cache.disk_store import DiskImageStore
from favicache.cache.memory_store import MemoryImageStore


class TestBaseImageStore:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseImageStore()  # type: ignore[abstract]

    def test_has_required_methods(self):
        for method in ["get", "put", "delete", "clear"]:
            assert hasattr(BaseImageStore, method)

    def test_both_tiers_implement_it(self):
        assert issubclass(MemoryImageStore, BaseImageStore)
        assert issubclass(DiskImageStore, BaseImageStore)
