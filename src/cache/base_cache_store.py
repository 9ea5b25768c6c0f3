# src/cache/base_cache_store.py — v1
"""Abstract interface shared by the memory and disk cache tiers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

V = TypeVar("V")


class BaseImageStore(ABC, Generic[V]):
    """Key-addressed store for one cache tier.

    Implementations never raise on I/O trouble: a failed read is a miss and a
    failed write is a no-op.
    """

    @abstractmethod
    async def get(self, key: str) -> V | None:
        """Retrieve the value stored under key."""

    @abstractmethod
    async def put(self, key: str, value: V) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every stored value."""
