# src/cache/disk_store.py — v1
"""Durable tier: one canonical PNG per cache key under a dedicated directory.

Every filesystem failure degrades instead of raising. A failed read is a
miss, a failed write or clear is logged and skipped, because the caller
still holds a usable in-memory result for the current session.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from urllib.parse import quote, unquote

from favicache.cache.base_cache_store import BaseImageStore

logger = logging.getLogger(__name__)

IMAGE_SUFFIX = ".png"


class DiskImageStore(BaseImageStore[bytes]):
    """File-backed store of encoded canonical icons."""

    def __init__(self, cache_dir: str | Path) -> None:
        self._root = Path(cache_dir).expanduser()
        self._ensure_root()

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        """Return the file path for a cache key, confined to the cache directory.

        Every character outside ``[A-Za-z0-9._~-]`` is percent-escaped, ``%``
        included, and a leading dot is escaped too, so distinct keys never
        share a file and no key escapes the directory or hides its file.
        """
        return self._root / f"{_escape_key(key)}{IMAGE_SUFFIX}"

    def contains(self, key: str) -> bool:
        """Check whether a file exists for key."""
        return self.path_for(key).is_file()

    async def get(self, key: str) -> bytes | None:
        """Read the stored bytes for key, or None on miss or I/O failure."""
        path = self.path_for(key)
        if not path.is_file():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning("Failed to read disk cache entry %s: %s", key, e)
            return None

    async def put(self, key: str, value: bytes) -> None:
        """Write bytes for key atomically; failures are logged, not raised."""
        path = self.path_for(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(value)
            tmp_path.replace(path)
        except OSError as e:
            logger.warning("Failed to write disk cache entry %s: %s", key, e)
            tmp_path.unlink(missing_ok=True)

    async def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to delete disk cache entry %s: %s", key, e)

    async def clear(self) -> None:
        """Remove the whole cache directory and recreate it empty."""
        try:
            shutil.rmtree(self._root)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove cache directory %s: %s", self._root, e)
        self._ensure_root()

    def list_keys(self) -> list[str]:
        """List the keys currently stored on disk."""
        if not self._root.is_dir():
            return []
        return sorted(_unescape_key(p.stem) for p in self._root.glob(f"*{IMAGE_SUFFIX}"))

    def _ensure_root(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Failed to create cache directory %s: %s", self._root, e)


def _escape_key(key: str) -> str:
    if not key:
        return "%"
    escaped = quote(key, safe="")
    if escaped.startswith("."):
        escaped = "%2E" + escaped[1:]
    return escaped


def _unescape_key(name: str) -> str:
    return "" if name == "%" else unquote(name)
