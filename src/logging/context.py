# src/logging/context.py — v1
"""Contextual logging support: attach cache_key and source to log records.

Each fetch runs as its own asyncio task, and tasks copy the context when
they are created, so concurrent fetches never see each other's values.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_cache_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache_key", default=None
)
_source: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    cache_key: str | None = None
    source: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(cache_key=_cache_key.get(), source=_source.get())


def set_request_context(cache_key: str) -> None:
    """Set request-level context (once per icon lookup)."""
    _cache_key.set(cache_key)
    _source.set(None)


def set_source_context(source: str | None) -> None:
    """Set the source currently being tried."""
    _source.set(source)


def clear_context() -> None:
    """Reset all context variables."""
    _cache_key.set(None)
    _source.set(None)
