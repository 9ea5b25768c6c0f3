# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache locations, capacity limits and network
timeouts. Every field has a default, so an empty environment yields a
working configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from favicache.version import __version__


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Disk cache ===
    cache_dir: Path = Path("~/.cache/favicache/Favicons")

    # === Memory cache ===
    memory_max_entries: int = 100
    memory_max_bytes: int = 50 * 1024 * 1024

    # === Image normalization ===
    canonical_size: int = 64

    # === Network ===
    fetch_connect_timeout_s: float = 10.0
    fetch_total_timeout_s: float = 15.0
    fetch_max_bytes: int = 1024 * 1024
    fetch_user_agent: str = f"favicache/{__version__}"

    # === Batch prefetch ===
    prefetch_concurrency: int = 4

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator(
        "memory_max_entries",
        "memory_max_bytes",
        "canonical_size",
        "fetch_max_bytes",
        "prefetch_concurrency",
    )
    @classmethod
    def validate_positive_int(cls, v: int, info) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.fetch_connect_timeout_s <= 0:
            errors.append("FETCH_CONNECT_TIMEOUT_S must be > 0")

        if self.fetch_total_timeout_s <= 0:
            errors.append("FETCH_TOTAL_TIMEOUT_S must be > 0")

        if self.fetch_connect_timeout_s > self.fetch_total_timeout_s:
            errors.append(
                "FETCH_CONNECT_TIMEOUT_S must be <= FETCH_TOTAL_TIMEOUT_S"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def resolved_cache_dir(self) -> Path:
        """Cache directory with ``~`` expanded."""
        return self.cache_dir.expanduser()


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding apps).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
