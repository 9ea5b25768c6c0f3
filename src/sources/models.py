# src/sources/models.py — v1
"""Source chain models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SourceCandidate(BaseModel):
    """One network location to try for a host, ordered by priority (0 first)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location_url: str
    priority: int
