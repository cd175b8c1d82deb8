"""Cache entry and statistics models."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field

_DEFAULT_TTL_SECONDS = 600.0  # 10 minutes


class CacheEntry(BaseModel):
    """A converted artifact held in the memory tier."""

    key: str
    data: bytes = b""
    created_at: float = Field(default_factory=time.time)
    ttl_seconds: float = _DEFAULT_TTL_SECONDS

    @property
    def is_expired(self) -> bool:
        return time.time() > self.created_at + self.ttl_seconds

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    size_mb: float = 0.0
    memory_hits: int = 0
    disk_hits: int = 0
    misses: int = 0
    conversions: int = 0
    coalesced: int = 0

    @property
    def hits(self) -> int:
        return self.memory_hits + self.disk_hits

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
