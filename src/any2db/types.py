"""Shared Pydantic models for any2db."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel

# ── Enums ──


class BackendClass(StrEnum):
    """How a backend splits a source path into (root, relative path)."""

    LOCAL = "local"
    HTTP = "http"
    GENERIC = "generic"


# ── Runtime models ──


class ConversionOptions(BaseModel):
    verbose: bool = False


class ListEntry(BaseModel):
    """One entry of a directory listing."""

    name: str
    is_dir: bool = False
    size: int = 0
    modified: datetime | None = None


class BatchOutcome(BaseModel):
    """Result of materializing one source in a batch."""

    source: str
    path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
