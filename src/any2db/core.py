"""Top-level entry points: open_cache(), get_artifact(), get_artifacts()."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from any2db.cache.manager import ArtifactCache
from any2db.config.hierarchy import load_settings
from any2db.config.schema import Settings
from any2db.types import BatchOutcome

logger = logging.getLogger(__name__)


def open_cache(settings: Settings | None = None, **overrides: Any) -> ArtifactCache:
    """Build an ArtifactCache from the configuration hierarchy."""
    settings = settings or load_settings(**overrides)
    return ArtifactCache(
        cache_dir=settings.cache_dir,
        memory_max_mb=settings.memory_max_mb,
        memory_ttl_seconds=settings.memory_ttl_seconds,
        enabled=not settings.cache_disabled,
        verbose=settings.verbose,
    )


def default_credentials(
    source_path: str,
    backend_type: str | None = None,
    credentials: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Fill in a backend type when the caller gave none.

    HTTP(S) URLs are left untyped so the handle cache infers it; anything
    else is treated as a local path.
    """
    creds = dict(credentials or {})
    if backend_type:
        creds.setdefault("type", backend_type)
    if "type" not in creds and not source_path.startswith(("http:", "https:")):
        creds["type"] = "local"
    return creds


# ── Module-level convenience functions ──


def get_artifact(
    source_path: str,
    credentials: Mapping[str, Any] | None = None,
    alias: str = "",
    cache: ArtifactCache | None = None,
) -> Path:
    """Materialize one source as a SQLite file (caller deletes it)."""
    cache = cache or open_cache()
    return cache.get_artifact(source_path, default_credentials(source_path, None, credentials), alias)


def get_artifacts(
    sources: list[str],
    credentials: Mapping[str, Any] | None = None,
    alias: str = "",
    max_workers: int = 5,
    cache: ArtifactCache | None = None,
) -> list[BatchOutcome]:
    """Materialize many sources concurrently (sync wrapper)."""
    from any2db.concurrency.pool import ConcurrencyPool

    cache = cache or open_cache()

    async def _fetch(source: str) -> Path:
        creds = default_credentials(source, None, credentials)
        return await cache.get_artifact_async(source, creds, alias)

    async def _run() -> list[BatchOutcome]:
        pool = ConcurrencyPool(max_workers=max_workers)
        return await pool.process_batch(_fetch, sources)

    return asyncio.run(_run())
