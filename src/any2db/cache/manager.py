"""Artifact cache — orchestrates L1 (memory) and L2 (disk) tiers around the convert pipeline."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
import threading
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Any

from any2db.cache.disk import DiskCache
from any2db.cache.flight import SingleFlight
from any2db.cache.keys import make_cache_key
from any2db.cache.memory import MemoryCache
from any2db.cache.stats import CacheStats
from any2db.converters.registry import ConverterRegistry, close_converter, default_registry
from any2db.drivers import FILESYSTEM_DRIVER, PROBE_EXTENSIONS, get_driver, is_passthrough
from any2db.errors.exceptions import (
    FetchCancelledError,
    FetchError,
    LocalIOError,
    UnsupportedFormatError,
)
from any2db.remote.fetcher import copy_stream, open_source
from any2db.remote.handles import HandleCache
from any2db.types import ConversionOptions

logger = logging.getLogger(__name__)

_DEFAULT_CACHE_DIR = Path.home() / ".any2db" / "cache"

# Scratch file naming inside the cache directory
SCRATCH_PREFIX = "any2db_"
_OUTPUT_PREFIX = SCRATCH_PREFIX + "db_"
_SOURCE_PREFIX = SCRATCH_PREFIX + "source_"
_MATERIALIZED_PREFIX = SCRATCH_PREFIX + "cache_"
_SQLITE_SUFFIX = ".sqlite"


def _is_local(credentials: Mapping[str, Any]) -> bool:
    return credentials.get("type") == "local"


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove scratch file %s: %s", path, e)


class ArtifactCache:
    """Two-tier cache of converted SQLite artifacts: L1 in-memory → L2 on-disk.

    Every successful call returns a fresh scratch file that the caller owns
    and must delete. It never aliases a cache-tier file.
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        memory_max_mb: float = 2048,
        memory_ttl_seconds: float = 600,
        enabled: bool = True,
        verbose: bool = False,
        handles: HandleCache | None = None,
        registry: ConverterRegistry | None = None,
    ) -> None:
        self._cache_dir = Path(cache_dir or _DEFAULT_CACHE_DIR)
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._enabled = enabled
        self._options = ConversionOptions(verbose=verbose)
        self._l1 = MemoryCache(max_size_mb=memory_max_mb, ttl_seconds=memory_ttl_seconds)
        self._l2 = DiskCache(self._cache_dir)
        self._handles = handles or HandleCache()
        self._registry = registry or default_registry()
        self._flight: SingleFlight[tuple[Path, bytes]] = SingleFlight()
        self._stats = CacheStats()
        self._stats_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def handles(self) -> HandleCache:
        return self._handles

    @property
    def registry(self) -> ConverterRegistry:
        return self._registry

    def resolve_source_path(self, source_path: str, credentials: Mapping[str, Any]) -> str:
        """Append a supported extension to a missing local path if exactly such a file exists.

        Only local sources are probed. Extensions are tried in a fixed order
        and the first regular file wins. Without a match the path is returned
        unchanged.
        """
        if not _is_local(credentials) or os.path.exists(source_path):
            return source_path
        for ext in PROBE_EXTENSIONS:
            candidate = source_path + ext
            if os.path.isfile(candidate):
                logger.debug("Resolved %s to %s", source_path, candidate)
                return candidate
        return source_path

    def cache_key(self, source_path: str, credentials: Mapping[str, Any], alias: str = "") -> str:
        return make_cache_key(alias, self.resolve_source_path(source_path, credentials))

    def get_artifact(
        self,
        source_path: str,
        credentials: Mapping[str, Any],
        alias: str = "",
        cancel: threading.Event | None = None,
    ) -> Path:
        """Return a path to a SQLite file holding the converted source.

        Served from memory, then disk, and otherwise fetched and converted.
        Concurrent misses on the same key share one conversion.
        """
        source_path = self.resolve_source_path(source_path, credentials)
        key = make_cache_key(alias, source_path)
        logger.debug("Cache key from alias=[%s] source=[%s]", alias, source_path)

        if self._enabled:
            data = self._lookup(key)
            if data is not None:
                return self._materialize(data)

        with self._stats_lock:
            self._stats.misses += 1
        logger.info("Cache miss for %s, fetching and converting", source_path)

        while True:
            try:
                (out_path, data), shared = self._flight.do(
                    key, lambda: self._fill(key, source_path, credentials, cancel)
                )
                break
            except FetchCancelledError:
                if cancel is not None and cancel.is_set():
                    raise
                # Another caller's cancellation aborted the shared fetch
                logger.debug("Shared fetch for %s was cancelled, retrying", key)

        if shared:
            with self._stats_lock:
                self._stats.coalesced += 1
            return self._materialize(data)
        return out_path

    async def get_artifact_async(
        self,
        source_path: str,
        credentials: Mapping[str, Any],
        alias: str = "",
    ) -> Path:
        """Run get_artifact on a worker thread. Cancelling the task stops the fetch step."""
        cancel = threading.Event()
        try:
            return await asyncio.to_thread(
                self.get_artifact, source_path, credentials, alias, cancel
            )
        except asyncio.CancelledError:
            cancel.set()
            raise

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        with self._stats_lock:
            stats = self._stats.model_copy()
        stats.entries = len(self._l1) + self._l2.entry_count
        stats.size_mb = self._l1.size_mb + self._l2.size_mb
        return stats

    def clear(self) -> int:
        """Clear both tiers. Returns the number of disk entries removed."""
        self._l1.clear()
        removed = self._l2.clear()
        with self._stats_lock:
            self._stats = CacheStats()
        return removed

    # ── Tiers ──

    def _lookup(self, key: str) -> bytes | None:
        data = self._l1.get(key)
        if data is not None:
            logger.debug("Cache hit (memory) for %s", key)
            with self._stats_lock:
                self._stats.memory_hits += 1
            return data

        try:
            data = self._l2.get(key)
        except OSError as e:
            logger.warning("Failed to read disk cache for %s: %s", key, e)
            return None
        if data is None:
            return None

        logger.debug("Cache hit (disk) for %s", key)
        with self._stats_lock:
            self._stats.disk_hits += 1
        self._store_memory(key, data)
        return data

    def _store(self, key: str, data: bytes) -> None:
        self._store_memory(key, data)
        try:
            path = self._l2.set(key, data)
            logger.debug("Cache saved to disk: %s", path)
        except OSError as e:
            logger.warning("Failed to write disk cache for %s: %s", key, e)

    def _store_memory(self, key: str, data: bytes) -> None:
        try:
            self._l1.set(key, data)
        except ValueError as e:
            logger.warning("Failed to set memory cache for %s: %s", key, e)

    # ── Miss pipeline ──

    def _fill(
        self,
        key: str,
        source_path: str,
        credentials: Mapping[str, Any],
        cancel: threading.Event | None,
    ) -> tuple[Path, bytes]:
        out_path = self._scratch(_OUTPUT_PREFIX, _SQLITE_SUFFIX)
        try:
            if _is_local(credentials) and os.path.isdir(source_path):
                self._convert(FILESYSTEM_DRIVER, Path(source_path), out_path)
            else:
                self._fetch_and_convert(source_path, credentials, out_path, cancel)
            try:
                data = out_path.read_bytes()
            except OSError as exc:
                raise LocalIOError(
                    f"failed to read converted db: {exc}", path=str(out_path), operation="read"
                ) from exc
        except BaseException:
            _remove(out_path)
            raise

        with self._stats_lock:
            self._stats.conversions += 1
        if self._enabled:
            self._store(key, data)
        return out_path, data

    def _fetch_and_convert(
        self,
        source_path: str,
        credentials: Mapping[str, Any],
        out_path: Path,
        cancel: threading.Event | None,
    ) -> None:
        stream = open_source(self._handles, source_path, credentials)
        ext = PurePosixPath(source_path).suffix.lower()
        try:
            src_path = self._scratch(_SOURCE_PREFIX, ext)
        except BaseException:
            stream.close()
            raise

        try:
            with stream:
                copy_stream(stream, src_path, cancel=cancel)

            if is_passthrough(ext):
                self._copy(src_path, out_path)
                return

            driver = get_driver(ext)
            if driver is None:
                raise UnsupportedFormatError(f"unsupported file type: {ext or '(none)'}", extension=ext)

            try:
                src = open(src_path, "rb")
            except OSError as exc:
                raise LocalIOError(
                    f"failed to open source temp file: {exc}", path=str(src_path), operation="open"
                ) from exc
            with src:
                self._convert(driver, src, out_path)
        except FetchError as exc:
            if not exc.path:
                exc.path = source_path
            raise
        finally:
            _remove(src_path)

    def _convert(self, driver: str, source: Any, out_path: Path) -> None:
        converter = self._registry.open(driver, source, self._options)
        try:
            self._registry.import_to_sqlite(converter, out_path, self._options, driver=driver)
        finally:
            close_converter(converter)
        logger.info("Converted with %s driver into %s", driver, out_path.name)

    # ── Scratch files ──

    def _scratch(self, prefix: str, suffix: str) -> Path:
        try:
            fd, name = tempfile.mkstemp(dir=self._cache_dir, prefix=prefix, suffix=suffix)
        except OSError as exc:
            raise LocalIOError(
                f"failed to create temp file: {exc}", path=str(self._cache_dir), operation="create"
            ) from exc
        os.close(fd)
        return Path(name)

    def _copy(self, src: Path, dst: Path) -> None:
        try:
            shutil.copyfile(src, dst)
        except OSError as exc:
            raise LocalIOError(f"failed to copy {src} to {dst}: {exc}", path=str(dst), operation="copy") from exc

    def _materialize(self, data: bytes) -> Path:
        path = self._scratch(_MATERIALIZED_PREFIX, _SQLITE_SUFFIX)
        try:
            path.write_bytes(data)
        except OSError as exc:
            _remove(path)
            raise LocalIOError(
                f"failed to write cached db: {exc}", path=str(path), operation="write"
            ) from exc
        return path
