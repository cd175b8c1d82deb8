"""L1 in-memory LRU cache."""

from __future__ import annotations

import threading
from collections import OrderedDict

from any2db.cache.stats import CacheEntry

_DEFAULT_MAX_SIZE_MB = 2048
_DEFAULT_TTL_SECONDS = 600.0


class MemoryCache:
    """Thread-safe in-memory LRU cache with size-based eviction and a TTL."""

    def __init__(
        self,
        max_size_mb: float = _DEFAULT_MAX_SIZE_MB,
        ttl_seconds: float = _DEFAULT_TTL_SECONDS,
    ) -> None:
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._ttl_seconds = ttl_seconds
        self._current_size_bytes = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired:
                self._remove(key)
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return entry.data

    def set(self, key: str, data: bytes) -> None:
        """Store bytes under key.

        Raises ValueError if the entry alone exceeds the tier's capacity.
        """
        entry = CacheEntry(key=key, data=data, ttl_seconds=self._ttl_seconds)
        if entry.size_bytes > self._max_size_bytes:
            raise ValueError(
                f"entry of {entry.size_bytes} bytes exceeds memory cache capacity "
                f"of {self._max_size_bytes} bytes"
            )
        with self._lock:
            if key in self._store:
                self._remove(key)
            # Evict until there's room
            while self._current_size_bytes + entry.size_bytes > self._max_size_bytes and self._store:
                self._evict_oldest()
            self._store[key] = entry
            self._current_size_bytes += entry.size_bytes

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._remove(key)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._current_size_bytes = 0

    @property
    def size_mb(self) -> float:
        return self._current_size_bytes / (1024 * 1024)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def _remove(self, key: str) -> bool:
        entry = self._store.pop(key, None)
        if entry is None:
            return False
        self._current_size_bytes -= entry.size_bytes
        return True

    def _evict_oldest(self) -> None:
        if self._store:
            _, entry = self._store.popitem(last=False)
            self._current_size_bytes -= entry.size_bytes
