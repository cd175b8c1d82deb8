"""Cache key generation — alias-scoped, content-independent."""

from __future__ import annotations

import hashlib

DISK_SUFFIX = ".sqlite"


def make_cache_key(alias: str, source_path: str) -> str:
    """Build the artifact cache key.

    The alias is part of the key so two tenants requesting the same path
    never share a converted artifact.
    """
    return f"{alias}:{source_path}"


def disk_filename(key: str) -> str:
    """Deterministic on-disk file name for a cache key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest() + DISK_SUFFIX


def is_disk_filename(name: str) -> bool:
    """True if a file name looks like one produced by disk_filename()."""
    if not name.endswith(DISK_SUFFIX):
        return False
    stem = name[: -len(DISK_SUFFIX)]
    return len(stem) == 64 and all(c in "0123456789abcdef" for c in stem)
