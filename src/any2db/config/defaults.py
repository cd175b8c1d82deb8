"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Default cache settings
DEFAULT_CACHE_DIR = str(Path.home() / ".any2db" / "cache")
DEFAULT_MEMORY_MAX_MB = 2048.0
DEFAULT_MEMORY_TTL_SECONDS = 600.0
DEFAULT_CACHE_DISABLED = False

# Default concurrency settings
DEFAULT_MAX_WORKERS = 5

# Converter verbosity
DEFAULT_VERBOSE = False

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "cache_dir": DEFAULT_CACHE_DIR,
        "memory_max_mb": DEFAULT_MEMORY_MAX_MB,
        "memory_ttl_seconds": DEFAULT_MEMORY_TTL_SECONDS,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "max_workers": DEFAULT_MAX_WORKERS,
        "verbose": DEFAULT_VERBOSE,
        "credentials_file": None,
        "log_level": DEFAULT_LOG_LEVEL,
    }
