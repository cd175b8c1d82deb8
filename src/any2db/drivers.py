"""Maps a file extension to a converter driver name."""

from __future__ import annotations

_DRIVERS: dict[str, str] = {
    ".csv": "csv",
    ".xlsx": "excel",
    ".xls": "excel",
    ".zip": "zip",
    ".html": "html",
    ".htm": "html",
    ".json": "json",
    ".txt": "txt",
    ".md": "markdown",
    ".markdown": "markdown",
}

# Already SQLite: copied through, never routed to a driver
PASSTHROUGH_EXTENSIONS: frozenset[str] = frozenset({".db", ".sqlite", ".sqlite3"})

# Probe order for extension-less local paths
PROBE_EXTENSIONS: tuple[str, ...] = (
    ".csv",
    ".xlsx",
    ".xls",
    ".zip",
    ".html",
    ".htm",
    ".json",
    ".txt",
    ".md",
    ".markdown",
    ".db",
    ".sqlite",
    ".sqlite3",
)

# Driver used for local directory trees
FILESYSTEM_DRIVER = "filesystem"


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and make sure it has a leading dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def get_driver(ext: str) -> str | None:
    """Return the driver name for an extension, or None if unsupported."""
    return _DRIVERS.get(normalize_extension(ext))


def is_passthrough(ext: str) -> bool:
    return normalize_extension(ext) in PASSTHROUGH_EXTENSIONS


def driver_table() -> dict[str, str]:
    """Return the full extension → driver mapping, pass-through included."""
    table = dict(_DRIVERS)
    for ext in sorted(PASSTHROUGH_EXTENSIONS):
        table[ext] = "sqlite"
    return table
