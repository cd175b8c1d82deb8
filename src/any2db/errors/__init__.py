"""Error handling — the any2db exception hierarchy."""

from any2db.errors.exceptions import (
    Any2DbError,
    ConfigurationError,
    ConversionError,
    FetchCancelledError,
    FetchError,
    HandleCreationError,
    LocalIOError,
    UnsupportedFormatError,
)

__all__ = [
    "Any2DbError",
    "ConfigurationError",
    "HandleCreationError",
    "FetchError",
    "FetchCancelledError",
    "ConversionError",
    "UnsupportedFormatError",
    "LocalIOError",
]
