"""Registry contract plus built-in plain-text and directory drivers."""

from any2db.converters.registry import (
    Converter,
    ConverterRegistry,
    close_converter,
    default_registry,
)

__all__ = [
    "Converter",
    "ConverterRegistry",
    "close_converter",
    "default_registry",
]
