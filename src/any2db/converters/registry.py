"""Converter registry: driver name → converter factory."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, BinaryIO, Protocol, runtime_checkable

from any2db.errors.exceptions import ConversionError
from any2db.types import ConversionOptions

logger = logging.getLogger(__name__)


@runtime_checkable
class Converter(Protocol):
    """An opened source ready to be written into a SQLite file."""

    def write_sqlite(self, out_path: Path, options: ConversionOptions) -> None: ...


# A factory receives a binary stream, or a directory Path for tree drivers
ConverterFactory = Callable[[BinaryIO | Path, ConversionOptions], Converter]


class ConverterRegistry:
    """Pluggable, driver-keyed conversion functions."""

    def __init__(self) -> None:
        self._factories: dict[str, ConverterFactory] = {}

    def register(self, name: str, factory: ConverterFactory | None = None) -> Any:
        """Register a factory for a driver name.

        Usable directly or as a decorator::

            @registry.register("csv")
            class CsvConverter: ...
        """
        if factory is not None:
            self._factories[name] = factory
            return factory

        def decorator(fn: ConverterFactory) -> ConverterFactory:
            self._factories[name] = fn
            return fn

        return decorator

    def has(self, name: str) -> bool:
        return name in self._factories

    def names(self) -> list[str]:
        return sorted(self._factories)

    def open(
        self,
        driver: str,
        source: BinaryIO | Path,
        options: ConversionOptions | None = None,
    ) -> Converter:
        factory = self._factories.get(driver)
        if factory is None:
            raise ConversionError(
                f"failed to open converter for {driver}: no converter registered",
                driver=driver,
            )
        try:
            return factory(source, options or ConversionOptions())
        except Exception as exc:
            raise ConversionError(
                f"failed to open converter for {driver}: {exc}", driver=driver
            ) from exc

    def import_to_sqlite(
        self,
        converter: Converter,
        out_path: Path,
        options: ConversionOptions | None = None,
        driver: str = "",
    ) -> None:
        try:
            converter.write_sqlite(out_path, options or ConversionOptions())
        except Exception as exc:
            raise ConversionError(f"conversion failed for {driver}: {exc}", driver=driver) from exc


def close_converter(converter: object) -> None:
    """Release a converter's resources if it holds any."""
    close = getattr(converter, "close", None)
    if callable(close):
        try:
            close()
        except Exception as e:
            logger.warning("Failed to close converter %r: %s", converter, e)


def default_registry() -> ConverterRegistry:
    """Return a registry with the built-in converters registered."""
    from any2db.converters.builtin import register_builtins

    registry = ConverterRegistry()
    register_builtins(registry)
    return registry
