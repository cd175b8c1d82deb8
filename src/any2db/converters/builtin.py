"""Built-in converters for plain-text formats and local directory trees.

Each writes a single table ``tb0``. Spreadsheet, HTML, archive, and markdown
drivers are resolved by extension but must be registered by the application.
"""

from __future__ import annotations

import csv
import io
import json
import os
import sqlite3
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO

from any2db.converters.registry import ConverterRegistry
from any2db.drivers import FILESYSTEM_DRIVER
from any2db.types import ConversionOptions

TABLE_NAME = "tb0"


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _column_names(raw: Sequence[str]) -> list[str]:
    """Make header names usable as unique, non-empty column names."""
    names: list[str] = []
    seen: set[str] = set()
    for i, name in enumerate(raw):
        base = (name or "").strip() or f"col{i + 1}"
        candidate = base
        n = 2
        while candidate.lower() in seen:
            candidate = f"{base}_{n}"
            n += 1
        seen.add(candidate.lower())
        names.append(candidate)
    return names


def write_table(
    out_path: Path,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    table: str = TABLE_NAME,
) -> int:
    """Create ``table`` in the SQLite file at out_path and insert rows."""
    conn = sqlite3.connect(str(out_path))
    try:
        col_defs = ", ".join(f"{_quote(c)} TEXT" for c in columns)
        conn.execute(f"CREATE TABLE {_quote(table)} ({col_defs})")
        placeholders = ", ".join("?" for _ in columns)
        width = len(columns)
        count = 0
        insert = f"INSERT INTO {_quote(table)} VALUES ({placeholders})"
        for row in rows:
            values = list(row[:width]) + [None] * (width - len(row))
            conn.execute(insert, values)
            count += 1
        conn.commit()
        return count
    finally:
        conn.close()


def _text(stream: BinaryIO) -> io.TextIOWrapper:
    return io.TextIOWrapper(stream, encoding="utf-8-sig", newline="")


class CsvConverter:
    """First row is the header; every column is TEXT."""

    def __init__(self, stream: BinaryIO, options: ConversionOptions) -> None:
        self._stream = stream

    def write_sqlite(self, out_path: Path, options: ConversionOptions) -> None:
        reader = csv.reader(_text(self._stream))
        header = next(reader, None)
        if header is None:
            raise ValueError("empty CSV input")
        write_table(out_path, _column_names(header), reader)


class JsonConverter:
    """A list of objects (or one object) becomes one row per object.

    Nested values are stored as JSON text.
    """

    def __init__(self, stream: BinaryIO, options: ConversionOptions) -> None:
        self._stream = stream

    def write_sqlite(self, out_path: Path, options: ConversionOptions) -> None:
        doc = json.load(_text(self._stream))
        records = [doc] if isinstance(doc, dict) else doc
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise ValueError("JSON input must be an object or a list of objects")

        keys: list[str] = []
        for record in records:
            for key in record:
                if key not in keys:
                    keys.append(key)
        if not keys:
            keys = ["value"]

        def cell(value: Any) -> Any:
            if isinstance(value, (dict, list)):
                return json.dumps(value)
            return value

        rows = ([cell(r.get(k)) for k in keys] for r in records)
        write_table(out_path, _column_names(keys), rows)


class TextConverter:
    def __init__(self, stream: BinaryIO, options: ConversionOptions) -> None:
        self._stream = stream

    def write_sqlite(self, out_path: Path, options: ConversionOptions) -> None:
        lines = (line.rstrip("\r\n") for line in _text(self._stream))
        write_table(out_path, ["line"], ([line] for line in lines))


class FilesystemConverter:
    """Recursive listing of a local directory tree."""

    def __init__(self, root: Path, options: ConversionOptions) -> None:
        self._root = Path(root)
        if not self._root.is_dir():
            raise NotADirectoryError(str(self._root))

    def write_sqlite(self, out_path: Path, options: ConversionOptions) -> None:
        write_table(
            out_path,
            ["path", "name", "is_dir", "size", "mod_time"],
            self._walk(),
        )

    def _walk(self) -> Iterable[list[Any]]:
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames.sort()
            for name in dirnames + sorted(filenames):
                full = Path(dirpath) / name
                try:
                    st = full.stat()
                except OSError:
                    continue
                yield [
                    full.relative_to(self._root).as_posix(),
                    name,
                    int(full.is_dir()),
                    st.st_size,
                    datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).isoformat(),
                ]


def register_builtins(registry: ConverterRegistry) -> None:
    registry.register("csv", CsvConverter)
    registry.register("json", JsonConverter)
    registry.register("txt", TextConverter)
    registry.register(FILESYSTEM_DRIVER, FilesystemConverter)
