"""Tests for the built-in converters."""

import io
import sqlite3

import pytest

from any2db.converters.builtin import (
    CsvConverter,
    FilesystemConverter,
    JsonConverter,
    TextConverter,
    _column_names,
    write_table,
)
from any2db.types import ConversionOptions

_OPTS = ConversionOptions()


def _read(db_path, table="tb0"):
    conn = sqlite3.connect(str(db_path))
    try:
        columns = [row[1] for row in conn.execute(f'PRAGMA table_info("{table}")')]
        rows = conn.execute(f'SELECT * FROM "{table}"').fetchall()
        return columns, rows
    finally:
        conn.close()


class TestColumnNames:
    def test_blank_names(self):
        assert _column_names(["a", "", " "]) == ["a", "col2", "col3"]

    def test_duplicates(self):
        assert _column_names(["id", "ID", "id"]) == ["id", "ID_2", "id_3"]


class TestWriteTable:
    def test_pads_and_truncates_rows(self, tmp_path):
        out = tmp_path / "out.sqlite"
        count = write_table(out, ["a", "b"], [["1"], ["2", "3", "extra"]])
        assert count == 2
        assert _read(out) == (["a", "b"], [("1", None), ("2", "3")])

    def test_quoted_identifiers(self, tmp_path):
        out = tmp_path / "out.sqlite"
        write_table(out, ['we"ird', "select"], [["x", "y"]], table="my table")
        assert _read(out, table="my table") == (['we"ird', "select"], [("x", "y")])


class TestCsvConverter:
    def test_header_and_rows(self, tmp_path):
        out = tmp_path / "out.sqlite"
        CsvConverter(io.BytesIO(b"id,name\n1,Alice\n2,Bob\n"), _OPTS).write_sqlite(out, _OPTS)
        assert _read(out) == (["id", "name"], [("1", "Alice"), ("2", "Bob")])

    def test_bom_and_quotes(self, tmp_path):
        out = tmp_path / "out.sqlite"
        data = '\ufeffname,note\n"Smith, J","line1\nline2"\n'.encode()
        CsvConverter(io.BytesIO(data), _OPTS).write_sqlite(out, _OPTS)
        assert _read(out) == (["name", "note"], [("Smith, J", "line1\nline2")])

    def test_empty(self, tmp_path):
        with pytest.raises(ValueError, match="empty CSV"):
            CsvConverter(io.BytesIO(b""), _OPTS).write_sqlite(tmp_path / "out.sqlite", _OPTS)


class TestJsonConverter:
    def test_list_of_objects(self, tmp_path):
        out = tmp_path / "out.sqlite"
        data = b'[{"a": 1, "b": {"x": 2}}, {"a": 3, "c": [1, 2]}]'
        JsonConverter(io.BytesIO(data), _OPTS).write_sqlite(out, _OPTS)

        columns, rows = _read(out)
        assert columns == ["a", "b", "c"]
        assert rows == [("1", '{"x": 2}', None), ("3", None, "[1, 2]")]

    def test_single_object(self, tmp_path):
        out = tmp_path / "out.sqlite"
        JsonConverter(io.BytesIO(b'{"k": "v"}'), _OPTS).write_sqlite(out, _OPTS)
        assert _read(out) == (["k"], [("v",)])

    def test_rejects_scalars(self, tmp_path):
        with pytest.raises(ValueError, match="object or a list of objects"):
            JsonConverter(io.BytesIO(b"[1, 2]"), _OPTS).write_sqlite(tmp_path / "o.sqlite", _OPTS)


class TestTextConverter:
    def test_lines(self, tmp_path):
        out = tmp_path / "out.sqlite"
        TextConverter(io.BytesIO(b"first\r\nsecond\n"), _OPTS).write_sqlite(out, _OPTS)
        assert _read(out) == (["line"], [("first",), ("second",)])


class TestFilesystemConverter:
    def test_walks_tree(self, tmp_path):
        root = tmp_path / "root"
        (root / "sub").mkdir(parents=True)
        (root / "a.txt").write_text("hello")
        (root / "sub" / "b.txt").write_text("hi")
        out = tmp_path / "out.sqlite"

        FilesystemConverter(root, _OPTS).write_sqlite(out, _OPTS)

        columns, rows = _read(out)
        assert columns == ["path", "name", "is_dir", "size", "mod_time"]
        by_path = {row[0]: row for row in rows}
        assert set(by_path) == {"sub", "a.txt", "sub/b.txt"}
        assert by_path["sub"][2] == "1"
        assert by_path["a.txt"][3] == "5"
        assert by_path["sub/b.txt"][1] == "b.txt"

    def test_rejects_file(self, tmp_path):
        path = tmp_path / "f.txt"
        path.write_text("x")
        with pytest.raises(NotADirectoryError):
            FilesystemConverter(path, _OPTS)
