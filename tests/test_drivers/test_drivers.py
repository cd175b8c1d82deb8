"""Tests for extension → driver resolution."""

import pytest

from any2db.drivers import (
    PROBE_EXTENSIONS,
    driver_table,
    get_driver,
    is_passthrough,
    normalize_extension,
)


class TestGetDriver:
    @pytest.mark.parametrize(
        "ext, driver",
        [
            (".csv", "csv"),
            (".xlsx", "excel"),
            (".xls", "excel"),
            (".zip", "zip"),
            (".html", "html"),
            (".htm", "html"),
            (".json", "json"),
            (".txt", "txt"),
            (".md", "markdown"),
            (".markdown", "markdown"),
        ],
    )
    def test_known(self, ext, driver):
        assert get_driver(ext) == driver

    def test_case_insensitive(self):
        assert get_driver(".CSV") == "csv"
        assert get_driver("Json") == "json"

    def test_unknown(self):
        assert get_driver(".unknownext") is None
        assert get_driver("") is None

    def test_passthrough_has_no_driver(self):
        assert get_driver(".sqlite") is None


class TestPassthrough:
    @pytest.mark.parametrize("ext", [".db", ".sqlite", ".SQLITE3"])
    def test_passthrough(self, ext):
        assert is_passthrough(ext)

    def test_not_passthrough(self):
        assert not is_passthrough(".csv")


class TestHelpers:
    def test_normalize(self):
        assert normalize_extension(" CSV ") == ".csv"
        assert normalize_extension("") == ""

    def test_probe_order(self):
        assert PROBE_EXTENSIONS[0] == ".csv"
        assert PROBE_EXTENSIONS[-3:] == (".db", ".sqlite", ".sqlite3")

    def test_driver_table(self):
        table = driver_table()
        assert table[".csv"] == "csv"
        assert table[".db"] == "sqlite"
        assert set(table) == set(PROBE_EXTENSIONS)
