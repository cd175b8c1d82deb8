import sqlite3

import pytest

from any2db.converters.builtin import CsvConverter, FilesystemConverter
from any2db.converters.registry import ConverterRegistry


class CountingRegistry(ConverterRegistry):
    """Registry that records every converter it opens."""

    def __init__(self) -> None:
        super().__init__()
        self.opened: list[str] = []

    def open(self, driver, source, options=None):
        self.opened.append(driver)
        return super().open(driver, source, options)


@pytest.fixture
def cache_dir(tmp_path):
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def local_creds():
    return {"type": "local"}


@pytest.fixture
def registry():
    reg = CountingRegistry()
    reg.register("csv", CsvConverter)
    reg.register("filesystem", FilesystemConverter)
    return reg


@pytest.fixture
def csv_file(data_dir):
    path = data_dir / "people.csv"
    path.write_text("id,name\n1,Alice\n2,Bob\n")
    return path


@pytest.fixture
def sqlite_file(data_dir):
    path = data_dir / "x.sqlite"
    conn = sqlite3.connect(str(path))
    conn.execute("CREATE TABLE t (a INTEGER)")
    conn.execute("INSERT INTO t VALUES (42)")
    conn.commit()
    conn.close()
    return path
