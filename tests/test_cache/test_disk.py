"""Tests for the on-disk tier."""

from any2db.cache.disk import DiskCache
from any2db.cache.keys import disk_filename


class TestDiskCache:
    def test_set_get(self, tmp_path):
        cache = DiskCache(tmp_path)
        path = cache.set("alice:/data/x.csv", b"payload")
        assert path == tmp_path / disk_filename("alice:/data/x.csv")
        assert cache.get("alice:/data/x.csv") == b"payload"

    def test_get_miss(self, tmp_path):
        cache = DiskCache(tmp_path)
        assert cache.get("nonexistent") is None

    def test_creates_directory(self, tmp_path):
        target = tmp_path / "nested" / "cache"
        DiskCache(target)
        assert target.is_dir()

    def test_overwrite_replaces_whole_file(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k", b"a" * 100)
        cache.set("k", b"b")
        assert cache.get("k") == b"b"

    def test_no_temp_files_left(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k", b"data")
        assert [p.name for p in tmp_path.iterdir()] == [disk_filename("k")]

    def test_persists_across_instances(self, tmp_path):
        DiskCache(tmp_path).set("k", b"data")
        assert DiskCache(tmp_path).get("k") == b"data"

    def test_delete(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k", b"data")
        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.get("k") is None

    def test_clear_only_removes_entries(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k1", b"one")
        cache.set("k2", b"two")
        other = tmp_path / "any2db_db_123.sqlite"
        other.write_bytes(b"caller owned")

        assert cache.clear() == 2
        assert cache.entry_count == 0
        assert other.exists()

    def test_size_mb(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k1", b"x" * 1024 * 1024)
        assert cache.entry_count == 1
        assert cache.size_mb == 1.0
