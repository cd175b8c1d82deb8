"""Tests for cache key and file name generation."""

from any2db.cache.keys import disk_filename, is_disk_filename, make_cache_key


class TestMakeCacheKey:
    def test_format(self):
        assert make_cache_key("alice", "/data/x.csv") == "alice:/data/x.csv"

    def test_empty_alias(self):
        assert make_cache_key("", "bucket/x.csv") == ":bucket/x.csv"

    def test_alias_scopes_key(self):
        assert make_cache_key("a", "p") != make_cache_key("b", "p")


class TestDiskFilename:
    def test_deterministic(self):
        assert disk_filename("a:p") == disk_filename("a:p")

    def test_sha256_hex_with_suffix(self):
        name = disk_filename("a:p")
        assert name.endswith(".sqlite")
        assert len(name) == 64 + len(".sqlite")

    def test_different_keys(self):
        assert disk_filename("a:p") != disk_filename("b:p")

    def test_recognized(self):
        assert is_disk_filename(disk_filename("a:p"))

    def test_scratch_names_not_recognized(self):
        assert not is_disk_filename("any2db_db_abc123.sqlite")
        assert not is_disk_filename(".any2db_write_x.tmp")
        assert not is_disk_filename("A" * 64 + ".sqlite")
