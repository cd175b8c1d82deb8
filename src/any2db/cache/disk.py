"""L2 disk cache: one flat file per artifact, named by a hash of its key."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from any2db.cache.keys import disk_filename, is_disk_filename

logger = logging.getLogger(__name__)


class DiskCache:
    """Persistent artifact store with no automatic eviction.

    Entries survive process restarts. Reclaiming space is left to the
    operator (see ``clear``).
    """

    def __init__(self, cache_dir: Path) -> None:
        self._dir = Path(cache_dir)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        return self._dir / disk_filename(key)

    def get(self, key: str) -> bytes | None:
        """Return the stored bytes for key, or None on a miss.

        Raises OSError if the entry exists but cannot be read.
        """
        path = self.path_for(key)
        if not path.is_file():
            return None
        return path.read_bytes()

    def set(self, key: str, data: bytes) -> Path:
        """Write the entry as a whole file.

        Writes go to a sibling temp file first so ``os.replace`` is atomic and
        concurrent writers of the same key can't interleave bytes.
        """
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".any2db_write_", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return path

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if path.exists():
            path.unlink()
            return True
        return False

    def clear(self) -> int:
        """Delete every cached artifact. Returns the number removed."""
        count = 0
        for path in self._entries():
            try:
                path.unlink()
                count += 1
            except FileNotFoundError:
                pass
        return count

    @property
    def entry_count(self) -> int:
        return sum(1 for _ in self._entries())

    @property
    def size_mb(self) -> float:
        total = 0
        for path in self._entries():
            try:
                total += path.stat().st_size
            except FileNotFoundError:
                continue
        return total / (1024 * 1024)

    def _entries(self) -> list[Path]:
        return [p for p in self._dir.iterdir() if p.is_file() and is_disk_filename(p.name)]
