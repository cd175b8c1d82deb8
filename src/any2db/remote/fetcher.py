"""Open, copy, and list source objects through shared handles."""

from __future__ import annotations

import logging
import posixpath
import threading
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO

from any2db.errors.exceptions import (
    Any2DbError,
    FetchCancelledError,
    FetchError,
    LocalIOError,
)
from any2db.remote.handles import HandleCache
from any2db.types import ListEntry

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024  # 1 MiB

# Keys fsspec backends use for modification time, in preference order
_MTIME_KEYS = ("mtime", "LastModified", "last_modified", "updated", "modified", "created")


def open_source(
    handles: HandleCache,
    source_path: str,
    credentials: Mapping[str, Any],
    backend_type: str | None = None,
) -> BinaryIO:
    """Open a binary read stream for a source object."""
    handle, relative_path = handles.resolve(backend_type, credentials, source_path)
    try:
        return handle.fs.open(handle.full_path(relative_path), "rb")
    except Any2DbError:
        raise
    except Exception as exc:
        raise FetchError(
            f"failed to open file '{relative_path}': {exc}", path=source_path
        ) from exc


def copy_stream(
    src: BinaryIO,
    dst_path: Path,
    cancel: threading.Event | None = None,
    chunk_size: int = _CHUNK_SIZE,
) -> int:
    """Copy a stream into dst_path in chunks. Returns the byte count.

    The cancel event is checked between chunks.
    """
    written = 0
    try:
        dst = open(dst_path, "wb")
    except OSError as exc:
        raise LocalIOError(
            f"failed to open source temp file: {exc}", path=str(dst_path), operation="open"
        ) from exc

    with dst:
        while True:
            if cancel is not None and cancel.is_set():
                raise FetchCancelledError("fetch cancelled", path=str(dst_path))
            try:
                chunk = src.read(chunk_size)
            except Exception as exc:
                raise FetchError(f"failed to read source stream: {exc}") from exc
            if not chunk:
                break
            try:
                dst.write(chunk)
            except OSError as exc:
                raise LocalIOError(
                    f"failed to write source temp file: {exc}",
                    path=str(dst_path),
                    operation="write",
                ) from exc
            written += len(chunk)
    return written


def list_source(
    handles: HandleCache,
    source_path: str,
    credentials: Mapping[str, Any],
    backend_type: str | None = None,
) -> list[ListEntry]:
    """List a directory on any backend, sorted by name."""
    handle, relative_path = handles.resolve(backend_type, credentials, source_path)
    try:
        infos = handle.fs.ls(handle.full_path(relative_path), detail=True)
    except Exception as exc:
        raise FetchError(
            f"failed to list directory '{relative_path or '.'}': {exc}", path=source_path
        ) from exc

    entries = [_to_entry(info) for info in infos]
    return sorted(entries, key=lambda e: e.name)


def _to_entry(info: dict[str, Any]) -> ListEntry:
    name = posixpath.basename(str(info.get("name", "")).rstrip("/"))
    return ListEntry(
        name=name,
        is_dir=info.get("type") == "directory",
        size=int(info.get("size") or 0),
        modified=_parse_mtime(info),
    )


def _parse_mtime(info: dict[str, Any]) -> datetime | None:
    for key in _MTIME_KEYS:
        value = info.get(key)
        if value is None:
            continue
        if isinstance(value, datetime):
            return value
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                logger.debug("Unparseable modification time %r", value)
    return None
