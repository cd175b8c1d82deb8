"""Shared remote filesystem handles and streaming access."""

from any2db.remote.fetcher import copy_stream, list_source, open_source
from any2db.remote.handles import HandleCache, RemoteHandle, split_source_path

__all__ = [
    "HandleCache",
    "RemoteHandle",
    "split_source_path",
    "open_source",
    "copy_stream",
    "list_source",
]
