"""any2db — materialize any local or remote data source as a cached SQLite file."""

from any2db.cache.manager import ArtifactCache
from any2db.core import get_artifact, get_artifacts, open_cache
from any2db.drivers import get_driver
from any2db.remote.fetcher import list_source
from any2db.remote.handles import HandleCache

__all__ = [
    "ArtifactCache",
    "HandleCache",
    "get_artifact",
    "get_artifacts",
    "get_driver",
    "list_source",
    "open_cache",
]
