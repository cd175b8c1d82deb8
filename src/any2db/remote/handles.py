"""One shared fsspec filesystem per (type, credentials, root)."""

from __future__ import annotations

import hashlib
import logging
import os
import posixpath
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import fsspec
from fsspec import AbstractFileSystem

from any2db.errors.exceptions import ConfigurationError, HandleCreationError
from any2db.types import BackendClass

logger = logging.getLogger(__name__)

# Backend type names that differ from the fsspec protocol name
_PROTOCOL_ALIASES: dict[str, str] = {
    "local": "file",
}

BackendFactory = Callable[[str, dict[str, Any]], AbstractFileSystem]


def hash_handle(backend_type: str, root: str, credentials: Mapping[str, Any]) -> str:
    """Hash a (backend type, root, credentials) triple.

    Keys are visited in sorted order so equal credential sets hash equally
    regardless of insertion order.
    """
    h = hashlib.sha256()
    h.update(backend_type.encode("utf-8"))
    h.update(b"\0")
    h.update(root.encode("utf-8"))
    for key in sorted(credentials):
        h.update(str(key).encode("utf-8"))
        h.update(str(credentials[key]).encode("utf-8"))
    return h.hexdigest()


def backend_class(backend_type: str) -> BackendClass:
    if backend_type == "local":
        return BackendClass.LOCAL
    if backend_type in ("http", "https"):
        return BackendClass.HTTP
    return BackendClass.GENERIC


def _split_local(source_path: str) -> tuple[str, str]:
    # Root the filesystem at / and address files by their absolute path
    return "/", os.path.abspath(source_path).lstrip("/")


def _split_http(source_path: str) -> tuple[str, str]:
    try:
        parts = urlsplit(source_path)
    except ValueError:
        return posixpath.dirname(source_path), posixpath.basename(source_path)
    return f"{parts.scheme}://{parts.netloc}", parts.path.lstrip("/")


def _split_generic(source_path: str) -> tuple[str, str]:
    # Object stores are rooted at the backend root; the bucket is part of the path
    return "", source_path.lstrip("/")


_SPLITTERS: dict[BackendClass, Callable[[str], tuple[str, str]]] = {
    BackendClass.LOCAL: _split_local,
    BackendClass.HTTP: _split_http,
    BackendClass.GENERIC: _split_generic,
}


def split_source_path(backend_type: str, source_path: str) -> tuple[str, str]:
    """Decompose a caller-supplied path into (root, relative path) for a backend."""
    return _SPLITTERS[backend_class(backend_type)](source_path)


def infer_backend_type(
    backend_type: str | None,
    credentials: Mapping[str, Any],
    source_path: str,
) -> str:
    """Pick the backend type: credentials first, then the argument, then the URL scheme."""
    fs_type = credentials.get("type") or backend_type
    if fs_type:
        return str(fs_type)
    if source_path.startswith(("http:", "https:")):
        return "http"
    raise ConfigurationError("credentials missing 'type' field")


def _fsspec_factory(protocol: str, options: dict[str, Any]) -> AbstractFileSystem:
    return fsspec.filesystem(protocol, skip_instance_cache=True, **options)


@dataclass(frozen=True)
class RemoteHandle:
    """A live filesystem handle with the root it was created for."""

    key: str
    backend_type: str
    backend_class: BackendClass
    root: str
    fs: AbstractFileSystem

    def full_path(self, relative_path: str) -> str:
        """Rebuild the backend-native path for a path relative to this handle's root."""
        if self.backend_class == BackendClass.LOCAL:
            return "/" + relative_path
        if self.backend_class == BackendClass.HTTP:
            return f"{self.root}/{relative_path}"
        return relative_path


class HandleCache:
    """Process-lifetime cache of remote filesystem handles.

    One coarse lock spans lookup-or-create. Creation of different handles
    serializes behind it; handles are created rarely compared to lookups.
    Entries are never expired: rotated credentials hash differently and get
    a fresh handle.
    """

    def __init__(self, factory: BackendFactory | None = None) -> None:
        self._factory = factory or _fsspec_factory
        self._handles: dict[str, RemoteHandle] = {}
        self._lock = threading.Lock()

    def resolve(
        self,
        backend_type: str | None,
        credentials: Mapping[str, Any],
        source_path: str,
    ) -> tuple[RemoteHandle, str]:
        """Return the shared handle for this source and the path relative to its root.

        Raises ConfigurationError for a missing/unknown backend type and
        HandleCreationError when the backend can't be set up.
        """
        fs_type = infer_backend_type(backend_type, credentials, source_path)
        root, relative_path = split_source_path(fs_type, source_path)
        key = hash_handle(fs_type, root, credentials)

        with self._lock:
            handle = self._handles.get(key)
            if handle is not None:
                return handle, relative_path

            handle = self._create(key, fs_type, root, credentials)
            self._handles[key] = handle

        logger.info("Created %s handle rooted at '%s'", fs_type, root)
        return handle, relative_path

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def clear(self) -> None:
        with self._lock:
            self._handles.clear()

    def _create(
        self,
        key: str,
        fs_type: str,
        root: str,
        credentials: Mapping[str, Any],
    ) -> RemoteHandle:
        protocol = _PROTOCOL_ALIASES.get(fs_type, fs_type)
        try:
            fsspec.get_filesystem_class(protocol)
        except ValueError as exc:
            raise ConfigurationError(
                f"backend type '{fs_type}' not found", backend_type=fs_type
            ) from exc
        except ImportError as exc:
            raise HandleCreationError(
                f"backend '{fs_type}' is not installed: {exc}",
                backend_type=fs_type,
                original=exc,
            ) from exc

        options = {k: v for k, v in credentials.items() if k != "type"}
        try:
            fs = self._factory(protocol, options)
        except Exception as exc:
            raise HandleCreationError(
                f"failed to create {fs_type} filesystem: {exc}",
                backend_type=fs_type,
                original=exc,
            ) from exc

        return RemoteHandle(
            key=key,
            backend_type=fs_type,
            backend_class=backend_class(fs_type),
            root=root,
            fs=fs,
        )
