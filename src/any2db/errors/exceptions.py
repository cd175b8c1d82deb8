"""Custom exception hierarchy for any2db."""

from __future__ import annotations


class Any2DbError(Exception):
    """Base exception for all any2db errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(Any2DbError):
    """Missing or unknown backend type.

    Examples: credentials without a 'type' field, a protocol fsspec doesn't know.
    """

    def __init__(self, message: str = "", backend_type: str | None = None) -> None:
        super().__init__(message)
        self.backend_type = backend_type


class HandleCreationError(Any2DbError):
    """Backend connection/auth setup failed. Never cached; the next call retries."""

    def __init__(
        self,
        message: str = "",
        backend_type: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.backend_type = backend_type
        self.original = original


class FetchError(Any2DbError):
    """Opening or copying the source stream failed."""

    def __init__(self, message: str = "", path: str = "") -> None:
        super().__init__(message)
        self.path = path


class FetchCancelledError(FetchError):
    """The caller cancelled the request while the source was being fetched."""


class ConversionError(Any2DbError):
    """Converter lookup, open, or import failed."""

    def __init__(self, message: str = "", driver: str = "") -> None:
        super().__init__(message)
        self.driver = driver


class UnsupportedFormatError(ConversionError):
    """No driver is known for the source's file extension."""

    def __init__(self, message: str = "", extension: str = "") -> None:
        super().__init__(message)
        self.extension = extension


class LocalIOError(Any2DbError):
    """Creating, reading, writing, or removing a local scratch file failed."""

    def __init__(self, message: str = "", path: str = "", operation: str = "") -> None:
        super().__init__(message)
        self.path = path
        self.operation = operation
