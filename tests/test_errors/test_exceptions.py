"""Tests for the exception hierarchy."""

import pytest

from any2db.errors.exceptions import (
    Any2DbError,
    ConfigurationError,
    ConversionError,
    FetchCancelledError,
    FetchError,
    HandleCreationError,
    LocalIOError,
    UnsupportedFormatError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            ConfigurationError,
            HandleCreationError,
            FetchError,
            FetchCancelledError,
            ConversionError,
            UnsupportedFormatError,
            LocalIOError,
        ],
    )
    def test_all_derive_from_base(self, cls):
        assert issubclass(cls, Any2DbError)

    def test_cancel_is_fetch_error(self):
        assert issubclass(FetchCancelledError, FetchError)

    def test_unsupported_is_conversion_error(self):
        assert issubclass(UnsupportedFormatError, ConversionError)


class TestAttributes:
    def test_message(self):
        err = Any2DbError("something broke")
        assert str(err) == "something broke"
        assert err.message == "something broke"

    def test_handle_creation_keeps_original(self):
        cause = RuntimeError("auth")
        err = HandleCreationError("failed", backend_type="s3", original=cause)
        assert err.backend_type == "s3"
        assert err.original is cause

    def test_fetch_path(self):
        assert FetchError("x", path="bucket/a.csv").path == "bucket/a.csv"

    def test_unsupported_extension(self):
        err = UnsupportedFormatError("unsupported file type: .xyz", extension=".xyz")
        assert err.extension == ".xyz"
        assert err.driver == ""

    def test_local_io(self):
        err = LocalIOError("failed", path="/tmp/x", operation="write")
        assert (err.path, err.operation) == ("/tmp/x", "write")

    def test_unknown_keyword_rejected(self):
        with pytest.raises(TypeError):
            Any2DbError("failed", path="/tmp/x")

    def test_misspelled_context_rejected(self):
        with pytest.raises(TypeError):
            FetchError("failed", pth="bucket/a.csv")
