# topmark:header:start
#
#   project      : SpanMark
#   file         : test_errors.py
#   file_relpath : tests/core/test_errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for the library exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

from spanmark.core.errors import (
    ColumnTooLargeError,
    FileMissingError,
    IndexTooLargeError,
    InvalidCharBoundaryError,
    LineTooLargeError,
    SourceCollisionError,
    SourceEncodingError,
    SourceIOError,
    SpanmarkError,
)
from spanmark.core.exit_codes import ExitCode
from spanmark.source.identity import SourceID, SourcePath

FILE: SourceID = SourceID.from_path(SourcePath.snippet("x"))


@pytest.mark.parametrize(
    ("error", "what"),
    [
        (IndexTooLargeError(given=12, max=10), "byte index"),
        (LineTooLargeError(given=4, max=2), "line index"),
        (ColumnTooLargeError(given=9, max=3), "column"),
    ],
)
def test_bounded_lookup_errors(error: IndexTooLargeError, what: str) -> None:
    """Bounded lookups carry the given and maximum values."""
    assert isinstance(error, SpanmarkError)
    assert isinstance(error, IndexError)
    assert str(error) == f"invalid {what}: given {error.given}, max {error.max}"


def test_error_bases_allow_builtin_handlers() -> None:
    """Library errors can be caught by their builtin counterparts too."""
    cause = FileNotFoundError(2, "No such file")
    io_error = SourceIOError(Path("a.rs"), cause)

    assert isinstance(FileMissingError(FILE), LookupError)
    assert isinstance(InvalidCharBoundaryError(3), ValueError)
    assert isinstance(SourceCollisionError(FILE), ValueError)
    assert isinstance(io_error, OSError)
    assert io_error.cause is cause
    assert str(io_error).startswith("cannot read source a.rs")


def test_messages_name_the_source() -> None:
    """Messages identify the source involved."""
    assert str(FILE) in str(FileMissingError(FILE))
    assert str(FILE) in str(SourceCollisionError(FILE))
    assert str(InvalidCharBoundaryError(3)) == "byte index 3 is not on a character boundary"
    assert str(SourceEncodingError(5, "surrogates not allowed")) == (
        "source text is not valid UTF-8 at character 5: surrogates not allowed"
    )


def test_exit_codes_follow_sysexits() -> None:
    """Exit codes follow the BSD sysexits convention where one applies."""
    assert ExitCode.SUCCESS == 0
    assert ExitCode.USAGE_ERROR == 64
    assert ExitCode.DATA_ERROR == 65
    assert ExitCode.FILE_NOT_FOUND == 66
    assert ExitCode.IO_ERROR == 74
    assert ExitCode.CONFIG_ERROR == 78
