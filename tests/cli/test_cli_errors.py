# topmark:header:start
#
#   project      : SpanMark
#   file         : test_cli_errors.py
#   file_relpath : tests/cli/test_cli_errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the CLI error mapping and the group-level verbosity flags."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from spanmark.cli.errors import (
    SpanmarkCliError,
    SpanmarkConfigError,
    SpanmarkDataError,
    SpanmarkFileNotFoundError,
    SpanmarkIOError,
    SpanmarkUnexpectedError,
    SpanmarkUsageError,
    from_library_error,
)
from spanmark.cli.options import resolve_verbosity
from spanmark.config.io import ConfigLoadError
from spanmark.config.logging import TRACE_LEVEL
from spanmark.core.errors import (
    ColumnTooLargeError,
    FileMissingError,
    IndexTooLargeError,
    InvalidCharBoundaryError,
    RenderError,
    SourceCollisionError,
    SourceEncodingError,
    SourceIOError,
    SpanmarkError,
)
from spanmark.core.exit_codes import ExitCode
from spanmark.diagnostic.loaders import DocumentLoadError
from spanmark.source.identity import SourceID, SourcePath
from tests.cli.conftest import assert_USAGE_ERROR, run_cli
from tests.conftest import mark_cli

if TYPE_CHECKING:
    from click.testing import Result

FILE: SourceID = SourceID.from_path(SourcePath.snippet("main.rs"))


@pytest.mark.parametrize(
    ("error", "expected", "code"),
    [
        (ConfigLoadError(Path("x.toml"), "bad"), SpanmarkConfigError, ExitCode.CONFIG_ERROR),
        (DocumentLoadError("document", "bad"), SpanmarkDataError, ExitCode.DATA_ERROR),
        (
            SourceIOError("a.rs", FileNotFoundError("gone")),
            SpanmarkFileNotFoundError,
            ExitCode.FILE_NOT_FOUND,
        ),
        (
            SourceIOError("a.rs", UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid")),
            SpanmarkDataError,
            ExitCode.DATA_ERROR,
        ),
        (SourceIOError("a.rs", PermissionError("denied")), SpanmarkIOError, ExitCode.IO_ERROR),
        (FileMissingError(FILE), SpanmarkDataError, ExitCode.DATA_ERROR),
        (SourceCollisionError(FILE), SpanmarkDataError, ExitCode.DATA_ERROR),
        (
            SourceEncodingError(2, "surrogates not allowed"),
            SpanmarkDataError,
            ExitCode.DATA_ERROR,
        ),
        (IndexTooLargeError(given=9, max=3), SpanmarkUsageError, ExitCode.USAGE_ERROR),
        (ColumnTooLargeError(given=9, max=3), SpanmarkUsageError, ExitCode.USAGE_ERROR),
        (InvalidCharBoundaryError(given=1), SpanmarkUsageError, ExitCode.USAGE_ERROR),
        (RenderError("sink failed"), SpanmarkUnexpectedError, ExitCode.UNEXPECTED_ERROR),
    ],
)
def test_from_library_error(
    error: SpanmarkError | ConfigLoadError,
    expected: type[SpanmarkCliError],
    code: ExitCode,
) -> None:
    """Each library error maps to one CLI error class and exit code."""
    cli_error: SpanmarkCliError = from_library_error(error)

    assert type(cli_error) is expected
    assert cli_error.exit_code == code
    assert cli_error.format_message() == str(error)


def test_source_io_error_keeps_cause() -> None:
    """The wrapped OS error stays reachable for the mapping."""
    cause = FileNotFoundError("gone")
    error = SourceIOError(Path("a.rs"), cause)

    assert error.cause is cause
    assert "a.rs" in str(error)


@pytest.mark.parametrize(
    ("verbose", "quiet", "level"),
    [
        (0, 0, logging.WARNING),
        (1, 0, logging.INFO),
        (2, 0, logging.DEBUG),
        (3, 0, TRACE_LEVEL),
        (5, 0, TRACE_LEVEL),
        (0, 1, logging.ERROR),
        (0, 3, logging.ERROR),
    ],
)
def test_resolve_verbosity(verbose: int, quiet: int, level: int) -> None:
    """``-v`` raises and ``-q`` lowers the program-output level."""
    assert resolve_verbosity(verbose, quiet) == level


def test_resolve_verbosity_rejects_both() -> None:
    """``-v`` and ``-q`` are mutually exclusive."""
    with pytest.raises(SpanmarkUsageError, match="mutually exclusive"):
        resolve_verbosity(1, 1)


@mark_cli
def test_verbose_and_quiet_is_usage_error() -> None:
    """The CLI exits with USAGE_ERROR when both flags are given."""
    result: Result = run_cli(["-v", "-q", "version"])

    assert_USAGE_ERROR(result)
    assert "mutually exclusive" in result.output


@mark_cli
def test_unknown_color_mode_is_rejected() -> None:
    """An unknown ``--color`` value is refused by Click before any command runs."""
    result: Result = run_cli(["--color", "sometimes", "version"])

    assert result.exit_code != ExitCode.SUCCESS
    assert "sometimes" in result.output
