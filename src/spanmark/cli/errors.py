# topmark:header:start
#
#   project      : SpanMark
#   file         : errors.py
#   file_relpath : src/spanmark/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the SpanMark CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes. Library errors (`spanmark.core.errors`) are
    translated by `from_library_error`.

Styling:
    Exceptions prefer the project console if one is stored in the Click
    context (see `show()`); otherwise Click's default display is used.
"""

from __future__ import annotations

from typing import IO, Any

import click

from spanmark.config.io import ConfigLoadError
from spanmark.core.errors import (
    FileMissingError,
    SourceCollisionError,
    SourceEncodingError,
    SourceIOError,
    SpanmarkError,
)
from spanmark.core.exit_codes import ExitCode
from spanmark.diagnostic.loaders import DocumentLoadError


class SpanmarkCliError(click.ClickException):
    """Base class for all SpanMark CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:
        """Return the plain error message text; color is added by `show()`."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(f"Error: {self.format_message()}")
                return
        super().show(file)


class SpanmarkUsageError(SpanmarkCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class SpanmarkDataError(SpanmarkCliError):
    """Error for malformed diagnostics documents or undecodable sources."""

    exit_code = ExitCode.DATA_ERROR


class SpanmarkConfigError(SpanmarkCliError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


class SpanmarkFileNotFoundError(SpanmarkCliError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class SpanmarkIOError(SpanmarkCliError):
    """Error for I/O errors reading inputs or writing output."""

    exit_code = ExitCode.IO_ERROR


class SpanmarkUnexpectedError(SpanmarkCliError):
    """Error for unhandled/unknown errors (last-resort)."""

    exit_code = ExitCode.UNEXPECTED_ERROR


def from_library_error(exc: SpanmarkError | ConfigLoadError) -> SpanmarkCliError:
    """Return the CLI error matching a library error."""
    if isinstance(exc, ConfigLoadError):
        return SpanmarkConfigError(str(exc))
    if isinstance(exc, DocumentLoadError):
        return SpanmarkDataError(str(exc))
    if isinstance(exc, SourceIOError):
        if isinstance(exc.cause, FileNotFoundError):
            return SpanmarkFileNotFoundError(str(exc))
        if isinstance(exc.cause, UnicodeDecodeError):
            return SpanmarkDataError(str(exc))
        return SpanmarkIOError(str(exc))
    if isinstance(exc, (FileMissingError, SourceCollisionError, SourceEncodingError)):
        return SpanmarkDataError(str(exc))
    if isinstance(exc, (IndexError, ValueError)):
        return SpanmarkUsageError(str(exc))
    return SpanmarkUnexpectedError(str(exc))
