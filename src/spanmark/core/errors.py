# topmark:header:start
#
#   project      : SpanMark
#   file         : errors.py
#   file_relpath : src/spanmark/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the SpanMark library layer.

Lookup errors carry the offending value (``given``) and the largest accepted
value (``max``) so callers can build precise messages without re-deriving
source geometry.

Usage:
    Direct API calls (``SourceText.line_range``, ``SourceCache.fetch``, the
    LSP conversion helpers) raise these exceptions. The renderer catches the
    lookup errors per label and degrades to placeholders; see
    `spanmark.rendering.layout.RenderIssue`.

The CLI maps these onto its own Click-aware hierarchy in `spanmark.cli.errors`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from spanmark.source.identity import SourceID


class SpanmarkError(Exception):
    """Base class for all SpanMark library errors."""


class FileMissingError(SpanmarkError, LookupError):
    """A `SourceID` is not registered in the source cache."""

    def __init__(self, file: SourceID) -> None:
        self.file: SourceID = file
        super().__init__(f"source not found in cache: {file}")


class _BoundedLookupError(SpanmarkError, IndexError):
    """Shared shape for out-of-range lookups."""

    what: str = "value"

    def __init__(self, given: int, max: int) -> None:  # noqa: A002
        self.given: int = given
        self.max: int = max
        super().__init__(f"invalid {self.what}: given {given}, max {max}")


class IndexTooLargeError(_BoundedLookupError):
    """A byte offset lies beyond the end of the source."""

    what = "byte index"


class LineTooLargeError(_BoundedLookupError):
    """A line index lies beyond the last line of the source."""

    what = "line index"


class ColumnTooLargeError(_BoundedLookupError):
    """A column lies beyond the end of its line."""

    what = "column"


class InvalidCharBoundaryError(SpanmarkError, ValueError):
    """A byte offset falls inside a multi-byte UTF-8 sequence."""

    def __init__(self, given: int) -> None:
        self.given: int = given
        super().__init__(f"byte index {given} is not on a character boundary")


class SourceEncodingError(SpanmarkError, ValueError):
    """Source text cannot be encoded as UTF-8 (for example a lone surrogate)."""

    def __init__(self, position: int, reason: str) -> None:
        self.position: int = position
        self.reason: str = reason
        super().__init__(f"source text is not valid UTF-8 at character {position}: {reason}")


class SourceIOError(SpanmarkError, OSError):
    """Reading a source from disk failed.

    Wraps the underlying `OSError` or `UnicodeDecodeError`, available as ``cause``
    and as ``__cause__`` when raised with ``from``.
    """

    def __init__(self, path: Path | str, cause: BaseException) -> None:
        self.path: Path | str = path
        self.cause: BaseException = cause
        super().__init__(f"cannot read source {path}: {cause}")


class SourceCollisionError(SpanmarkError, ValueError):
    """A different text was registered under an identity already in the cache."""

    def __init__(self, file: SourceID) -> None:
        self.file: SourceID = file
        super().__init__(f"a different source is already registered as {file}")


class RenderError(SpanmarkError):
    """The output sink failed while a diagnostic was being written."""
