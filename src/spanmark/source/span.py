# topmark:header:start
#
#   project      : SpanMark
#   file         : span.py
#   file_relpath : src/spanmark/source/span.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Half-open byte ranges over a registered source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from spanmark.constants import MAX_OFFSET

if TYPE_CHECKING:
    from spanmark.source.identity import SourceID


def _clamp_offset(value: int) -> int:
    return min(max(int(value), 0), MAX_OFFSET)


@dataclass(frozen=True, slots=True, init=False)
class Span:
    """A ``start .. end`` byte range in one source.

    Construction never raises: negative offsets become 0, offsets above
    ``2**32 - 1`` are capped, and an ``end`` before ``start`` collapses the span
    to zero width at ``start``. Whether the offsets exist in the source is only
    checked when the span is resolved against a `SourceText`.

    Attributes:
        file (SourceID): Identity of the source the offsets refer to.
        start (int): First byte covered.
        end (int): One past the last byte covered.
    """

    file: SourceID
    start: int
    end: int

    def __init__(self, file: SourceID, start: int, end: int) -> None:
        start = _clamp_offset(start)
        end = max(_clamp_offset(end), start)
        object.__setattr__(self, "file", file)
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """True for zero-width spans."""
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        """Return True if ``offset`` lies inside the span."""
        return self.start <= offset < self.end

    def overlaps(self, other: Span) -> bool:
        """Return True if both spans share at least one byte of the same source."""
        return self.file == other.file and self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.file}[{self.start}..{self.end}]"
