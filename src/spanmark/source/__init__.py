# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/source/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Source buffers, their identities, spans over them, and position conversion."""

from __future__ import annotations

from spanmark.source.cache import SourceCache
from spanmark.source.identity import SourceID, SourceKind, SourcePath
from spanmark.source.lsp import (
    Position,
    PositionRange,
    byte_span_to_range,
    byte_to_utf16_position,
    range_to_byte_span,
    utf16_position_to_byte,
)
from spanmark.source.span import Span
from spanmark.source.text import Location, SourceLine, SourceText

__all__ = [
    "Location",
    "Position",
    "PositionRange",
    "SourceCache",
    "SourceID",
    "SourceKind",
    "SourceLine",
    "SourcePath",
    "SourceText",
    "Span",
    "byte_span_to_range",
    "byte_to_utf16_position",
    "range_to_byte_span",
    "utf16_position_to_byte",
]
