# topmark:header:start
#
#   project      : SpanMark
#   file         : lsp.py
#   file_relpath : src/spanmark/source/lsp.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Conversion between byte offsets and Language Server Protocol positions.

LSP positions are ``(line, character)`` pairs, both zero-based, where
``character`` counts **UTF-16 code units**: characters outside the Basic
Multilingual Plane count as two.

Examples:
    ```python
    src = SourceText("åä t𐐀b")
    assert byte_to_utf16_position(src, 5) == Position(0, 3)
    assert utf16_position_to_byte(src, Position(0, 6)) == 10
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from spanmark.core.errors import ColumnTooLargeError, InvalidCharBoundaryError
from spanmark.source.span import Span

if TYPE_CHECKING:
    from spanmark.source.text import SourceLine, SourceText


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based LSP position (``character`` in UTF-16 code units)."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class PositionRange:
    """Half-open LSP range."""

    start: Position
    end: Position


def utf16_len(text: str) -> int:
    """Return the number of UTF-16 code units needed to encode ``text``."""
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def byte_to_utf16_position(source: SourceText, offset: int) -> Position:
    """Convert a byte offset to an LSP position.

    Args:
        source (SourceText): Buffer the offset refers to.
        offset (int): Byte offset; the buffer length is accepted.

    Returns:
        Position: The zero-based line and UTF-16 column.

    Raises:
        IndexTooLargeError: If the offset lies beyond the buffer.
        InvalidCharBoundaryError: If the offset splits a character.
    """
    source.check_char_boundary(offset)
    line_index: int = source.line_index(offset)
    line: SourceLine = source.line(line_index)
    prefix: str = source.data[line.offset : offset].decode("utf-8")
    return Position(line=line_index, character=utf16_len(prefix))


def utf16_position_to_byte(source: SourceText, position: Position) -> int:
    """Convert an LSP position to a byte offset.

    The column may point at the line terminator or just past the line content,
    but not beyond the line.

    Raises:
        LineTooLargeError: If the line does not exist.
        ColumnTooLargeError: If the UTF-16 column lies past the end of the line.
        InvalidCharBoundaryError: If the column falls between the two units of
            a surrogate pair.
    """
    line: SourceLine = source.line(position.line)
    text: str = source.data[line.offset : line.end].decode("utf-8")
    units: int = 0
    byte_offset: int = line.offset
    for ch in text:
        if units >= position.character:
            break
        units += 2 if ord(ch) > 0xFFFF else 1
        byte_offset += len(ch.encode("utf-8"))
    if units < position.character:
        raise ColumnTooLargeError(given=position.character, max=units)
    if units > position.character:
        # The requested column splits a surrogate pair
        raise InvalidCharBoundaryError(given=byte_offset)
    return byte_offset


def byte_span_to_range(source: SourceText, span: Span) -> PositionRange:
    """Convert a byte span to an LSP range."""
    return PositionRange(
        start=byte_to_utf16_position(source, span.start),
        end=byte_to_utf16_position(source, span.end),
    )


def range_to_byte_span(source: SourceText, lsp_range: PositionRange) -> Span:
    """Convert an LSP range to a byte span in ``source``.

    A range that ends before it starts yields a zero-width span at its start.
    """
    start: int = utf16_position_to_byte(source, lsp_range.start)
    end: int = utf16_position_to_byte(source, lsp_range.end)
    return Span(source.id, start, end)
