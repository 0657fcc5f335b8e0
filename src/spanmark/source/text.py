# topmark:header:start
#
#   project      : SpanMark
#   file         : text.py
#   file_relpath : src/spanmark/source/text.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Source text with a line-start index.

`SourceText` holds one buffer together with the byte offset of every line
start, computed in a single pass on construction. All offsets are **byte**
offsets into the UTF-8 encoding of the text, which is what compilers and
language servers report; columns are derived on demand.

Line terminators recognized: ``\\r\\n`` (one terminator), ``\\n``, ``\\r``, vertical
tab, form feed, NEL (U+0085), LINE SEPARATOR (U+2028) and PARAGRAPH SEPARATOR
(U+2029). A terminator always starts a new line, so ``"a\\n"`` has two lines
(``"a\\n"`` and ``""``) and the empty text has exactly one empty line.

Examples:
    ```python
    src = SourceText.snippet("foo\\nbar\\r\\n\\nbaz", "demo")
    assert src.line_starts == (0, 4, 9, 10)
    views = [src.line_view(i) for i in range(src.line_count)]
    assert views == ["foo\\n", "bar\\r\\n", "\\n", "baz"]
    ```
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.core.errors import (
    ColumnTooLargeError,
    IndexTooLargeError,
    InvalidCharBoundaryError,
    LineTooLargeError,
    SourceEncodingError,
    SourceIOError,
)
from spanmark.source.identity import SourceID, SourcePath

if TYPE_CHECKING:
    from pathlib import Path

    from spanmark.config.logging import SpanmarkLogger

logger: SpanmarkLogger = get_logger(__name__)

_LINE_TERMINATOR_RE: re.Pattern[str] = re.compile("\r\n|[\n\r\x0b\x0c\x85\u2028\u2029]")


@dataclass(frozen=True, slots=True)
class SourceLine:
    """One line of a `SourceText`.

    Attributes:
        index (int): Zero-based line index.
        offset (int): Byte offset of the first byte of the line.
        length (int): Length in bytes, including the line terminator.
        text (str): Line content without terminator and trailing whitespace.
    """

    index: int
    offset: int
    length: int
    text: str

    @property
    def end(self) -> int:
        """Byte offset one past the terminator."""
        return self.offset + self.length

    @property
    def byte_range(self) -> range:
        """Byte offsets covered by this line, terminator included."""
        return range(self.offset, self.end)


@dataclass(frozen=True, slots=True)
class Location:
    """One-based, human-facing line and column numbers."""

    line_number: int
    column_number: int

    def __str__(self) -> str:
        return f"{self.line_number}:{self.column_number}"


class SourceText:
    """A source buffer and its line index.

    Instances are immutable apart from `clear`, which empties the text and
    marks the buffer dirty. To change the text, build a new instance and
    re-register it with the cache.

    The `id` is fixed at construction, so a cleared anonymous buffer keeps
    the identity it was cached under. Hashing uses the path only, which
    stays stable across `clear` and agrees with `__eq__`.

    Args:
        text (str): Full buffer text.
        path (SourcePath | None): Display path. Defaults to an anonymous path.

    Raises:
        SourceEncodingError: If ``text`` holds a lone surrogate.
    """

    def __init__(self, text: str, path: SourcePath | None = None) -> None:
        self._path: SourcePath = path or SourcePath.anonymous()
        self._dirty: bool = False
        self._load(text)
        self._id: SourceID = SourceID.from_path(self._path, content=self._text)

    # ------------------------------------------------------------------ build

    def _load(self, text: str) -> None:
        try:
            data: bytes = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            logger.error("Cannot encode source %s: %s", self._path, exc.reason)
            raise SourceEncodingError(exc.start, exc.reason) from exc
        self._text: str = text
        self._data: bytes = data

        starts: list[int] = [0]
        char_pos: int = 0
        byte_pos: int = 0
        for match in _LINE_TERMINATOR_RE.finditer(text):
            end: int = match.end()
            byte_pos += len(text[char_pos:end].encode("utf-8"))
            char_pos = end
            starts.append(byte_pos)
        self._line_starts: tuple[int, ...] = tuple(starts)

        lines: list[SourceLine] = []
        for index, start in enumerate(starts):
            stop: int = starts[index + 1] if index + 1 < len(starts) else len(self._data)
            raw: str = self._data[start:stop].decode("utf-8")
            lines.append(
                SourceLine(index=index, offset=start, length=stop - start, text=raw.rstrip())
            )
        self._lines: tuple[SourceLine, ...] = tuple(lines)
        logger.trace("Indexed %s: %d bytes, %d lines", self._path, len(self._data), len(lines))

    @classmethod
    def from_text(cls, text: str, path: SourcePath | None = None) -> SourceText:
        """Build a source from in-memory text."""
        return cls(text, path)

    @classmethod
    def snippet(cls, text: str, name: str) -> SourceText:
        """Build a source registered under the snippet name ``name``."""
        return cls(text, SourcePath.snippet(name))

    @classmethod
    def from_file(cls, path: Path, *, encoding: str = "utf-8") -> SourceText:
        """Read a source from disk.

        Args:
            path (Path): File to read.
            encoding (str): Text encoding of the file.

        Returns:
            SourceText: The loaded source, with a local `SourcePath`.

        Raises:
            SourceIOError: If the file cannot be read or decoded.
        """
        try:
            # Keep "\r\n" intact: terminators are part of the line geometry
            with path.open("r", encoding=encoding, newline="") as fh:
                text: str = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot read source %s: %s", path, exc)
            raise SourceIOError(path, exc) from exc
        return cls(text, SourcePath.local(path))

    # ------------------------------------------------------------ properties

    @property
    def path(self) -> SourcePath:
        """Display path of the buffer."""
        return self._path

    @property
    def id(self) -> SourceID:
        """Identity under which this buffer is cached; fixed at construction."""
        return self._id

    @property
    def text(self) -> str:
        """Full buffer text."""
        return self._text

    @property
    def data(self) -> bytes:
        """UTF-8 encoding of the buffer; all offsets index into this."""
        return self._data

    @property
    def length(self) -> int:
        """Length of the buffer in bytes."""
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def line_starts(self) -> tuple[int, ...]:
        """Byte offset of every line start, ascending, first is always 0."""
        return self._line_starts

    @property
    def lines(self) -> tuple[SourceLine, ...]:
        """All lines of the buffer."""
        return self._lines

    @property
    def line_count(self) -> int:
        """Number of lines; at least 1."""
        return len(self._lines)

    @property
    def dirty(self) -> bool:
        """True once `clear` has been called."""
        return self._dirty

    def clear(self) -> None:
        """Drop the text, keeping the path, and mark the buffer dirty."""
        self._load("")
        self._dirty = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceText):
            return NotImplemented
        return self._path == other._path and self._text == other._text

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return (
            f"SourceText(path={self._path.display()!r}, "
            f"length={self.length}, lines={self.line_count})"
        )

    # ---------------------------------------------------------------- lookups

    def line(self, line_index: int) -> SourceLine:
        """Return line ``line_index``.

        Raises:
            LineTooLargeError: If the index is past the last line.
        """
        if not 0 <= line_index < len(self._lines):
            raise LineTooLargeError(given=line_index, max=len(self._lines) - 1)
        return self._lines[line_index]

    def line_range(self, line_index: int) -> range:
        """Return the byte range of a line, terminator included.

        Raises:
            LineTooLargeError: If the index is past the last line.
        """
        return self.line(line_index).byte_range

    def line_view(self, line_index: int) -> str:
        """Return the raw text of a line, terminator included."""
        line: SourceLine = self.line(line_index)
        return self._data[line.offset : line.end].decode("utf-8")

    def get_offset_line(self, offset: int) -> tuple[SourceLine, int, int] | None:
        """Locate the line containing a byte offset.

        An offset at a line start belongs to the line it starts; the buffer
        length itself belongs to the last line.

        Args:
            offset (int): Byte offset.

        Returns:
            tuple[SourceLine, int, int] | None: ``(line, line_index, byte_column)``,
            or ``None`` when the offset lies outside the buffer.
        """
        if offset < 0 or offset > len(self._data):
            return None
        index: int = bisect_right(self._line_starts, offset) - 1
        line: SourceLine = self._lines[index]
        return line, index, offset - line.offset

    def line_index(self, offset: int) -> int:
        """Return the index of the line containing ``offset``.

        Raises:
            IndexTooLargeError: If the offset lies beyond the buffer.
        """
        found = self.get_offset_line(offset)
        if found is None:
            raise IndexTooLargeError(given=offset, max=len(self._data))
        return found[1]

    def get_line_range(self, start: int, end: int) -> range:
        """Return the indices of all lines touched by the byte range ``start .. end``.

        A range ending exactly at a line start does not touch that line. A
        zero-width range touches the line containing ``start``.
        """
        first: int = self.line_index(start)
        last: int = self.line_index(max(end - 1, start))
        return range(first, last + 1)

    # ------------------------------------------------------ char boundaries

    def is_char_boundary(self, offset: int) -> bool:
        """Return True if ``offset`` does not split a UTF-8 sequence."""
        if offset < 0 or offset > len(self._data):
            return False
        if offset == len(self._data):
            return True
        # UTF-8 continuation bytes are 0b10xxxxxx
        return (self._data[offset] & 0xC0) != 0x80

    def check_char_boundary(self, offset: int) -> None:
        """Validate ``offset`` as a position inside the buffer.

        Raises:
            IndexTooLargeError: If the offset lies beyond the buffer.
            InvalidCharBoundaryError: If the offset splits a character.
        """
        if offset > len(self._data):
            raise IndexTooLargeError(given=offset, max=len(self._data))
        if not self.is_char_boundary(offset):
            raise InvalidCharBoundaryError(given=offset)

    def floor_char_boundary(self, offset: int) -> int:
        """Return the closest character boundary at or before ``offset``."""
        offset = min(max(offset, 0), len(self._data))
        while not self.is_char_boundary(offset):
            offset -= 1
        return offset

    def slice(self, start: int, end: int) -> str:
        """Return the text between two byte offsets.

        Raises:
            IndexTooLargeError: If an offset lies beyond the buffer.
            InvalidCharBoundaryError: If an offset splits a character.
        """
        self.check_char_boundary(start)
        self.check_char_boundary(end)
        return self._data[start:end].decode("utf-8")

    # ------------------------------------------------------------- columns

    def column_index(self, line_index: int, offset: int) -> int:
        """Return the zero-based character column of ``offset`` in a line.

        Columns count characters, not bytes.

        Raises:
            LineTooLargeError: If the line does not exist.
            ColumnTooLargeError: If the offset lies outside the line.
            InvalidCharBoundaryError: If the offset splits a character.
        """
        line: SourceLine = self.line(line_index)
        if not line.offset <= offset <= line.end:
            raise ColumnTooLargeError(given=offset - line.offset, max=line.length)
        if not self.is_char_boundary(offset):
            raise InvalidCharBoundaryError(given=offset)
        return len(self._data[line.offset : offset].decode("utf-8"))

    def location(self, offset: int) -> Location:
        """Return the one-based line/column of a byte offset.

        Raises:
            IndexTooLargeError: If the offset lies beyond the buffer.
            InvalidCharBoundaryError: If the offset splits a character.
        """
        line_index: int = self.line_index(offset)
        return Location(
            line_number=line_index + 1,
            column_number=self.column_index(line_index, offset) + 1,
        )
