# topmark:header:start
#
#   project      : SpanMark
#   file         : width.py
#   file_relpath : src/spanmark/rendering/width.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Display width of source characters.

Underlines and connectors are positioned in terminal cells, not in characters
or bytes:

- a tab advances to the next multiple of the tab width,
- any other whitespace (including line terminators) occupies one cell and is
  shown as a space,
- East Asian wide and fullwidth characters occupy two cells,
- combining marks and format characters occupy none.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass


def char_width(char: str, column: int, tab_width: int) -> int:
    """Return the number of cells ``char`` occupies when it starts at ``column``."""
    if char == "\t":
        if tab_width <= 0:
            return 0
        return tab_width - (column % tab_width)
    if char.isspace():
        return 1
    if unicodedata.combining(char) or unicodedata.category(char) in ("Mn", "Me", "Cf"):
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


def display_char(char: str, width: int) -> str:
    """Return the cells printed for ``char`` when it occupies ``width`` cells."""
    if char.isspace():
        return " " * width
    if unicodedata.category(char) == "Cc":
        # Other control characters would move the cursor
        return "\N{REPLACEMENT CHARACTER}" if width else ""
    return char


@dataclass(frozen=True, slots=True)
class DisplayLine:
    """A source line laid out in terminal cells.

    Attributes:
        text (str): Printable text of the line with tabs expanded.
        byte_offsets (tuple[int, ...]): Byte offset (relative to the line
            start) of every character of the laid-out line.
        columns (tuple[int, ...]): Starting cell of each of those characters;
            one extra entry holds the cell after the last character.
        content_bytes (int): Byte length of the printable text.
    """

    text: str
    byte_offsets: tuple[int, ...]
    columns: tuple[int, ...]
    content_bytes: int

    @property
    def width(self) -> int:
        """Total width in cells."""
        return self.columns[-1]

    def column_of(self, byte_column: int) -> int:
        """Return the cell at which the character at ``byte_column`` starts.

        Offsets past the last character map one cell per missing byte after
        the end of the line, so spans over the line terminator stay visible.
        """
        for index, offset in enumerate(self.byte_offsets):
            if offset >= byte_column:
                return self.columns[index]
        return self.width + max(byte_column - self.content_bytes, 0)


def layout_line(raw: str, tab_width: int) -> DisplayLine:
    """Lay out ``raw`` (one source line, terminator included) in cells.

    Only the printable text is kept in `DisplayLine.text`; the terminator
    and trailing whitespace contribute offsets but no cells.
    """
    content: str = raw.rstrip()
    pieces: list[str] = []
    offsets: list[int] = []
    columns: list[int] = []
    column: int = 0
    byte_pos: int = 0
    for char in content:
        width: int = char_width(char, column, tab_width)
        offsets.append(byte_pos)
        columns.append(column)
        pieces.append(display_char(char, width))
        column += width
        byte_pos += len(char.encode("utf-8"))
    columns.append(column)
    return DisplayLine(
        text="".join(pieces),
        byte_offsets=tuple(offsets),
        columns=tuple(columns),
        content_bytes=byte_pos,
    )


def text_width(text: str, tab_width: int = 4) -> int:
    """Return the width in cells of a single-line string."""
    column: int = 0
    for char in text:
        column += char_width(char, column, tab_width)
    return column
