# topmark:header:start
#
#   project      : SpanMark
#   file         : glyphs.py
#   file_relpath : src/spanmark/rendering/glyphs.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Box-drawing glyph sets.

Each `CharSet` maps to a `Glyphs` table. Unicode output uses box-drawing
characters; ASCII output is safe for logs, CI consoles and legacy terminals.
"""

from __future__ import annotations

from dataclasses import dataclass

from spanmark.core.enum_mixins import KeyedStrEnum


class CharSet(KeyedStrEnum):
    """Glyph set used to draw gutters, lanes and underlines."""

    UNICODE = ("unicode", "Unicode box-drawing characters", ("utf8", "utf-8"))
    ASCII = ("ascii", "Plain 7-bit ASCII", ())


@dataclass(frozen=True, slots=True)
class Glyphs:
    """One glyph per drawing role.

    Attributes:
        hbar: Horizontal run of a message connector.
        vbar: Vertical connector; also the gutter border.
        xbar: Crossing of a vertical and a horizontal connector.
        vbar_break: Gutter border of a skipped-lines row.
        vbar_gap: Lane connector across a skipped-lines row.
        rarrow: Arrow pointing from a lane into the source text.
        ltop: Lane start (top-left corner).
        lbot: End of a connector (bottom-left corner).
        lcross: Connector that continues below a junction.
        underbar: Junction between an underline and its connector.
        primary_underline: Underline of primary labels.
        secondary_underline: Underline of secondary labels.
        locator: Prefix of the first source locator line.
        locator_more: Prefix of locator lines of further files.
        note_bullet: Bullet in front of notes.
        ellipsis: Text of a skipped-lines row.
    """

    hbar: str
    vbar: str
    xbar: str
    vbar_break: str
    vbar_gap: str
    rarrow: str
    ltop: str
    lbot: str
    lcross: str
    underbar: str
    primary_underline: str
    secondary_underline: str
    locator: str = "-->"
    locator_more: str = ":::"
    note_bullet: str = "="
    ellipsis: str = "..."


UNICODE_GLYPHS = Glyphs(
    hbar="─",
    vbar="│",
    xbar="┼",
    vbar_break="┆",
    vbar_gap="┆",
    rarrow="▶",
    ltop="╭",
    lbot="╰",
    lcross="├",
    underbar="┬",
    primary_underline="━",
    secondary_underline="─",
    ellipsis="…",
)

ASCII_GLYPHS = Glyphs(
    hbar="-",
    vbar="|",
    xbar="+",
    vbar_break="*",
    vbar_gap=":",
    rarrow=">",
    ltop=",",
    lbot="`",
    lcross="|",
    underbar="|",
    primary_underline="^",
    secondary_underline="-",
)

GLYPHS: dict[CharSet, Glyphs] = {
    CharSet.UNICODE: UNICODE_GLYPHS,
    CharSet.ASCII: ASCII_GLYPHS,
}


def glyphs_for(char_set: CharSet) -> Glyphs:
    """Return the glyph table of ``char_set``."""
    return GLYPHS[char_set]
