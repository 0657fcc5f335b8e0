# topmark:header:start
#
#   project      : SpanMark
#   file         : styles.py
#   file_relpath : src/spanmark/rendering/styles.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Colors and text styles used by the renderer.

A `Color` is whatever ``click.style`` accepts for ``fg``/``bg``:

- a color name (``"red"``, ``"bright_cyan"``, ...),
- an ``int`` in ``0..255`` selecting an entry of the 256-color table,
- an ``(r, g, b)`` tuple for true color.

`Styles` groups the styles of every element of a rendered diagnostic; sinks
receive the resolved `Style` of each text run.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Union

from spanmark.diagnostic.model import LabelStyle

if TYPE_CHECKING:
    from spanmark.diagnostic.model import DiagnosticLevel

Color = Union[str, int, tuple[int, int, int]]

ANSI_COLOR_NAMES: tuple[str, ...] = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
)


def is_valid_color(value: object) -> bool:
    """Return True if ``value`` is a color ``click.style`` accepts."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return 0 <= value <= 255
    if isinstance(value, str):
        name: str = value.removeprefix("bright_")
        return name in ANSI_COLOR_NAMES or value == "reset"
    if isinstance(value, tuple):
        channels: tuple[object, ...] = tuple(value)  # pyright: ignore[reportUnknownArgumentType]
        return len(channels) == 3 and all(
            isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in channels
        )
    return False


@dataclass(frozen=True, slots=True)
class Style:
    """Attributes of one run of text.

    Attributes:
        fg (Color | None): Foreground color.
        bg (Color | None): Background color.
        bold (bool): Bold weight.
        underline (bool): Underlined text.
    """

    fg: Color | None = None
    bg: Color | None = None
    bold: bool = False
    underline: bool = False

    @property
    def is_plain(self) -> bool:
        """True if the style changes nothing."""
        return self.fg is None and self.bg is None and not self.bold and not self.underline

    def with_fg(self, fg: Color | None) -> Style:
        """Return a copy with another foreground color."""
        return replace(self, fg=fg)


def _default_headers() -> dict[str, Style]:
    return {
        "fatal": Style(fg="bright_magenta", bold=True),
        "error": Style(fg="bright_red", bold=True),
        "warning": Style(fg="bright_yellow", bold=True),
        "info": Style(fg="bright_green", bold=True),
        "custom": Style(fg="bright_cyan", bold=True),
    }


@dataclass(frozen=True, slots=True)
class Styles:
    """Styles for every element of a rendered diagnostic.

    Attributes:
        headers (dict[str, Style]): Severity word and code, keyed by level value.
        header_message (Style): Diagnostic message in the header.
        primary_label (Style | None): Primary labels; ``None`` reuses the header
            color of the diagnostic's level.
        secondary_label (Style): Secondary labels.
        line_number (Style): Gutter line numbers.
        source_border (Style): Gutter border and locator arrow.
        note_bullet (Style): ``=`` in front of notes.
        skipped (Style): Skipped-lines marker and unavailable-source marker.
    """

    headers: dict[str, Style] = field(default_factory=_default_headers)
    header_message: Style = Style(bold=True)
    primary_label: Style | None = None
    secondary_label: Style = Style(fg="bright_blue")
    line_number: Style = Style(fg="bright_cyan")
    source_border: Style = Style(fg="bright_cyan")
    note_bullet: Style = Style(fg="bright_cyan")
    skipped: Style = Style(fg="bright_black")

    def header(self, level: DiagnosticLevel) -> Style:
        """Return the style of the severity word for ``level``."""
        return self.headers.get(level.value, self.headers.get("custom", Style(bold=True)))

    def label(self, level: DiagnosticLevel, label_style: LabelStyle) -> Style:
        """Return the default style of a label without an explicit color."""
        if label_style is LabelStyle.SECONDARY:
            return self.secondary_label
        if self.primary_label is not None:
            return self.primary_label
        return Style(fg=self.header(level).fg)

    @classmethod
    def with_color(cls, fg: Color) -> Styles:
        """Return default styles with every header and the primary label in ``fg``."""
        return cls(
            headers={name: Style(fg=fg, bold=True) for name in _default_headers()},
            primary_label=Style(fg=fg),
        )
