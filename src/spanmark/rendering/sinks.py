# topmark:header:start
#
#   project      : SpanMark
#   file         : sinks.py
#   file_relpath : src/spanmark/rendering/sinks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Styled text sinks.

The renderer writes through the small `StyledSink` protocol: text runs plus
style changes. Implementations decide how (and whether) styles show up:

- `PlainSink` drops styles.
- `AnsiSink` emits ANSI escape sequences via ``click.style``.
- `HtmlSink` emits HTML-escaped text wrapped in ``<span class=...>`` elements;
  `wrap_svg` embeds that markup in a standalone SVG document.

Sinks write to any text stream (``TextIO``) and default to an in-memory
``io.StringIO`` whose content `getvalue` returns.
"""

from __future__ import annotations

import html
import io
from typing import TYPE_CHECKING, Protocol, TextIO

import click

from spanmark.rendering.styles import Style

if TYPE_CHECKING:
    from spanmark.rendering.styles import Color


class StyledSink(Protocol):
    """Output device used by the renderer."""

    def write_text(self, text: str) -> None:
        """Write a run of text in the current style."""
        ...

    def set_style(
        self,
        fg: Color | None = None,
        bg: Color | None = None,
        bold: bool = False,
        underline: bool = False,
    ) -> None:
        """Set the style of subsequent text."""
        ...

    def reset_style(self) -> None:
        """Return to unstyled text."""
        ...


class _StreamSink:
    """Shared stream handling for the concrete sinks."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out: TextIO = out if out is not None else io.StringIO()
        self._style: Style = Style()

    def getvalue(self) -> str:
        """Return everything written so far when writing to a ``StringIO``.

        Raises:
            TypeError: If the sink writes to another kind of stream.
        """
        if not isinstance(self.out, io.StringIO):
            raise TypeError("getvalue() needs a sink writing to io.StringIO")
        return self.out.getvalue()

    def set_style(
        self,
        fg: Color | None = None,
        bg: Color | None = None,
        bold: bool = False,
        underline: bool = False,
    ) -> None:
        self._style = Style(fg=fg, bg=bg, bold=bold, underline=underline)

    def reset_style(self) -> None:
        self._style = Style()


class PlainSink(_StreamSink):
    """Sink that ignores styles."""

    def write_text(self, text: str) -> None:
        """Write ``text`` unchanged."""
        self.out.write(text)


class AnsiSink(_StreamSink):
    """Sink that renders styles as ANSI escape sequences."""

    def write_text(self, text: str) -> None:
        """Write ``text``, wrapped in escape sequences for the current style."""
        style: Style = self._style
        if style.is_plain or not text:
            self.out.write(text)
            return
        # Keep newlines outside escape sequences so every row resets cleanly
        parts: list[str] = text.split("\n")
        self.out.write(
            "\n".join(
                click.style(
                    part, fg=style.fg, bg=style.bg, bold=style.bold, underline=style.underline
                )
                if part
                else part
                for part in parts
            )
        )


def _css_classes(kind: str, color: Color) -> tuple[list[str], str]:
    """Return the CSS classes and inline declarations selecting ``color``."""
    if isinstance(color, str):
        name: str = color.removeprefix("bright_")
        classes: list[str] = [kind, name]
        if color.startswith("bright_"):
            classes.append("bright")
        return classes, ""
    prop: str = "color" if kind == "fg" else "background-color"
    if isinstance(color, int):
        return [kind], f"{prop}: {xterm_to_hex(color)};"
    r, g, b = color
    return [kind], f"{prop}: #{r:02x}{g:02x}{b:02x};"


def xterm_to_hex(index: int) -> str:
    """Return the ``#rrggbb`` value of an xterm 256-color index."""
    base16: tuple[str, ...] = (
        "#000000",
        "#cd0000",
        "#00cd00",
        "#cdcd00",
        "#0000ee",
        "#cd00cd",
        "#00cdcd",
        "#e5e5e5",
        "#7f7f7f",
        "#ff0000",
        "#00ff00",
        "#ffff00",
        "#5c5cff",
        "#ff00ff",
        "#00ffff",
        "#ffffff",
    )
    if index < 16:
        return base16[max(index, 0)]
    if index < 232:
        cube: int = index - 16
        steps: tuple[int, ...] = (0, 95, 135, 175, 215, 255)
        r, g, b = steps[cube // 36], steps[(cube // 6) % 6], steps[cube % 6]
        return f"#{r:02x}{g:02x}{b:02x}"
    gray: int = 8 + (min(index, 255) - 232) * 10
    return f"#{gray:02x}{gray:02x}{gray:02x}"


class HtmlSink(_StreamSink):
    """Sink that writes HTML-escaped text inside ``<span>`` elements.

    Named colors become classes (``fg red bright``) so a stylesheet can theme
    them; 256-color indices and RGB colors become inline ``style`` attributes.
    """

    def _open_tag(self) -> str:
        style: Style = self._style
        classes: list[str] = []
        inline: list[str] = []
        for kind, color in (("fg", style.fg), ("bg", style.bg)):
            if color is None:
                continue
            names, decl = _css_classes(kind, color)
            classes.extend(names)
            if decl:
                inline.append(decl)
        if style.bold:
            classes.append("bold")
        if style.underline:
            classes.append("underline")
        attrs: str = f' class="{" ".join(classes)}"'
        if inline:
            attrs += f' style="{" ".join(inline)}"'
        return f"<span{attrs}>"

    def write_text(self, text: str) -> None:
        """Write ``text`` escaped for HTML, in a span when styled."""
        escaped: str = html.escape(text, quote=False)
        if self._style.is_plain or not text:
            self.out.write(escaped)
            return
        self.out.write(f"{self._open_tag()}{escaped}</span>")


SVG_TEMPLATE: str = """\
<svg viewBox="0 0 {width} {height}" xmlns="http://www.w3.org/2000/svg">
  <style>
    pre {{
      background: #1d1f21;
      margin: 0;
      padding: {padding}px;
      border-radius: 6px;
      color: #ffffff;
      font: {font_size}px SFMono-Regular, Consolas, Liberation Mono, Menlo, monospace;
    }}

    pre .bold {{ font-weight: bold; }}
    pre .underline {{ text-decoration: underline; }}

{color_rules}
  </style>

  <foreignObject x="0" y="0" width="{width}" height="{height}">
    <div xmlns="http://www.w3.org/1999/xhtml">
      <pre>{body}</pre>
    </div>
  </foreignObject>
</svg>
"""

_THEME: dict[str, tuple[str, str]] = {
    # name: (normal, bright)
    "black": ("#1d1f21", "#969896"),
    "red": ("#cc6666", "#cc6666"),
    "green": ("#b5bd68", "#b5bd68"),
    "yellow": ("#f0c674", "#f0c674"),
    "blue": ("#81a2be", "#81a2be"),
    "magenta": ("#b294bb", "#b294bb"),
    "cyan": ("#8abeb7", "#8abeb7"),
    "white": ("#c5c8c6", "#ffffff"),
}


def _color_rules() -> str:
    rules: list[str] = []
    for kind, prop in (("fg", "color"), ("bg", "background-color")):
        for name, (normal, bright) in _THEME.items():
            rules.append(f"    pre .{kind}.{name} {{ {prop}: {normal}; }}")
            rules.append(f"    pre .{kind}.{name}.bright {{ {prop}: {bright}; }}")
    return "\n".join(rules)


def wrap_svg(
    body: str,
    *,
    width: int = 882,
    font_size: int = 12,
    line_spacing: int = 3,
    padding: int = 10,
) -> str:
    """Embed HTML produced by `HtmlSink` in a standalone SVG document.

    Args:
        body (str): Escaped HTML markup.
        width (int): Width of the image in pixels.
        font_size (int): Font size in pixels.
        line_spacing (int): Extra spacing between lines in pixels.
        padding (int): Padding around the text in pixels.

    Returns:
        str: The SVG document.
    """
    num_lines: int = body.count("\n") + 1
    height: int = padding + num_lines * (font_size + line_spacing) + padding
    return SVG_TEMPLATE.format(
        width=width,
        height=height,
        padding=padding,
        font_size=font_size,
        color_rules=_color_rules(),
        body=body,
    )
