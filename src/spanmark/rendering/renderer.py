# topmark:header:start
#
#   project      : SpanMark
#   file         : renderer.py
#   file_relpath : src/spanmark/rendering/renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Render diagnostics as annotated source snippets.

A rich report looks like this (ASCII glyphs):

```text
error[E0308]: mismatched types
 --> main.rs:2:18
  |
1 | ,-> fn main() {
2 | |       let x: i32 = "a";
  | |                    ^|^
  | |                     `-- expected `i32`
3 | |-> }
  | `-- in this function
  |
  = note: expected type `i32`
```

Rows are built as lists of ``(text, style)`` cells and written to a
`StyledSink` one row at a time. Styles are only sent to the sink when
`Config.color` is set. Lookup problems never abort a report: they are
repaired locally and returned as `RenderIssue`s.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.config.model import Config, DisplayStyle
from spanmark.core.errors import FileMissingError, RenderError
from spanmark.diagnostic.model import LabelStyle
from spanmark.rendering.glyphs import glyphs_for
from spanmark.rendering.layout import (
    RenderIssue,
    ResolvedLabel,
    SkippedLines,
    assign_lanes,
    build_window,
    cell_range,
    message_order,
    resolve_label,
    underline_winner,
    visible_lines,
)
from spanmark.rendering.palette import Palette
from spanmark.rendering.sinks import AnsiSink, PlainSink
from spanmark.rendering.styles import Style
from spanmark.rendering.width import layout_line, text_width

if TYPE_CHECKING:
    from collections.abc import Iterable

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.diagnostic.model import Diagnostic
    from spanmark.rendering.glyphs import Glyphs
    from spanmark.rendering.layout import CellRange
    from spanmark.rendering.sinks import StyledSink
    from spanmark.rendering.width import DisplayLine
    from spanmark.source.cache import SourceCache
    from spanmark.source.identity import SourceID
    from spanmark.source.text import Location, SourceText

logger: SpanmarkLogger = get_logger(__name__)

Cell = tuple[str, Style | None]

SOURCE_UNAVAILABLE: str = "source unavailable"


@dataclass
class _FileGroup:
    """Labels of one diagnostic that point into the same source."""

    file: SourceID
    name: str
    source: SourceText | None
    labels: list[ResolvedLabel] = field(default_factory=lambda: [])
    location: Location | None = None
    window: list[int | SkippedLines] = field(default_factory=lambda: [])
    lanes: dict[int, int] = field(default_factory=lambda: {})

    @property
    def lane_count(self) -> int:
        return max(self.lanes.values(), default=-1) + 1

    @property
    def multiline(self) -> list[ResolvedLabel]:
        return [r for r in self.labels if r.multiline]

    @property
    def last_line_number(self) -> int:
        return max((item + 1 for item in self.window if isinstance(item, int)), default=1)

    def locator_text(self) -> str:
        if self.location is None:
            return self.name
        return f"{self.name}:{self.location}"


def _trim(row: list[Cell]) -> list[Cell]:
    """Drop trailing whitespace from a row."""
    cells: list[Cell] = list(row)
    while cells:
        text, style = cells[-1]
        stripped: str = text.rstrip()
        if stripped:
            cells[-1] = (stripped, style)
            break
        cells.pop()
    return cells


def _merge(row: Iterable[Cell]) -> list[Cell]:
    """Join adjacent cells that share a style."""
    merged: list[Cell] = []
    for text, style in row:
        if merged and merged[-1][1] == style:
            merged[-1] = (merged[-1][0] + text, style)
        else:
            merged.append((text, style))
    return merged


class Renderer:
    """Writes diagnostics to a sink.

    Args:
        cache (SourceCache): Sources the labels point into.
        config (Config): Rendering options.
        sink (StyledSink): Output device.
    """

    def __init__(self, cache: SourceCache, config: Config, sink: StyledSink) -> None:
        self._cache: SourceCache = cache
        self._config: Config = config
        self._sink: StyledSink = sink
        self._glyphs: Glyphs = glyphs_for(config.char_set)
        self._label_styles: dict[int, Style] = {}

    # ------------------------------------------------------------------ API

    def render(self, diagnostic: Diagnostic) -> list[RenderIssue]:
        """Render one diagnostic.

        Returns:
            list[RenderIssue]: Problems repaired while placing labels.

        Raises:
            RenderError: If the sink fails to write.
        """
        issues: list[RenderIssue] = []
        groups: list[_FileGroup] = self._build_groups(diagnostic, issues)
        self._label_styles = self._assign_label_styles(diagnostic)

        style: DisplayStyle = self._config.display_style
        if style is DisplayStyle.RICH:
            self._render_rich(diagnostic, groups)
        else:
            self._render_oneline(diagnostic, groups, with_notes=style is DisplayStyle.MEDIUM)

        logger.debug(
            "Rendered %s diagnostic with %d label(s), %d issue(s)",
            diagnostic.level_name,
            len(diagnostic.labels),
            len(issues),
        )
        return issues

    def render_all(self, diagnostics: Iterable[Diagnostic]) -> list[RenderIssue]:
        """Render several diagnostics, separated by an empty line in rich style."""
        issues: list[RenderIssue] = []
        for index, diagnostic in enumerate(diagnostics):
            if index and self._config.display_style is DisplayStyle.RICH:
                self._emit([])
            issues.extend(self.render(diagnostic))
        return issues

    # ---------------------------------------------------------- preparation

    def _build_groups(self, diagnostic: Diagnostic, issues: list[RenderIssue]) -> list[_FileGroup]:
        config: Config = self._config
        groups: list[_FileGroup] = []
        for file in diagnostic.files():
            indices: list[int] = [
                index for index, label in enumerate(diagnostic.labels) if label.file == file
            ]
            source: SourceText | None = self._cache.get(file)
            group = _FileGroup(file=file, name=self._cache.display_name(file), source=source)
            groups.append(group)

            if source is None:
                logger.warning("Source %s is not registered; rendering without snippet", file)
                if indices:
                    issues.extend(RenderIssue(file, i, FileMissingError(file)) for i in indices)
                else:
                    issues.append(RenderIssue(file, None, FileMissingError(file)))
                continue

            for index in indices:
                resolved, label_issues = resolve_label(source, diagnostic.labels[index], index)
                group.labels.append(resolved)
                issues.extend(label_issues)

            group.location = self._locate(diagnostic, group, source)
            lines: list[int] = visible_lines(
                group.labels,
                source.line_count,
                before=config.context_lines_before,
                after=config.context_lines_after,
            )
            group.window = build_window(lines, config.gap_threshold)
            group.lanes = assign_lanes(group.labels)
        return groups

    @staticmethod
    def _locate(diagnostic: Diagnostic, group: _FileGroup, source: SourceText) -> Location | None:
        """Return the location shown in a group's locator line."""
        explicit = diagnostic.location
        if explicit is not None and explicit.file == group.file:
            if explicit.offset is None:
                return None
            return source.location(source.floor_char_boundary(explicit.offset))
        if not group.labels:
            return None
        primary: ResolvedLabel = next(
            (r for r in group.labels if r.label.style is LabelStyle.PRIMARY), group.labels[0]
        )
        return source.location(primary.start)

    def _assign_label_styles(self, diagnostic: Diagnostic) -> dict[int, Style]:
        palette: Palette | None = Palette() if self._config.palette else None
        styles: dict[int, Style] = {}
        for index, label in enumerate(diagnostic.labels):
            if label.color is not None:
                styles[index] = Style(fg=label.color)
            elif palette is not None:
                styles[index] = Style(fg=palette.random())
            else:
                styles[index] = self._config.styles.label(diagnostic.severity, label.style)
        return styles

    def _style_of(self, resolved: ResolvedLabel) -> Style | None:
        return self._label_styles.get(resolved.index)

    # --------------------------------------------------------------- output

    def _emit(self, row: list[Cell]) -> None:
        """Write one row and a newline."""
        sink: StyledSink = self._sink
        try:
            for text, style in _merge(_trim(row)):
                if self._config.color and style is not None and not style.is_plain:
                    sink.set_style(
                        fg=style.fg, bg=style.bg, bold=style.bold, underline=style.underline
                    )
                    sink.write_text(text)
                    sink.reset_style()
                else:
                    sink.write_text(text)
            sink.write_text("\n")
        except OSError as exc:
            logger.error("Cannot write diagnostic: %s", exc)
            raise RenderError(f"cannot write diagnostic: {exc}") from exc

    def _header_cells(self, diagnostic: Diagnostic, lead: int = 0) -> list[list[Cell]]:
        """Return the header rows; later message lines hang under the first one."""
        styles = self._config.styles
        title: str = diagnostic.level_name
        if diagnostic.code:
            title += f"[{diagnostic.code}]"
        message_lines: list[str] = diagnostic.message.split("\n") if diagnostic.message else []
        first: list[Cell] = [(title, styles.header(diagnostic.severity))]
        if message_lines:
            first.append((": " + message_lines[0], styles.header_message))
        rows: list[list[Cell]] = [first]
        indent: str = " " * (lead + text_width(title) + 2)
        rows.extend([(indent, None), (line, styles.header_message)] for line in message_lines[1:])
        return rows

    # ---------------------------------------------------------------- rich

    def _render_rich(self, diagnostic: Diagnostic, groups: list[_FileGroup]) -> None:
        width: int = max((len(str(g.last_line_number)) for g in groups), default=1)
        for row in self._header_cells(diagnostic):
            self._emit(row)
        for position, group in enumerate(groups):
            self._render_group(group, width, first=position == 0)
        self._render_notes(diagnostic.notes, width)

    def _render_notes(self, notes: list[str], width: int) -> None:
        bullet: str = self._glyphs.note_bullet
        note_style: Style = self._config.styles.note_bullet
        prefix: str = " note: "
        indent: str = " " * (width + 1 + len(bullet) + len(prefix))
        for note in notes:
            lines: list[str] = note.split("\n")
            self._emit([(" " * (width + 1), None), (bullet, note_style), (prefix + lines[0], None)])
            for line in lines[1:]:
                self._emit([(indent + line, None)])

    def _gutter(self, width: int, line_number: int | None = None) -> list[Cell]:
        styles = self._config.styles
        number: str = f"{line_number:>{width}}" if line_number is not None else " " * width
        return [
            (number, styles.line_number if line_number is not None else None),
            (" ", None),
            (self._glyphs.vbar, styles.source_border),
            (" ", None),
        ]

    def _render_group(self, group: _FileGroup, width: int, *, first: bool) -> None:
        glyphs: Glyphs = self._glyphs
        styles = self._config.styles
        compact: bool = self._config.compact
        locator: str = glyphs.locator if first else glyphs.locator_more
        self._emit(
            [
                (" " * width, None),
                (locator, styles.source_border),
                (" " + group.locator_text(), None),
            ]
        )

        if group.source is None:
            if not compact:
                self._emit(self._gutter(width))
            self._emit([*self._gutter(width), (SOURCE_UNAVAILABLE, styles.skipped)])
            return
        if not group.labels:
            return

        if not compact:
            self._emit(self._gutter(width))
        for item in group.window:
            if isinstance(item, SkippedLines):
                self._render_skipped(group, width, item)
            else:
                self._render_line(group, width, group.source, item)
        if not compact:
            self._emit(self._gutter(width))

    def _render_skipped(self, group: _FileGroup, width: int, skipped: SkippedLines) -> None:
        glyphs: Glyphs = self._glyphs
        skipped_style: Style = self._config.styles.skipped
        noun: str = "line" if skipped.count == 1 else "lines"
        self._emit(
            [
                (" " * (width + 1), None),
                (glyphs.vbar_break, skipped_style),
                (" ", None),
                *self._between_margin(group, skipped.first - 1, set(), gap=True),
                (f"{glyphs.ellipsis} {skipped.count} {noun} skipped", skipped_style),
            ]
        )

    def _render_line(self, group: _FileGroup, width: int, source: SourceText, line: int) -> None:
        display: DisplayLine = layout_line(source.line_view(line), self._config.tab_width)
        self._emit(
            [
                *self._gutter(width, line + 1),
                *self._source_margin(group, line),
                (display.text, None),
            ]
        )

        pending: set[int] = {
            r.index for r in group.multiline if r.end_line == line and r.message is not None
        }
        singles: list[ResolvedLabel] = [
            r for r in group.labels if not r.multiline and r.start_line == line
        ]
        if singles:
            self._render_single_line_labels(group, width, line, display, singles, pending)

        ending: list[ResolvedLabel] = sorted(
            (r for r in group.multiline if r.index in pending),
            key=lambda r: group.lanes[r.index],
            reverse=True,
        )
        for resolved in ending:
            pending.discard(resolved.index)
            self._render_multiline_message(group, width, line, resolved, pending)

    # ------------------------------------------------------------- margins

    def _margin_size(self, group: _FileGroup) -> int:
        lanes: int = group.lane_count
        # lane + filler per lane, then the arrow cell and a separator
        return 2 * lanes + 2 if lanes else 0

    def _run(
        self,
        cells: list[Cell],
        start: int,
        stop: int,
        style: Style | None,
        *,
        vertical: set[int],
        keep: set[int],
    ) -> None:
        """Draw a horizontal run over ``start .. stop`` crossing ``vertical`` cells."""
        glyphs: Glyphs = self._glyphs
        for cell in range(start, stop):
            if cell in keep:
                continue
            if cell in vertical and not self._config.cross_gap:
                cells[cell] = (glyphs.xbar, style)
            else:
                cells[cell] = (glyphs.hbar, style)

    def _source_margin(self, group: _FileGroup, line: int) -> list[Cell]:
        size: int = self._margin_size(group)
        if not size:
            return []
        glyphs: Glyphs = self._glyphs
        arrow_cell: int = size - 2
        cells: list[Cell] = [(" ", None)] * size
        vertical: set[int] = set()
        endpoints: list[ResolvedLabel] = []
        for resolved in group.multiline:
            if not resolved.start_line <= line <= resolved.end_line:
                continue
            cell: int = 2 * group.lanes[resolved.index]
            style: Style | None = self._style_of(resolved)
            if line == resolved.start_line:
                cells[cell] = (glyphs.ltop, style)
            elif line == resolved.end_line:
                glyph: str = glyphs.lcross if resolved.message is not None else glyphs.lbot
                cells[cell] = (glyph, style)
            else:
                cells[cell] = (glyphs.vbar, style)
                vertical.add(cell)
                continue
            endpoints.append(resolved)

        if self._config.multiline_arrows:
            keep: set[int] = {2 * group.lanes[r.index] for r in endpoints}
            for resolved in sorted(endpoints, key=lambda r: group.lanes[r.index]):
                style = self._style_of(resolved)
                start: int = 2 * group.lanes[resolved.index] + 1
                self._run(cells, start, arrow_cell, style, vertical=vertical, keep=keep)
                cells[arrow_cell] = (glyphs.rarrow, style)
        return cells

    def _active_lanes(self, group: _FileGroup, line: int, pending: set[int]) -> list[ResolvedLabel]:
        """Return the multi-line labels whose connector passes below ``line``."""
        return [
            r
            for r in group.multiline
            if r.start_line <= line < r.end_line or (r.end_line == line and r.index in pending)
        ]

    def _between_margin(
        self, group: _FileGroup, line: int, pending: set[int], *, gap: bool = False
    ) -> list[Cell]:
        size: int = self._margin_size(group)
        if not size:
            return []
        glyph: str = self._glyphs.vbar_gap if gap else self._glyphs.vbar
        cells: list[Cell] = [(" ", None)] * size
        for resolved in self._active_lanes(group, line, pending):
            cells[2 * group.lanes[resolved.index]] = (glyph, self._style_of(resolved))
        return cells

    # ------------------------------------------------------ label messages

    def _render_multiline_message(
        self,
        group: _FileGroup,
        width: int,
        line: int,
        resolved: ResolvedLabel,
        pending: set[int],
    ) -> None:
        glyphs: Glyphs = self._glyphs
        style: Style | None = self._style_of(resolved)
        size: int = self._margin_size(group)
        cells: list[Cell] = self._between_margin(group, line, pending)
        lane_cell: int = 2 * group.lanes[resolved.index]
        vertical: set[int] = {
            2 * group.lanes[r.index] for r in self._active_lanes(group, line, pending)
        }
        cells[lane_cell] = (glyphs.lbot, style)
        if self._config.multiline_arrows:
            self._run(cells, lane_cell + 1, size - 1, style, vertical=vertical, keep=set())

        lines: list[str] = (resolved.message or "").split("\n")
        self._emit([*self._gutter(width), *cells, (lines[0], None)])
        for text in lines[1:]:
            margin: list[Cell] = self._between_margin(group, line, pending)
            self._emit([*self._gutter(width), *margin, (text, None)])

    def _render_single_line_labels(
        self,
        group: _FileGroup,
        width: int,
        line: int,
        display: DisplayLine,
        singles: list[ResolvedLabel],
        pending: set[int],
    ) -> None:
        glyphs: Glyphs = self._glyphs
        attach = self._config.label_attach
        ranges: dict[int, CellRange] = {
            r.index: cell_range(r, display, attach) for r in singles
        }
        with_message: list[ResolvedLabel] = message_order(singles)

        attach_owner: dict[int, ResolvedLabel] = {}
        for resolved in with_message:
            attach_owner.setdefault(ranges[resolved.index].attach, resolved)

        # Underline row
        underline: list[Cell] = []
        for cell in range(max(cr.end for cr in ranges.values())):
            if cell in attach_owner:
                underline.append((glyphs.underbar, self._style_of(attach_owner[cell])))
                continue
            covering: list[ResolvedLabel] = [r for r in singles if ranges[r.index].covers(cell)]
            if not covering:
                underline.append((" ", None))
                continue
            winner: ResolvedLabel = underline_winner(covering)
            glyph: str = (
                glyphs.primary_underline
                if winner.label.style is LabelStyle.PRIMARY
                else glyphs.secondary_underline
            )
            underline.append((glyph, self._style_of(winner)))
        margin: list[Cell] = self._between_margin(group, line, pending)
        self._emit([*self._gutter(width), *margin, *underline])

        if not with_message:
            return

        # One message row per label, connectors of later rows hanging down
        message_cell: int = max(ranges[r.index].attach for r in with_message) + 3
        for position, resolved in enumerate(with_message):
            later: dict[int, ResolvedLabel] = {}
            for other in with_message[position + 1 :]:
                later.setdefault(ranges[other.index].attach, other)

            style: Style | None = self._style_of(resolved)
            cells: list[Cell] = self._hanging(later, message_cell)
            own: int = ranges[resolved.index].attach
            cells[own] = (glyphs.lcross if own in later else glyphs.lbot, style)
            self._run(cells, own + 1, message_cell, style, vertical=set(later), keep=set())

            lines: list[str] = (resolved.message or "").split("\n")
            self._emit([*self._gutter(width), *margin, *cells, (" " + lines[0], None)])
            for text in lines[1:]:
                hanging: list[Cell] = self._hanging(later, message_cell)
                self._emit([*self._gutter(width), *margin, *hanging, (" " + text, None)])

    def _hanging(self, later: dict[int, ResolvedLabel], size: int) -> list[Cell]:
        """Return ``size`` cells holding the connectors of the rows still to come."""
        cells: list[Cell] = [(" ", None)] * size
        for cell, other in later.items():
            cells[cell] = (self._glyphs.vbar, self._style_of(other))
        return cells

    # ------------------------------------------------------- one-line styles

    def _render_oneline(
        self, diagnostic: Diagnostic, groups: list[_FileGroup], *, with_notes: bool
    ) -> None:
        locator: str = groups[0].locator_text() + ": " if groups else ""
        header: list[list[Cell]] = self._header_cells(diagnostic, lead=text_width(locator))
        prefix: list[Cell] = [(locator, None)] if locator else []
        self._emit([*prefix, *header[0]])
        for row in header[1:]:
            self._emit(row)
        if not with_notes:
            return
        note_style: Style = self._config.styles.note_bullet
        for note in diagnostic.notes:
            lines: list[str] = note.split("\n")
            bullet: list[Cell] = [(" ", None), (self._glyphs.note_bullet, note_style)]
            self._emit([*bullet, (" note: " + lines[0], None)])
            indent: str = " " * (len(self._glyphs.note_bullet) + len(" note: ") + 1)
            for line in lines[1:]:
                self._emit([(indent + line, None)])


# ------------------------------------------------------------ entry points


def render(
    diagnostic: Diagnostic,
    cache: SourceCache,
    config: Config | None = None,
    sink: StyledSink | None = None,
) -> list[RenderIssue]:
    """Render ``diagnostic`` to ``sink``.

    Args:
        diagnostic (Diagnostic): The diagnostic to render.
        cache (SourceCache): Sources the labels point into.
        config (Config | None): Rendering options; defaults to `Config()`.
        sink (StyledSink | None): Output device; defaults to a `PlainSink`
            writing to an in-memory buffer.

    Returns:
        list[RenderIssue]: Problems repaired while placing labels.

    Raises:
        RenderError: If the sink fails to write.
    """
    resolved_config: Config = config if config is not None else Config()
    return Renderer(cache, resolved_config, sink or PlainSink()).render(diagnostic)


def render_to_string(
    diagnostic: Diagnostic,
    cache: SourceCache,
    config: Config | None = None,
) -> str:
    """Render ``diagnostic`` and return the text.

    Uses ANSI escape sequences when ``config.color`` is set, plain text otherwise.
    """
    resolved_config: Config = config if config is not None else Config(color=False)
    sink: AnsiSink | PlainSink = AnsiSink() if resolved_config.color else PlainSink()
    Renderer(cache, resolved_config, sink).render(diagnostic)
    return sink.getvalue()
