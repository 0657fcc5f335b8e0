# topmark:header:start
#
#   project      : SpanMark
#   file         : layout.py
#   file_relpath : src/spanmark/rendering/layout.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Geometry of a rendered diagnostic.

This module decides *where* things go, independent of glyphs and styles:

- `resolve_label` maps a label's byte span onto lines and byte columns,
  clamping offsets that do not exist in the source and recording a
  `RenderIssue` for each repair.
- `visible_lines` and `build_window` choose the source lines to print and
  collapse long gaps into `SkippedLines` markers.
- `assign_lanes` stacks multi-line labels into non-conflicting lanes.
- `cell_range` and `attach_column` place single-line labels in display cells.
- `message_order` orders the message rows hanging below a source line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.config.model import LabelAttach
from spanmark.core.errors import IndexTooLargeError, InvalidCharBoundaryError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.core.errors import SpanmarkError
    from spanmark.diagnostic.model import Label
    from spanmark.rendering.width import DisplayLine
    from spanmark.source.identity import SourceID
    from spanmark.source.text import SourceText

logger: SpanmarkLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RenderIssue:
    """A problem found while placing a label; rendering continued regardless.

    Attributes:
        file (SourceID): Source the label points into.
        label_index (int | None): Declaration index of the label in its
            diagnostic, ``None`` for problems not tied to a label.
        error (SpanmarkError): What went wrong.
    """

    file: SourceID
    label_index: int | None
    error: SpanmarkError

    def __str__(self) -> str:
        where: str = "diagnostic" if self.label_index is None else f"label {self.label_index}"
        return f"{where} in {self.file}: {self.error}"


@dataclass(frozen=True, slots=True)
class ResolvedLabel:
    """A label placed in its source.

    Attributes:
        index (int): Declaration index of the label in its diagnostic.
        label (Label): The label itself.
        start (int): First byte covered, after repairs.
        end (int): One past the last byte covered, after repairs.
        start_line (int): Index of the first line touched.
        end_line (int): Index of the last line touched.
        start_col (int): Byte column of ``start`` in ``start_line``.
        end_col (int): Byte column of ``end`` in ``end_line``.
    """

    index: int
    label: Label
    start: int
    end: int
    start_line: int
    end_line: int
    start_col: int
    end_col: int

    @property
    def multiline(self) -> bool:
        """True if the label crosses a line boundary."""
        return self.start_line != self.end_line

    @property
    def message(self) -> str | None:
        """Message of the label, ``None`` when empty."""
        return self.label.message or None

    @property
    def length(self) -> int:
        """Number of bytes covered."""
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class SkippedLines:
    """A run of source lines collapsed into a single marker row."""

    first: int
    count: int


@dataclass(frozen=True, slots=True)
class CellRange:
    """Display cells of a single-line label.

    Attributes:
        start (int): First cell covered.
        end (int): One past the last cell covered; always ``> start``.
        attach (int): Cell where the message connector leaves the underline.
    """

    start: int
    end: int
    attach: int

    def covers(self, cell: int) -> bool:
        """Return True if ``cell`` is underlined."""
        return self.start <= cell < self.end


def _repair_offset(
    source: SourceText, offset: int, label: Label, index: int, issues: list[RenderIssue]
) -> int:
    if offset > source.length:
        issues.append(
            RenderIssue(label.file, index, IndexTooLargeError(given=offset, max=source.length))
        )
        return source.length
    if not source.is_char_boundary(offset):
        issues.append(RenderIssue(label.file, index, InvalidCharBoundaryError(given=offset)))
        return source.floor_char_boundary(offset)
    return offset


def resolve_label(
    source: SourceText, label: Label, index: int
) -> tuple[ResolvedLabel, list[RenderIssue]]:
    """Place ``label`` in ``source``.

    Offsets past the end of the source are clamped to its length; offsets
    inside a multi-byte character are moved back to the start of that
    character. Each repair is reported as a `RenderIssue`.

    Args:
        source (SourceText): Text the label points into.
        label (Label): Label to place.
        index (int): Declaration index of the label.

    Returns:
        tuple[ResolvedLabel, list[RenderIssue]]: The placement and the repairs made.
    """
    issues: list[RenderIssue] = []
    start: int = _repair_offset(source, label.span.start, label, index, issues)
    end: int = _repair_offset(source, label.span.end, label, index, issues)
    end = max(end, start)

    lines: range = source.get_line_range(start, end)
    first: int = lines.start
    last: int = lines.stop - 1
    for issue in issues:
        logger.warning("Repaired %s", issue)
    return (
        ResolvedLabel(
            index=index,
            label=label,
            start=start,
            end=end,
            start_line=first,
            end_line=last,
            start_col=start - source.line(first).offset,
            end_col=end - source.line(last).offset,
        ),
        issues,
    )


def visible_lines(
    labels: Iterable[ResolvedLabel],
    line_count: int,
    *,
    before: int,
    after: int,
) -> list[int]:
    """Return the sorted indices of the lines a snippet must show.

    Single-line labels show their own line. Multi-line labels show both
    endpoints, each with ``before`` / ``after`` lines of context clipped to
    the source. Negative context counts show the endpoints alone.
    """
    before = max(before, 0)
    after = max(after, 0)
    shown: set[int] = set()
    for resolved in labels:
        if not resolved.multiline:
            shown.add(resolved.start_line)
            continue
        for endpoint in (resolved.start_line, resolved.end_line):
            low: int = max(endpoint - before, 0)
            high: int = min(endpoint + after, line_count - 1)
            shown.add(endpoint)
            shown.update(range(low, high + 1))
    return sorted(shown)


def build_window(lines: Sequence[int], gap_threshold: int) -> list[int | SkippedLines]:
    """Fill or collapse the gaps between ``lines``.

    Gaps of at most ``gap_threshold`` lines are filled with the missing lines;
    larger gaps become one `SkippedLines` entry.
    """
    gap_threshold = max(gap_threshold, 0)
    items: list[int | SkippedLines] = []
    previous: int | None = None
    for line in lines:
        if previous is not None:
            gap: int = line - previous - 1
            if 0 < gap <= gap_threshold:
                items.extend(range(previous + 1, line))
            elif gap > gap_threshold:
                items.append(SkippedLines(first=previous + 1, count=gap))
        items.append(line)
        previous = line
    return items


def assign_lanes(labels: Iterable[ResolvedLabel]) -> dict[int, int]:
    """Assign a lane to every multi-line label.

    Labels are taken by ascending start line, ties broken by ``order``, then
    higher priority, then longer span, then declaration order; each takes the
    lowest lane whose previous occupant ended on an earlier line. Shorter
    spans starting on the same line thus land in inner (higher) lanes.

    Returns:
        dict[int, int]: Lane per label declaration index.
    """
    ordered: list[ResolvedLabel] = sorted(
        (r for r in labels if r.multiline),
        key=lambda r: (
            r.start_line,
            r.label.order,
            -(r.label.priority or 0),
            -r.length,
            r.index,
        ),
    )
    lane_ends: list[int] = []
    lanes: dict[int, int] = {}
    for resolved in ordered:
        for lane, last_line in enumerate(lane_ends):
            if last_line < resolved.start_line:
                lane_ends[lane] = resolved.end_line
                lanes[resolved.index] = lane
                break
        else:
            lanes[resolved.index] = len(lane_ends)
            lane_ends.append(resolved.end_line)
    return lanes


def attach_column(start: int, end: int, attach: LabelAttach) -> int:
    """Return the cell of ``start .. end`` where a message connector attaches."""
    if attach is LabelAttach.START:
        return start
    if attach is LabelAttach.END:
        return end - 1
    return start + (end - start) // 2


def cell_range(resolved: ResolvedLabel, line: DisplayLine, attach: LabelAttach) -> CellRange:
    """Return the display cells of a single-line label.

    Zero-width labels, and labels covering only zero-width characters, are
    widened to one cell at their start.
    """
    start: int = line.column_of(resolved.start_col)
    end: int = line.column_of(resolved.end_col) if resolved.length else start
    end = max(end, start + 1)
    return CellRange(start=start, end=end, attach=attach_column(start, end, attach))


def message_order(labels: Iterable[ResolvedLabel]) -> list[ResolvedLabel]:
    """Order the labels with a message into message rows.

    Lower ``order`` first, then higher priority, then declaration order.
    """
    return sorted(
        (r for r in labels if r.message is not None),
        key=lambda r: (r.label.order, -(r.label.priority or 0), r.index),
    )


def underline_winner(candidates: Sequence[ResolvedLabel]) -> ResolvedLabel:
    """Return the label that owns a cell shared by ``candidates``.

    The highest effective priority wins (explicit priority, then the shorter
    span); remaining ties go to the label declared first.
    """
    return max(candidates, key=lambda r: (r.label.effective_priority, -r.index))
