# topmark:header:start
#
#   project      : SpanMark
#   file         : model.py
#   file_relpath : src/spanmark/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostics and their labels.

A `Diagnostic` is a severity, a message, an optional code, labeled spans over
one or more sources and free-form notes. Labels reference sources by
`SourceID` only; the text is looked up in a `SourceCache` when rendering.

Both types offer a fluent builder API:

```python
diagnostic = (
    Diagnostic.error()
    .with_code("E0308")
    .with_message("mismatched types")
    .with_label(Label.primary(file_id.with_range(21, 28)).with_message("expected `i32`"))
    .with_note("expected type `i32`\\n   found type `&str`")
)
```
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spanmark.rendering.styles import Color
    from spanmark.source.identity import SourceID
    from spanmark.source.span import Span


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic.

    ``INFO < WARNING < ERROR < FATAL``. ``CUSTOM`` is a named bucket outside
    that order; ordering comparisons involving it raise `TypeError`. Severity
    only affects styling.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"
    CUSTOM = "custom"

    @property
    def rank(self) -> int | None:
        """Position in the severity order, ``None`` for ``CUSTOM``."""
        return _LEVEL_RANK.get(self)

    @property
    def color(self) -> str:
        """Return the ``click`` color name associated with this severity level.

        Intended for human-readable summaries only; machine formats should not use colors.
        """
        return _LEVEL_COLOR[self]

    def _ranks(self, other: object) -> tuple[int, int]:
        if not isinstance(other, DiagnosticLevel):
            raise TypeError(f"cannot compare DiagnosticLevel with {type(other).__name__}")
        a, b = self.rank, other.rank
        if a is None or b is None:
            raise TypeError("custom diagnostic levels have no severity order")
        return a, b

    def __lt__(self, other: object) -> bool:
        a, b = self._ranks(other)
        return a < b

    def __le__(self, other: object) -> bool:
        a, b = self._ranks(other)
        return a <= b

    def __gt__(self, other: object) -> bool:
        a, b = self._ranks(other)
        return a > b

    def __ge__(self, other: object) -> bool:
        a, b = self._ranks(other)
        return a >= b

    def __str__(self) -> str:
        return str(self.value)


_LEVEL_RANK: dict[DiagnosticLevel, int] = {
    DiagnosticLevel.INFO: 0,
    DiagnosticLevel.WARNING: 1,
    DiagnosticLevel.ERROR: 2,
    DiagnosticLevel.FATAL: 3,
}

_LEVEL_COLOR: dict[DiagnosticLevel, str] = {
    DiagnosticLevel.INFO: "bright_green",
    DiagnosticLevel.WARNING: "bright_yellow",
    DiagnosticLevel.ERROR: "bright_red",
    DiagnosticLevel.FATAL: "bright_magenta",
    DiagnosticLevel.CUSTOM: "bright_cyan",
}


class LabelStyle(str, Enum):
    """Emphasis of a label.

    Attributes:
        PRIMARY: The place the diagnostic is about; underlined with the
            primary underline glyph and the severity color.
        SECONDARY: Supporting context.
    """

    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class Label:
    """A span with an optional message.

    Attributes:
        span (Span): Byte range the label points at.
        message (str | None): Text shown next to the label.
        color (Color | None): Explicit color; unset labels get a palette or
            default color at render time.
        order (int): Presentation order among message rows of the same line;
            lower first.
        priority (int | None): Which label wins an underline cell shared with
            other labels; higher wins. Unset means 0, with ties going to the
            shorter span.
        style (LabelStyle): Primary or secondary emphasis.
    """

    span: Span
    message: str | None = None
    color: Color | None = None
    order: int = 0
    priority: int | None = None
    style: LabelStyle = LabelStyle.PRIMARY

    @classmethod
    def primary(cls, span: Span, message: str | None = None) -> Label:
        """Return a primary label."""
        return cls(span=span, message=message, style=LabelStyle.PRIMARY)

    @classmethod
    def secondary(cls, span: Span, message: str | None = None) -> Label:
        """Return a secondary label."""
        return cls(span=span, message=message, style=LabelStyle.SECONDARY)

    @property
    def file(self) -> SourceID:
        """Identity of the source the label points into."""
        return self.span.file

    @property
    def effective_priority(self) -> tuple[int, int]:
        """Sort key for underline conflicts; larger wins."""
        return (self.priority or 0, -len(self.span))

    def with_message(self, message: str | None) -> Label:
        """Return a copy with another message."""
        return replace(self, message=message)

    def with_color(self, color: Color | None) -> Label:
        """Return a copy with another color."""
        return replace(self, color=color)

    def with_order(self, order: int) -> Label:
        """Return a copy with another presentation order."""
        return replace(self, order=order)

    def with_priority(self, priority: int | None) -> Label:
        """Return a copy with another priority."""
        return replace(self, priority=priority)

    def with_style(self, style: LabelStyle) -> Label:
        """Return a copy with another emphasis."""
        return replace(self, style=style)


@dataclass(frozen=True, slots=True)
class DiagnosticLocation:
    """Explicit location shown in the ``-->`` locator line.

    Attributes:
        file (SourceID): Source the diagnostic is about.
        offset (int | None): Byte offset, or ``None`` to show only the path.
    """

    file: SourceID
    offset: int | None = None


@dataclass
class Diagnostic:
    """A diagnostic message with labeled spans and notes.

    Builder methods mutate the instance and return it, so calls chain.

    Attributes:
        severity (DiagnosticLevel): Severity; selects the header style.
        message (str): Main message shown in the header.
        code (str | None): Optional code shown as ``error[CODE]``.
        labels (list[Label]): Labeled spans, in declaration order.
        notes (list[str]): Notes rendered after the source snippets.
        location (DiagnosticLocation | None): Explicit primary location.
        custom_name (str | None): Name shown for ``CUSTOM`` severities.
    """

    severity: DiagnosticLevel
    message: str = ""
    code: str | None = None
    labels: list[Label] = field(default_factory=lambda: [])
    notes: list[str] = field(default_factory=lambda: [])
    location: DiagnosticLocation | None = None
    custom_name: str | None = None

    # ------------------------------------------------------------ creation

    @classmethod
    def new(cls, severity: DiagnosticLevel) -> Diagnostic:
        """Return an empty diagnostic of ``severity``."""
        return cls(severity=severity)

    @classmethod
    def fatal(cls) -> Diagnostic:
        """Return an empty fatal diagnostic."""
        return cls(severity=DiagnosticLevel.FATAL)

    @classmethod
    def error(cls) -> Diagnostic:
        """Return an empty error diagnostic."""
        return cls(severity=DiagnosticLevel.ERROR)

    @classmethod
    def warning(cls) -> Diagnostic:
        """Return an empty warning diagnostic."""
        return cls(severity=DiagnosticLevel.WARNING)

    @classmethod
    def info(cls) -> Diagnostic:
        """Return an empty info diagnostic."""
        return cls(severity=DiagnosticLevel.INFO)

    @classmethod
    def custom(cls, name: str) -> Diagnostic:
        """Return an empty diagnostic with the custom level ``name`` (e.g. ``"help"``)."""
        return cls(severity=DiagnosticLevel.CUSTOM, custom_name=name)

    # ------------------------------------------------------------- builder

    def with_message(self, message: str) -> Diagnostic:
        """Set the main message."""
        self.message = message
        return self

    def with_code(self, code: str | None) -> Diagnostic:
        """Set the diagnostic code."""
        self.code = code
        return self

    def with_label(self, label: Label) -> Diagnostic:
        """Append a label."""
        self.labels.append(label)
        return self

    def with_labels(self, labels: Iterable[Label]) -> Diagnostic:
        """Append several labels."""
        self.labels.extend(labels)
        return self

    def with_note(self, note: str) -> Diagnostic:
        """Append a note."""
        self.notes.append(note)
        return self

    def with_notes(self, notes: Iterable[str]) -> Diagnostic:
        """Append several notes."""
        self.notes.extend(notes)
        return self

    def with_location(self, file: SourceID, offset: int | None = None) -> Diagnostic:
        """Set the explicit location shown in the locator line."""
        self.location = DiagnosticLocation(file=file, offset=offset)
        return self

    # ------------------------------------------------------------- queries

    @property
    def level_name(self) -> str:
        """Word shown in the header (``error``, ``warning``, or the custom name)."""
        if self.severity is DiagnosticLevel.CUSTOM:
            return self.custom_name or DiagnosticLevel.CUSTOM.value
        return self.severity.value

    def files(self) -> list[SourceID]:
        """Return the sources referenced, explicit location first, then label order."""
        seen: list[SourceID] = []
        if self.location is not None:
            seen.append(self.location.file)
        for label in self.labels:
            if label.file not in seen:
                seen.append(label.file)
        return seen


@dataclass(frozen=True)
class DiagnosticStats:
    """Aggregated counts for diagnostics by severity level."""

    n_info: int
    n_warning: int
    n_error: int
    n_fatal: int
    n_custom: int

    @property
    def total(self) -> int:
        """Return the total count of diagnostics."""
        return self.n_info + self.n_warning + self.n_error + self.n_fatal + self.n_custom

    def count(self, level: DiagnosticLevel) -> int:
        """Return the count for one level."""
        return {
            DiagnosticLevel.INFO: self.n_info,
            DiagnosticLevel.WARNING: self.n_warning,
            DiagnosticLevel.ERROR: self.n_error,
            DiagnosticLevel.FATAL: self.n_fatal,
            DiagnosticLevel.CUSTOM: self.n_custom,
        }[level]


def compute_diagnostic_stats(diags: Sequence[Diagnostic]) -> DiagnosticStats:
    """Return per-level counts for a sequence of diagnostics."""

    def n(level: DiagnosticLevel) -> int:
        return sum(1 for d in diags if d.severity is level)

    return DiagnosticStats(
        n_info=n(DiagnosticLevel.INFO),
        n_warning=n(DiagnosticLevel.WARNING),
        n_error=n(DiagnosticLevel.ERROR),
        n_fatal=n(DiagnosticLevel.FATAL),
        n_custom=n(DiagnosticLevel.CUSTOM),
    )
