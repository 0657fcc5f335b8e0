# topmark:header:start
#
#   project      : SpanMark
#   file         : model.py
#   file_relpath : src/spanmark/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering configuration.

`Config` is the immutable snapshot the renderer reads. `MutableConfig` is the
builder used while layering defaults, config files and CLI overrides; its
fields are ``None`` when a layer leaves a value unset, so
`MutableConfig.merge_with` can tell "not configured" from "configured to the
default".

Sources, in increasing precedence:

1. Runtime defaults (`spanmark.config.io.load_defaults_dict`).
2. ``spanmark.toml`` or ``[tool.spanmark]`` in ``pyproject.toml``.
3. CLI overrides / API callers.

Use `Config.thaw` to obtain a builder from a snapshot and `MutableConfig.freeze`
to return to an immutable snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any

from spanmark.config.io import (
    TomlTable,
    get_bool_value_or_none_checked,
    get_color_value_or_none_checked,
    get_enum_value_checked,
    get_int_value_or_none_checked,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
)
from spanmark.config.keys import Toml
from spanmark.config.logging import get_logger
from spanmark.constants import PYPROJECT_TOML_NAME, SPANMARK_TOML_NAME
from spanmark.core.enum_mixins import KeyedStrEnum
from spanmark.rendering.glyphs import CharSet
from spanmark.rendering.styles import Style, Styles

if TYPE_CHECKING:
    from pathlib import Path

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.rendering.styles import Color

logger: SpanmarkLogger = get_logger(__name__)


class LabelAttach(KeyedStrEnum):
    """Column of a single-line label where its message connector attaches."""

    START = ("start", "First column of the span", ("left",))
    MIDDLE = ("middle", "Middle column of the span", ("center", "centre"))
    END = ("end", "Last column of the span", ("right",))


class DisplayStyle(KeyedStrEnum):
    """Amount of detail rendered per diagnostic."""

    RICH = ("rich", "Header, annotated source snippets and notes", ("full",))
    MEDIUM = ("medium", "One line per diagnostic, plus notes", ())
    SHORT = ("short", "One line per diagnostic", ())


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable rendering configuration.

    Attributes:
        char_set (CharSet): Unicode box drawing or plain ASCII.
        tab_width (int): Tab stops, in cells.
        color (bool): Emit styles. Resolved once by the caller (see
            `spanmark.rendering.color.resolve_color_mode`).
        label_attach (LabelAttach): Attach column of single-line label connectors.
        cross_gap (bool): Leave a gap in vertical connectors crossed by a
            horizontal one instead of drawing a crossing glyph.
        compact (bool): Omit the empty gutter rows around snippets.
        multiline_arrows (bool): Draw arrows from lanes into the source text
            and horizontal runs to multi-line label messages.
        context_lines_before (int): Lines shown before each multi-line label endpoint.
        context_lines_after (int): Lines shown after each multi-line label endpoint.
        gap_threshold (int): Largest gap between shown lines that is printed
            in full instead of collapsing into a skipped-lines row.
        display_style (DisplayStyle): Rich, medium or short output.
        palette (bool): Color labels without an explicit color from a
            distinct-color palette.
        styles (Styles): Element styles.
        config_files (tuple[Path | str, ...]): Provenance of the values.
        warnings (tuple[str, ...]): Problems found while loading config files.
    """

    char_set: CharSet = CharSet.UNICODE
    tab_width: int = 4
    color: bool = True
    label_attach: LabelAttach = LabelAttach.MIDDLE
    cross_gap: bool = True
    compact: bool = False
    multiline_arrows: bool = True
    context_lines_before: int = 1
    context_lines_after: int = 1
    gap_threshold: int = 1
    display_style: DisplayStyle = DisplayStyle.RICH
    palette: bool = True
    styles: Styles = field(default_factory=Styles)
    config_files: tuple[Path | str, ...] = ()
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Negative counts are clamped to 0
        for name in ("tab_width", "context_lines_before", "context_lines_after", "gap_threshold"):
            value: int = getattr(self, name)
            if value < 0:
                logger.debug("Clamping %s=%d to 0", name, value)
                object.__setattr__(self, name, 0)

    # Builder-style helpers mirroring the fluent diagnostic API

    def with_char_set(self, char_set: CharSet) -> Config:
        """Return a copy using another glyph set."""
        return replace(self, char_set=char_set)

    def with_tab_width(self, tab_width: int) -> Config:
        """Return a copy with another tab width."""
        return replace(self, tab_width=max(tab_width, 0))

    def with_color(self, color: bool) -> Config:
        """Return a copy with styles enabled or disabled."""
        return replace(self, color=color)

    def with_label_attach(self, label_attach: LabelAttach) -> Config:
        """Return a copy with another attach policy."""
        return replace(self, label_attach=label_attach)

    def with_cross_gap(self, cross_gap: bool) -> Config:
        """Return a copy with another crossing policy."""
        return replace(self, cross_gap=cross_gap)

    def with_compact(self, compact: bool) -> Config:
        """Return a copy with compact output enabled or disabled."""
        return replace(self, compact=compact)

    def with_multiline_arrows(self, multiline_arrows: bool) -> Config:
        """Return a copy with multi-line arrows enabled or disabled."""
        return replace(self, multiline_arrows=multiline_arrows)

    def with_context_lines(self, before: int, after: int) -> Config:
        """Return a copy with other context line counts."""
        return replace(self, context_lines_before=max(before, 0), context_lines_after=max(after, 0))

    def with_display_style(self, display_style: DisplayStyle) -> Config:
        """Return a copy with another display style."""
        return replace(self, display_style=display_style)

    def with_styles(self, styles: Styles) -> Config:
        """Return a copy with other element styles."""
        return replace(self, styles=styles)

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen config.

        Symmetry:
            Mirrors `MutableConfig.freeze`. Prefer thaw→edit→freeze rather
            than rebuilding a `Config` by hand.
        """
        return MutableConfig(
            char_set=self.char_set,
            tab_width=self.tab_width,
            color=self.color,
            label_attach=self.label_attach,
            cross_gap=self.cross_gap,
            compact=self.compact,
            multiline_arrows=self.multiline_arrows,
            context_lines_before=self.context_lines_before,
            context_lines_after=self.context_lines_after,
            gap_threshold=self.gap_threshold,
            display_style=self.display_style,
            palette=self.palette,
            styles=self.styles,
            config_files=list(self.config_files),
            warnings=list(self.warnings),
        )

    def to_toml_dict(self) -> TomlTable:
        """Convert this config into a TOML-serializable dict (styles excluded)."""
        return {
            Toml.SECTION_RENDER: {
                Toml.KEY_CHAR_SET: self.char_set.key,
                Toml.KEY_TAB_WIDTH: self.tab_width,
                Toml.KEY_COLOR: self.color,
                Toml.KEY_LABEL_ATTACH: self.label_attach.key,
                Toml.KEY_CROSS_GAP: self.cross_gap,
                Toml.KEY_COMPACT: self.compact,
                Toml.KEY_MULTILINE_ARROWS: self.multiline_arrows,
                Toml.KEY_DISPLAY_STYLE: self.display_style.key,
                Toml.KEY_PALETTE: self.palette,
            },
            Toml.SECTION_CONTEXT: {
                Toml.KEY_LINES_BEFORE: self.context_lines_before,
                Toml.KEY_LINES_AFTER: self.context_lines_after,
                Toml.KEY_GAP_THRESHOLD: self.gap_threshold,
            },
        }


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableConfig:
    """Mutable configuration used while layering config sources.

    ``None`` means "not set by this layer". `freeze` substitutes the `Config`
    defaults for anything still unset.
    """

    char_set: CharSet | None = None
    tab_width: int | None = None
    color: bool | None = None
    label_attach: LabelAttach | None = None
    cross_gap: bool | None = None
    compact: bool | None = None
    multiline_arrows: bool | None = None
    context_lines_before: int | None = None
    context_lines_after: int | None = None
    gap_threshold: int | None = None
    display_style: DisplayStyle | None = None
    palette: bool | None = None
    styles: Styles | None = None
    config_files: list[Path | str] = field(default_factory=lambda: [])
    warnings: list[str] = field(default_factory=lambda: [])

    # ---------------------------- Build/freeze ----------------------------

    def freeze(self) -> Config:
        """Freeze this builder into an immutable `Config`."""
        values: dict[str, Any] = {}
        for f in fields(self):
            if f.name in ("config_files", "warnings"):
                continue
            value: Any = getattr(self, f.name)
            if value is not None:
                values[f.name] = value
        return Config(
            **values,
            config_files=tuple(self.config_files),
            warnings=tuple(self.warnings),
        )

    # --------------------------- Loaders/parsers --------------------------

    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a builder populated with the runtime defaults."""
        return cls.from_toml_dict(load_defaults_dict())

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load configuration from a single TOML file.

        Supports ``spanmark.toml`` and ``pyproject.toml``; for the latter the
        ``[tool.spanmark]`` table is used.

        Args:
            path (Path): Path to the TOML file.

        Returns:
            MutableConfig | None: The builder; ``None`` if ``pyproject.toml``
            has no ``[tool.spanmark]`` table.

        Raises:
            ConfigLoadError: If the file cannot be read or parsed.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)

        toml_data: TomlTable = load_toml_dict(path)

        if path.name == PYPROJECT_TOML_NAME:
            tool_section: TomlTable = get_table_value(
                get_table_value(toml_data, Toml.SECTION_TOOL), Toml.SECTION_PROJECT
            )
            if not tool_section:
                logger.info("[tool.spanmark] section missing in %s", path)
                return None
            toml_data = tool_section

        draft: MutableConfig = cls.from_toml_dict(toml_data)
        draft.config_files = [path]
        logger.debug("Generated MutableConfig: %s", draft)
        return draft

    @classmethod
    def discover(cls, start: Path) -> Path | None:
        """Return the nearest config file at or above ``start``.

        In each directory ``spanmark.toml`` wins over ``pyproject.toml``; a
        ``pyproject.toml`` only counts if it has a ``[tool.spanmark]`` table.
        """
        directory: Path = start if start.is_dir() else start.parent
        for candidate_dir in (directory, *directory.parents):
            own: Path = candidate_dir / SPANMARK_TOML_NAME
            if own.is_file():
                return own
            pyproject: Path = candidate_dir / PYPROJECT_TOML_NAME
            if pyproject.is_file():
                data: TomlTable = load_toml_dict(pyproject)
                if get_table_value(get_table_value(data, Toml.SECTION_TOOL), Toml.SECTION_PROJECT):
                    return pyproject
        return None

    @classmethod
    def from_toml_dict(cls, data: TomlTable) -> MutableConfig:
        """Parse a TOML dict (already unwrapped from ``[tool.spanmark]``).

        Values of the wrong shape are reported in `warnings` and left unset.
        """
        warnings: list[str] = []

        render: TomlTable = get_table_value(data, Toml.SECTION_RENDER)
        where: str = f"[{Toml.SECTION_RENDER}]"
        draft = cls(
            char_set=get_enum_value_checked(
                render, Toml.KEY_CHAR_SET, CharSet, where=where, warnings=warnings
            ),
            tab_width=get_int_value_or_none_checked(
                render, Toml.KEY_TAB_WIDTH, where=where, warnings=warnings
            ),
            color=get_bool_value_or_none_checked(
                render, Toml.KEY_COLOR, where=where, warnings=warnings
            ),
            label_attach=get_enum_value_checked(
                render, Toml.KEY_LABEL_ATTACH, LabelAttach, where=where, warnings=warnings
            ),
            cross_gap=get_bool_value_or_none_checked(
                render, Toml.KEY_CROSS_GAP, where=where, warnings=warnings
            ),
            compact=get_bool_value_or_none_checked(
                render, Toml.KEY_COMPACT, where=where, warnings=warnings
            ),
            multiline_arrows=get_bool_value_or_none_checked(
                render, Toml.KEY_MULTILINE_ARROWS, where=where, warnings=warnings
            ),
            display_style=get_enum_value_checked(
                render, Toml.KEY_DISPLAY_STYLE, DisplayStyle, where=where, warnings=warnings
            ),
            palette=get_bool_value_or_none_checked(
                render, Toml.KEY_PALETTE, where=where, warnings=warnings
            ),
        )

        context: TomlTable = get_table_value(data, Toml.SECTION_CONTEXT)
        where = f"[{Toml.SECTION_CONTEXT}]"
        draft.context_lines_before = get_int_value_or_none_checked(
            context, Toml.KEY_LINES_BEFORE, where=where, warnings=warnings
        )
        draft.context_lines_after = get_int_value_or_none_checked(
            context, Toml.KEY_LINES_AFTER, where=where, warnings=warnings
        )
        draft.gap_threshold = get_int_value_or_none_checked(
            context, Toml.KEY_GAP_THRESHOLD, where=where, warnings=warnings
        )

        styles_table: TomlTable = get_table_value(data, Toml.SECTION_STYLES)
        if styles_table:
            draft.styles = _styles_from_table(styles_table, warnings)

        draft.warnings = warnings
        return draft

    # ------------------------------- Merging ------------------------------

    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new builder where values set in ``other`` override this one."""
        merged: MutableConfig = MutableConfig()
        for f in fields(self):
            if f.name in ("config_files", "warnings"):
                continue
            theirs: Any = getattr(other, f.name)
            setattr(merged, f.name, theirs if theirs is not None else getattr(self, f.name))
        merged.config_files = [*self.config_files, *other.config_files]
        merged.warnings = [*self.warnings, *other.warnings]
        return merged

    @classmethod
    def load_merged(cls, config_file: Path | None = None) -> MutableConfig:
        """Return defaults layered with ``config_file`` (when given and usable)."""
        draft: MutableConfig = cls.from_defaults()
        if config_file is not None:
            layer: MutableConfig | None = cls.from_toml_file(config_file)
            if layer is not None:
                draft = draft.merge_with(layer)
        return draft


def _styles_from_table(table: TomlTable, warnings: list[str]) -> Styles:
    """Build `Styles` from a ``[styles]`` table of colors."""
    where: str = f"[{Toml.SECTION_STYLES}]"
    base: Styles = Styles()

    def color(key: str) -> Color | None:
        return get_color_value_or_none_checked(table, key, where=where, warnings=warnings)

    headers: dict[str, Style] = dict(base.headers)
    for level in list(headers):
        fg: Color | None = color(f"{Toml.KEY_HEADER_PREFIX}{level}")
        if fg is not None:
            headers[level] = headers[level].with_fg(fg)

    def styled(key: str, default: Style) -> Style:
        fg: Color | None = color(key)
        return default.with_fg(fg) if fg is not None else default

    primary_fg: Color | None = color(Toml.KEY_PRIMARY_LABEL)
    return Styles(
        headers=headers,
        header_message=base.header_message,
        primary_label=Style(fg=primary_fg) if primary_fg is not None else base.primary_label,
        secondary_label=styled(Toml.KEY_SECONDARY_LABEL, base.secondary_label),
        line_number=styled(Toml.KEY_LINE_NUMBER, base.line_number),
        source_border=styled(Toml.KEY_SOURCE_BORDER, base.source_border),
        note_bullet=styled(Toml.KEY_NOTE_BULLET, base.note_bullet),
        skipped=styled(Toml.KEY_SKIPPED, base.skipped),
    )
