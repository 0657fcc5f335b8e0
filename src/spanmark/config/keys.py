# topmark:header:start
#
#   project      : SpanMark
#   file         : keys.py
#   file_relpath : src/spanmark/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for SpanMark configuration.

These constants define the external configuration schema as it appears in
``spanmark.toml`` and in ``[tool.spanmark]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by SpanMark configuration."""

    # [tool.spanmark] in pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_PROJECT: Final[str] = "spanmark"

    # [render]
    SECTION_RENDER: Final[str] = "render"

    KEY_CHAR_SET: Final[str] = "char_set"
    KEY_TAB_WIDTH: Final[str] = "tab_width"
    KEY_COLOR: Final[str] = "color"
    KEY_LABEL_ATTACH: Final[str] = "label_attach"
    KEY_CROSS_GAP: Final[str] = "cross_gap"
    KEY_COMPACT: Final[str] = "compact"
    KEY_MULTILINE_ARROWS: Final[str] = "multiline_arrows"
    KEY_DISPLAY_STYLE: Final[str] = "display_style"
    KEY_PALETTE: Final[str] = "palette"

    # [context]
    SECTION_CONTEXT: Final[str] = "context"

    KEY_LINES_BEFORE: Final[str] = "lines_before"
    KEY_LINES_AFTER: Final[str] = "lines_after"
    KEY_GAP_THRESHOLD: Final[str] = "gap_threshold"

    # [styles]: one color per element
    SECTION_STYLES: Final[str] = "styles"

    KEY_PRIMARY_LABEL: Final[str] = "primary_label"
    KEY_SECONDARY_LABEL: Final[str] = "secondary_label"
    KEY_LINE_NUMBER: Final[str] = "line_number"
    KEY_SOURCE_BORDER: Final[str] = "source_border"
    KEY_NOTE_BULLET: Final[str] = "note_bullet"
    KEY_SKIPPED: Final[str] = "skipped"
    # Header colors use "header_<level>", e.g. "header_error"
    KEY_HEADER_PREFIX: Final[str] = "header_"
