# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/rendering/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering of diagnostics.

Public modules:
    - spanmark.rendering.renderer: `Renderer`, `render` and `render_to_string`.
    - spanmark.rendering.layout: label placement, visible lines and lanes.
    - spanmark.rendering.sinks: plain, ANSI and HTML sinks, SVG wrapper.
    - spanmark.rendering.glyphs: Unicode and ASCII glyph tables.
    - spanmark.rendering.styles: colors and element styles.
    - spanmark.rendering.palette: distinct-color generator.
    - spanmark.rendering.width: display width of source text.
    - spanmark.rendering.color: one-shot color mode resolution.
"""

from __future__ import annotations
