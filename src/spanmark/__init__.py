# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark package.

SpanMark renders compiler-style diagnostics (a severity, a message, labeled
spans over source buffers and notes) as annotated source snippets, and
converts between byte offsets, line/column locations and LSP positions. It
exposes a Click CLI and the `spanmark.rendering.renderer.render` family of
functions for use as a library.
"""

from __future__ import annotations
