# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click command-line interface for SpanMark.

Entry point: `spanmark.cli.main.cli` (console script ``spanmark``).
Commands live in `spanmark.cli.commands`.
"""

from __future__ import annotations
