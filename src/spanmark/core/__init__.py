# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core, UI-agnostic primitives shared across SpanMark.

Included modules:

- ``errors``
  The library error taxonomy (lookup errors carrying ``given``/``max``, I/O and
  cache collision errors, render failures).

- ``exit_codes``
  Exit codes for the CLI, aligned with BSD-style ``sysexits``.

- ``enum_mixins``
  ``KeyedStrEnum``: string enums with labels and parse aliases, used for config
  values and CLI choices.
"""

from __future__ import annotations
