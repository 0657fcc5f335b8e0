# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for SpanMark.

Public modules:
    - spanmark.config.model: `Config` (frozen) and `MutableConfig` (builder),
      plus the `LabelAttach` and `DisplayStyle` enums.
    - spanmark.config.io: TOML loading and checked value getters.
    - spanmark.config.keys: canonical TOML section and key names.
    - spanmark.config.logging: the project logger with a TRACE level.

Configuration is read from ``spanmark.toml`` or from ``[tool.spanmark]`` in
``pyproject.toml`` and layered over the runtime defaults.
"""

from __future__ import annotations
