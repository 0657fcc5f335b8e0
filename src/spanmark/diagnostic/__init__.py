# topmark:header:start
#
#   project      : SpanMark
#   file         : __init__.py
#   file_relpath : src/spanmark/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic primitives.

Design:
    - A `Diagnostic` is built fluently and holds `Label`s that reference
      sources by `SourceID` only.
    - Rendering is separate (see `spanmark.rendering`); the model has no
      knowledge of glyphs or sinks.

Checks that collect diagnostics as they go return a `Validation`
(`spanmark.diagnostic.validation`). Documents describing sources and
diagnostics in TOML or JSON are read by `spanmark.diagnostic.loaders`.
"""

from __future__ import annotations

from spanmark.diagnostic.model import (
    Diagnostic,
    DiagnosticLevel,
    DiagnosticLocation,
    DiagnosticStats,
    Label,
    LabelStyle,
    compute_diagnostic_stats,
)
from spanmark.diagnostic.validation import Validation, ValidationFailedError

__all__ = [
    "Diagnostic",
    "DiagnosticLevel",
    "DiagnosticLocation",
    "DiagnosticStats",
    "Label",
    "LabelStyle",
    "Validation",
    "ValidationFailedError",
    "compute_diagnostic_stats",
]
