# topmark:header:start
#
#   project      : SpanMark
#   file         : constants.py
#   file_relpath : src/spanmark/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    SPANMARK_VERSION: str = get_version("spanmark")
except PackageNotFoundError:  # running from a source checkout
    SPANMARK_VERSION = "0.0.0+unknown"

# Config file names, in discovery order
SPANMARK_TOML_NAME: str = "spanmark.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"

# Largest byte offset a span can address
MAX_OFFSET: int = 2**32 - 1

ANONYMOUS_SOURCE_NAME: str = "<anonymous>"
