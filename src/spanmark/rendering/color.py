# topmark:header:start
#
#   project      : SpanMark
#   file         : color.py
#   file_relpath : src/spanmark/rendering/color.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-independent color helpers for SpanMark.

Whether output is colored is decided once, at the edge (CLI startup or the
caller's own initialization), by `resolve_color_mode`; the result is stored in
`Config.color`. The renderer itself never inspects the terminal or the
environment.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger

if TYPE_CHECKING:
    from spanmark.config.logging import SpanmarkLogger

logger: SpanmarkLogger = get_logger(__name__)

# Output formats that carry styles as markup rather than escape sequences
MARKUP_FORMATS: frozenset[str] = frozenset({"html", "svg"})


class ColorMode(str, Enum):
    """User intent for colorized output.

    Attributes:
        AUTO: Enable color only when appropriate (typically when stdout is a TTY).
        ALWAYS: Force-enable color regardless of TTY status.
        NEVER: Disable color entirely.
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    color_mode_override: ColorMode | None,
    output_format: str | None = None,  # "text" | "html" | "svg" | None
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
        1. **CLI override**: ``ALWAYS`` → True; ``NEVER`` → False.
        2. **Markup formats**: ``"html"`` and ``"svg"`` carry styles as markup,
           independent of the terminal → True.
        3. **Environment**:
            - ``FORCE_COLOR`` (set and not equal to ``"0"``) → True
            - ``NO_COLOR`` (set to any value) → False
        4. **Auto**: If none of the above decide, return ``stdout.isatty()``.

    Args:
        color_mode_override: Parsed `ColorMode` value from ``--color``;
            ``None`` means "not provided".
        output_format: Output format of the command, if any.
        stdout_isatty: Optional override for TTY detection. When ``None``, the function
            calls ``sys.stdout.isatty()`` and falls back to ``False`` on error.

    Returns:
        True if styled output should be enabled; False otherwise.
    """
    if color_mode_override == ColorMode.ALWAYS:
        return True
    if color_mode_override == ColorMode.NEVER:
        return False

    if output_format and output_format.lower() in MARKUP_FORMATS:
        return True

    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        logger.debug("Color forced by FORCE_COLOR=%s", force_color)
        return True
    if os.getenv("NO_COLOR") is not None:
        logger.debug("Color disabled by NO_COLOR")
        return False

    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (OSError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)
