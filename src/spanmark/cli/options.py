# topmark:header:start
#
#   project      : SpanMark
#   file         : options.py
#   file_relpath : src/spanmark/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI options and their resolution logic.

Reusable options (verbosity, color, rendering overrides) live here so the
group and the commands stay thin.
"""

from __future__ import annotations

import logging
from typing import Callable, ParamSpec, TypeVar

import click

from spanmark.cli.cli_types import EnumChoiceParam
from spanmark.cli.errors import SpanmarkUsageError
from spanmark.config.logging import TRACE_LEVEL
from spanmark.config.model import DisplayStyle, LabelAttach
from spanmark.rendering.color import ColorMode
from spanmark.rendering.glyphs import CharSet

P = ParamSpec("P")
R = TypeVar("R")

# Verbosity levels, mapped to standard logging levels
LOG_LEVELS: dict[str, int] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

CONTEXT_SETTINGS: dict[str, list[str]] = {"help_option_names": ["-h", "--help"]}


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output level from the ``-v`` and ``-q`` counts.

    Args:
        verbose_count: Number of times ``-v`` is passed.
        quiet_count: Number of times ``-q`` is passed.

    Returns:
        The level as a `logging` level number.

    Raises:
        SpanmarkUsageError: If both verbose and quiet flags are used.

    Behavior:
        Three or more ``-v`` set TRACE, two set DEBUG, one sets INFO.
        One or more ``-q`` set ERROR. The default is WARNING.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise SpanmarkUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:
        return LOG_LEVELS["TRACE"]
    if verbose_count == 2:
        return LOG_LEVELS["DEBUG"]
    if verbose_count == 1:
        return LOG_LEVELS["INFO"]
    if quiet_count >= 1:
        return LOG_LEVELS["ERROR"]
    return LOG_LEVELS["WARNING"]


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` counting options."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress warnings and summaries.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` (auto, always, never) and ``--no-color``."""
    f = click.option(
        "--color",
        "color_mode",
        type=EnumChoiceParam(ColorMode),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def render_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the options that override rendering configuration values.

    Every option defaults to ``None`` so unset options leave the configured
    value alone.
    """
    f = click.option(
        "--config",
        "config_file",
        type=click.Path(dir_okay=False, path_type=str),
        default=None,
        help="Read configuration from this TOML file instead of discovering one.",
    )(f)
    f = click.option(
        "--no-config",
        is_flag=True,
        help="Ignore spanmark.toml / pyproject.toml and use the defaults.",
    )(f)
    f = click.option(
        "--charset",
        "char_set",
        type=EnumChoiceParam(CharSet),
        default=None,
        help=f"Glyph set ({', '.join(CharSet.keys())}).",
    )(f)
    f = click.option(
        "--style",
        "display_style",
        type=EnumChoiceParam(DisplayStyle),
        default=None,
        help=f"Amount of detail ({', '.join(DisplayStyle.keys())}).",
    )(f)
    f = click.option(
        "--attach",
        "label_attach",
        type=EnumChoiceParam(LabelAttach),
        default=None,
        help=f"Where label connectors attach ({', '.join(LabelAttach.keys())}).",
    )(f)
    f = click.option(
        "--tab-width",
        type=click.IntRange(min=0),
        default=None,
        help="Tab stop width in cells.",
    )(f)
    f = click.option(
        "--compact/--no-compact",
        default=None,
        help="Omit the empty gutter rows around snippets.",
    )(f)
    f = click.option(
        "--context",
        "context_lines",
        type=click.IntRange(min=0),
        default=None,
        help="Context lines before and after multi-line label endpoints.",
    )(f)
    return f
