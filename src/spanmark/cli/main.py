# topmark:header:start
#
#   project      : SpanMark
#   file         : main.py
#   file_relpath : src/spanmark/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark CLI entry point.

Group-level options (verbosity, color) are resolved once in
`init_common_state` and stored in ``ctx.obj`` for the subcommands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from spanmark.cli.commands.locate import locate_command
from spanmark.cli.commands.render import render_command
from spanmark.cli.commands.version import version_command
from spanmark.cli.console import ClickConsole
from spanmark.cli.options import (
    CONTEXT_SETTINGS,
    common_color_options,
    common_verbose_options,
    resolve_verbosity,
)
from spanmark.config.logging import get_logger, resolve_env_log_level, setup_logging
from spanmark.rendering.color import ColorMode, resolve_color_mode

if TYPE_CHECKING:
    from spanmark.cli.console import ConsoleLike
    from spanmark.config.logging import SpanmarkLogger

logger: SpanmarkLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging and color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; ``obj`` and ``color`` are set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    # Program-output verbosity
    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    # Internal logging is configured from the environment only
    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    override: ColorMode | None = ColorMode.NEVER if no_color else color_mode
    ctx.obj["color_mode"] = override
    enable_color: bool = resolve_color_mode(color_mode_override=override)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    help="SpanMark: render compiler-style diagnostics over source text.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the SpanMark CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'spanmark render DOCUMENT' to render diagnostics.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(render_command)

cli.add_command(locate_command)

cli.add_command(version_command)

if __name__ == "__main__":
    cli()
