# topmark:header:start
#
#   project      : SpanMark
#   file         : version.py
#   file_relpath : src/spanmark/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark ``version`` command.

Prints the SpanMark version as installed in the active Python environment.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import click

from spanmark.cli.cli_types import EnumChoiceParam, OutputFormat
from spanmark.constants import SPANMARK_VERSION

if TYPE_CHECKING:
    from spanmark.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of SpanMark.",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(OutputFormat.keys())}).",
)
def version_command(*, output_format: OutputFormat | None = None) -> None:
    """Show the current version of SpanMark.

    Args:
        output_format (OutputFormat | None): Plain text (default) or JSON.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    verbosity: int = ctx.obj.get("verbosity_level", logging.WARNING)

    if output_format is OutputFormat.JSON:
        console.print(json.dumps({"version": SPANMARK_VERSION}))
    elif verbosity <= logging.INFO:
        console.print(console.styled("SpanMark version:", bold=True, underline=True))
        console.print(f"    {console.styled(SPANMARK_VERSION, bold=True)}")
    else:
        console.print(console.styled(SPANMARK_VERSION, bold=True))
