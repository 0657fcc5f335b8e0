# topmark:header:start
#
#   project      : SpanMark
#   file         : locate.py
#   file_relpath : src/spanmark/cli/commands/locate.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark ``locate`` command.

Converts between the three position systems used around diagnostics:

- byte offsets (what labels store),
- one-based ``line:column`` locations (what the renderer shows, columns in
  characters),
- zero-based LSP positions (columns in UTF-16 code units).

Examples:
    ```bash
    spanmark locate src/main.rs 120
    spanmark locate src/main.rs --position 4:8
    ```
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING

import click

from spanmark.cli.cli_types import EnumChoiceParam, OutputFormat
from spanmark.cli.errors import SpanmarkFileNotFoundError, SpanmarkUsageError, from_library_error
from spanmark.cli.options import CONTEXT_SETTINGS
from spanmark.core.errors import SpanmarkError
from spanmark.source.lsp import Position, byte_to_utf16_position, utf16_position_to_byte
from spanmark.source.text import SourceText

if TYPE_CHECKING:
    from spanmark.cli.console import ConsoleLike
    from spanmark.source.text import Location

_POSITION_RE: re.Pattern[str] = re.compile(r"^\s*(\d+)\s*:\s*(\d+)\s*$")
_ONE_OF_MESSAGE: str = "Pass exactly one of OFFSET or --position."


def parse_position(raw: str) -> Position:
    """Parse ``LINE:CHARACTER`` (both zero-based) into an LSP `Position`.

    Raises:
        SpanmarkUsageError: If ``raw`` is not two non-negative integers.
    """
    match: re.Match[str] | None = _POSITION_RE.match(raw)
    if match is None:
        raise SpanmarkUsageError(f"Invalid position {raw!r}: expected LINE:CHARACTER")
    return Position(line=int(match.group(1)), character=int(match.group(2)))


@click.command(
    name="locate",
    context_settings=CONTEXT_SETTINGS,
    help=(
        "Show the line/column and LSP position of a byte OFFSET in FILE, "
        "or the byte offset of an LSP --position."
    ),
)
@click.argument("file", type=click.Path(dir_okay=False, path_type=str))
@click.argument("offset", type=click.IntRange(min=0), required=False)
@click.option(
    "--position",
    "position",
    default=None,
    metavar="LINE:CHARACTER",
    help="Zero-based LSP position (UTF-16 columns) to convert to a byte offset.",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(OutputFormat.keys())}).",
)
def locate_command(
    *,
    file: str,
    offset: int | None,
    position: str | None,
    output_format: OutputFormat | None,
) -> None:
    """Convert a byte offset or LSP position in a file."""
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    if (offset is None) == (position is None):
        raise SpanmarkUsageError(_ONE_OF_MESSAGE)

    path: Path = Path(file)
    if not path.is_file():
        raise SpanmarkFileNotFoundError(f"No such file: {file}")

    try:
        source: SourceText = SourceText.from_file(path)
        lsp: Position
        if position is not None:
            lsp = parse_position(position)
            byte_offset: int = utf16_position_to_byte(source, lsp)
        elif offset is not None:
            byte_offset = offset
            lsp = byte_to_utf16_position(source, byte_offset)
        else:
            raise SpanmarkUsageError(_ONE_OF_MESSAGE)
        location: Location = source.location(byte_offset)
    except SpanmarkError as exc:
        raise from_library_error(exc) from exc

    name: str = source.path.display()
    if output_format is OutputFormat.JSON:
        console.print(
            json.dumps(
                {
                    "file": name,
                    "offset": byte_offset,
                    "line": location.line_number,
                    "column": location.column_number,
                    "lsp": {"line": lsp.line, "character": lsp.character},
                }
            )
        )
        return

    console.print(f"offset:   {byte_offset}")
    console.print(f"location: {name}:{location}")
    console.print(f"lsp:      {lsp.line}:{lsp.character}")
