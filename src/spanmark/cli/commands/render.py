# topmark:header:start
#
#   project      : SpanMark
#   file         : render.py
#   file_relpath : src/spanmark/cli/commands/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark ``render`` command.

Reads a diagnostics document (TOML or JSON, see `spanmark.diagnostic.loaders`),
renders every diagnostic and writes the result to stdout or a file.

Configuration is layered as: built-in defaults, then the discovered (or
``--config``) TOML file, then the command-line overrides.

Exit codes:
    0 on success; 1 when ``--fail-on`` matches a rendered diagnostic; the
    codes of `spanmark.core.exit_codes.ExitCode` for errors.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from spanmark.cli.cli_types import EnumChoiceParam, RenderFormat
from spanmark.cli.errors import (
    SpanmarkConfigError,
    SpanmarkFileNotFoundError,
    SpanmarkIOError,
    from_library_error,
)
from spanmark.cli.options import CONTEXT_SETTINGS, render_config_options
from spanmark.config.io import ConfigLoadError
from spanmark.config.logging import get_logger
from spanmark.config.model import Config, DisplayStyle, LabelAttach, MutableConfig
from spanmark.core.errors import RenderError, SpanmarkError
from spanmark.core.exit_codes import ExitCode
from spanmark.diagnostic.loaders import load_document
from spanmark.diagnostic.model import DiagnosticLevel, compute_diagnostic_stats
from spanmark.rendering.color import resolve_color_mode
from spanmark.rendering.renderer import Renderer
from spanmark.rendering.sinks import AnsiSink, HtmlSink, PlainSink, wrap_svg

if TYPE_CHECKING:
    from collections.abc import Iterable

    from spanmark.cli.console import ConsoleLike
    from spanmark.config.logging import SpanmarkLogger
    from spanmark.diagnostic.loaders import DiagnosticDocument
    from spanmark.diagnostic.model import DiagnosticStats
    from spanmark.rendering.glyphs import CharSet
    from spanmark.rendering.layout import RenderIssue
    from spanmark.rendering.sinks import StyledSink

logger: SpanmarkLogger = get_logger(__name__)

FAIL_ON_LEVELS: tuple[str, ...] = ("info", "warning", "error", "fatal")


def build_render_config(
    document: Path,
    *,
    config_file: str | None,
    no_config: bool,
    overrides: MutableConfig,
) -> MutableConfig:
    """Layer defaults, the config file and the CLI overrides.

    Args:
        document (Path): The diagnostics document; discovery starts in its directory.
        config_file (str | None): Explicit config file (``--config``).
        no_config (bool): Skip discovery (an explicit ``--config`` still applies).
        overrides (MutableConfig): Values set on the command line.

    Returns:
        MutableConfig: The merged, not yet frozen configuration.

    Raises:
        SpanmarkConfigError: If the explicit config file does not exist.
        ConfigLoadError: If a config file cannot be read or parsed.
    """
    path: Path | None = None
    if config_file is not None:
        path = Path(config_file)
        if not path.is_file():
            raise SpanmarkConfigError(f"Config file not found: {config_file}")
    elif not no_config:
        path = MutableConfig.discover(document.resolve().parent)

    if path is not None:
        logger.info("Using configuration from %s", path)
    draft: MutableConfig = MutableConfig.load_merged(path)
    return draft.merge_with(overrides)


def _make_sink(fmt: RenderFormat, color: bool, out: io.StringIO) -> StyledSink:
    if fmt is RenderFormat.TEXT:
        return AnsiSink(out) if color else PlainSink(out)
    return HtmlSink(out)


def _fails(document: DiagnosticDocument, threshold: DiagnosticLevel) -> bool:
    # Custom levels have no severity order and never trip the threshold
    return any(
        d.severity is not DiagnosticLevel.CUSTOM and d.severity >= threshold
        for d in document.diagnostics
    )


def _report_warnings(console: ConsoleLike, messages: Iterable[str]) -> None:
    for message in messages:
        console.warn(f"warning: {message}")


def _render_summary(console: ConsoleLike, stats: DiagnosticStats) -> None:
    parts: list[str] = []
    for level in DiagnosticLevel:
        count: int = stats.count(level)
        if count:
            parts.append(console.styled(f"{count} {level.value}", fg=level.color))
    summary: str = f": {', '.join(parts)}" if parts else ""
    console.warn(f"Rendered {stats.total} diagnostic(s){summary}")


@click.command(
    name="render",
    context_settings=CONTEXT_SETTINGS,
    help=(
        "Render the diagnostics in DOCUMENT (a TOML or JSON file).\n\n"
        "Configuration is read from spanmark.toml, or from [tool.spanmark] in "
        "pyproject.toml, found next to DOCUMENT or in a parent directory."
    ),
)
@click.argument("document", type=click.Path(dir_okay=False, path_type=str))
@render_config_options
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(RenderFormat),
    default=None,
    help=f"Output format ({', '.join(RenderFormat.keys())}). Default: text.",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, path_type=str),
    default=None,
    help="Write the output to this file instead of stdout.",
)
@click.option(
    "--fail-on",
    type=click.Choice(FAIL_ON_LEVELS, case_sensitive=False),
    default=None,
    help="Exit with status 1 if any diagnostic is at least this severe.",
)
def render_command(
    *,
    document: str,
    config_file: str | None,
    no_config: bool,
    char_set: CharSet | None,
    display_style: DisplayStyle | None,
    label_attach: LabelAttach | None,
    tab_width: int | None,
    compact: bool | None,
    context_lines: int | None,
    output_format: RenderFormat | None,
    output_file: str | None,
    fail_on: str | None,
) -> None:
    """Render the diagnostics in a document."""
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    verbosity: int = ctx.obj.get("verbosity_level", logging.WARNING)
    fmt: RenderFormat = output_format or RenderFormat.TEXT

    document_path: Path = Path(document)
    if not document_path.is_file():
        raise SpanmarkFileNotFoundError(f"No such file: {document}")

    overrides: MutableConfig = MutableConfig(
        char_set=char_set,
        display_style=display_style,
        label_attach=label_attach,
        tab_width=tab_width,
        compact=compact,
        context_lines_before=context_lines,
        context_lines_after=context_lines,
    )
    try:
        draft: MutableConfig = build_render_config(
            document_path, config_file=config_file, no_config=no_config, overrides=overrides
        )
        loaded: DiagnosticDocument = load_document(document_path)
    except (SpanmarkError, ConfigLoadError) as exc:
        raise from_library_error(exc) from exc

    # An explicit --color wins; otherwise the configured value can turn color off
    override = ctx.obj.get("color_mode")
    color: bool = resolve_color_mode(color_mode_override=override, output_format=fmt.key)
    if override is None and draft.color is False:
        color = False
    draft.color = color
    config: Config = draft.freeze()
    logger.debug("Effective configuration: %s", config)

    if verbosity <= logging.WARNING:
        _report_warnings(console, [*config.warnings, *loaded.warnings])

    buffer: io.StringIO = io.StringIO()
    sink: StyledSink = _make_sink(fmt, color, buffer)
    try:
        issues: list[RenderIssue] = Renderer(loaded.cache, config, sink).render_all(
            loaded.diagnostics
        )
    except RenderError as exc:
        raise SpanmarkIOError(str(exc)) from exc

    output: str = buffer.getvalue()
    if fmt is RenderFormat.SVG:
        output = wrap_svg(output)

    if output_file is not None:
        try:
            Path(output_file).write_text(output, encoding="utf-8")
        except OSError as exc:
            raise SpanmarkIOError(f"Cannot write {output_file}: {exc}") from exc
        logger.info("Wrote %s output to %s", fmt.key, output_file)
    else:
        # Click strips ANSI escapes when the console has color disabled
        console.print(output, nl=False)

    if verbosity <= logging.WARNING:
        _report_warnings(console, (str(issue) for issue in issues))
    if verbosity <= logging.INFO:
        _render_summary(console, compute_diagnostic_stats(loaded.diagnostics))

    if fail_on is not None and _fails(loaded, DiagnosticLevel(fail_on.lower())):
        logger.info("Diagnostics at or above %s found", fail_on)
        ctx.exit(ExitCode.FAILURE)
