# topmark:header:start
#
#   project      : SpanMark
#   file         : cli_types.py
#   file_relpath : src/spanmark/cli/cli_types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared Click parameter types for the SpanMark CLI."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, NoReturn, Protocol, TypeVar, cast

import click

from spanmark.core.enum_mixins import KeyedStrEnum

if TYPE_CHECKING:
    from click.shell_completion import CompletionItem as ClickCompletionItem

    class ParamTypeBase(Protocol):
        """Typed base to avoid subclassing Any when Click lacks stubs."""

        name: str

else:
    # At runtime, subclass the real Click type
    ParamTypeBase = click.ParamType

# Type variable bounded to Enum for generic EnumChoiceParam
E = TypeVar("E", bound=Enum)


class EnumChoiceParam(ParamTypeBase, Generic[E]):
    """A Click parameter type that converts a string to a member of a given Enum.

    `KeyedStrEnum` subclasses also accept their member names and aliases.
    """

    enum_cls: type[E]
    name: str
    choices: list[str]

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls = enum_cls
        self.name = self.enum_cls.__name__.lower()
        self.choices = [str(getattr(e, "value", e)) for e in self.enum_cls]

    def _fail_noreturn(
        self,
        message: str,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> NoReturn:
        """Raise a BadParameter with a NoReturn signature (clear to type checkers)."""
        raise click.BadParameter(message, param=param, ctx=ctx)

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E | None:
        """Convert a string (or an existing member) to a member of the Enum."""
        if value is None or isinstance(value, self.enum_cls):
            return value

        raw: str = str(value)
        if issubclass(self.enum_cls, KeyedStrEnum):
            member: KeyedStrEnum | None = self.enum_cls.parse(raw)
            if member is not None:
                return cast("E", member)
        else:
            lookup: dict[str, E] = {str(getattr(c, "value", c)).lower(): c for c in self.enum_cls}
            if raw.lower() in lookup:
                return lookup[raw.lower()]

        self._fail_noreturn(
            f"Invalid value '{raw}'. Must be one of: {', '.join(self.choices)}",
            param,
            ctx,
        )

    def shell_complete(
        self,
        ctx: click.Context,
        param: click.Parameter,
        incomplete: str,
    ) -> list[ClickCompletionItem]:
        """Complete enum values for Click shell completion."""
        from click.shell_completion import CompletionItem

        return [CompletionItem(c) for c in self.choices if c.startswith(incomplete.lower())]


class OutputFormat(KeyedStrEnum):
    """Output format of informational commands."""

    TEXT = ("text", "Human-readable text", ("plain",))
    JSON = ("json", "A single JSON object", ())


class RenderFormat(KeyedStrEnum):
    """Output format of the ``render`` command."""

    TEXT = ("text", "Terminal text, ANSI-colored when color is enabled", ("ansi", "plain"))
    HTML = ("html", "HTML-escaped text in styled <span> elements", ())
    SVG = ("svg", "Standalone SVG image embedding the HTML output", ())
