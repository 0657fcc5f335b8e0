# topmark:header:start
#
#   project      : SpanMark
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the SpanMark test suite.

This file sets up global fixtures and the logging configuration for test runs,
and provides small builders shared by the rendering tests.

Notes:
    Tests should respect the immutable/mutable configuration split: build a
    `spanmark.config.model.MutableConfig`, then `freeze()` it, or derive
    variants of a frozen `Config` through its ``with_*`` helpers. Do **not**
    mutate a frozen `Config`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from spanmark.config import logging
from spanmark.config.model import Config, MutableConfig
from spanmark.rendering.glyphs import CharSet
from spanmark.rendering.renderer import render_to_string

if TYPE_CHECKING:
    from spanmark.diagnostic.model import Diagnostic
    from spanmark.source.cache import SourceCache

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.cli`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)
mark_rendering: DecoratorType[Any] = as_typed_mark(pytest.mark.rendering)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.hookimpl`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.hookimpl`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_spanmark_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure SpanMark's runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    SPANMARK_LOG_LEVEL in their shell, and keeps color decisions independent
    of the developer's terminal settings.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Configure logging at TRACE level for the test suite.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


def make_config(**overrides: Any) -> Config:
    """Return a frozen plain-text `Config` built from defaults and overrides.

    ASCII glyphs and no color unless overridden, so expected output can be
    written as plain strings.

    Args:
        **overrides (Any): Field overrides applied to the mutable builder before freezing.

    Returns:
        Config: An immutable configuration snapshot.
    """
    m: MutableConfig = MutableConfig.from_defaults()
    m.char_set = CharSet.ASCII
    m.color = False
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()


def render_text(diagnostic: Diagnostic, cache: SourceCache, **overrides: Any) -> str:
    """Render ``diagnostic`` as plain text with `make_config` options.

    Args:
        diagnostic (Diagnostic): Diagnostic to render.
        cache (SourceCache): Sources the labels point into.
        **overrides (Any): Config overrides.

    Returns:
        str: The rendered report.
    """
    return render_to_string(diagnostic, cache, make_config(**overrides))


def lines_of(text: str) -> list[str]:
    """Return the rows of a rendered report, without the final newline."""
    return text.rstrip("\n").split("\n")
