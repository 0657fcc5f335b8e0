# topmark:header:start
#
#   project      : SpanMark
#   file         : test_color_mode.py
#   file_relpath : tests/rendering/test_color_mode.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for `spanmark.rendering.color.resolve_color_mode`."""

from __future__ import annotations

import pytest

from spanmark.rendering.color import ColorMode, resolve_color_mode


def test_override_wins_over_everything(monkeypatch: pytest.MonkeyPatch) -> None:
    """``--color`` decides before formats and the environment."""
    monkeypatch.setenv("FORCE_COLOR", "1")

    assert resolve_color_mode(color_mode_override=ColorMode.NEVER, output_format="html") is False
    assert resolve_color_mode(color_mode_override=ColorMode.ALWAYS, stdout_isatty=False) is True


@pytest.mark.parametrize("fmt", ["html", "SVG"])
def test_markup_formats_are_colored(fmt: str, monkeypatch: pytest.MonkeyPatch) -> None:
    """HTML and SVG output always carry styles."""
    monkeypatch.setenv("NO_COLOR", "1")

    assert resolve_color_mode(color_mode_override=None, output_format=fmt) is True


def test_environment_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    """FORCE_COLOR enables color, NO_COLOR disables it, FORCE_COLOR=0 is ignored."""
    monkeypatch.setenv("FORCE_COLOR", "1")
    assert resolve_color_mode(color_mode_override=None, stdout_isatty=False) is True

    monkeypatch.setenv("FORCE_COLOR", "0")
    monkeypatch.setenv("NO_COLOR", "")
    assert resolve_color_mode(color_mode_override=None, stdout_isatty=True) is False


@pytest.mark.parametrize("isatty", [True, False])
def test_auto_follows_the_terminal(isatty: bool) -> None:
    """Without other signals, color follows the TTY check."""
    assert (
        resolve_color_mode(
            color_mode_override=ColorMode.AUTO, output_format="text", stdout_isatty=isatty
        )
        is isatty
    )
