# topmark:header:start
#
#   project      : SpanMark
#   file         : test_validation.py
#   file_relpath : tests/diagnostic/test_validation.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for `spanmark.diagnostic.validation.Validation`."""

from __future__ import annotations

import pytest

from spanmark.config.model import DisplayStyle
from spanmark.diagnostic import Diagnostic, Validation, ValidationFailedError
from spanmark.rendering.renderer import Renderer
from spanmark.rendering.sinks import PlainSink
from spanmark.source.cache import SourceCache
from tests.conftest import make_config

WARN: Diagnostic = Diagnostic.warning().with_message("unused value")
FATAL: Diagnostic = Diagnostic.error().with_message("cannot continue")


@pytest.mark.parametrize(
    ("validation", "success", "clean"),
    [
        (Validation.success(1), True, True),
        (Validation.success(1, [WARN]), True, False),
        (Validation[int].failure(FATAL), False, False),
        (Validation[int].failure(FATAL, [WARN]), False, False),
    ],
)
def test_queries(validation: Validation[int], success: bool, clean: bool) -> None:
    """A success may still carry diagnostics; only a clean success has no problem."""
    assert validation.is_success() is success
    assert validation.is_failure() is not success
    assert validation.no_problem() is clean


def test_unwrap() -> None:
    """Successes unwrap to their value; failures raise with the fatal diagnostic."""
    assert Validation.success("v").unwrap() == "v"
    assert Validation[str].failure(FATAL).unwrap_or("fallback") == "fallback"

    with pytest.raises(ValidationFailedError, match="cannot continue") as excinfo:
        Validation[str].failure(FATAL).unwrap()
    assert excinfo.value.fatal is FATAL


def test_all_diagnostics_puts_fatal_last() -> None:
    """Collected diagnostics come first, the fatal one last."""
    assert Validation.success(0, [WARN]).all_diagnostics() == [WARN]
    failed = Validation[int].failure(FATAL, [WARN]).all_diagnostics()
    assert failed[0] is WARN
    assert failed[1] is FATAL


def test_map_keeps_diagnostics_and_skips_failures() -> None:
    """`map` transforms a value only; diagnostics travel along."""
    mapped = Validation.success(2, [WARN]).map(lambda n: n * 10)
    assert mapped.unwrap() == 20
    assert mapped.diagnostics == [WARN]

    failed = Validation[int].failure(FATAL).map(lambda n: n * 10)
    assert failed.is_failure()
    assert failed.fatal is FATAL


def test_from_callable_turns_value_errors_into_failures() -> None:
    """A `ValueError` from the callable becomes an error diagnostic."""
    ok = Validation.from_callable(int, "12")
    bad = Validation.from_callable(int, "twelve")

    assert ok.unwrap() == 12
    assert bad.is_failure()
    assert bad.fatal is not None
    assert "twelve" in bad.fatal.message


def test_take_diagnostics_moves_them_out() -> None:
    """Collected diagnostics move into the caller's list."""
    validation = Validation.success(1, [WARN])
    out: list[Diagnostic] = []

    validation.take_diagnostics(out)

    assert out == [WARN]
    assert validation.no_problem()


def test_validate_accumulates_across_steps() -> None:
    """Each step hands its diagnostics to the running list; a failure carries them all."""
    errors: list[Diagnostic] = []
    other: Diagnostic = Diagnostic.info().with_message("fyi")

    first = Validation.success(1, [WARN]).validate(errors)
    second = Validation[int].failure(FATAL, [other]).validate(errors)

    assert first.no_problem()
    assert errors == [WARN, other]
    assert second.is_failure()
    assert second.diagnostics == [WARN, other]
    assert second.diagnostics is not errors


def test_recover_demotes_failure_to_diagnostic() -> None:
    """A recovered failure continues with the default and records the fatal diagnostic."""
    errors: list[Diagnostic] = []

    recovered = Validation[int].failure(FATAL, [WARN]).recover(errors, default=0)

    assert recovered.is_success()
    assert recovered.unwrap() == 0
    assert errors == [WARN, FATAL]


def test_all_diagnostics_render_together() -> None:
    """The accumulated diagnostics feed `render_all` directly."""
    validation = Validation[int].failure(FATAL, [WARN])
    sink = PlainSink()

    Renderer(SourceCache(), make_config(display_style=DisplayStyle.SHORT), sink).render_all(
        validation.all_diagnostics()
    )

    assert sink.getvalue() == "warning: unused value\nerror: cannot continue\n"
