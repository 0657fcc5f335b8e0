# topmark:header:start
#
#   project      : SpanMark
#   file         : test_logging_setup.py
#   file_relpath : tests/config/test_logging_setup.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for `spanmark.config.logging`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click
import pytest

from spanmark.config.logging import (
    LOG_LEVEL_ENV_VAR,
    TRACE_LEVEL,
    ClickStyleFormatter,
    SpanmarkLogger,
    get_logger,
    resolve_env_log_level,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Reinstate the test-suite logging setup afterwards."""
    yield
    setup_logging(level=TRACE_LEVEL)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("trace", TRACE_LEVEL),
        (" Debug ", logging.DEBUG),
        ("warn", logging.WARNING),
        ("FATAL", logging.CRITICAL),
        ("15", 15),
        ("loud", None),
    ],
)
def test_resolve_env_log_level(
    raw: str, expected: int | None, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Level names and numbers are accepted; unknown names are ignored."""
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, raw)

    assert resolve_env_log_level() == expected


def test_resolve_env_log_level_unset() -> None:
    """Without the variable there is no level."""
    assert resolve_env_log_level() is None


@pytest.mark.usefixtures("restore_logging")
def test_setup_logging_defaults_to_critical() -> None:
    """Without a level or environment, only critical records pass."""
    setup_logging()

    root = logging.getLogger()
    assert root.level == logging.CRITICAL
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, ClickStyleFormatter)


@pytest.mark.usefixtures("restore_logging")
def test_setup_logging_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """The environment variable sets the level when none is passed."""
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "INFO")

    setup_logging()

    assert logging.getLogger().level == logging.INFO


def test_trace_records(caplog: pytest.LogCaptureFixture) -> None:
    """SpanMark loggers offer a TRACE level below DEBUG."""
    logger: SpanmarkLogger = get_logger("spanmark.tests.trace")
    caplog.set_level(TRACE_LEVEL, logger="spanmark.tests.trace")

    logger.trace("indexed %d lines", 3)

    assert isinstance(logger, SpanmarkLogger)
    [record] = caplog.records
    assert record.levelname == "TRACE"
    assert record.getMessage() == "indexed 3 lines"


def test_formatter_colors_by_level() -> None:
    """Records are styled by severity and unstyle to the plain format."""
    formatter = ClickStyleFormatter("[%(levelname)s] %(message)s")
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)

    formatted: str = formatter.format(record)

    assert formatted == click.style("[WARNING] careful", fg="yellow")
    assert click.unstyle(formatted) == "[WARNING] careful"
