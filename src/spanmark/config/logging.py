# topmark:header:start
#
#   project      : SpanMark
#   file         : logging.py
#   file_relpath : src/spanmark/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Custom SpanMark logging with TRACE logging.

This module extends the standard logging module with SpanMark-specific features,
including a custom TRACE level, a specialized logger class, and colored output formatting.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Any, Final, cast

import click

if TYPE_CHECKING:
    from collections.abc import Mapping

# Define TRACE_LEVEL as a module-level constant
TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_LEVEL_ENV_VAR: Final[str] = "SPANMARK_LOG_LEVEL"


class SpanmarkLogger(logging.Logger):
    """Custom logger class for SpanMark with support for a TRACE log level below DEBUG."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'.

        Args:
            msg (object): The message to be logged.
            *args (object): Variable length argument list for the message.
            extra (Mapping[str, object] | None): Optional dictionary of extra information to pass
                to the logger.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(
                TRACE_LEVEL,
                msg=msg,
                args=args,
                extra=extra,
                stacklevel=2,
            )


if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")
    # Expose TRACE_LEVEL as logging.TRACE
    logging.TRACE = TRACE_LEVEL  # type: ignore

logging.setLoggerClass(SpanmarkLogger)


LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"


class ClickStyleFormatter(logging.Formatter):
    """Formatter that colors log records with ``click.style`` based on severity level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the specified record with colors based on log level.

        Args:
            record (logging.LogRecord): The LogRecord to be formatted.

        Returns:
            str: The colorized formatted log message as a string.
        """
        level = record.levelno
        message = super().format(record)

        style: dict[str, Any]
        if level >= logging.CRITICAL:
            style = {"fg": "bright_red"}
        elif level >= logging.ERROR:
            style = {"fg": "red"}
        elif level >= logging.WARNING:
            style = {"fg": "yellow"}
        elif level >= logging.INFO:
            style = {"fg": "green"}
        elif level >= logging.DEBUG:
            style = {"fg": "bright_black"}
        elif level >= TRACE_LEVEL:
            style = {"fg": "blue"}
        else:
            # Fallback color for unknown or lower-than-TRACE levels
            style = {"fg": "red", "dim": True}

        return click.style(message, **style)


def resolve_env_log_level() -> int | None:
    """Return a logging level from environment or None if unset.

    Honors SPANMARK_LOG_LEVEL (e.g., "TRACE", "DEBUG", "INFO", numeric "10").
    """
    val = os.environ.get(LOG_LEVEL_ENV_VAR)
    if val:
        v = val.strip().upper()
        if v.isdigit():
            return int(v)
        name_to_level = {
            "TRACE": TRACE_LEVEL,
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "WARN": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
            "FATAL": logging.CRITICAL,
            "NOTSET": logging.NOTSET,
        }
        return name_to_level.get(v)
    return None


def setup_logging(level: int | None = None) -> None:
    """Configure the root logger with a specified log level and colored output.

    If ``level`` is None, environment variables are consulted via
    [`resolve_env_log_level`][spanmark.config.logging.resolve_env_log_level].
    Default is CRITICAL when unspecified.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove all existing handlers to prevent duplicate log messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Diagnostics go to stdout through the renderer; keep log records on stderr
    handler = logging.StreamHandler(sys.stderr)
    formatter = ClickStyleFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    root_logger.propagate = False


def get_logger(name: str) -> SpanmarkLogger:
    """Retrieve a SpanmarkLogger instance with the specified name.

    Args:
        name (str): The name of the logger.

    Returns:
        SpanmarkLogger: A SpanmarkLogger instance.
    """
    logger = logging.getLogger(name)
    return cast("SpanmarkLogger", logger)
