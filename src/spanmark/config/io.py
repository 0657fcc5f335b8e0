# topmark:header:start
#
#   project      : SpanMark
#   file         : io.py
#   file_relpath : src/spanmark/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML loading and typed value getters for SpanMark configuration.

Parsing is done with `tomlkit` and returned as plain `dict` structures.

The *checked* getters validate the expected shape of a value, log a warning
and append a human-readable message to a ``warnings`` list when the shape is
wrong, and then fall back to ``None`` so the default applies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, TypeVar, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from spanmark.config.keys import Toml
from spanmark.config.logging import get_logger
from spanmark.core.enum_mixins import KeyedStrEnum
from spanmark.rendering.styles import is_valid_color

if TYPE_CHECKING:
    from pathlib import Path

    from spanmark.config.logging import SpanmarkLogger
    from spanmark.rendering.styles import Color

logger: SpanmarkLogger = get_logger(__name__)

TomlTable = dict[str, Any]

KS = TypeVar("KS", bound=KeyedStrEnum)


class ConfigLoadError(ValueError):
    """A configuration file exists but cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path: Path = path
        self.reason: str = reason
        super().__init__(f"cannot load config {path}: {reason}")


def load_defaults_dict() -> TomlTable:
    """Return SpanMark's **runtime defaults** as a Python dict.

    This function performs no I/O. Sections and keys align with
    `spanmark.config.keys.Toml`.

    Returns:
        A new TOML-table-compatible dict containing the runtime defaults.
    """
    return {
        Toml.SECTION_RENDER: {
            Toml.KEY_CHAR_SET: "unicode",
            Toml.KEY_TAB_WIDTH: 4,
            Toml.KEY_COLOR: True,
            Toml.KEY_LABEL_ATTACH: "middle",
            Toml.KEY_CROSS_GAP: True,
            Toml.KEY_COMPACT: False,
            Toml.KEY_MULTILINE_ARROWS: True,
            Toml.KEY_DISPLAY_STYLE: "rich",
            Toml.KEY_PALETTE: True,
        },
        Toml.SECTION_CONTEXT: {
            Toml.KEY_LINES_BEFORE: 1,
            Toml.KEY_LINES_AFTER: 1,
            Toml.KEY_GAP_THRESHOLD: 1,
        },
        Toml.SECTION_STYLES: {},
    }


def parse_toml_text(text: str) -> TomlTable:
    """Parse TOML text into a plain dict.

    Raises:
        tomlkit.exceptions.ParseError: If the text is not valid TOML.
    """
    doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (``spanmark.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Raises:
        ConfigLoadError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        raise ConfigLoadError(path, str(e)) from e
    try:
        return parse_toml_text(text)
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        raise ConfigLoadError(path, str(e)) from e


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Return the sub-table ``key``, or an empty dict when absent or not a table."""
    value: Any | None = table.get(key)
    if isinstance(value, dict):
        return cast("TomlTable", value)
    if value is not None:
        logger.debug("Expected table at %s, got %s", key, type(value).__name__)
    return {}


def _warn(warnings: list[str], message: str) -> None:
    logger.warning("%s", message)
    warnings.append(message)


def get_bool_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    warnings: list[str],
) -> bool | None:
    """Return an optional bool value, warning when present but not `bool`."""
    value: Any | None = table.get(key)
    if value is None or isinstance(value, bool):
        return value
    _warn(warnings, f"Expected bool in {where}.{key}, got {type(value).__name__}: {value!r}")
    return None


def get_int_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    warnings: list[str],
    minimum: int = 0,
) -> int | None:
    """Return an optional int value, warning when present but not an `int` >= ``minimum``.

    Notes:
        `bool` is rejected (since `bool` is a subclass of `int`).
    """
    value: Any | None = table.get(key)
    if value is None:
        return None

    loc: Final[str] = f"{where}.{key}"
    if isinstance(value, bool) or not isinstance(value, int):
        _warn(warnings, f"Expected int in {loc}, got {type(value).__name__}: {value!r}")
        return None
    if value < minimum:
        _warn(warnings, f"Expected int >= {minimum} in {loc}, got {value}")
        return None
    return value


def get_enum_value_checked(
    table: TomlTable,
    key: str,
    enum_cls: type[KS],
    *,
    where: str,
    warnings: list[str],
) -> KS | None:
    """Parse a `KeyedStrEnum` value from TOML.

    - Missing key -> None
    - Wrong type -> warning + None
    - Unknown value -> warning + None
    """
    raw: Any | None = table.get(key)
    if raw is None:
        return None

    loc: Final[str] = f"{where}.{key}"
    if not isinstance(raw, str):
        _warn(
            warnings,
            f"Expected string enum value in {loc}, got {type(raw).__name__}: {raw!r}",
        )
        return None

    member: KS | None = enum_cls.parse(raw)
    if member is None:
        allowed: str = ", ".join(enum_cls.keys())
        _warn(warnings, f"Invalid value for {loc}: {raw!r} (allowed: {allowed})")
    return member


def get_color_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    warnings: list[str],
) -> Color | None:
    """Return an optional color: a name, a 256-color index or an ``[r, g, b]`` array."""
    raw: Any | None = table.get(key)
    if raw is None:
        return None
    value: Any = tuple(cast("list[Any]", raw)) if isinstance(raw, list) else raw
    if not is_valid_color(value):
        _warn(warnings, f"Invalid color in {where}.{key}: {raw!r}")
        return None
    return cast("Color", value)
