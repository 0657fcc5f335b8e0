# topmark:header:start
#
#   project      : SpanMark
#   file         : test_config_io.py
#   file_relpath : tests/config/test_config_io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for TOML helpers and checked getters in `spanmark.config.io`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from tomlkit.exceptions import ParseError

from spanmark.config.io import (
    ConfigLoadError,
    get_bool_value_or_none_checked,
    get_color_value_or_none_checked,
    get_enum_value_checked,
    get_int_value_or_none_checked,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
    parse_toml_text,
)
from spanmark.config.keys import Toml
from spanmark.config.model import LabelAttach

if TYPE_CHECKING:
    from pathlib import Path


def test_defaults_dict_sections() -> None:
    """The defaults cover every section and return a fresh dict each time."""
    defaults = load_defaults_dict()

    assert set(defaults) == {Toml.SECTION_RENDER, Toml.SECTION_CONTEXT, Toml.SECTION_STYLES}
    assert defaults[Toml.SECTION_RENDER][Toml.KEY_CHAR_SET] == "unicode"
    defaults[Toml.SECTION_RENDER][Toml.KEY_TAB_WIDTH] = 99
    assert load_defaults_dict()[Toml.SECTION_RENDER][Toml.KEY_TAB_WIDTH] == 4


def test_parse_toml_text_returns_plain_values() -> None:
    """Parsed documents are plain dicts and lists."""
    data = parse_toml_text("[a]\nb = [1, 2]\n")

    assert data == {"a": {"b": [1, 2]}}
    assert type(data["a"]) is dict

    with pytest.raises(ParseError):
        parse_toml_text("[a")


def test_load_toml_dict_errors(tmp_path: Path) -> None:
    """Missing and malformed files raise `ConfigLoadError`."""
    with pytest.raises(ConfigLoadError, match="cannot load config"):
        load_toml_dict(tmp_path / "missing.toml")

    bad = tmp_path / "bad.toml"
    bad.write_text("= 1\n", encoding="utf-8")
    with pytest.raises(ConfigLoadError):
        load_toml_dict(bad)


def test_get_table_value() -> None:
    """Only tables are returned; anything else is an empty dict."""
    assert get_table_value({"t": {"k": 1}}, "t") == {"k": 1}
    assert get_table_value({"t": 3}, "t") == {}
    assert get_table_value({}, "t") == {}


def test_checked_bool_and_int() -> None:
    """Booleans are not ints, and ints respect the minimum."""
    warnings: list[str] = []
    table = {"flag": True, "text": "x", "n": 3, "neg": -2, "b": False}

    assert get_bool_value_or_none_checked(table, "flag", where="[t]", warnings=warnings) is True
    assert get_bool_value_or_none_checked(table, "text", where="[t]", warnings=warnings) is None
    assert get_int_value_or_none_checked(table, "n", where="[t]", warnings=warnings) == 3
    assert get_int_value_or_none_checked(table, "neg", where="[t]", warnings=warnings) is None
    assert (
        get_int_value_or_none_checked(table, "neg", where="[t]", warnings=warnings, minimum=-5)
        == -2
    )
    assert get_int_value_or_none_checked(table, "b", where="[t]", warnings=warnings) is None
    assert get_int_value_or_none_checked(table, "absent", where="[t]", warnings=warnings) is None

    assert warnings == [
        "Expected bool in [t].text, got str: 'x'",
        "Expected int >= 0 in [t].neg, got -2",
        "Expected int in [t].b, got bool: False",
    ]


def test_checked_enum() -> None:
    """Enum values parse through keys and aliases; unknown values warn."""
    warnings: list[str] = []
    table = {"a": "Centre", "b": "sideways", "c": 1}

    assert (
        get_enum_value_checked(table, "a", LabelAttach, where="[r]", warnings=warnings)
        is LabelAttach.MIDDLE
    )
    assert get_enum_value_checked(table, "b", LabelAttach, where="[r]", warnings=warnings) is None
    assert get_enum_value_checked(table, "c", LabelAttach, where="[r]", warnings=warnings) is None
    assert len(warnings) == 2
    assert "allowed: start, middle, end" in warnings[0]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("red", "red"),
        ("bright_blue", "bright_blue"),
        (128, 128),
        ([10, 20, 30], (10, 20, 30)),
        ("mauve", None),
        (256, None),
        ([1, 2], None),
        (True, None),
    ],
)
def test_checked_color(raw: object, expected: object) -> None:
    """Colors are names, 256-color indices or RGB triples."""
    warnings: list[str] = []

    value = get_color_value_or_none_checked({"c": raw}, "c", where="[s]", warnings=warnings)

    assert value == expected
    assert len(warnings) == (0 if expected is not None else 1)
