# topmark:header:start
#
#   project      : SpanMark
#   file         : test_enum_mixins.py
#   file_relpath : tests/core/test_enum_mixins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for `spanmark.core.enum_mixins.KeyedStrEnum`."""

from __future__ import annotations

import pytest

from spanmark.config.model import DisplayStyle, LabelAttach
from spanmark.core.enum_mixins import KeyedStrEnum
from spanmark.rendering.glyphs import CharSet


class Fruit(KeyedStrEnum):
    """Enum used only by these tests."""

    APPLE = ("apple", "A crisp apple", ("pomme",))
    BLOOD_ORANGE = ("blood-orange", "A red orange", ())


def test_members_are_strings_with_metadata() -> None:
    """Members compare equal to their key and carry a label."""
    assert Fruit.APPLE == "apple"
    assert str(Fruit.APPLE) == "apple"
    assert Fruit.APPLE.key == "apple"
    assert Fruit.APPLE.label == "A crisp apple"
    assert Fruit.APPLE.aliases == ("pomme",)
    assert Fruit.keys() == ["apple", "blood-orange"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("apple", Fruit.APPLE),
        ("  APPLE ", Fruit.APPLE),
        ("Pomme", Fruit.APPLE),
        ("blood orange", Fruit.BLOOD_ORANGE),
        ("blood_orange", Fruit.BLOOD_ORANGE),
        ("Blood-Orange", Fruit.BLOOD_ORANGE),
        ("pear", None),
        (None, None),
    ],
)
def test_parse(raw: str | None, expected: Fruit | None) -> None:
    """Keys, names and aliases parse case-insensitively."""
    assert Fruit.parse(raw) is expected


def test_project_enums_accept_their_aliases() -> None:
    """The configuration enums register the documented aliases."""
    assert CharSet.parse("utf8") is CharSet.UNICODE
    assert LabelAttach.parse("right") is LabelAttach.END
    assert LabelAttach.parse("center") is LabelAttach.MIDDLE
    assert DisplayStyle.parse("full") is DisplayStyle.RICH
