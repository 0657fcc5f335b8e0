# topmark:header:start
#
#   project      : SpanMark
#   file         : palette.py
#   file_relpath : src/spanmark/rendering/palette.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Deterministic generator of visually distinct 256-color indices.

Three 16-bit counters advance by fixed odd strides; each step maps them to a
point of the 6x6x6 color cube of the xterm 256-color table. A brightness floor
keeps generated colors readable on dark backgrounds.
"""

from __future__ import annotations

from dataclasses import dataclass, field

_STRIDE: int = 40503
_MASK: int = 0xFFFF
DEFAULT_STATE: tuple[int, int, int] = (30000, 15000, 35000)
DEFAULT_MIN_BRIGHTNESS: float = 0.5


@dataclass
class Palette:
    """Sequence of distinct colors.

    Attributes:
        state (list[int]): The three counters.
        min_brightness (float): Lower bound of every channel, in ``0.0 .. 1.0``.
    """

    state: list[int] = field(default_factory=lambda: list(DEFAULT_STATE))
    min_brightness: float = DEFAULT_MIN_BRIGHTNESS

    def __post_init__(self) -> None:
        if len(self.state) != 3:
            raise ValueError(f"palette state needs 3 counters, got {len(self.state)}")
        self.state = [int(s) & _MASK for s in self.state]
        self.min_brightness = min(max(float(self.min_brightness), 0.0), 1.0)

    @classmethod
    def from_state(
        cls, state: tuple[int, int, int], min_brightness: float = DEFAULT_MIN_BRIGHTNESS
    ) -> Palette:
        """Return a palette seeded with ``state``."""
        return cls(list(state), min_brightness)

    def random(self) -> int:
        """Advance the counters and return the next color index (``16 .. 231``)."""
        for i in range(3):
            self.state[i] = (self.state[i] + _STRIDE * (i * 4 + 1130)) & _MASK

        floor: float = self.min_brightness

        def channel(value: int) -> float:
            return value / 65535.0 * (1.0 - floor) + floor

        return 16 + int(
            channel(self.state[2]) * 5 + channel(self.state[1]) * 30 + channel(self.state[0]) * 180
        )

    def take(self, count: int) -> list[int]:
        """Return the next ``count`` colors."""
        return [self.random() for _ in range(count)]
