from __future__ import annotations

import math
from dataclasses import dataclass

from province_race.engine.animation import interpolate


def format_number(value: float) -> str:
    """Thousands separators, no decimal places: 12345.6 -> '12,346'."""
    value = float(value)
    rounded = int(math.copysign(math.floor(abs(value) + 0.5), value))
    return f"{rounded:,d}"


def parse_displayed_number(text: str | None) -> float:
    """Read back a label produced by ``format_number``; anything unparseable counts as 0."""
    if not text:
        return 0.0
    try:
        value = float(str(text).replace(",", "").strip())
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


@dataclass(frozen=True)
class LabelTween:
    start: float
    target: float

    def value_at(self, t: float) -> float:
        return interpolate(self.start, self.target, t)

    def text_at(self, t: float) -> str:
        return format_number(self.value_at(t))


class LabelTweener:
    """Builds label tweens that start from whatever number is currently on screen."""

    def begin(self, displayed_text: str | None, target: float) -> LabelTween:
        return LabelTween(start=parse_displayed_number(displayed_text), target=float(target))
