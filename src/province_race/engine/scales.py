from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Sequence

import matplotlib
import numpy as np
from matplotlib.colors import to_hex
from matplotlib.ticker import EngFormatter, MaxNLocator

from province_race.config import ChartConfig
from province_race.features.date_index import as_instant
from province_race.features.overview import safe_value_domain
from province_race.features.ranking import RankedFrame


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return r0
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, position: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return d0
        return d0 + (float(position) - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 5) -> list[float]:
        d0, d1 = self.domain
        locator = MaxNLocator(nbins=count, steps=[1, 2, 2.5, 5, 10])
        values = locator.tick_values(d0, d1)
        return [float(value) for value in values if d0 <= value <= d1]


def format_si(value: float) -> str:
    """Short SI label for axis ticks, e.g. 20000 -> '20k'."""
    return EngFormatter(sep="")(value)


@dataclass(frozen=True)
class BandScale:
    """Ordinal keys onto evenly spaced bands, padding applied inside and outside."""

    domain: tuple[str, ...]
    range: tuple[float, float]
    padding: float = 0.1
    align: float = 0.5

    @property
    def step(self) -> float:
        r0, r1 = self.range
        n = len(self.domain)
        return (r1 - r0) / max(1.0, n - self.padding + self.padding * 2)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def _start(self) -> float:
        r0, r1 = self.range
        n = len(self.domain)
        return r0 + (r1 - r0 - self.step * (n - self.padding)) * self.align

    def __call__(self, key: str) -> float | None:
        try:
            position = self.domain.index(key)
        except ValueError:
            return None
        return self._start() + self.step * position

    def center(self, key: str) -> float | None:
        start = self(key)
        if start is None:
            return None
        return start + self.bandwidth / 2


@dataclass(frozen=True)
class TimeScale:
    domain: tuple[dt.date, dt.date]
    range: tuple[float, float]

    def __call__(self, value: dt.date) -> float:
        start, end = (as_instant(bound) for bound in self.domain)
        r0, r1 = self.range
        span = (end - start).total_seconds()
        if span == 0:
            return r0
        return r0 + (as_instant(value) - start).total_seconds() / span * (r1 - r0)

    def invert(self, position: float) -> dt.datetime:
        start, end = (as_instant(bound) for bound in self.domain)
        r0, r1 = self.range
        if r1 == r0:
            return start
        fraction = (float(position) - r0) / (r1 - r0)
        return start + (end - start) * fraction


def palette_colors(name: str = "tab10") -> list[str]:
    colormap = matplotlib.colormaps[name]
    colors = getattr(colormap, "colors", None)
    if colors is None:
        colors = colormap(np.linspace(0.0, 1.0, 10))
    return [to_hex(color) for color in colors]


class ColorAssignment:
    """Category -> color, fixed in first-seen order for the lifetime of a session."""

    def __init__(self, categories: Iterable[str], palette: Sequence[str] | None = None) -> None:
        self._palette = list(palette) if palette else palette_colors()
        self._colors: dict[str, str] = {}
        for category in categories:
            self.color_for(category)

    def color_for(self, category: str) -> str:
        color = self._colors.get(category)
        if color is None:
            color = self._palette[len(self._colors) % len(self._palette)]
            self._colors[category] = color
        return color

    def as_dict(self) -> dict[str, str]:
        return dict(self._colors)

    def __len__(self) -> int:
        return len(self._colors)


@dataclass(frozen=True)
class FrameScales:
    value: LinearScale
    category: BandScale
    colors: ColorAssignment

    def bar_top(self, category: str) -> float | None:
        return self.category(category)

    def bar_width(self, value: float) -> float:
        return self.value(value)

    def label_center(self, category: str) -> float | None:
        return self.category.center(category)


class ScaleManager:
    def __init__(self, chart: ChartConfig, colors: ColorAssignment) -> None:
        self.chart = chart
        self.colors = colors

    def compute(self, ranked: RankedFrame) -> FrameScales:
        return FrameScales(
            value=LinearScale(
                domain=safe_value_domain(ranked.max_value),
                range=(0.0, self.chart.inner_width),
            ),
            category=BandScale(
                domain=tuple(ranked.categories),
                range=(0.0, self.chart.inner_height),
                padding=self.chart.band_padding,
            ),
            colors=self.colors,
        )
