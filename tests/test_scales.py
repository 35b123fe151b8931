from __future__ import annotations

import datetime as dt

import pytest

from province_race.config import ChartConfig
from province_race.engine.scales import (
    BandScale,
    ColorAssignment,
    LinearScale,
    ScaleManager,
    TimeScale,
    format_si,
    palette_colors,
)
from province_race.features.ranking import RankingEngine
from province_race.metrics import Metric
from province_race.preprocess.records import Record


def test_linear_scale_maps_and_inverts() -> None:
    scale = LinearScale(domain=(0.0, 200.0), range=(0.0, 780.0))

    assert scale(0) == 0.0
    assert scale(100) == pytest.approx(390.0)
    assert scale.invert(780.0) == pytest.approx(200.0)


def test_linear_scale_ticks_stay_inside_domain() -> None:
    ticks = LinearScale(domain=(0.0, 20000.0), range=(0.0, 780.0)).ticks(5)

    assert ticks[0] == 0.0
    assert all(0.0 <= tick <= 20000.0 for tick in ticks)
    assert ticks == sorted(ticks)
    assert 2 <= len(ticks) <= 7


def test_format_si_uses_short_prefixes() -> None:
    assert format_si(20000) == "20k"
    assert format_si(1_500_000) == "1.5M"


def test_band_scale_matches_padded_layout() -> None:
    scale = BandScale(domain=("A", "B"), range=(0.0, 100.0), padding=0.1)

    assert scale.step == pytest.approx(100 / 2.1)
    assert scale.bandwidth == pytest.approx(100 / 2.1 * 0.9)
    assert scale("A") == pytest.approx(100 / 2.1 * 0.1)
    assert scale("B") == pytest.approx(100 / 2.1 * 1.1)
    assert scale.center("A") == pytest.approx(scale("A") + scale.bandwidth / 2)
    assert scale("missing") is None
    assert scale.center("missing") is None


def test_band_scale_bands_do_not_overlap() -> None:
    keys = tuple(f"P{i}" for i in range(20))
    scale = BandScale(domain=keys, range=(0.0, 510.0), padding=0.1)

    tops = [scale(key) for key in keys]
    assert tops == sorted(tops)
    for upper, lower in zip(tops, tops[1:]):
        assert upper + scale.bandwidth < lower
    assert tops[-1] + scale.bandwidth <= 510.0


def test_time_scale_maps_and_inverts_dates() -> None:
    scale = TimeScale(domain=(dt.date(2021, 1, 1), dt.date(2021, 1, 5)), range=(0.0, 900.0))

    assert scale(dt.date(2021, 1, 3)) == pytest.approx(450.0)
    assert scale.invert(225.0) == dt.datetime(2021, 1, 2)
    assert scale.invert(0.0) == dt.datetime(2021, 1, 1)


def test_color_assignment_is_first_seen_and_stable() -> None:
    palette = palette_colors("tab10")
    colors = ColorAssignment(["Jakarta", "Bali", "Papua"], palette)

    assert palette[0] == "#1f77b4"
    assert colors.color_for("Jakarta") == palette[0]
    assert colors.color_for("Bali") == palette[1]
    assert colors.color_for("Jakarta") == palette[0]
    assert colors.color_for("Aceh") == palette[3]
    assert len(colors) == 4


def test_color_assignment_wraps_the_palette() -> None:
    colors = ColorAssignment([f"P{i}" for i in range(12)], ["#000000", "#ffffff"])

    assert colors.color_for("P0") == colors.color_for("P2") == "#000000"
    assert colors.color_for("P11") == "#ffffff"


def test_scale_manager_fits_frame_and_falls_back_on_empty() -> None:
    chart = ChartConfig()
    manager = ScaleManager(chart, ColorAssignment(["A", "B"]))
    day = dt.date(2021, 1, 1)
    records = [
        Record.from_values(day, "A", {Metric.new_cases: 40}),
        Record.from_values(day, "B", {Metric.new_cases: 10}),
    ]
    engine = RankingEngine(top_n=5)

    scales = manager.compute(engine.rank(records, Metric.new_cases, day))
    assert scales.value.domain == (0.0, 40.0)
    assert scales.bar_width(40) == pytest.approx(chart.inner_width)
    assert scales.category.domain == ("A", "B")
    assert scales.bar_top("A") < scales.bar_top("B")

    empty = manager.compute(engine.rank([], Metric.new_cases, day))
    assert empty.value.domain == (0.0, 1.0)
    assert empty.category.domain == ()
