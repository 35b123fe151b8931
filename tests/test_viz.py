from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from province_race.config import AppConfig
from province_race.engine.clock import VirtualClock
from province_race.io.annotations import Annotation
from province_race.metrics import Metric
from province_race.pipeline.session import build_session
from province_race.preprocess.records import Record
from province_race.viz.animate import collect_playback_views, export_race_animation
from province_race.viz.overview import plot_overview
from province_race.viz.race import plot_race_frame


def _controller():
    values = {"Jakarta": (10, 30, 5), "Bali": (20, 5, 40), "Papua": (0, 2, 3)}
    records = [
        Record.from_values(dt.date(2021, 1, day + 1), category, {Metric.new_cases: series[day]})
        for day in range(3)
        for category, series in values.items()
    ]
    return build_session(records, AppConfig(ranking={"top_n": 2}), clock=VirtualClock())


def test_plot_race_frame_writes_png(tmp_path: Path) -> None:
    controller = _controller()
    controller.scrub(1)
    output = tmp_path / "figures" / "frame.png"

    path = plot_race_frame(controller.view(), AppConfig().chart, output, dpi=40)

    assert path == output
    assert output.exists()
    assert output.stat().st_size > 0


def test_plot_overview_with_annotations_and_brush(tmp_path: Path) -> None:
    controller = _controller()
    controller.brush_dates(dt.date(2021, 1, 2), dt.date(2021, 1, 3))
    output = tmp_path / "overview.png"

    plot_overview(
        series=controller.brush.series,
        annotations=[Annotation(date=dt.date(2021, 1, 2), label="Peak")],
        chart=AppConfig().chart,
        output_path=output,
        active=controller.active_range,
        dpi=40,
    )

    assert output.exists()


def test_collect_playback_views_plays_to_the_end_and_settles() -> None:
    controller = _controller()
    controller.scrub(0)

    views = collect_playback_views(controller, fps=20)

    assert views[0].slider_value == 0
    assert views[0].button_label == "Play"
    assert any(view.button_label == "Pause" for view in views)
    final = views[-1]
    assert final.slider_value == 2
    assert final.button_label == "Play"
    assert final.date_label == "Jan 03, 2021"
    assert {element.category: element.value_text for element in final.elements} == {
        "Bali": "40",
        "Jakarta": "5",
    }


def test_export_race_animation_writes_gif(tmp_path: Path) -> None:
    controller = _controller()
    controller.scrub(0)
    views = collect_playback_views(controller, fps=10)
    output = tmp_path / "race.gif"

    path = export_race_animation(views, AppConfig().chart, output, fps=10, dpi=20)

    assert path == output
    assert output.exists()
    assert output.stat().st_size > 0


def test_export_race_animation_rejects_empty_views(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        export_race_animation([], AppConfig().chart, tmp_path / "race.gif")
