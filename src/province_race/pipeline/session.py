from __future__ import annotations

from typing import Sequence

from province_race.config import AppConfig
from province_race.engine.animation import AnimationTimeline
from province_race.engine.brush import BrushFilter
from province_race.engine.clock import VirtualClock
from province_race.engine.controller import RaceController
from province_race.engine.diff import DiffRenderer
from province_race.engine.scales import ColorAssignment, ScaleManager, palette_colors
from province_race.engine.tween import LabelTweener
from province_race.features.date_index import DateIndex
from province_race.features.frames import FrameStore
from province_race.features.ranking import RankingEngine
from province_race.metrics import Metric
from province_race.preprocess.records import Record, records_to_frame


def build_session(
    records: Sequence[Record],
    config: AppConfig,
    *,
    clock: VirtualClock | None = None,
    metric: Metric | None = None,
) -> RaceController:
    """Wire the frame store, ranking, scales, renderer, brush and playback around ``records``."""
    clock = clock or VirtualClock()
    store = FrameStore(records)
    date_index = DateIndex(store.dates())
    colors = ColorAssignment(store.categories(), palette_colors(config.chart.palette))
    selected = metric or config.playback.default_metric
    brush = BrushFilter(
        date_index=date_index,
        records_frame=records_to_frame(store.records()),
        metric=selected,
        width=config.chart.overview_inner_width,
        height=config.chart.overview_inner_height,
    )
    renderer = DiffRenderer(
        timeline=AnimationTimeline(clock),
        tweener=LabelTweener(),
        axis_duration_ms=config.playback.axis_transition_ms,
    )
    return RaceController(
        store=store,
        ranking=RankingEngine(top_n=config.ranking.top_n, tie_break=config.ranking.tie_break),
        scales=ScaleManager(config.chart, colors),
        renderer=renderer,
        brush=brush,
        clock=clock,
        playback=config.playback,
        metric=selected,
    )
