from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from province_race.config import PlaybackConfig
from province_race.engine.brush import BrushFilter
from province_race.engine.clock import VirtualClock
from province_race.engine.diff import DiffRenderer, ElementView, RenderPatch
from province_race.engine.hover import Tooltip, TooltipView
from province_race.engine.playback import PlaybackController
from province_race.engine.scales import FrameScales, ScaleManager
from province_race.engine.state import PlaybackState, UpdateOrigin, ViewState
from province_race.features.date_index import ActiveRange
from province_race.features.frames import FrameStore
from province_race.features.ranking import RankedFrame, RankingEngine
from province_race.metrics import Metric

LOGGER = logging.getLogger(__name__)

DATE_LABEL_FORMAT = "%b %d, %Y"


def format_date_label(value: dt.date) -> str:
    return value.strftime(DATE_LABEL_FORMAT)


@dataclass(frozen=True)
class FrameUpdate:
    index: int
    date: dt.date
    ranked: RankedFrame
    scales: FrameScales
    patch: RenderPatch
    origin: UpdateOrigin

    @property
    def date_label(self) -> str:
        return format_date_label(self.date)


@dataclass(frozen=True)
class RaceView:
    """Everything the drawing surface and widgets need to display the current moment."""

    metric: Metric
    date_label: str
    slider_value: int
    slider_max: int
    button_label: str
    axis_max: float
    elements: tuple[ElementView, ...]
    tooltip: TooltipView


class RaceController:
    """Single owner of the ViewState; every user or timer event goes through one of its handlers."""

    def __init__(
        self,
        store: FrameStore,
        ranking: RankingEngine,
        scales: ScaleManager,
        renderer: DiffRenderer,
        brush: BrushFilter,
        clock: VirtualClock,
        playback: PlaybackConfig,
        metric: Metric | None = None,
    ) -> None:
        self.store = store
        self.ranking = ranking
        self.scales = scales
        self.renderer = renderer
        self.brush = brush
        self.clock = clock
        self.transition_ms = float(playback.transition_ms)
        self.tooltip = Tooltip()
        self._state = ViewState(metric=metric or playback.default_metric)
        if self.brush.metric is not self._state.metric:
            self.brush.set_metric(self._state.metric)
        self.playback = PlaybackController(
            clock=clock,
            interval_ms=playback.interval_ms,
            position=self._playback_position,
            advance=self._advance_from_playback,
            on_state_change=self._on_playback_state,
        )
        self.last_update: FrameUpdate | None = None

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def active_range(self) -> ActiveRange:
        return self.brush.active

    @property
    def has_data(self) -> bool:
        return not self.store.is_empty and len(self.active_range) > 0

    @property
    def slider_max(self) -> int:
        return max(self.active_range.last_index, 0)

    def ranked_at(self, index: int, metric: Metric | None = None) -> RankedFrame | None:
        current = self.active_range.date_at(index)
        if current is None:
            return None
        selected = metric or self._state.metric
        return self.ranking.rank(self.store.get(current), selected, date=current)

    def show(self, index: int, origin: UpdateOrigin, duration_ms: float) -> FrameUpdate | None:
        """Rank, rescale and reconcile the bars for ``index`` of the active range.

        ``duration_ms`` is supplied by the caller: handlers for direct user input
        pass 0, playback passes the configured transition length. Returns None
        (and renders nothing) when there is no data or the index is out of range.
        """
        if not self.has_data:
            return None
        ranked = self.ranked_at(index)
        if ranked is None or ranked.date is None:
            LOGGER.debug("No frame for active index %s; skipping render", index)
            return None
        frame_scales = self.scales.compute(ranked)
        patch = self.renderer.render(ranked, frame_scales, duration_ms)
        self._state = self._state.with_index(index)
        self.last_update = FrameUpdate(
            index=index,
            date=ranked.date,
            ranked=ranked,
            scales=frame_scales,
            patch=patch,
            origin=origin,
        )
        return self.last_update

    def scrub(self, index: int) -> FrameUpdate | None:
        return self.show(int(index), UpdateOrigin.scrub, duration_ms=0.0)

    def select_metric(self, metric: Metric | str) -> FrameUpdate | None:
        selected = Metric.parse(metric)
        self._state = self._state.with_metric(selected)
        self.brush.set_metric(selected)
        return self.show(self._state.active_index, UpdateOrigin.metric, duration_ms=0.0)

    def brush_pixels(self, x0: float, x1: float) -> FrameUpdate | None:
        self.brush.select_pixels(x0, x1)
        return self._after_brush()

    def brush_dates(self, start: dt.date, end: dt.date) -> FrameUpdate | None:
        self.brush.select_dates(start, end)
        return self._after_brush()

    def clear_brush(self) -> FrameUpdate | None:
        self.brush.clear()
        return self._after_brush()

    def _after_brush(self) -> FrameUpdate | None:
        self._state = self._state.with_index(0)
        LOGGER.info(
            "Active range now %d dates (%s)",
            len(self.active_range),
            "full" if self.active_range.is_full else "brushed",
        )
        return self.show(0, UpdateOrigin.brush, duration_ms=0.0)

    def play(self) -> None:
        self.playback.play()

    def pause(self) -> None:
        self.playback.pause()

    def toggle_play(self) -> PlaybackState:
        return self.playback.toggle()

    def hover(self, category: str) -> TooltipView:
        element = self.renderer.element(category)
        if element is None:
            return self.tooltip.hide()
        return self.tooltip.show(element.record, self._state.metric)

    def move_pointer(self, page_x: float, page_y: float) -> TooltipView:
        return self.tooltip.move(page_x, page_y)

    def leave(self) -> TooltipView:
        return self.tooltip.hide()

    def view(self) -> RaceView:
        current = self.active_range.date_at(self._state.active_index)
        return RaceView(
            metric=self._state.metric,
            date_label=format_date_label(current) if current is not None else "",
            slider_value=self._state.active_index,
            slider_max=self.slider_max,
            button_label=self.playback.button_label,
            axis_max=self.renderer.axis_max,
            elements=tuple(self.renderer.snapshot()),
            tooltip=self.tooltip.view,
        )

    def _playback_position(self) -> tuple[int, int]:
        return self._state.active_index, self.active_range.last_index

    def _advance_from_playback(self, index: int) -> None:
        self.show(index, UpdateOrigin.playback, duration_ms=self.transition_ms)

    def _on_playback_state(self, playback: PlaybackState) -> None:
        self._state = self._state.with_playback(playback)
