from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Callable

from province_race.engine.animation import AnimationTimeline, Transition, interpolate
from province_race.engine.scales import FrameScales
from province_race.engine.tween import LabelTween, LabelTweener, format_number
from province_race.features.ranking import RankedFrame
from province_race.preprocess.records import Record

VALUE_LABEL_OFFSET = 5.0
AXIS_KEY = "__value_axis__"


class ElementPhase(str, Enum):
    entering = "entering"
    updating = "updating"
    exiting = "exiting"


@dataclass
class ElementState:
    """Rendered state of one category: its bar, name label and value label."""

    category: str
    color: str
    record: Record
    value: float
    bar_y: float
    bar_width: float
    bar_height: float
    label_y: float
    label_visible: bool
    value_x: float
    value_y: float
    value_text: str
    phase: ElementPhase
    generation: int = 0


@dataclass(frozen=True)
class ElementView:
    category: str
    color: str
    value: float
    bar_y: float
    bar_width: float
    bar_height: float
    label_y: float
    label_visible: bool
    value_x: float
    value_y: float
    value_text: str
    phase: ElementPhase


_VIEW_FIELDS = tuple(item.name for item in fields(ElementView))


@dataclass(frozen=True)
class RenderPatch:
    entered: tuple[str, ...]
    updated: tuple[str, ...]
    exited: tuple[str, ...]
    duration_ms: float


class DiffRenderer:
    """Keyed reconciliation of rendered bars against successive ranked frames.

    Elements are joined by category, never by position. Every call to
    :meth:`render` bumps the generation of each element it touches; steps of a
    transition started under an older generation are dropped, so the most
    recent request always wins.
    """

    def __init__(
        self,
        timeline: AnimationTimeline,
        tweener: LabelTweener | None = None,
        axis_duration_ms: float = 300.0,
    ) -> None:
        self.timeline = timeline
        self.tweener = tweener or LabelTweener()
        self.axis_duration_ms = float(axis_duration_ms)
        self._elements: dict[str, ElementState] = {}
        self._axis_max = 1.0
        self._axis_generation = 0

    def __contains__(self, category: object) -> bool:
        return category in self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def element(self, category: str) -> ElementState | None:
        return self._elements.get(category)

    @property
    def axis_max(self) -> float:
        return self._axis_max

    def render(self, ranked: RankedFrame, scales: FrameScales, duration_ms: float) -> RenderPatch:
        duration_ms = max(0.0, float(duration_ms))
        incoming = {entry.category: entry for entry in ranked.entries}

        entered: list[str] = []
        updated: list[str] = []
        for entry in ranked.entries:
            if entry.category in self._elements:
                updated.append(entry.category)
                self._update(entry.record, entry.value, scales, duration_ms)
            else:
                entered.append(entry.category)
                self._enter(entry.record, entry.value, scales, duration_ms)

        # An exit already in flight keeps running to removal unless this update is instant.
        exited = [
            category
            for category, element in self._elements.items()
            if category not in incoming
            and (duration_ms <= 0 or element.phase is not ElementPhase.exiting)
        ]
        for category in exited:
            self._exit(category, duration_ms)

        self._animate_axis(scales.value.domain[1], duration_ms)
        return RenderPatch(
            entered=tuple(entered),
            updated=tuple(updated),
            exited=tuple(exited),
            duration_ms=duration_ms,
        )

    def snapshot(self) -> list[ElementView]:
        return [
            ElementView(**{name: getattr(element, name) for name in _VIEW_FIELDS})
            for element in self._elements.values()
        ]

    def _targets(self, value: float, category: str, scales: FrameScales) -> dict[str, float]:
        top = scales.bar_top(category) or 0.0
        center = scales.label_center(category) or 0.0
        return {
            "bar_y": top,
            "bar_width": scales.bar_width(value),
            "bar_height": scales.category.bandwidth,
            "label_y": center,
            "value_x": scales.bar_width(value) + VALUE_LABEL_OFFSET,
            "value_y": center,
        }

    def _enter(
        self, record: Record, value: float, scales: FrameScales, duration_ms: float
    ) -> None:
        targets = self._targets(value, record.category, scales)
        element = ElementState(
            category=record.category,
            color=scales.colors.color_for(record.category),
            record=record,
            value=value,
            bar_y=targets["bar_y"],
            bar_width=0.0,
            bar_height=targets["bar_height"],
            label_y=targets["label_y"],
            label_visible=True,
            value_x=targets["value_x"],
            value_y=targets["value_y"],
            value_text=format_number(value),
            phase=ElementPhase.entering,
        )
        self._elements[record.category] = element
        self._transition(element, targets, duration_ms, text_target=value)

    def _update(
        self, record: Record, value: float, scales: FrameScales, duration_ms: float
    ) -> None:
        element = self._elements[record.category]
        element.record = record
        element.value = value
        element.label_visible = True
        element.phase = ElementPhase.updating
        targets = self._targets(value, record.category, scales)
        self._transition(element, targets, duration_ms, text_target=value)

    def _exit(self, category: str, duration_ms: float) -> None:
        element = self._elements[category]
        element.phase = ElementPhase.exiting
        element.label_visible = False

        def _remove() -> None:
            if self._elements.get(category) is element:
                del self._elements[category]

        self._transition(
            element,
            {"bar_width": 0.0, "value_x": 0.0},
            duration_ms,
            text_target=None,
            on_end=_remove,
        )

    def _transition(
        self,
        element: ElementState,
        targets: dict[str, float],
        duration_ms: float,
        *,
        text_target: float | None,
        on_end: Callable[[], None] | None = None,
    ) -> None:
        element.generation += 1
        generation = element.generation
        category = element.category

        if duration_ms <= 0:
            for name, end in targets.items():
                setattr(element, name, end)
            if text_target is not None:
                element.value_text = format_number(text_target)
            if on_end is not None:
                on_end()
            return

        starts = {name: float(getattr(element, name)) for name in targets}
        tween: LabelTween | None = None
        if text_target is not None:
            tween = self.tweener.begin(element.value_text, text_target)

        def _step(t: float) -> None:
            for name, end in targets.items():
                setattr(element, name, interpolate(starts[name], end, t))
            if tween is not None:
                element.value_text = tween.text_at(t)

        def _is_current() -> bool:
            return element.generation == generation and self._elements.get(category) is element

        self.timeline.start(
            Transition(
                key=category,
                started_at=self.timeline.clock.now_ms,
                duration_ms=duration_ms,
                on_step=_step,
                is_current=_is_current,
                on_end=on_end,
            )
        )

    def _animate_axis(self, target_max: float, duration_ms: float) -> None:
        self._axis_generation += 1
        generation = self._axis_generation
        if duration_ms <= 0 or self.axis_duration_ms <= 0 or target_max == self._axis_max:
            self._axis_max = target_max
            return
        start = self._axis_max

        def _step(t: float) -> None:
            self._axis_max = interpolate(start, target_max, t)

        self.timeline.start(
            Transition(
                key=AXIS_KEY,
                started_at=self.timeline.clock.now_ms,
                duration_ms=self.axis_duration_ms,
                on_step=_step,
                is_current=lambda: self._axis_generation == generation,
            )
        )
