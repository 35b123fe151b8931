from __future__ import annotations

from dataclasses import dataclass, replace

from province_race.engine.tween import format_number
from province_race.metrics import Metric
from province_race.preprocess.records import Record

POINTER_OFFSET_X = 15.0
POINTER_OFFSET_Y = -28.0


@dataclass(frozen=True)
class TooltipView:
    visible: bool = False
    title: str = ""
    body: str = ""
    left: float = 0.0
    top: float = 0.0


class Tooltip:
    """Hover display for a bar: category name and the formatted value of the selected metric."""

    def __init__(self) -> None:
        self._view = TooltipView()

    @property
    def view(self) -> TooltipView:
        return self._view

    def show(self, record: Record, metric: Metric) -> TooltipView:
        self._view = replace(
            self._view,
            visible=True,
            title=record.category,
            body=f"{metric.value}: {format_number(record.value(metric))}",
        )
        return self._view

    def move(self, page_x: float, page_y: float) -> TooltipView:
        self._view = replace(
            self._view,
            left=float(page_x) + POINTER_OFFSET_X,
            top=float(page_y) + POINTER_OFFSET_Y,
        )
        return self._view

    def hide(self) -> TooltipView:
        self._view = replace(self._view, visible=False)
        return self._view
