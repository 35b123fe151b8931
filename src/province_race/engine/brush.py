from __future__ import annotations

import datetime as dt
import logging

import pandas as pd

from province_race.engine.scales import LinearScale, TimeScale
from province_race.features.date_index import ActiveRange, DateIndex, as_instant
from province_race.features.overview import OverviewSeries, build_overview_series
from province_race.metrics import Metric

LOGGER = logging.getLogger(__name__)


class BrushFilter:
    """Overview series plus the brushed sub-range of dates that playback and scrubbing use."""

    def __init__(
        self,
        date_index: DateIndex,
        records_frame: pd.DataFrame,
        metric: Metric,
        width: float,
        height: float,
    ) -> None:
        self.date_index = date_index
        self.records_frame = records_frame
        self.width = float(width)
        self.height = float(height)
        self.time_scale: TimeScale | None = None
        if len(date_index):
            self.time_scale = TimeScale(
                domain=(date_index[0], date_index[-1]),
                range=(0.0, self.width),
            )
        self.active: ActiveRange = date_index.full_range()
        self.selection: tuple[dt.date, dt.date] | None = None
        self.series: OverviewSeries = build_overview_series(
            records_frame, date_index.dates, metric
        )

    @property
    def metric(self) -> Metric:
        return self.series.metric

    @property
    def value_scale(self) -> LinearScale:
        return LinearScale(domain=self.series.value_domain, range=(self.height, 0.0))

    def set_metric(self, metric: Metric) -> OverviewSeries:
        """Recompute the aggregate for a new metric; the active range is left alone."""
        self.series = build_overview_series(self.records_frame, self.date_index.dates, metric)
        return self.series

    def select_pixels(self, x0: float, x1: float) -> ActiveRange:
        if self.time_scale is None:
            return self.active
        left, right = sorted(min(max(float(x), 0.0), self.width) for x in (x0, x1))
        return self.select_dates(self.time_scale.invert(left), self.time_scale.invert(right))

    def select_dates(self, start: dt.date, end: dt.date) -> ActiveRange:
        restricted = self.date_index.restrict(start, end)
        if not len(restricted):
            LOGGER.warning(
                "Brush selection %s..%s contains no observation dates; using the full range",
                start,
                end,
            )
            return self.clear()
        self.selection = (min(start, end, key=as_instant), max(start, end, key=as_instant))
        self.active = restricted
        return self.active

    def clear(self) -> ActiveRange:
        self.selection = None
        self.active = self.date_index.full_range()
        return self.active
