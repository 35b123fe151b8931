from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from province_race.metrics import Metric


@dataclass(frozen=True)
class OverviewSeries:
    """National total of one metric for every date of the full index."""

    metric: Metric
    totals: pd.DataFrame
    value_domain: tuple[float, float]

    @property
    def dates(self) -> list[dt.date]:
        return list(self.totals["date"])

    @property
    def values(self) -> list[float]:
        return [float(value) for value in self.totals["value"]]


def safe_value_domain(max_value: float) -> tuple[float, float]:
    if pd.isna(max_value) or max_value <= 0:
        return (0.0, 1.0)
    return (0.0, float(max_value))


def build_overview_series(
    records_frame: pd.DataFrame,
    dates: Sequence[dt.date],
    metric: Metric,
) -> OverviewSeries:
    if records_frame.empty:
        totals = pd.Series(0.0, index=pd.Index(list(dates), name="date"), dtype="float64")
    else:
        totals = (
            records_frame.groupby("date", sort=True)[metric.value]
            .sum()
            .reindex(list(dates), fill_value=0.0)
            .astype(float)
        )
        totals.index.name = "date"
    frame = totals.rename("value").reset_index()
    max_value = float(frame["value"].max()) if not frame.empty else 0.0
    return OverviewSeries(metric=metric, totals=frame, value_domain=safe_value_domain(max_value))
