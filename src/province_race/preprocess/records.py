from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from province_race.metrics import ALL_METRICS, Metric

LOGGER = logging.getLogger(__name__)

_METRIC_POSITIONS = {metric: position for position, metric in enumerate(ALL_METRICS)}


@dataclass(frozen=True)
class Record:
    date: dt.date
    category: str
    values: tuple[float, ...]

    def value(self, metric: Metric) -> float:
        return self.values[_METRIC_POSITIONS[metric]]

    @classmethod
    def from_values(cls, date: dt.date, category: str, values: dict[Metric, float]) -> Record:
        return cls(
            date=date,
            category=category.strip(),
            values=tuple(float(values.get(metric, 0.0)) for metric in ALL_METRICS),
        )


def coerce_metric_values(df: pd.DataFrame) -> pd.DataFrame:
    working = df.copy()
    for metric in ALL_METRICS:
        if metric.value not in working.columns:
            working[metric.value] = 0.0
            continue
        text = working[metric.value].astype(str).str.replace(",", "", regex=False)
        numeric = pd.to_numeric(text, errors="coerce").replace([np.inf, -np.inf], np.nan)
        working[metric.value] = numeric.fillna(0.0).astype(float)
    return working


def add_record_keys(df: pd.DataFrame, date_format: str) -> pd.DataFrame:
    """Parse the date column and trim category names; drop rows where either is unusable."""
    working = df.copy()
    parsed = pd.to_datetime(working["date"], format=date_format, errors="coerce")
    working["date"] = parsed.dt.date
    working["category"] = working["category"].fillna("").astype(str).str.strip()

    invalid = parsed.isna() | (working["category"] == "")
    if invalid.any():
        LOGGER.warning(
            "Dropping %d rows with unparseable date or blank category", int(invalid.sum())
        )
        working = working.loc[~invalid]

    duplicated = working.duplicated(subset=["date", "category"], keep="first")
    if duplicated.any():
        LOGGER.warning(
            "Dropping %d duplicate (date, category) rows; keeping the first occurrence",
            int(duplicated.sum()),
        )
        working = working.loc[~duplicated]
    return working.reset_index(drop=True)


def build_records(df: pd.DataFrame, date_format: str = "%m/%d/%Y") -> list[Record]:
    working = add_record_keys(coerce_metric_values(df), date_format=date_format)
    metric_columns = [metric.value for metric in ALL_METRICS]
    records: list[Record] = []
    for row in working[["date", "category", *metric_columns]].itertuples(index=False, name=None):
        record_date, category, *values = row
        records.append(
            Record(date=record_date, category=category, values=tuple(float(v) for v in values))
        )
    return records


def records_to_frame(records: list[Record]) -> pd.DataFrame:
    columns = ["date", "category", *(metric.value for metric in ALL_METRICS)]
    rows = [(record.date, record.category, *record.values) for record in records]
    return pd.DataFrame(rows, columns=columns)
