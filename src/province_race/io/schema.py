from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from province_race.config import ColumnsConfig


@dataclass(frozen=True)
class CanonicalColumns:
    date: str = "date"
    category: str = "category"


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Rename source columns to the canonical date/category/metric names."""
    rename_map = {
        columns.date: CanonicalColumns.date,
        columns.category: CanonicalColumns.category,
    }
    for metric, source in columns.metric_columns().items():
        rename_map[source] = metric.value
    missing = [source for source in rename_map if source not in df.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ValueError(f"Missing required columns in CSV: {missing_str}")
    return df.rename(columns=rename_map)[list(rename_map.values())]
