from __future__ import annotations

from pathlib import Path

import pandas as pd

from province_race.config import AppConfig
from province_race.io.schema import normalize_columns
from province_race.preprocess.records import Record, build_records


class DataLoadError(RuntimeError):
    """Raised when the input table cannot be turned into any usable records."""


def load_frame(csv_path: Path, config: AppConfig) -> pd.DataFrame:
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    df = pd.read_csv(csv_path, encoding="utf-8-sig")
    return normalize_columns(df=df, columns=config.columns)


def load_records(csv_path: Path, config: AppConfig) -> list[Record]:
    """Load per-province daily records from CSV, coercing malformed metric values to 0."""
    try:
        frame = load_frame(csv_path=csv_path, config=config)
        records = build_records(frame, date_format=config.columns.date_format)
    except (OSError, ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataLoadError(f"Failed to load records from {csv_path}: {exc}") from exc
    if not records:
        raise DataLoadError(f"No usable records found in {csv_path}")
    return records
