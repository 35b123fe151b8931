from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Literal

import pandas as pd

LOGGER = logging.getLogger(__name__)

TableFormat = Literal["csv", "parquet"]


def write_table(df: pd.DataFrame, path: Path, fmt: TableFormat = "csv") -> Path:
    """Write a ranking-style table; date cells are stored as ISO strings in either format."""
    path.parent.mkdir(parents=True, exist_ok=True)
    working = df.copy()
    if "date" in working.columns:
        working["date"] = working["date"].map(
            lambda value: value.isoformat() if isinstance(value, dt.date) else value
        )
    if fmt == "parquet":
        working.to_parquet(path, index=False)
    elif fmt == "csv":
        working.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported table format: {fmt}")
    LOGGER.info("Wrote %d rows to %s", len(working), path)
    return path


def _json_default(value: Any) -> Any:
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, sort_keys=True, default=_json_default),
        encoding="utf-8",
    )
    return path
