from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Literal

import pandas as pd

from province_race.metrics import Metric
from province_race.preprocess.records import Record

TieBreak = Literal["input_order", "category"]


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    category: str
    value: float
    record: Record


@dataclass(frozen=True)
class RankedFrame:
    date: dt.date | None
    metric: Metric
    entries: tuple[RankedEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def categories(self) -> list[str]:
        return [entry.category for entry in self.entries]

    @property
    def max_value(self) -> float:
        return max((entry.value for entry in self.entries), default=0.0)

    def value_for(self, category: str) -> float | None:
        for entry in self.entries:
            if entry.category == category:
                return entry.value
        return None


class RankingEngine:
    """Selects the top-N categories of a frame by one metric."""

    def __init__(self, top_n: int = 20, tie_break: TieBreak = "input_order") -> None:
        if top_n < 1:
            raise ValueError("top_n must be >= 1")
        self.top_n = int(top_n)
        self.tie_break = tie_break

    def rank(
        self,
        records: Iterable[Record],
        metric: Metric,
        date: dt.date | None = None,
    ) -> RankedFrame:
        positive = [record for record in records if record.value(metric) > 0]
        if self.tie_break == "category":
            # Ascending by name first; the stable sort below keeps that order among ties.
            positive.sort(key=lambda record: record.category)
        ordered = sorted(positive, key=lambda record: record.value(metric), reverse=True)
        entries = tuple(
            RankedEntry(
                rank=position,
                category=record.category,
                value=record.value(metric),
                record=record,
            )
            for position, record in enumerate(ordered[: self.top_n])
        )
        return RankedFrame(date=date, metric=metric, entries=entries)


def ranked_frames_table(frames: Iterable[RankedFrame]) -> pd.DataFrame:
    rows = [
        {
            "date": frame.date,
            "metric": frame.metric.value,
            "rank": entry.rank + 1,
            "category": entry.category,
            "value": entry.value,
        }
        for frame in frames
        for entry in frame.entries
    ]
    return pd.DataFrame(rows, columns=["date", "metric", "rank", "category", "value"])
