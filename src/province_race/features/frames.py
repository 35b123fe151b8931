from __future__ import annotations

import datetime as dt
from typing import Iterable

from province_race.preprocess.records import Record


class FrameStore:
    """Records grouped by date, keeping each date's original input order."""

    def __init__(self, records: Iterable[Record]) -> None:
        frames: dict[dt.date, list[Record]] = {}
        seen: dict[dt.date, set[str]] = {}
        categories: dict[str, None] = {}
        for record in records:
            keys = seen.setdefault(record.date, set())
            if record.category in keys:
                continue
            keys.add(record.category)
            frames.setdefault(record.date, []).append(record)
            categories.setdefault(record.category, None)
        self._frames = {date: tuple(items) for date, items in frames.items()}
        self._categories = tuple(categories)

    def get(self, date: dt.date | None) -> tuple[Record, ...]:
        if date is None:
            return ()
        return self._frames.get(date, ())

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def is_empty(self) -> bool:
        return not self._frames

    def dates(self) -> list[dt.date]:
        return sorted(self._frames)

    def records(self) -> list[Record]:
        return [record for date in sorted(self._frames) for record in self._frames[date]]

    def categories(self) -> tuple[str, ...]:
        """Every category in first-seen order over the full dataset."""
        return self._categories
