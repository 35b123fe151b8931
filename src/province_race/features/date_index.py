from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Iterator

from province_race.preprocess.records import Record


def as_instant(value: dt.date) -> dt.datetime:
    """Midnight of a date, or the (naive) datetime itself."""
    if isinstance(value, dt.datetime):
        return value.replace(tzinfo=None)
    return dt.datetime.combine(value, dt.time.min)


@dataclass(frozen=True)
class ActiveRange:
    """Contiguous, ascending slice of a DateIndex that drives scrubbing and playback."""

    dates: tuple[dt.date, ...]
    is_full: bool = True

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self) -> Iterator[dt.date]:
        return iter(self.dates)

    def __getitem__(self, index: int) -> dt.date:
        return self.dates[index]

    @property
    def last_index(self) -> int:
        return len(self.dates) - 1

    def date_at(self, index: int) -> dt.date | None:
        if index < 0 or index >= len(self.dates):
            return None
        return self.dates[index]


class DateIndex:
    """Strictly increasing, de-duplicated observation dates. Never mutated after construction."""

    def __init__(self, dates: Iterable[dt.date]) -> None:
        self._dates: tuple[dt.date, ...] = tuple(sorted(set(dates)))

    @classmethod
    def from_records(cls, records: Iterable[Record]) -> DateIndex:
        return cls(record.date for record in records)

    @property
    def dates(self) -> tuple[dt.date, ...]:
        return self._dates

    def __len__(self) -> int:
        return len(self._dates)

    def __iter__(self) -> Iterator[dt.date]:
        return iter(self._dates)

    def __getitem__(self, index: int) -> dt.date:
        return self._dates[index]

    @property
    def first(self) -> dt.date | None:
        return self._dates[0] if self._dates else None

    @property
    def last(self) -> dt.date | None:
        return self._dates[-1] if self._dates else None

    def full_range(self) -> ActiveRange:
        return ActiveRange(dates=self._dates, is_full=True)

    def restrict(self, start: dt.date, end: dt.date) -> ActiveRange:
        """Dates within [start, end] inclusive; bounds may be dates or datetimes, in any order."""
        lower, upper = sorted((as_instant(start), as_instant(end)))
        selected = tuple(d for d in self._dates if lower <= as_instant(d) <= upper)
        return ActiveRange(dates=selected, is_full=len(selected) == len(self._dates))
