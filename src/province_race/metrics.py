from __future__ import annotations

from enum import Enum


class Metric(str, Enum):
    """The fixed set of per-province metrics a race can be ranked by."""

    new_cases = "New Cases"
    new_deaths = "New Deaths"
    total_cases = "Total Cases"
    total_deaths = "Total Deaths"
    total_recovered = "Total Recovered"

    @classmethod
    def parse(cls, value: str | Metric) -> Metric:
        """Accept either the display label ("New Cases") or the member name ("new_cases")."""
        if isinstance(value, Metric):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text == member.name:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown metric: {value!r}. Expected one of: {choices}")


ALL_METRICS: tuple[Metric, ...] = tuple(Metric)
DEFAULT_METRIC = Metric.new_cases
