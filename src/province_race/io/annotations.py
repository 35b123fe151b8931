from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
import yaml

from province_race.config import AppConfig


@dataclass(frozen=True)
class Annotation:
    date: dt.date
    label: str


def _parse_date(raw_value: Any) -> dt.date:
    if isinstance(raw_value, dt.datetime):
        return raw_value.date()
    if isinstance(raw_value, dt.date):
        return raw_value
    if isinstance(raw_value, str) and raw_value.strip():
        try:
            return pd.Timestamp(raw_value.strip().replace("/", "-")).date()
        except ValueError as exc:
            raise ValueError(f"invalid annotation date: {raw_value!r}") from exc
    raise ValueError("annotation date must be an ISO date string or date")


def parse_annotations(payload: Any) -> list[Annotation]:
    if isinstance(payload, Mapping):
        payload = payload.get("annotations", [])
    if not isinstance(payload, list):
        raise ValueError("annotations must be a list of {date, label} mappings")

    annotations: list[Annotation] = []
    for item in payload:
        if not isinstance(item, Mapping):
            raise ValueError("each annotation must be a mapping with 'date' and 'label'")
        label = item.get("label")
        if not isinstance(label, str) or not label.strip():
            raise ValueError("annotation label must be a non-empty string")
        annotations.append(Annotation(date=_parse_date(item.get("date")), label=label.strip()))
    return sorted(annotations, key=lambda annotation: annotation.date)


def load_annotations(config: AppConfig) -> list[Annotation]:
    """Return the fixed overview markers: a YAML sidecar when configured, else the inline list."""
    if config.annotations_path:
        with Path(config.annotations_path).open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or []
        return parse_annotations(payload)
    return [Annotation(date=item.date, label=item.label) for item in config.annotations]
