from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from province_race.metrics import DEFAULT_METRIC, Metric


class ColumnsConfig(BaseModel):
    date: str = "Date"
    category: str = "Province"
    new_cases: str = "New Cases"
    new_deaths: str = "New Deaths"
    total_cases: str = "Total Cases"
    total_deaths: str = "Total Deaths"
    total_recovered: str = "Total Recovered"
    date_format: str = "%m/%d/%Y"

    def metric_columns(self) -> dict[Metric, str]:
        return {metric: getattr(self, metric.name) for metric in Metric}


class RankingConfig(BaseModel):
    top_n: int = Field(default=20, ge=1)
    tie_break: Literal["input_order", "category"] = "input_order"


class MarginsConfig(BaseModel):
    top: float = Field(default=20.0, ge=0)
    right: float = Field(default=30.0, ge=0)
    bottom: float = Field(default=20.0, ge=0)
    left: float = Field(default=150.0, ge=0)


def _overview_margins() -> MarginsConfig:
    return MarginsConfig(top=10.0, right=30.0, bottom=30.0, left=30.0)


class ChartConfig(BaseModel):
    width: float = Field(default=960.0, gt=0)
    height: float = Field(default=550.0, gt=0)
    margins: MarginsConfig = Field(default_factory=MarginsConfig)
    overview_width: float = Field(default=960.0, gt=0)
    overview_height: float = Field(default=100.0, gt=0)
    overview_margins: MarginsConfig = Field(default_factory=_overview_margins)
    band_padding: float = Field(default=0.1, ge=0, lt=1)
    palette: str = "tab10"

    @property
    def inner_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    @property
    def inner_height(self) -> float:
        return self.height - self.margins.top - self.margins.bottom

    @property
    def overview_inner_width(self) -> float:
        return self.overview_width - self.overview_margins.left - self.overview_margins.right

    @property
    def overview_inner_height(self) -> float:
        return self.overview_height - self.overview_margins.top - self.overview_margins.bottom


class PlaybackConfig(BaseModel):
    interval_ms: float = Field(default=150.0, gt=0)
    transition_ms: float = Field(default=250.0, ge=0)
    axis_transition_ms: float = Field(default=300.0, ge=0)
    default_metric: Metric = DEFAULT_METRIC


class AnnotationConfig(BaseModel):
    date: dt.date
    label: str


def _default_annotations() -> list[AnnotationConfig]:
    return [
        AnnotationConfig(date=dt.date(2021, 7, 15), label="Puncak Gelombang Delta"),
        AnnotationConfig(date=dt.date(2022, 2, 15), label="Puncak Gelombang Omicron"),
    ]


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"
    animation_format: Literal["gif", "mp4"] = "gif"
    fps: int = Field(default=20, ge=1, le=120)
    dpi: int = Field(default=72, ge=10)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    annotations: list[AnnotationConfig] = Field(default_factory=_default_annotations)
    annotations_path: str | None = None
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent
    config.annotations_path = _resolve_optional_path(config.annotations_path, base_dir)
    return config
