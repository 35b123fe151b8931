from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from province_race.config import AppConfig, load_config
from province_race.metrics import Metric


def test_app_config_defaults_match_chart_layout() -> None:
    cfg = AppConfig()

    assert cfg.ranking.top_n == 20
    assert cfg.ranking.tie_break == "input_order"
    assert cfg.chart.inner_width == 780.0
    assert cfg.chart.inner_height == 510.0
    assert cfg.chart.overview_inner_width == 900.0
    assert cfg.chart.overview_inner_height == 60.0
    assert cfg.playback.interval_ms == 150.0
    assert cfg.playback.transition_ms == 250.0
    assert cfg.playback.default_metric is Metric.new_cases
    assert [item.date for item in cfg.annotations] == [dt.date(2021, 7, 15), dt.date(2022, 2, 15)]


def test_load_config_overrides_and_resolves_annotations_path(tmp_path: Path) -> None:
    (tmp_path / "markers.yaml").write_text(
        "annotations:\n  - {date: 2021-01-01, label: Start}\n", encoding="utf-8"
    )
    config_data = {
        "columns": {"category": "Provinsi", "date_format": "%Y-%m-%d"},
        "ranking": {"top_n": 5, "tie_break": "category"},
        "playback": {"interval_ms": 100, "default_metric": "Total Cases"},
        "annotations_path": "markers.yaml",
    }
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config_data), encoding="utf-8")

    cfg = load_config(config_path)

    assert cfg.columns.category == "Provinsi"
    assert cfg.columns.date == "Date"
    assert cfg.ranking.top_n == 5
    assert cfg.ranking.tie_break == "category"
    assert cfg.playback.default_metric is Metric.total_cases
    assert Path(cfg.annotations_path or "").is_absolute()


def test_load_config_rejects_unknown_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump({"detectors": {}}), encoding="utf-8")

    with pytest.raises(ValidationError):
        load_config(config_path)


def test_default_config_file_loads() -> None:
    config_path = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"

    cfg = load_config(config_path)

    assert cfg == AppConfig()


def test_metric_parse_accepts_labels_and_names() -> None:
    assert Metric.parse("New Deaths") is Metric.new_deaths
    assert Metric.parse("total_recovered") is Metric.total_recovered
    with pytest.raises(ValueError, match="Unknown metric"):
        Metric.parse("Active Cases")
