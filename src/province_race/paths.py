from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path

from province_race.metrics import Metric


@dataclass(frozen=True)
class OutputPaths:
    """Layout of one render run: ranking tables, still figures and the run summary."""

    root: Path
    tables: Path
    figures: Path
    summary: Path

    def rankings_table(self, metric: Metric, fmt: str) -> Path:
        return self.tables / f"rankings_{metric.name}.{fmt}"

    def overview_figure(self, fmt: str) -> Path:
        return self.figures / f"overview.{fmt}"

    def frame_figure(self, date: dt.date, fmt: str) -> Path:
        return self.figures / f"frame_{date.isoformat()}.{fmt}"

    def race_animation(self, metric: Metric, fmt: str) -> Path:
        return self.figures / f"race_{metric.name}.{fmt}"

    @property
    def run_summary(self) -> Path:
        return self.summary / "run_summary.json"


def build_output_paths(out_dir: Path) -> OutputPaths:
    paths = OutputPaths(
        root=out_dir,
        tables=out_dir / "tables",
        figures=out_dir / "figures",
        summary=out_dir / "summary",
    )
    for directory in (paths.tables, paths.figures, paths.summary):
        directory.mkdir(parents=True, exist_ok=True)
    return paths
