from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

import pandas as pd

from province_race.config import AppConfig
from province_race.engine.controller import RaceController
from province_race.features.ranking import ranked_frames_table
from province_race.io.annotations import load_annotations
from province_race.io.read import load_records
from province_race.io.write import write_summary, write_table
from province_race.metrics import Metric
from province_race.paths import build_output_paths
from province_race.pipeline.session import build_session
from province_race.viz.animate import collect_playback_views, export_race_animation
from province_race.viz.overview import plot_overview
from province_race.viz.race import plot_race_frame

LOGGER = logging.getLogger(__name__)


def prepare_session(
    csv_path: Path,
    config: AppConfig,
    *,
    metric: Metric | None = None,
    start: dt.date | None = None,
    end: dt.date | None = None,
) -> RaceController:
    """Load records, build a session and apply an optional date brush."""
    records = load_records(csv_path=csv_path, config=config)
    controller = build_session(records, config, metric=metric)
    if start is not None or end is not None:
        index = controller.brush.date_index
        controller.brush_dates(start or index.first, end or index.last)
    else:
        controller.scrub(0)
    return controller


def build_rankings_table(controller: RaceController) -> pd.DataFrame:
    frames = [controller.ranked_at(index) for index in range(len(controller.active_range))]
    return ranked_frames_table(frame for frame in frames if frame is not None)


def write_rankings(controller: RaceController, out_dir: Path, config: AppConfig) -> Path:
    fmt = config.outputs.tables_format
    return write_table(
        build_rankings_table(controller),
        build_output_paths(out_dir).rankings_table(controller.state.metric, fmt),
        fmt=fmt,
    )


def write_overview(controller: RaceController, out_dir: Path, config: AppConfig) -> Path:
    paths = build_output_paths(out_dir)
    return plot_overview(
        series=controller.brush.series,
        annotations=load_annotations(config),
        chart=config.chart,
        output_path=paths.overview_figure(config.outputs.figures_format),
        active=controller.active_range,
        dpi=config.outputs.dpi,
    )


def write_frame(
    controller: RaceController,
    index: int,
    out_dir: Path,
    config: AppConfig,
) -> Path | None:
    update = controller.scrub(index)
    if update is None:
        LOGGER.warning("Frame %s is outside the active range; nothing rendered", index)
        return None
    paths = build_output_paths(out_dir)
    return plot_race_frame(
        controller.view(),
        config.chart,
        paths.frame_figure(update.date, config.outputs.figures_format),
        dpi=config.outputs.dpi,
    )


def run_all(
    csv_path: Path,
    out_dir: Path,
    config: AppConfig,
    *,
    metric: Metric | None = None,
    start: dt.date | None = None,
    end: dt.date | None = None,
    animate: bool = True,
) -> dict[str, Path]:
    controller = prepare_session(csv_path, config, metric=metric, start=start, end=end)
    paths = build_output_paths(out_dir)
    outputs: dict[str, Path] = {
        "overview": write_overview(controller, out_dir, config),
        "rankings": write_rankings(controller, out_dir, config),
    }

    if animate:
        controller.scrub(0)
        views = collect_playback_views(controller, fps=config.outputs.fps)
        try:
            outputs["animation"] = export_race_animation(
                views,
                config.chart,
                paths.race_animation(controller.state.metric, config.outputs.animation_format),
                fps=config.outputs.fps,
                dpi=config.outputs.dpi,
            )
        except Exception:  # pragma: no cover
            LOGGER.exception("Failed rendering the race animation")

    active = controller.active_range
    summary = {
        "metric": controller.state.metric.value,
        "dates_total": len(controller.brush.date_index),
        "dates_active": len(active),
        "active_start": active[0] if len(active) else None,
        "active_end": active[-1] if len(active) else None,
        "categories": len(controller.store.categories()),
        "top_n": config.ranking.top_n,
        "outputs": {name: str(path) for name, path in sorted(outputs.items())},
    }
    outputs["summary"] = write_summary(summary, paths.run_summary)
    LOGGER.info("Run complete: %s", ", ".join(sorted(outputs)))
    return outputs
