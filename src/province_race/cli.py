from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

import typer

from province_race.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from province_race.io.read import DataLoadError
from province_race.logging import configure_logging
from province_race.metrics import Metric
from province_race.paths import build_output_paths
from province_race.pipeline.run_all import (
    prepare_session,
    run_all,
    write_frame,
    write_overview,
    write_rankings,
)

LOGGER = logging.getLogger(__name__)

app = typer.Typer(no_args_is_help=True, add_completion=False)

METRIC_HELP = "Metric to rank by: " + ", ".join(f"'{metric.value}'" for metric in Metric)


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        return AppConfig()
    return load_config(config_path)


def _parse_metric(metric: str | None) -> Metric | None:
    if metric is None:
        return None
    try:
        return Metric.parse(metric)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _parse_date(value: str | None, option: str) -> dt.date | None:
    if value is None:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"{option} must be an ISO date (YYYY-MM-DD)") from exc


def _apply_top_n_override(cfg: AppConfig, top_n: int | None) -> None:
    if top_n is not None:
        cfg.ranking.top_n = int(top_n)


def _default_config() -> Path | None:
    return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None


def _fail_on_load_error(exc: DataLoadError) -> None:
    LOGGER.error("Error loading data: %s", exc)
    typer.echo(f"Error loading data: {exc}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level, e.g. DEBUG or INFO."),
) -> None:
    """Render ranked bar chart races of per-province daily metrics."""
    configure_logging(log_level)


@app.command()
def render(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(
        _default_config(), exists=True, readable=True, resolve_path=True
    ),
    metric: str | None = typer.Option(None, help=METRIC_HELP),
    start: str | None = typer.Option(None, help="First date of the brushed range (YYYY-MM-DD)."),
    end: str | None = typer.Option(None, help="Last date of the brushed range (YYYY-MM-DD)."),
    top_n: int | None = typer.Option(None, min=1, help="Number of bars per frame."),
    animate: bool = typer.Option(True, help="Write the race animation."),
) -> None:
    """Render the overview, the ranking table and the race animation."""
    cfg = _load_app_config(config)
    _apply_top_n_override(cfg, top_n)
    try:
        outputs = run_all(
            csv_path=csv,
            out_dir=out,
            config=cfg,
            metric=_parse_metric(metric),
            start=_parse_date(start, "--start"),
            end=_parse_date(end, "--end"),
            animate=animate,
        )
    except DataLoadError as exc:
        _fail_on_load_error(exc)
        return
    typer.echo(f"Render complete. Outputs: {', '.join(sorted(outputs.keys()))}")


@app.command()
def frame(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(
        _default_config(), exists=True, readable=True, resolve_path=True
    ),
    metric: str | None = typer.Option(None, help=METRIC_HELP),
    index: int = typer.Option(0, min=0, help="Position within the active date range."),
    start: str | None = typer.Option(None, help="First date of the brushed range (YYYY-MM-DD)."),
    end: str | None = typer.Option(None, help="Last date of the brushed range (YYYY-MM-DD)."),
    top_n: int | None = typer.Option(None, min=1, help="Number of bars per frame."),
) -> None:
    """Render a single race frame as a still image."""
    cfg = _load_app_config(config)
    _apply_top_n_override(cfg, top_n)
    try:
        controller = prepare_session(
            csv,
            cfg,
            metric=_parse_metric(metric),
            start=_parse_date(start, "--start"),
            end=_parse_date(end, "--end"),
        )
    except DataLoadError as exc:
        _fail_on_load_error(exc)
        return
    if index > controller.slider_max:
        raise typer.BadParameter(f"--index must be between 0 and {controller.slider_max}")
    path = write_frame(controller, index, out, cfg)
    typer.echo(f"Frame written to: {path}")


@app.command()
def rankings(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(
        _default_config(), exists=True, readable=True, resolve_path=True
    ),
    metric: str | None = typer.Option(None, help=METRIC_HELP),
    start: str | None = typer.Option(None, help="First date of the brushed range (YYYY-MM-DD)."),
    end: str | None = typer.Option(None, help="Last date of the brushed range (YYYY-MM-DD)."),
    top_n: int | None = typer.Option(None, min=1, help="Number of bars per frame."),
) -> None:
    """Write the top-N ranking of every active date as a table."""
    cfg = _load_app_config(config)
    _apply_top_n_override(cfg, top_n)
    try:
        controller = prepare_session(
            csv,
            cfg,
            metric=_parse_metric(metric),
            start=_parse_date(start, "--start"),
            end=_parse_date(end, "--end"),
        )
    except DataLoadError as exc:
        _fail_on_load_error(exc)
        return
    path = write_rankings(controller, out, cfg)
    typer.echo(f"Rankings written to: {path}")


@app.command()
def overview(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(
        _default_config(), exists=True, readable=True, resolve_path=True
    ),
    metric: str | None = typer.Option(None, help=METRIC_HELP),
    start: str | None = typer.Option(None, help="First date of the brushed range (YYYY-MM-DD)."),
    end: str | None = typer.Option(None, help="Last date of the brushed range (YYYY-MM-DD)."),
) -> None:
    """Render the national-total overview with annotations and the brushed range."""
    cfg = _load_app_config(config)
    try:
        controller = prepare_session(
            csv,
            cfg,
            metric=_parse_metric(metric),
            start=_parse_date(start, "--start"),
            end=_parse_date(end, "--end"),
        )
    except DataLoadError as exc:
        _fail_on_load_error(exc)
        return
    build_output_paths(out)
    path = write_overview(controller, out, cfg)
    typer.echo(f"Overview written to: {path}")


if __name__ == "__main__":
    app()
