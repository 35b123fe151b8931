from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import pandas as pd

from province_race.config import ChartConfig
from province_race.features.date_index import ActiveRange
from province_race.features.overview import OverviewSeries
from province_race.io.annotations import Annotation
from province_race.viz.common import pixel_axes, save_figure


def draw_overview(
    ax: plt.Axes,
    series: OverviewSeries,
    annotations: Sequence[Annotation],
    active: ActiveRange | None = None,
) -> None:
    dates = pd.to_datetime(series.totals["date"])
    values = series.totals["value"].astype(float)
    ax.fill_between(dates, 0.0, values, color="#4e79a7", alpha=0.6, linewidth=0)
    ax.set_ylim(*series.value_domain)
    if len(dates):
        ax.set_xlim(dates.min(), dates.max())
    ax.set_yticks([])
    ax.xaxis.set_major_locator(mdates.YearLocator())
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))
    ax.tick_params(axis="x", labelsize=8)

    for annotation in annotations:
        position = pd.Timestamp(annotation.date)
        ax.axvline(position, color="#dc2626", linewidth=1.0, linestyle="--", alpha=0.8)
        ax.text(
            position,
            series.value_domain[1],
            annotation.label,
            fontsize=7,
            ha="center",
            va="top",
            color="#dc2626",
        )

    if active is not None and len(active) and not active.is_full:
        ax.axvspan(
            pd.Timestamp(active[0]),
            pd.Timestamp(active[-1]),
            color="#64748b",
            alpha=0.2,
        )


def plot_overview(
    series: OverviewSeries,
    annotations: Sequence[Annotation],
    chart: ChartConfig,
    output_path: Path,
    active: ActiveRange | None = None,
    dpi: int = 72,
) -> Path:
    fig, ax = pixel_axes(chart.overview_width, chart.overview_height, chart.overview_margins, dpi)
    draw_overview(ax, series, annotations, active)
    ax.set_title(f"National total: {series.metric.value}", loc="left", fontsize=8)
    return save_figure(output_path, fig=fig, dpi=dpi)
