from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from province_race.config import ChartConfig
from province_race.engine.controller import RaceView
from province_race.engine.scales import LinearScale, format_si
from province_race.viz.common import pixel_axes, save_figure

NAME_LABEL_OFFSET = -5.0


def draw_race_frame(ax: plt.Axes, view: RaceView, chart: ChartConfig) -> None:
    """Draw one moment of the race in chart pixel coordinates (y grows downward)."""
    width = chart.inner_width
    height = chart.inner_height
    ax.clear()
    ax.set_xlim(0.0, width)
    ax.set_ylim(height, 0.0)
    ax.set_yticks([])
    for side in ("right", "bottom", "left"):
        ax.spines[side].set_visible(False)

    axis = LinearScale(domain=(0.0, max(view.axis_max, 1e-9)), range=(0.0, width))
    ticks = axis.ticks(5)
    ax.xaxis.tick_top()
    ax.set_xticks([axis(tick) for tick in ticks])
    ax.set_xticklabels([format_si(tick) for tick in ticks], fontsize=8, color="#475569")
    ax.vlines(
        [axis(tick) for tick in ticks],
        0.0,
        height,
        colors="#e2e8f0",
        linewidth=0.8,
        zorder=0,
    )

    for element in sorted(view.elements, key=lambda item: item.bar_y):
        ax.add_patch(
            Rectangle(
                (0.0, element.bar_y),
                max(element.bar_width, 0.0),
                element.bar_height,
                facecolor=element.color,
                edgecolor="none",
                zorder=2,
            )
        )
        if element.label_visible:
            ax.text(
                NAME_LABEL_OFFSET,
                element.label_y,
                element.category,
                ha="right",
                va="center",
                fontsize=8,
                clip_on=False,
            )
        ax.text(
            element.value_x,
            element.value_y,
            element.value_text,
            ha="left",
            va="center",
            fontsize=8,
            color="#0f172a",
            clip_on=False,
        )

    ax.text(
        width,
        height - 10.0,
        view.date_label,
        ha="right",
        va="bottom",
        fontsize=22,
        fontweight="bold",
        color="#94a3b8",
    )
    ax.set_title(view.metric.value, loc="left", fontsize=10, pad=18)


def plot_race_frame(view: RaceView, chart: ChartConfig, output_path: Path, dpi: int = 72) -> Path:
    fig, ax = pixel_axes(chart.width, chart.height, chart.margins, dpi)
    draw_race_frame(ax, view, chart)
    return save_figure(output_path, fig=fig, dpi=dpi)
