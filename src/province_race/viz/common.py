from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from province_race.config import MarginsConfig


def save_figure(path: Path, fig: Figure | None = None, dpi: int | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    figure = fig or plt.gcf()
    figure.savefig(path, dpi=dpi)
    plt.close(figure)
    return path


def pixel_axes(
    width: float,
    height: float,
    margins: MarginsConfig,
    dpi: int,
) -> tuple[Figure, plt.Axes]:
    """Figure of ``width`` x ``height`` pixels with one axis placed inside the margins."""
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax = fig.add_axes(
        (
            margins.left / width,
            margins.bottom / height,
            (width - margins.left - margins.right) / width,
            (height - margins.top - margins.bottom) / height,
        )
    )
    return fig, ax
