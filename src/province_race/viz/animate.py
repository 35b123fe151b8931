from __future__ import annotations

import logging
import math
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.animation import FFMpegWriter, FuncAnimation, PillowWriter

from province_race.config import ChartConfig
from province_race.engine.controller import RaceController, RaceView
from province_race.viz.common import pixel_axes
from province_race.viz.race import draw_race_frame

LOGGER = logging.getLogger(__name__)


def collect_playback_views(controller: RaceController, fps: int) -> list[RaceView]:
    """Play the active range from the current index on the controller's clock, sampling views.

    Sampling continues past the final tick until the last transitions settle.
    """
    frame_ms = 1000.0 / fps
    views = [controller.view()]
    if not controller.has_data:
        return views

    remaining = controller.slider_max - controller.state.active_index
    max_samples = math.ceil((remaining + 2) * controller.playback.interval_ms / frame_ms) + 1
    controller.play()
    while controller.playback.is_playing:
        if len(views) > max_samples:
            controller.pause()
            raise RuntimeError("Playback did not finish within the expected number of frames")
        controller.clock.advance(frame_ms)
        views.append(controller.view())

    settle_ms = max(controller.transition_ms, controller.renderer.axis_duration_ms)
    for _ in range(math.ceil(settle_ms / frame_ms)):
        controller.clock.advance(frame_ms)
        views.append(controller.view())
    return views


def export_race_animation(
    views: list[RaceView],
    chart: ChartConfig,
    output_path: Path,
    fps: int = 20,
    dpi: int = 72,
) -> Path:
    if not views:
        raise ValueError("No views to animate")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = pixel_axes(chart.width, chart.height, chart.margins, dpi)

    def _draw(frame_number: int) -> list:
        draw_race_frame(ax, views[frame_number], chart)
        return []

    animation = FuncAnimation(
        fig,
        _draw,
        frames=len(views),
        interval=1000.0 / fps,
        repeat=False,
        blit=False,
    )
    if output_path.suffix.lower() == ".mp4":
        writer = FFMpegWriter(fps=fps)
    else:
        writer = PillowWriter(fps=fps)
    LOGGER.info("Writing %d animation frames to %s", len(views), output_path)
    try:
        animation.save(str(output_path), writer=writer, dpi=dpi)
    finally:
        plt.close(fig)
    return output_path
