from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from province_race.metrics import DEFAULT_METRIC, Metric


class PlaybackState(str, Enum):
    stopped = "stopped"
    playing = "playing"


class UpdateOrigin(str, Enum):
    """Where a frame change came from; handlers pick the transition duration from it."""

    scrub = "scrub"
    brush = "brush"
    metric = "metric"
    playback = "playback"


@dataclass(frozen=True)
class ViewState:
    active_index: int = 0
    metric: Metric = DEFAULT_METRIC
    playback: PlaybackState = PlaybackState.stopped

    def with_index(self, index: int) -> ViewState:
        return replace(self, active_index=int(index))

    def with_metric(self, metric: Metric) -> ViewState:
        return replace(self, metric=metric)

    def with_playback(self, playback: PlaybackState) -> ViewState:
        return replace(self, playback=playback)
