from __future__ import annotations

import logging
from typing import Callable

from province_race.engine.clock import TaskHandle, VirtualClock
from province_race.engine.state import PlaybackState

LOGGER = logging.getLogger(__name__)


class PlaybackController:
    """Stopped/Playing scheduler that steps the frame pointer at a fixed cadence.

    ``position`` reports ``(current_index, last_index)`` of the active range and
    ``advance`` is asked to move to the next index. Playback never wraps: it
    stops once the last index is reached.
    """

    def __init__(
        self,
        clock: VirtualClock,
        interval_ms: float,
        position: Callable[[], tuple[int, int]],
        advance: Callable[[int], None],
        on_state_change: Callable[[PlaybackState], None] | None = None,
    ) -> None:
        self.clock = clock
        self.interval_ms = float(interval_ms)
        self._position = position
        self._advance = advance
        self._on_state_change = on_state_change
        self._state = PlaybackState.stopped
        self._task: TaskHandle | None = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.playing

    @property
    def button_label(self) -> str:
        return "Pause" if self.is_playing else "Play"

    def play(self) -> None:
        if self.is_playing:
            return
        self._task = self.clock.call_every(self.interval_ms, self._tick)
        self._set_state(PlaybackState.playing)

    def pause(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self.is_playing:
            self._set_state(PlaybackState.stopped)

    stop = pause

    def toggle(self) -> PlaybackState:
        if self.is_playing:
            self.pause()
        else:
            self.play()
        return self._state

    def _tick(self) -> None:
        index, last_index = self._position()
        if index >= last_index:
            self.stop()
            return
        self._advance(index + 1)
        if index + 1 >= last_index:
            LOGGER.debug("Playback reached the end of the active range")
            self.stop()

    def _set_state(self, state: PlaybackState) -> None:
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)
