from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from province_race.engine.clock import TaskHandle, VirtualClock


def ease_cubic_in_out(t: float) -> float:
    t = min(max(float(t), 0.0), 1.0) * 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


@dataclass
class Transition:
    """One timed animation of a keyed element.

    ``is_current`` is checked before every step; once it returns False the
    transition is discarded without applying anything further.
    """

    key: str
    started_at: float
    duration_ms: float
    on_step: Callable[[float], None]
    is_current: Callable[[], bool]
    on_end: Callable[[], None] | None = None
    easing: Callable[[float], float] = field(default=ease_cubic_in_out)

    def progress(self, now_ms: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min(max((now_ms - self.started_at) / self.duration_ms, 0.0), 1.0)


class AnimationTimeline:
    """Steps active transitions on every animation frame of the clock."""

    def __init__(self, clock: VirtualClock) -> None:
        self.clock = clock
        self._active: list[Transition] = []
        self._frames: TaskHandle | None = None

    def __len__(self) -> int:
        return len(self._active)

    def start(self, transition: Transition) -> None:
        self._active.append(transition)
        if self._frames is None:
            self._frames = self.clock.request_frames(self._on_frame)

    def _on_frame(self) -> None:
        now = self.clock.now_ms
        stepping, self._active = self._active, []
        still_running: list[Transition] = []
        for transition in stepping:
            if not transition.is_current():
                continue
            raw = transition.progress(now)
            transition.on_step(transition.easing(raw))
            if raw >= 1.0:
                if transition.on_end is not None and transition.is_current():
                    transition.on_end()
                continue
            still_running.append(transition)
        # Anything started from a callback above landed in the fresh list.
        self._active = still_running + self._active
        if not self._active and self._frames is not None:
            self._frames.cancel()
            self._frames = None
