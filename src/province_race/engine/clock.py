from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable

DEFAULT_FRAME_INTERVAL_MS = 1000.0 / 60.0


@dataclass
class TaskHandle:
    """Handle for a scheduled callback. ``cancel`` is idempotent and always safe to call."""

    interval_ms: float | None
    callback: Callable[[], None]
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled


class VirtualClock:
    """Single-threaded cooperative scheduler driven by explicit time advancement.

    Callbacks run to completion one at a time, in due-time order (ties in
    scheduling order). Nothing runs until ``advance`` is called, which keeps
    playback and transitions deterministic for offline rendering and tests.
    """

    def __init__(self, start_ms: float = 0.0, frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS):
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        self._now = float(start_ms)
        self.frame_interval_ms = float(frame_interval_ms)
        self._queue: list[tuple[float, int, TaskHandle]] = []
        self._sequence = itertools.count()

    @property
    def now_ms(self) -> float:
        return self._now

    def _push(self, due_ms: float, handle: TaskHandle) -> None:
        heapq.heappush(self._queue, (due_ms, next(self._sequence), handle))

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TaskHandle:
        handle = TaskHandle(interval_ms=None, callback=callback)
        self._push(self._now + max(0.0, float(delay_ms)), handle)
        return handle

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> TaskHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        handle = TaskHandle(interval_ms=float(interval_ms), callback=callback)
        self._push(self._now + handle.interval_ms, handle)
        return handle

    def request_frames(self, callback: Callable[[], None]) -> TaskHandle:
        """Repeat ``callback`` once per animation frame until cancelled."""
        return self.call_every(self.frame_interval_ms, callback)

    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if handle.active)

    def advance(self, duration_ms: float) -> None:
        target = self._now + max(0.0, float(duration_ms))
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            handle.callback()
            if handle.interval_ms is not None and not handle.cancelled:
                self._push(due + handle.interval_ms, handle)
            elif handle.interval_ms is None:
                handle.cancel()
        self._now = target
