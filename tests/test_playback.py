from __future__ import annotations

from province_race.engine.clock import VirtualClock
from province_race.engine.playback import PlaybackController
from province_race.engine.state import PlaybackState


class _Pointer:
    def __init__(self, index: int = 0, last: int = 4) -> None:
        self.index = index
        self.last = last
        self.visited: list[int] = []

    def position(self) -> tuple[int, int]:
        return self.index, self.last

    def advance(self, index: int) -> None:
        self.index = index
        self.visited.append(index)


def _controller(pointer: _Pointer) -> tuple[VirtualClock, PlaybackController, list]:
    clock = VirtualClock()
    states: list[PlaybackState] = []
    controller = PlaybackController(
        clock=clock,
        interval_ms=150,
        position=pointer.position,
        advance=pointer.advance,
        on_state_change=states.append,
    )
    return clock, controller, states


def test_playback_steps_to_the_end_and_stops() -> None:
    pointer = _Pointer()
    clock, controller, states = _controller(pointer)

    controller.play()
    clock.advance(150 * 10)

    assert pointer.visited == [1, 2, 3, 4]
    assert controller.state is PlaybackState.stopped
    assert states == [PlaybackState.playing, PlaybackState.stopped]
    assert clock.pending() == 0


def test_pause_cancels_the_schedule() -> None:
    pointer = _Pointer()
    clock, controller, states = _controller(pointer)

    controller.play()
    clock.advance(150)
    controller.pause()
    controller.pause()
    clock.advance(1000)

    assert pointer.visited == [1]
    assert clock.pending() == 0
    assert states == [PlaybackState.playing, PlaybackState.stopped]


def test_play_at_last_index_stops_without_advancing() -> None:
    pointer = _Pointer(index=4)
    clock, controller, _ = _controller(pointer)

    controller.play()
    assert controller.is_playing
    clock.advance(150)

    assert pointer.visited == []
    assert not controller.is_playing


def test_play_twice_keeps_a_single_schedule() -> None:
    pointer = _Pointer()
    clock, controller, _ = _controller(pointer)

    controller.play()
    controller.play()
    clock.advance(150)

    assert pointer.visited == [1]
    assert clock.pending() == 1


def test_toggle_and_button_label() -> None:
    pointer = _Pointer()
    _, controller, _ = _controller(pointer)

    assert controller.button_label == "Play"
    assert controller.toggle() is PlaybackState.playing
    assert controller.button_label == "Pause"
    assert controller.toggle() is PlaybackState.stopped
    assert controller.button_label == "Play"
