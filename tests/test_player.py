"""Tests for step playback: manual navigation and timed auto-advance."""

import pytest

from player import StepPlayer
from steps import Step


def _steps(count):
    return [Step(values=[i], highlight=None, description=f"step {i}") for i in range(count)]


@pytest.fixture
def player(clock) -> StepPlayer:
    return StepPlayer(interval=1.0, clock=clock)


def test_empty_player_has_no_current_step(player) -> None:
    assert player.current is None
    assert not player.is_animating
    assert not player.next()
    assert not player.previous()


def test_load_starts_autoplay_from_first_step(player) -> None:
    player.load(_steps(3))

    assert player.index == 0
    assert player.playing
    assert player.current.description == "step 0"
    assert player.is_animating


def test_single_step_trace_does_not_play(player) -> None:
    player.load(_steps(1))

    assert not player.playing
    assert not player.is_animating
    assert not player.go_back()


def test_next_and_previous_are_clamped(player) -> None:
    player.load(_steps(3), playing=False)

    assert player.next()
    assert player.next()
    assert not player.next()
    assert player.index == 2

    assert player.previous()
    assert player.previous()
    assert not player.previous()
    assert player.index == 0


def test_tick_advances_once_per_interval(player, clock) -> None:
    player.load(_steps(3))

    clock.advance(0.5)
    assert not player.tick()
    assert player.index == 0

    clock.advance(0.6)
    assert player.tick()
    assert player.index == 1

    clock.advance(0.5)
    assert not player.tick()

    clock.advance(1.0)
    assert player.tick()
    assert player.index == 2
    assert not player.playing

    clock.advance(5.0)
    assert not player.tick()


def test_skip_to_end_stops_playback(player) -> None:
    player.load(_steps(4))
    player.skip_to_end()

    assert player.index == 3
    assert not player.playing
    assert not player.is_animating


def test_go_back_replays_from_start(player) -> None:
    player.load(_steps(4))
    player.skip_to_end()

    assert player.go_back()
    assert player.index == 0
    assert player.playing


def test_toggle_pauses_and_resumes(player, clock) -> None:
    player.load(_steps(3))
    player.toggle()
    assert not player.playing

    clock.advance(3.0)
    assert not player.tick()

    player.toggle()
    assert player.playing


def test_load_clamps_index(player) -> None:
    player.load(_steps(2), index=10, playing=True)
    assert player.index == 1
    assert not player.playing


def test_reset_clears_trace(player) -> None:
    player.load(_steps(3))
    player.reset()

    assert len(player) == 0
    assert player.current is None
    assert not player.playing
