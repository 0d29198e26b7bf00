"""Smoke tests for the pygame UI, run with the SDL dummy drivers."""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from controller import HeapController
from player import StepPlayer
from settings import WIDTH, HEIGHT, PANEL_H, LEVEL_HEIGHT
from ui import UI, node_position


@pytest.fixture
def ui(clock):
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    controller = HeapController(player=StepPlayer(interval=1.0, clock=clock))
    yield UI(screen, controller)
    pygame.quit()


def _key(key, unicode=""):
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode=unicode, mod=0)


def _labels(ui):
    return [b.label for b in ui.buttons]


def test_node_position_spreads_levels() -> None:
    root = node_position(0, 800, top=100)
    left = node_position(1, 800, top=100)
    right = node_position(2, 800, top=100)

    assert root == (400, 100)
    assert left[1] == right[1] == 100 + LEVEL_HEIGHT
    assert left[0] < root[0] < right[0]


def test_node_position_default_top_is_below_toolbar() -> None:
    assert node_position(0, WIDTH)[1] > PANEL_H


def test_draw_empty_heap(ui) -> None:
    ui.draw()
    assert "Insert Rand" in _labels(ui)


def test_shortcut_insert_switches_to_playback_buttons(ui, clock) -> None:
    ui.handle_event(_key(pygame.K_i, "i"))

    assert len(ui.controller.heap) == 1
    assert "Pause" in _labels(ui)
    ui.draw()

    clock.advance(2.0)
    ui.draw()
    assert "Insert Rand" in _labels(ui)


def test_typed_value_is_inserted_on_enter(ui) -> None:
    ui.input_active = True
    for ch in "-42":
        ui.handle_event(_key(ord(ch), ch))
    ui.handle_event(_key(pygame.K_RETURN))

    assert ui.controller.heap.snapshot() == [-42]
    assert ui.input_text == ""
    ui.draw()


def test_skip_shortcut_during_playback(ui) -> None:
    ui.controller.insert_text("5")
    ui.controller.insert_text("1")
    ui._build_buttons()

    ui.handle_event(_key(pygame.K_s, "s"))

    assert not ui.controller.player.is_animating
    assert "Delete Min" in _labels(ui)
