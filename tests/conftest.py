from __future__ import annotations

import pytest

from falling_blocks.game import FallingBlocksGame, GameConfig


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls = []

    def render(self, board, score):
        self.calls.append(("render", board.copy(), score))

    def render_piece_overlay(self, piece, visible):
        self.calls.append(("overlay", piece, visible))

    def render_game_over(self, score):
        self.calls.append(("game_over", score))

    def names(self):
        return [c[0] for c in self.calls]


class FakeClock:
    """Whole-second clock advanced only by `sleep`."""

    def __init__(self, on_sleep=None) -> None:
        self.now = 0.0
        self.sleeps = 0
        self.on_sleep = on_sleep

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds
        self.sleeps += 1
        if self.on_sleep is not None:
            self.on_sleep(self)


@pytest.fixture
def game() -> FallingBlocksGame:
    return FallingBlocksGame(GameConfig(random_seed=1234))


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
