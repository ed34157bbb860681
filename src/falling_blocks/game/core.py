from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from .grid import GameGrid
from .pieces import Piece, TetrominoType
from .rules import ScoringRules


logger = logging.getLogger(__name__)

PIECE_OVERLAY = 2


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    QUIT = 4
    RESTART = 5


class GameStatus(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


class GameOverReason(Enum):
    BLOCKED_SPAWN = "blocked_spawn"
    QUIT = "quit"


@dataclass
class GameConfig:
    random_seed: Optional[int] = None
    gravity_interval_ms: int = 500
    poll_interval_ms: int = 50
    input_poll_interval_ms: int = 5


@dataclass(frozen=True)
class StepResult:
    moved: bool = False
    rotated: bool = False
    locked: bool = False
    lines_cleared: int = 0
    score_delta: int = 0
    game_over: bool = False

    @property
    def changed(self) -> bool:
        return self.moved or self.rotated or self.locked or self.game_over


@dataclass(frozen=True)
class GameSnapshot:
    board: np.ndarray
    piece: Optional[Piece]
    score: int
    status: GameStatus
    lines_cleared_total: int
    pieces_locked: int


class FallingBlocksGame:
    """Owns the board, the falling piece and the score for one game session.

    Every transition is synchronous and leaves state untouched when the
    requested move is illegal. The engine performs no locking; callers that
    share it between threads go through `GameScheduler`.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.status = GameStatus.PLAYING
        self.game_over_reason: Optional[GameOverReason] = None
        self.current_piece: Optional[Piece] = None
        self.reset()

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.status = GameStatus.PLAYING
        self.game_over_reason = None
        self.current_piece = None
        self.spawn_piece()

    def _random_kind(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))

    def _end(self, reason: GameOverReason) -> None:
        self.status = GameStatus.GAME_OVER
        self.game_over_reason = reason
        logger.info("Game over (%s), final score %d", reason.value, self.score)

    def spawn_piece(self, kind: Optional[TetrominoType] = None) -> bool:
        """Place a new piece at the top centre; ends the game if it does not fit."""
        piece = Piece.spawn(kind if kind is not None else self._random_kind(), self.grid.width)
        self.current_piece = piece
        if self.grid.collides(piece.shape, piece.x, piece.y):
            self._end(GameOverReason.BLOCKED_SPAWN)
            return False
        logger.debug("Spawned %s at x=%d", piece.kind.name, piece.x)
        return True

    def move(self, dx: int) -> bool:
        piece = self.current_piece
        if self.game_over or piece is None:
            return False
        if self.grid.collides(piece.shape, piece.x + dx, piece.y):
            return False
        piece.x += dx
        return True

    def rotate(self) -> bool:
        piece = self.current_piece
        if self.game_over or piece is None:
            return False
        rotated = piece.rotated_shape()
        if self.grid.collides(rotated, piece.x, piece.y):
            logger.debug("Rotation of %s rejected at (%d, %d)", piece.kind.name, piece.x, piece.y)
            return False
        piece.shape = rotated
        return True

    def drop(self) -> StepResult:
        """Advance the piece one row, locking it when it cannot fall further.

        Gravity ticks and soft drops both come through here.
        """
        piece = self.current_piece
        if self.game_over or piece is None:
            return StepResult(game_over=self.game_over)
        if not self.grid.collides(piece.shape, piece.x, piece.y + 1):
            piece.y += 1
            return StepResult(moved=True)
        return self._lock_piece()

    tick = drop

    def _lock_piece(self) -> StepResult:
        piece = self.current_piece
        assert piece is not None
        self.grid.lock(piece.shape, piece.x, piece.y)
        self.pieces_locked += 1
        logger.debug("Locked %s at (%d, %d)", piece.kind.name, piece.x, piece.y)

        lines = self.grid.clear_full_rows()
        gained = self.rules.score_for_lines(lines)
        self.lines_cleared_total += lines
        self.score += gained
        if lines:
            logger.info("Cleared %d row(s), score %d", lines, self.score)

        self.spawn_piece()
        return StepResult(locked=True, lines_cleared=lines, score_delta=gained, game_over=self.game_over)

    def quit(self) -> StepResult:
        if not self.game_over:
            self._end(GameOverReason.QUIT)
        return StepResult(game_over=True)

    def apply(self, command: Command) -> StepResult:
        if not isinstance(command, Command):
            raise ValueError(f"Unknown command: {command!r}")
        if self.game_over:
            return StepResult(game_over=True)

        if command == Command.MOVE_LEFT:
            return StepResult(moved=self.move(-1))
        if command == Command.MOVE_RIGHT:
            return StepResult(moved=self.move(1))
        if command == Command.SOFT_DROP:
            return self.drop()
        if command == Command.ROTATE:
            return StepResult(rotated=self.rotate())
        if command == Command.QUIT:
            return self.quit()
        # RESTART is only meaningful at the game-over prompt
        return StepResult()

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            board=self.grid.clone_state(),
            piece=self.current_piece.copy() if self.current_piece is not None else None,
            score=self.score,
            status=self.status,
            lines_cleared_total=self.lines_cleared_total,
            pieces_locked=self.pieces_locked,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                if self.grid.is_inside(x, y):
                    state[y, x] = PIECE_OVERLAY
        return state
