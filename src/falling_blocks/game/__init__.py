"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- GameGrid: Fixed 12x20 board, collision, locking and row clearing
- Piece: Falling tetromino with clockwise rotation
- TetrominoType: Enum of available piece types
- ScoringRules: Points awarded per cleared row
- FallingBlocksGame: Game state machine (spawn, gravity, commands)
- GameScheduler: Gravity and input drivers sharing one lock
- run_sessions: Restart/quit loop around whole games
"""

from .grid import BOARD_HEIGHT, BOARD_WIDTH, Cell, GameGrid
from .pieces import BASE_SHAPES, Piece, TetrominoType, rotate_clockwise
from .rules import ScoringRules
from .core import (
    Command,
    FallingBlocksGame,
    GameConfig,
    GameOverReason,
    GameSnapshot,
    GameStatus,
    StepResult,
)
from .interfaces import InputSource, NullRenderer, QueueInputSource, Renderer
from .scheduler import GameScheduler, SchedulerError
from .session import run_sessions, wait_for_restart

__all__ = [
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "Cell",
    "GameGrid",
    "BASE_SHAPES",
    "Piece",
    "TetrominoType",
    "rotate_clockwise",
    "ScoringRules",
    "Command",
    "FallingBlocksGame",
    "GameConfig",
    "GameOverReason",
    "GameSnapshot",
    "GameStatus",
    "StepResult",
    "InputSource",
    "NullRenderer",
    "QueueInputSource",
    "Renderer",
    "GameScheduler",
    "SchedulerError",
    "run_sessions",
    "wait_for_restart",
]
