from __future__ import annotations

import queue
from typing import Optional, Protocol

import numpy as np

from .core import Command
from .pieces import Piece


class Renderer(Protocol):
    """Consumes read-only snapshots of the game; never mutates the engine."""

    def render(self, board: np.ndarray, score: int) -> None: ...

    def render_piece_overlay(self, piece: Piece, visible: bool) -> None: ...

    def render_game_over(self, score: int) -> None: ...


class InputSource(Protocol):
    def try_next(self) -> Optional[Command]:
        """Return the next pending command, or None without blocking."""
        ...


class QueueInputSource:
    """Thread-safe command buffer; producers `push`, the input driver drains it."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Command]" = queue.Queue()

    def push(self, command: Command) -> None:
        self._queue.put(command)

    def try_next(self) -> Optional[Command]:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def pending(self) -> int:
        return self._queue.qsize()


class NullRenderer:
    def render(self, board: np.ndarray, score: int) -> None:
        pass

    def render_piece_overlay(self, piece: Piece, visible: bool) -> None:
        pass

    def render_game_over(self, score: int) -> None:
        pass
