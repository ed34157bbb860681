from __future__ import annotations

import threading
from typing import Tuple

import numpy as np
import pygame

from falling_blocks.game import BOARD_HEIGHT, BOARD_WIDTH, Piece


EMPTY_COLOR = (20, 20, 26)
FILLED_COLOR = (200, 200, 200)
PIECE_COLOR = (0, 240, 240)
TEXT_COLOR = (240, 240, 0)
GAME_OVER_COLOR = (255, 100, 100)
BACKGROUND_COLOR = (10, 10, 14)

HELP_LINES = (
    "Left/Right  Move",
    "Up          Rotate",
    "Down        Drop",
    "Esc         Quit",
)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: EMPTY_COLOR,
        1: FILLED_COLOR,
        2: PIECE_COLOR,
    }
    return palette.get(int(v), (200, 200, 200))


class PygameRenderer:
    """Draws into an off-screen surface from any thread.

    The main thread calls `blit` to copy the surface to the display; the
    surface is guarded by its own lock because the drivers draw from their
    own threads.
    """

    def __init__(self, cell_size: int = 28, margin: int = 20, side_panel: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.board_w = BOARD_WIDTH * cell_size
        self.board_h = BOARD_HEIGHT * cell_size
        self.size = (margin * 3 + self.board_w + side_panel, margin * 2 + self.board_h)
        self.surface = pygame.Surface(self.size)
        self.font = pygame.font.SysFont(None, 24)
        self.big_font = pygame.font.SysFont(None, 42)
        self._lock = threading.Lock()
        self.surface.fill(BACKGROUND_COLOR)

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _draw_score(self, score: int) -> None:
        x0 = self.margin * 2 + self.board_w
        panel = pygame.Rect(x0, self.margin, self.size[0] - x0, self.board_h)
        self.surface.fill(BACKGROUND_COLOR, panel)
        img = self.font.render(f"Score: {score}", True, TEXT_COLOR)
        self.surface.blit(img, (x0, self.margin))
        for i, line in enumerate(HELP_LINES):
            img = self.font.render(line, True, (230, 230, 230))
            self.surface.blit(img, (x0, self.margin + 40 + i * 22))

    def render(self, board: np.ndarray, score: int) -> None:
        with self._lock:
            # clears the gaps between cells as well
            self.surface.fill(BACKGROUND_COLOR, pygame.Rect(self.margin, self.margin, self.board_w, self.board_h))
            h, w = board.shape
            for y in range(h):
                for x in range(w):
                    pygame.draw.rect(self.surface, _color_for_value(board[y, x]), self._cell_rect(x, y))
            self._draw_score(score)

    def render_piece_overlay(self, piece: Piece, visible: bool) -> None:
        color = PIECE_COLOR if visible else EMPTY_COLOR
        with self._lock:
            for x, y in piece.cells():
                if 0 <= x < BOARD_WIDTH and 0 <= y < BOARD_HEIGHT:
                    pygame.draw.rect(self.surface, color, self._cell_rect(x, y))

    def render_game_over(self, score: int) -> None:
        lines = [
            (self.big_font, "GAME OVER!", GAME_OVER_COLOR),
            (self.font, f"Score: {score}", TEXT_COLOR),
            (self.font, "R to restart, Esc to quit", TEXT_COLOR),
        ]
        with self._lock:
            cy = self.margin + self.board_h // 2 - 40
            for font, text, color in lines:
                img = font.render(text, True, color)
                rect = img.get_rect(center=(self.margin + self.board_w // 2, cy))
                self.surface.blit(img, rect)
                cy += rect.height + 8

    def blit(self, screen: pygame.Surface) -> None:
        with self._lock:
            screen.blit(self.surface, (0, 0))
