from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    L = 4
    J = 5
    S = 6
    Z = 7


Shape = np.ndarray


def _frozen(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


BASE_SHAPES = {
    TetrominoType.I: _frozen([[1, 1, 1, 1]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.L: _frozen([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.J: _frozen([[0, 0, 1], [1, 1, 1]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
}


def rotate_clockwise(shape: Shape) -> Shape:
    """Return a new R x C -> C x R grid with ``out[i][j] == shape[R-1-j][i]``."""
    rotated = np.rot90(shape, 1, axes=(1, 0)).copy()
    rotated.setflags(write=False)
    return rotated


def filled_offsets(shape: Shape) -> List[Tuple[int, int]]:
    # (row, col) of every filled cell, row-major
    return [(int(i), int(j)) for i, j in np.argwhere(shape != 0)]


@dataclass
class Piece:
    """The falling piece: an occupancy grid and the board cell of its top-left corner."""

    kind: TetrominoType
    shape: Shape
    x: int = 0
    y: int = 0

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int) -> "Piece":
        shape = BASE_SHAPES[kind]
        return cls(kind=kind, shape=shape, x=board_width // 2 - shape.shape[1] // 2, y=0)

    def rotated_shape(self) -> Shape:
        return rotate_clockwise(self.shape)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        return [(origin_x + j, origin_y + i) for i, j in filled_offsets(self.shape)]

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)

    def copy(self) -> "Piece":
        # shapes are read-only, sharing them is safe
        return Piece(self.kind, self.shape, self.x, self.y)
