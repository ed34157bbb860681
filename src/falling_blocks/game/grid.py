from __future__ import annotations

from enum import IntEnum

import numpy as np

from .pieces import Shape, filled_offsets


BOARD_WIDTH = 12
BOARD_HEIGHT = 20


class Cell(IntEnum):
    EMPTY = 0
    FILLED = 1


class GameGrid:
    """Fixed 12x20 occupancy grid.

    Row 0 is the top of the visible board. Cells only record occupancy, not
    which piece filled them. Only `lock` and `clear_full_rows` mutate it.
    """

    def __init__(self) -> None:
        self.width = BOARD_WIDTH
        self.height = BOARD_HEIGHT
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(Cell.EMPTY)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_filled(self, x: int, y: int) -> bool:
        return self.grid[y, x] == Cell.FILLED

    def collides(self, shape: Shape, origin_x: int, origin_y: int) -> bool:
        """True if `shape` placed at the origin leaves the board or overlaps a filled cell.

        Cells above row 0 are allowed and only checked against the side walls,
        so pieces may spawn and rotate partly above the visible board.
        """
        for i, j in filled_offsets(shape):
            bx = origin_x + j
            by = origin_y + i
            if bx < 0 or bx >= self.width or by >= self.height:
                return True
            if by >= 0 and self.grid[by, bx] == Cell.FILLED:
                return True
        return False

    def lock(self, shape: Shape, origin_x: int, origin_y: int) -> int:
        """Fill the board cells covered by `shape`; returns how many were written.

        Cells still above the board are dropped.
        """
        written = 0
        for i, j in filled_offsets(shape):
            bx = origin_x + j
            by = origin_y + i
            if self.is_inside(bx, by):
                self.grid[by, bx] = Cell.FILLED
                written += 1
        return written

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] == Cell.FILLED))

    def clear_full_rows(self) -> int:
        """Remove full rows bottom-up in one sweep and return how many were removed.

        After a removal everything above shifts down by one and the same row
        index is tested again, since a new row has moved into it.
        """
        cleared = 0
        y = self.height - 1
        while y >= 0:
            if self.is_row_full(y):
                self.grid[1 : y + 1] = self.grid[0:y].copy()
                self.grid[0] = Cell.EMPTY
                cleared += 1
                continue
            y -= 1
        return cleared

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
