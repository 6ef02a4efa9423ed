from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .pieces import Piece


class Grid:
    """Fixed-size board of colour codes.

    Cells are stored flat and row-major (index ``y * width + x``). 0 is an
    empty cell and 1..7 are the colours of locked pieces.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.cells = np.zeros(self.width * self.height, dtype=np.int8)

    @property
    def board(self) -> np.ndarray:
        """2-D (height, width) view onto ``cells``."""
        return self.cells.reshape(self.height, self.width)

    def reset(self) -> None:
        self.cells.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def can_place(self, piece: Piece) -> bool:
        for x, y in piece.cells():
            if not self.is_inside(x, y):
                return False
            if self.cells[y * self.width + x] != 0:
                return False
        return True

    def place_piece(self, piece: Piece) -> None:
        """Write the piece's colours into the grid.

        Assumes the position was already validated with ``can_place``.
        """
        for i, value in enumerate(piece.matrix):
            if value == 0:
                continue
            x = piece.x + i % piece.width
            y = piece.y + i // piece.width
            self.cells[y * self.width + x] = value

    def _row_complete(self, row: int) -> bool:
        start = row * self.width
        return bool(np.all(self.cells[start : start + self.width] != 0))

    def clear_lines(self) -> int:
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if not self._row_complete(row):
                row -= 1
                continue
            end = row * self.width
            # Shift everything above down by one row, then blank the top row.
            # The same row index is examined again since it now holds the row above.
            self.cells[self.width : end + self.width] = self.cells[:end].copy()
            self.cells[: self.width] = 0
            cleared += 1
        return cleared

    def composite(self, piece: Piece | None) -> np.ndarray:
        """Board copy with the falling piece drawn on top, for rendering."""
        state = self.board.copy()
        if piece is not None:
            for i, value in enumerate(piece.matrix):
                if value == 0:
                    continue
                x = piece.x + i % piece.width
                y = piece.y + i // piece.width
                if self.is_inside(x, y):
                    state[y, x] = value
        return state

    def copy(self) -> "Grid":
        new_grid = Grid(self.width, self.height)
        new_grid.cells = self.cells.copy()
        return new_grid
