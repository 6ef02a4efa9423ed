from __future__ import annotations

from enum import IntEnum
from typing import Optional

import numpy as np

from .grid import Grid
from .pieces import Piece, PieceFactory


class NudgeResult(IntEnum):
    MOVED = 0
    BLOCKED = 1
    LOCKED = 2


class Session:
    """One game: the grid, the falling piece and the cleared-line count.

    Not thread-safe. A driver that calls in from several threads must hold
    a single lock around every call (see ``falling_blocks.game.driver``).
    """

    def __init__(
        self,
        width: int,
        height: int,
        factory: Optional[PieceFactory] = None,
        grid: Optional[Grid] = None,
        piece: Optional[Piece] = None,
        lines_cleared: int = 0,
    ) -> None:
        self.factory = factory or PieceFactory()
        self.grid = grid if grid is not None else Grid(width, height)
        self.lines_cleared = lines_cleared
        self.piece: Piece = piece if piece is not None else self._spawn_piece()

    @classmethod
    def restore(
        cls,
        grid: Grid,
        piece: Piece,
        lines_cleared: int = 0,
        factory: Optional[PieceFactory] = None,
    ) -> "Session":
        """Session resumed from existing state instead of a fresh spawn."""
        return cls(grid.width, grid.height, factory, grid=grid, piece=piece, lines_cleared=lines_cleared)

    def _spawn_piece(self) -> Piece:
        piece = self.factory.next_piece()
        piece.x = self.grid.width // 2 - piece.width // 2
        piece.y = 0
        return piece

    def nudge(self, delta: int, vertical: bool) -> NudgeResult:
        if vertical:
            moved = self.piece.translated(0, delta)
        else:
            moved = self.piece.translated(delta, 0)
        if self.grid.can_place(moved):
            self.piece = moved
            return NudgeResult.MOVED
        if vertical and delta > 0:
            # Falling piece hit the floor or the stack: lock it where it was
            self.grid.place_piece(self.piece)
            self.piece = self._spawn_piece()
            return NudgeResult.LOCKED
        return NudgeResult.BLOCKED

    def rotate_block(self) -> bool:
        rotated = self.piece.copy()
        rotated.rotate()
        if self.grid.can_place(rotated):
            self.piece = rotated
            return True
        return False

    def clear_complete_lines(self) -> int:
        lines = self.grid.clear_lines()
        self.lines_cleared += lines
        return lines

    def piece_fits(self) -> bool:
        return self.grid.can_place(self.piece)

    def snapshot(self) -> np.ndarray:
        return self.grid.composite(self.piece)
