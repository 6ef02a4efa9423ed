from __future__ import annotations

import itertools
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class ShapeSpec:
    name: str
    color: int
    width: int
    height: int
    matrix: Tuple[int, ...]


# One entry per tetromino; the colour code doubles as the cell value.
SHAPES: Tuple[ShapeSpec, ...] = (
    ShapeSpec("T", 1, 3, 3, (0, 1, 0,
                             1, 1, 1,
                             0, 0, 0)),
    ShapeSpec("O", 2, 2, 2, (2, 2,
                             2, 2)),
    ShapeSpec("J", 3, 3, 3, (3, 3, 0,
                             0, 3, 0,
                             0, 3, 0)),
    ShapeSpec("L", 4, 3, 3, (0, 4, 4,
                             0, 4, 0,
                             0, 4, 0)),
    ShapeSpec("I", 5, 4, 4, (0, 0, 0, 0,
                             5, 5, 5, 5,
                             0, 0, 0, 0,
                             0, 0, 0, 0)),
    ShapeSpec("Z", 6, 3, 3, (6, 6, 0,
                             0, 6, 6,
                             0, 0, 0)),
    ShapeSpec("S", 7, 3, 3, (0, 7, 7,
                             7, 7, 0,
                             0, 0, 0)),
)


@dataclass(eq=False)
class Piece:
    width: int
    height: int
    matrix: np.ndarray = field(repr=False)
    x: int = 0
    y: int = 0

    def __post_init__(self) -> None:
        self.matrix = np.asarray(self.matrix, dtype=np.int8).reshape(-1)
        if self.matrix.size != self.width * self.height:
            raise ValueError(
                f"matrix has {self.matrix.size} cells, expected {self.width}x{self.height}"
            )

    @classmethod
    def from_spec(cls, spec: ShapeSpec) -> "Piece":
        return cls(spec.width, spec.height, np.array(spec.matrix, dtype=np.int8))

    def copy(self) -> "Piece":
        return Piece(self.width, self.height, self.matrix.copy(), self.x, self.y)

    def translated(self, dx: int, dy: int) -> "Piece":
        moved = self.copy()
        moved.x += dx
        moved.y += dy
        return moved

    def rotate(self) -> None:
        """Rotate the matrix 90 degrees clockwise in place.

        Width and height are left as they are, which only round-trips for
        square bounding boxes (all of ``SHAPES`` are square).
        """
        source = self.matrix.copy()
        for i, value in enumerate(source):
            x = i % self.width
            y = i // self.width
            self.matrix[x * self.height + (self.height - 1 - y)] = value

    def cells(self) -> List[Tuple[int, int]]:
        """Absolute grid coordinates of the non-empty cells."""
        out: List[Tuple[int, int]] = []
        for i in np.flatnonzero(self.matrix):
            out.append((self.x + int(i) % self.width, self.y + int(i) // self.width))
        return out

    @property
    def color(self) -> int:
        filled = self.matrix[self.matrix != 0]
        return int(filled[0]) if filled.size else 0


Draw = Callable[[int], int]


class PieceFactory:
    """Draws pieces uniformly from a shape table.

    ``draw(n)`` must return an index in ``range(n)``; pass a fixed sequence
    to make spawns deterministic.
    """

    def __init__(
        self,
        shapes: Sequence[ShapeSpec] = SHAPES,
        draw: Optional[Draw] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.shapes = tuple(shapes)
        if draw is None:
            draw = random.Random(seed).randrange
        self.draw = draw

    def next_piece(self) -> Piece:
        return Piece.from_spec(self.shapes[self.draw(len(self.shapes))])

    @classmethod
    def from_sequence(cls, indices: Sequence[int]) -> "PieceFactory":
        """Factory that cycles through ``indices`` in order."""
        order = itertools.cycle(indices)
        return cls(draw=lambda n: next(order) % n)
