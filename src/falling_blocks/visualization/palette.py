from __future__ import annotations

from typing import Tuple

EMPTY = (50, 50, 50)

# Indexed by colour code; 0 is an empty cell.
PALETTE = {
    0: EMPTY,
    1: (255, 255, 0),    # T
    2: (65, 105, 225),   # O
    3: (255, 0, 0),      # J
    4: (255, 165, 0),    # L
    5: (124, 252, 0),    # I
    6: (199, 21, 133),   # Z
    7: (255, 228, 225),  # S
}


def color_for_value(v: int) -> Tuple[int, int, int]:
    return PALETTE.get(v, (200, 200, 200))
