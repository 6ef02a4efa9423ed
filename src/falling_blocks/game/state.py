"""JSON save/restore for a :class:`Session`.

The layout mirrors the in-memory model one to one::

    {"grid": {"width", "height", "cells"},
     "piece": {"width", "height", "x", "y", "matrix"},
     "lines_cleared": int}
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import numpy as np

from .errors import StateError
from .grid import Grid
from .pieces import Piece, PieceFactory
from .session import Session

logger = logging.getLogger(__name__)


def to_dict(session: Session) -> Dict[str, Any]:
    grid = session.grid
    piece = session.piece
    return {
        "grid": {
            "width": grid.width,
            "height": grid.height,
            "cells": [int(v) for v in grid.cells],
        },
        "piece": {
            "width": piece.width,
            "height": piece.height,
            "x": piece.x,
            "y": piece.y,
            "matrix": [int(v) for v in piece.matrix],
        },
        "lines_cleared": session.lines_cleared,
    }


def _require_int(record: Dict[str, Any], key: str, minimum: Optional[int] = None) -> int:
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise StateError(f"{key!r} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise StateError(f"{key!r} must be >= {minimum}, got {value}")
    return value


def _require_colors(record: Dict[str, Any], key: str, length: int) -> np.ndarray:
    values = record.get(key)
    if not isinstance(values, list) or len(values) != length:
        raise StateError(f"{key!r} must be a list of {length} colour codes")
    if any(isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 7 for v in values):
        raise StateError(f"{key!r} holds values outside 0..7")
    return np.array(values, dtype=np.int8)


def _require_record(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    record = data.get(key)
    if not isinstance(record, dict):
        raise StateError(f"missing {key!r} record")
    return record


def from_dict(data: Any, factory: Optional[PieceFactory] = None) -> Session:
    """Rebuild a session from :func:`to_dict` output.

    Raises :class:`StateError` if anything is missing or out of range.
    """
    if not isinstance(data, dict):
        raise StateError("state must be a JSON object")

    grid_rec = _require_record(data, "grid")
    width = _require_int(grid_rec, "width", minimum=1)
    height = _require_int(grid_rec, "height", minimum=1)
    grid = Grid(width, height)
    grid.cells = _require_colors(grid_rec, "cells", width * height)

    piece_rec = _require_record(data, "piece")
    p_width = _require_int(piece_rec, "width", minimum=1)
    p_height = _require_int(piece_rec, "height", minimum=1)
    piece = Piece(
        p_width,
        p_height,
        _require_colors(piece_rec, "matrix", p_width * p_height),
        _require_int(piece_rec, "x"),
        _require_int(piece_rec, "y"),
    )
    # Overlap with the stack is allowed (a saved top-out), leaving the grid is not
    if not all(grid.is_inside(x, y) for x, y in piece.cells()):
        raise StateError(f"piece at ({piece.x}, {piece.y}) lies outside the {width}x{height} grid")

    lines_cleared = _require_int(data, "lines_cleared", minimum=0)
    return Session.restore(grid, piece, lines_cleared, factory)


def save_state(session: Session, path: str | os.PathLike) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(to_dict(session), fh)


def load_state(path: str | os.PathLike, factory: Optional[PieceFactory] = None) -> Session:
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except ValueError as exc:
            raise StateError(f"{path}: not valid JSON ({exc})") from exc
    return from_dict(data, factory)


def load_or_new(
    path: str | os.PathLike,
    width: int,
    height: int,
    factory: Optional[PieceFactory] = None,
) -> Session:
    """Restore the session saved at ``path``, or start a fresh one.

    A missing file is the normal first-run case. An unreadable or corrupt
    file, or one saved for a different grid size, is logged and replaced by
    a fresh session.
    """
    if not os.path.exists(path):
        return Session(width, height, factory)
    try:
        session = load_state(path, factory)
        saved = (session.grid.width, session.grid.height)
        if saved != (width, height):
            raise StateError(f"saved grid is {saved[0]}x{saved[1]}, expected {width}x{height}")
        return session
    except (OSError, StateError) as exc:
        logger.warning("Could not restore saved game from %s, starting fresh: %s", path, exc)
        return Session(width, height, factory)
