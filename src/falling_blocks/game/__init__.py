"""Game module for Falling Blocks.

Exports the rules engine and its adapters:
- Grid: fixed-size board, collision checks and line clearing
- Piece, ShapeSpec, SHAPES, PieceFactory: tetrominoes and random spawning
- Session, NudgeResult: grid + falling piece + cleared-line counter
- GameConfig, Driver: locked access, gravity cadence, pause, speed, autosave
- to_dict, from_dict, save_state, load_state, load_or_new: JSON persistence
"""

from .errors import StateError
from .grid import Grid
from .pieces import SHAPES, Piece, PieceFactory, ShapeSpec
from .session import NudgeResult, Session
from .state import from_dict, load_or_new, load_state, save_state, to_dict
from .driver import Driver, GameConfig

__all__ = [
    "StateError",
    "Grid",
    "SHAPES",
    "Piece",
    "PieceFactory",
    "ShapeSpec",
    "NudgeResult",
    "Session",
    "from_dict",
    "load_or_new",
    "load_state",
    "save_state",
    "to_dict",
    "Driver",
    "GameConfig",
]
