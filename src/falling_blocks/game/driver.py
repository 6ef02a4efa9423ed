from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .pieces import PieceFactory
from .session import NudgeResult, Session
from .state import load_or_new, save_state

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    # Gravity fires every (base_speed - speed) ticks
    base_speed: int = 21
    state_path: Optional[str] = "state.json"
    autosave: bool = True


class Driver:
    """Owns one :class:`Session` and serialises every call into it.

    Input handlers and the frame loop may run on different threads; each
    public method holds ``self.lock`` for exactly one session call.
    """

    def __init__(self, config: Optional[GameConfig] = None, factory: Optional[PieceFactory] = None) -> None:
        self.config = config or GameConfig()
        self.factory = factory or PieceFactory(seed=self.config.random_seed)
        self.lock = threading.Lock()
        self.paused = False
        self.speed = 0
        self.ticks = 0
        if self.config.state_path:
            self.session = load_or_new(
                self.config.state_path, self.config.width, self.config.height, self.factory
            )
        else:
            self.session = Session(self.config.width, self.config.height, self.factory)

    @property
    def lines_cleared(self) -> int:
        return self.session.lines_cleared

    @property
    def gravity_interval(self) -> int:
        return self.config.base_speed - self.speed

    def nudge(self, delta: int, vertical: bool) -> Optional[NudgeResult]:
        if self.paused:
            return None
        with self.lock:
            return self.session.nudge(delta, vertical)

    def rotate(self) -> bool:
        if self.paused:
            return False
        with self.lock:
            return self.session.rotate_block()

    def toggle_pause(self) -> None:
        self.paused = not self.paused

    def speed_up(self) -> None:
        if self.speed < self.config.base_speed - 1:
            self.speed += 1

    def slow_down(self) -> None:
        if self.speed > -(self.config.base_speed - 1):
            self.speed -= 1

    def clear(self) -> None:
        """Throw the current game away and start a fresh session."""
        with self.lock:
            self.session = Session(self.config.width, self.config.height, self.factory)

    def save(self) -> None:
        if not self.config.state_path:
            return
        try:
            save_state(self.session, self.config.state_path)
        except OSError as exc:
            logger.warning("Autosave to %s failed: %s", self.config.state_path, exc)

    def tick(self) -> np.ndarray:
        """Advance one frame and return the board to draw."""
        with self.lock:
            if not self.paused:
                if self.ticks % self.gravity_interval == 0:
                    if self.config.autosave:
                        self.save()
                    self.session.nudge(1, vertical=True)
                self.session.clear_complete_lines()
                self.ticks += 1
            return self.session.snapshot()

    def snapshot(self) -> np.ndarray:
        with self.lock:
            return self.session.snapshot()
