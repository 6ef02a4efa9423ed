from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import NudgeResult, PieceFactory, Session
from falling_blocks.visualization.palette import color_for_value


class Action(IntEnum):
    NONE = 0
    LEFT = 1
    RIGHT = 2
    DOWN = 3
    ROTATE = 4


class FallingBlocksEnv(gym.Env):
    """Single-player falling blocks with one key press per step.

    After the action is applied, gravity pulls the piece down one row every
    ``gravity_every`` steps and complete lines are cleared. The reward is
    the number of lines cleared during the step. An episode terminates when
    a freshly spawned piece overlaps the stack.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        width: int = 10,
        height: int = 20,
        gravity_every: int = 1,
        max_episode_steps: int = 5000,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        if gravity_every < 1:
            raise ValueError("gravity_every must be >= 1")
        self.width = int(width)
        self.height = int(height)
        self.gravity_every = int(gravity_every)
        self.max_episode_steps = int(max_episode_steps)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=0, high=7, shape=(self.height, self.width), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(Action))

        self.session = Session(self.width, self.height)
        self._steps = 0
        self._pieces_locked = 0

    def _get_obs(self) -> np.ndarray:
        return self.session.snapshot().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "lines_cleared": self.session.lines_cleared,
            "pieces_locked": self._pieces_locked,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        factory = PieceFactory(draw=lambda n: int(self.np_random.integers(n)))
        self.session = Session(self.width, self.height, factory)
        self._steps = 0
        self._pieces_locked = 0
        return self._get_obs(), self._get_info()

    def _apply(self, action: Action) -> Optional[NudgeResult]:
        if action == Action.LEFT:
            return self.session.nudge(-1, vertical=False)
        if action == Action.RIGHT:
            return self.session.nudge(1, vertical=False)
        if action == Action.DOWN:
            return self.session.nudge(1, vertical=True)
        if action == Action.ROTATE:
            self.session.rotate_block()
        return None

    def step(self, action: int):
        results = [self._apply(Action(int(action)))]
        self._steps += 1
        if self._steps % self.gravity_every == 0:
            results.append(self.session.nudge(1, vertical=True))
        self._pieces_locked += sum(1 for r in results if r == NudgeResult.LOCKED)

        lines = self.session.clear_complete_lines()
        reward = float(lines)
        terminated = not self.session.piece_fits()
        truncated = self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.session.snapshot()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = color_for_value(int(state[y, x]))
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
