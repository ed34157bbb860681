from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import BOARD_HEIGHT, BOARD_WIDTH, Command, FallingBlocksGame, GameConfig


class FallingBlocksEnv(gym.Env):
    """
    Single-agent environment over the falling blocks engine.

    Actions (5 total):
      0: Move Left
      1: Move Right
      2: Soft Drop
      3: Rotate
      4: No-op

    Every step applies the action and then one gravity tick, so the piece
    keeps falling whatever the agent does. The reward is the score gained.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    ACTIONS = (Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.SOFT_DROP, Command.ROTATE, None)

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = FallingBlocksGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.observation_space = spaces.Box(low=0, high=2, shape=(BOARD_HEIGHT, BOARD_WIDTH), dtype=np.int8)
        self.action_space = spaces.Discrete(len(self.ACTIONS))
        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_locked": self.game.pieces_locked,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self.game.get_state(), self._get_info()

    def step(self, action):
        command = self.ACTIONS[int(action)]
        score_before = self.game.score
        if command is not None:
            self.game.apply(command)
        self.game.tick()
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        return self.game.get_state(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.get_state()
            cell = 12
            h, w = grid.shape
            palette = {0: (30, 30, 36), 1: (200, 200, 200), 2: (0, 240, 240)}
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = palette[int(grid[y, x])]
            return img
        return None

    def close(self) -> None:
        pass
