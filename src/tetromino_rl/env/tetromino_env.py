from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_rl.game import BOARD_HEIGHT, BOARD_WIDTH, Command, GameState, TetrominoEngine, TetrominoType
from tetromino_rl.game import grid
from tetromino_rl.game.rules import ScoringRules


class EnvAction(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    HOLD = 6
    NONE = 7


ACTION_TO_COMMAND: Dict[EnvAction, Optional[Command]] = {
    EnvAction.LEFT: Command.MOVE_LEFT,
    EnvAction.RIGHT: Command.MOVE_RIGHT,
    EnvAction.ROTATE_CW: Command.ROTATE_CW,
    EnvAction.ROTATE_CCW: Command.ROTATE_CCW,
    EnvAction.SOFT_DROP: Command.SOFT_DROP,
    EnvAction.HARD_DROP: Command.HARD_DROP,
    EnvAction.HOLD: Command.HOLD,
    EnvAction.NONE: None,
}


@dataclass
class EnvConfig:
    random_seed: Optional[int] = None
    gravity: bool = True
    max_episode_steps: int = 5000
    reward_weights: Dict[str, float] = field(
        default_factory=lambda: {
            "score": 0.01,      # per engine point gained
            "lines": 1.0,       # per line cleared
            "holes": 0.1,       # penalize holes created
            "height": 0.02,     # penalize max height increase
            "bumpiness": 0.01,  # penalize surface roughness increase
        }
    )
    terminal_penalty: float = -1.0


def _kind_index(piece) -> int:
    return 0 if piece is None else int(piece.kind)


class TetrominoEnv(gym.Env):
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[EnvConfig] = None, render_mode: Optional[str] = None,
                 rules: Optional[ScoringRules] = None) -> None:
        super().__init__()
        self.config = config or EnvConfig()
        self.render_mode = render_mode
        self.engine = TetrominoEngine(rules=rules, rng=random.Random(self.config.random_seed))
        self.state: GameState = self.engine.initial_state()

        kinds = len(TetrominoType)
        # Board overlay: locked cells 1..7, falling piece -1..-7
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-kinds, high=kinds, shape=(BOARD_HEIGHT, BOARD_WIDTH), dtype=np.int8),
                "current": spaces.Discrete(kinds + 1),
                "next": spaces.Discrete(kinds + 1),
                "hold": spaces.Discrete(kinds + 1),
                "can_hold": spaces.Discrete(2),
            }
        )
        self.action_space = spaces.Discrete(len(EnvAction))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        piece = self.state.current_piece
        board = grid.board_with_piece(
            self.state.board, piece, value=None if piece is None else -int(piece.kind)
        )
        return {
            "board": board.astype(np.int8),
            "current": _kind_index(piece),
            "next": _kind_index(self.state.next_piece),
            "hold": _kind_index(self.state.hold_piece),
            "can_hold": int(self.state.can_hold),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.state.score,
            "lines": self.state.lines,
            "level": self.state.level,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
        self.state = self.engine.apply(self.engine.initial_state(), Command.START)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        before = self.state
        command = ACTION_TO_COMMAND[EnvAction(int(action))]
        if command is not None:
            self.state = self.engine.apply(self.state, command)
        if self.config.gravity and command not in (Command.SOFT_DROP, Command.HARD_DROP):
            self.state = self.engine.apply(self.state, Command.TICK)
        self._steps += 1

        reward_components = self._reward_components(before, self.state)
        terminated = bool(self.state.is_game_over)
        truncated = not terminated and self._steps >= self.config.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.config.terminal_penalty
        reward = float(sum(reward_components.values()))

        info = self._get_info()
        info["reward_components"] = reward_components
        return self._get_obs(), reward, terminated, truncated, info

    def _reward_components(self, before: GameState, after: GameState) -> Dict[str, float]:
        w = self.config.reward_weights
        # Holes, height and bumpiness only change when a piece locks
        holes_delta = grid.count_holes(after.board) - grid.count_holes(before.board)
        height_delta = grid.max_height(after.board) - grid.max_height(before.board)
        bumpiness_delta = grid.bumpiness(after.board) - grid.bumpiness(before.board)
        return {
            "score": w["score"] * float(after.score - before.score),
            "lines": w["lines"] * float(after.lines - before.lines),
            "holes": -w["holes"] * float(max(0, holes_delta)),
            "height": -w["height"] * float(max(0, height_delta)),
            "bumpiness": -w["bumpiness"] * float(max(0, bumpiness_delta)),
        }

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            from tetromino_rl.visualization.palette import color_for_value

            board = grid.board_with_piece(self.state.board, self.state.current_piece)
            cell = 12
            h, w = board.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(board[y, x]))
            return img
        # human rendering delegated to visualization.human_play
        return None

    def close(self) -> None:
        pass
