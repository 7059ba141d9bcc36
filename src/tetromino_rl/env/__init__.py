"""Gymnasium environments for Tetromino RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the 10x20 falling-block environment (8 discrete actions)
register(
    id="Tetromino-10x20-v0",
    entry_point="tetromino_rl.env.tetromino_env:TetrominoEnv",
)

__all__ = ["Tetromino-10x20-v0"]
