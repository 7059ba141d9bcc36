"""Game module for Tetromino RL.

Exports the core game engine and supporting types:
- TetrominoType, Piece: piece catalog and rotation
- new_bag: 7-bag randomizer
- grid helpers: collision, stamping and line clearing on numpy boards
- ScoringRules: scoring, leveling and gravity cadence
- TetrominoEngine, GameState, Command: the pure game-state reducer
- GravityClock: turns elapsed time into natural-fall ticks
"""

from .bag import draw, new_bag
from .clock import GravityClock
from .core import Command, GamePhase, GameState, TetrominoEngine, ghost_piece, render_board
from .grid import ClearResult
from .pieces import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    Piece,
    TetrominoType,
    create_piece,
    rotate_clockwise,
    rotate_counter_clockwise,
    shape_of,
)
from .rules import ScoringRules, drop_interval_ms, level_for_lines, line_score
from .snapshot import SnapshotError, load_state

__all__ = [
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "TetrominoType",
    "Piece",
    "shape_of",
    "create_piece",
    "rotate_clockwise",
    "rotate_counter_clockwise",
    "new_bag",
    "draw",
    "ClearResult",
    "ScoringRules",
    "line_score",
    "level_for_lines",
    "drop_interval_ms",
    "Command",
    "GamePhase",
    "GameState",
    "TetrominoEngine",
    "ghost_piece",
    "render_board",
    "GravityClock",
    "SnapshotError",
    "load_state",
]
