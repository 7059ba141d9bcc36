from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from . import bag as bag_ops
from . import grid
from .bag import Bag
from .pieces import Piece, create_piece, rotate_clockwise, rotate_counter_clockwise
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Command(IntEnum):
    START = 0
    MOVE_LEFT = 1
    MOVE_RIGHT = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    ROTATE_CW = 5
    ROTATE_CCW = 6
    HOLD = 7
    PAUSE = 8
    RESUME = 9
    RESET = 10
    TICK = 11


class GamePhase(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


# Commands that only act on a falling piece during play
_PIECE_COMMANDS = frozenset(
    {
        Command.MOVE_LEFT,
        Command.MOVE_RIGHT,
        Command.SOFT_DROP,
        Command.HARD_DROP,
        Command.ROTATE_CW,
        Command.ROTATE_CCW,
        Command.HOLD,
        Command.TICK,
    }
)


@dataclass(frozen=True, eq=False)
class GameState:
    board: np.ndarray
    current_piece: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    hold_piece: Optional[Piece] = None
    can_hold: bool = True
    score: int = 0
    lines: int = 0
    level: int = 1
    is_game_over: bool = False
    is_paused: bool = False
    phase: GamePhase = GamePhase.MENU
    bag: Bag = ()
    bag_index: int = 0
    player_name: str = ""

    def same_as(self, other: "GameState") -> bool:
        """Value equality (dataclass eq is disabled because of the array)."""
        if not isinstance(other, GameState):
            return False
        return (
            np.array_equal(self.board, other.board)
            and self.current_piece == other.current_piece
            and self.next_piece == other.next_piece
            and self.hold_piece == other.hold_piece
            and self.can_hold == other.can_hold
            and self.score == other.score
            and self.lines == other.lines
            and self.level == other.level
            and self.is_game_over == other.is_game_over
            and self.is_paused == other.is_paused
            and self.phase == other.phase
            and tuple(self.bag) == tuple(other.bag)
            and self.bag_index == other.bag_index
            and self.player_name == other.player_name
        )


class TetrominoEngine:
    """Pure transition function over GameState values.

    The engine holds no game state of its own: `apply` takes a state and a
    command and returns a new state, or the same object when the command is
    rejected. The only side channel is the injected random source used to
    shuffle new bags.
    """

    def __init__(self, rules: Optional[ScoringRules] = None, rng: Optional[random.Random] = None) -> None:
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random()

    def initial_state(self, player_name: str = "") -> GameState:
        name = player_name.strip() if isinstance(player_name, str) else ""
        return GameState(board=grid.create_empty_board(), player_name=name)

    def apply(self, state: GameState, command: object) -> GameState:
        try:
            command = Command(command)
        except (ValueError, TypeError):
            logger.warning("Ignoring unknown game command: %r", command)
            return state

        if command in _PIECE_COMMANDS and not self._can_act(state):
            return state

        if command == Command.START:
            return self._start(state)
        if command == Command.MOVE_LEFT:
            return self._move(state, -1, 0)
        if command == Command.MOVE_RIGHT:
            return self._move(state, 1, 0)
        if command == Command.ROTATE_CW:
            return self._rotate(state, clockwise=True)
        if command == Command.ROTATE_CCW:
            return self._rotate(state, clockwise=False)
        if command in (Command.SOFT_DROP, Command.TICK):
            # Gravity is a soft drop issued by the clock
            return self._fall(state)
        if command == Command.HARD_DROP:
            return self._hard_drop(state)
        if command == Command.HOLD:
            return self._hold(state)
        if command == Command.PAUSE:
            if state.phase != GamePhase.PLAYING:
                return state
            return replace(state, is_paused=True, phase=GamePhase.PAUSED)
        if command == Command.RESUME:
            if state.phase != GamePhase.PAUSED:
                return state
            return replace(state, is_paused=False, phase=GamePhase.PLAYING)
        if command == Command.RESET:
            return self.initial_state(state.player_name)
        return state

    @staticmethod
    def _can_act(state: GameState) -> bool:
        return (
            state.phase == GamePhase.PLAYING
            and not state.is_paused
            and not state.is_game_over
            and state.current_piece is not None
        )

    def _start(self, state: GameState) -> GameState:
        new_bag = bag_ops.new_bag(self.rng)
        logger.debug("Starting game with bag %s", "".join(k.name for k in new_bag))
        return replace(
            self.initial_state(state.player_name),
            current_piece=create_piece(new_bag[0]),
            next_piece=create_piece(new_bag[1]),
            phase=GamePhase.PLAYING,
            bag=new_bag,
            bag_index=2,
        )

    def _move(self, state: GameState, dx: int, dy: int) -> GameState:
        piece = state.current_piece
        assert piece is not None
        if not grid.can_place(state.board, piece, piece.x + dx, piece.y + dy):
            return state
        return replace(state, current_piece=piece.moved(dx, dy))

    def _rotate(self, state: GameState, clockwise: bool) -> GameState:
        assert state.current_piece is not None
        rotate = rotate_clockwise if clockwise else rotate_counter_clockwise
        rotated = rotate(state.current_piece)
        # No wall kicks: the rotation must fit where it stands
        if not grid.can_place(state.board, rotated):
            return state
        return replace(state, current_piece=rotated)

    def _fall(self, state: GameState) -> GameState:
        piece = state.current_piece
        assert piece is not None
        if grid.can_place(state.board, piece, piece.x, piece.y + 1):
            return replace(state, current_piece=piece.moved(0, 1), score=state.score + self.rules.soft_drop_score(1))
        return self._lock(state, piece)

    def _hard_drop(self, state: GameState) -> GameState:
        piece = state.current_piece
        assert piece is not None
        distance = grid.hard_drop_distance(state.board, piece)
        dropped = replace(state, score=state.score + self.rules.hard_drop_score(distance))
        return self._lock(dropped, piece.moved(0, distance))

    def _lock(self, state: GameState, piece: Piece) -> GameState:
        placed = grid.place(state.board, piece)
        cleared = grid.clear_lines(placed)
        lines = state.lines + cleared.count
        score = state.score + self.rules.score_for_lines(cleared.count, state.level)
        level = self.rules.level_for_lines(lines)
        logger.debug(
            "Locked %s at (%d, %d), cleared %d line(s)", piece.kind.name, piece.x, piece.y, cleared.count
        )
        locked = replace(
            state,
            board=cleared.board,
            current_piece=None,
            score=score,
            lines=lines,
            level=level,
            can_hold=True,
        )
        return self._spawn(locked)

    def _spawn(self, state: GameState) -> GameState:
        """Promote the next piece and draw a new one from the bag."""
        assert state.next_piece is not None
        promoted = state.next_piece.at_spawn()
        if not grid.can_place(state.board, promoted):
            logger.debug("Cannot spawn %s, game over at score %d", promoted.kind.name, state.score)
            return replace(
                state,
                current_piece=None,
                is_game_over=True,
                phase=GamePhase.GAME_OVER,
            )
        kind, new_bag, bag_index = bag_ops.draw(state.bag, state.bag_index, self.rng)
        return replace(
            state,
            current_piece=promoted,
            next_piece=create_piece(kind),
            bag=new_bag,
            bag_index=bag_index,
        )

    def _hold(self, state: GameState) -> GameState:
        if not state.can_hold:
            return state
        assert state.current_piece is not None
        held = state.current_piece.at_spawn()
        if state.hold_piece is None:
            return self._spawn(replace(state, hold_piece=held, can_hold=False))
        swapped = state.hold_piece.at_spawn()
        if not grid.can_place(state.board, swapped):
            return state
        return replace(state, current_piece=swapped, hold_piece=held, can_hold=False)


def ghost_piece(state: GameState) -> Optional[Piece]:
    if state.current_piece is None:
        return None
    return grid.ghost_piece(state.board, state.current_piece)


def render_board(state: GameState) -> np.ndarray:
    """Locked board with the falling piece overlaid."""
    return grid.board_with_piece(state.board, state.current_piece)
