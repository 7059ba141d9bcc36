"""Plain-record snapshots of GameState for external stores.

A record only contains dicts, lists, strings, numbers, booleans and None,
so it can go through JSON (or any key-value store) unchanged. Board rows are
encoded as strings with one letter per filled cell and "." for empty cells.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import numpy as np

from .core import GamePhase, GameState, TetrominoEngine
from .grid import Board, validate_board
from .pieces import BOARD_HEIGHT, BOARD_WIDTH, EMPTY, Piece, TetrominoType

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1
EMPTY_CHAR = "."


class SnapshotError(ValueError):
    """Raised when a record does not describe a valid GameState."""


def _board_to_rows(board: Board) -> list[str]:
    return [
        "".join(EMPTY_CHAR if cell == EMPTY else TetrominoType(int(cell)).name for cell in row)
        for row in board
    ]


def _rows_to_board(rows: Any) -> Board:
    if not isinstance(rows, list) or len(rows) != BOARD_HEIGHT:
        raise SnapshotError(f"board must be a list of {BOARD_HEIGHT} rows")
    board = np.zeros((BOARD_HEIGHT, BOARD_WIDTH), dtype=np.int8)
    for y, row in enumerate(rows):
        if not isinstance(row, str) or len(row) != BOARD_WIDTH:
            raise SnapshotError(f"board row {y} must be a string of {BOARD_WIDTH} cells")
        for x, ch in enumerate(row):
            if ch != EMPTY_CHAR:
                board[y, x] = _kind(ch, f"board cell ({x}, {y})")
    if not validate_board(board):
        raise SnapshotError("board holds unknown cell values")
    board.flags.writeable = False
    return board


def _kind(value: Any, what: str) -> TetrominoType:
    try:
        return TetrominoType.parse(value)
    except ValueError:
        raise SnapshotError(f"{what}: unknown piece kind {value!r}") from None


def _int(record: Mapping[str, Any], key: str, minimum: Optional[int] = None) -> int:
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"{key} must be an integer")
    if minimum is not None and value < minimum:
        raise SnapshotError(f"{key} must be >= {minimum}")
    return value


def _bool(record: Mapping[str, Any], key: str) -> bool:
    value = record.get(key)
    if not isinstance(value, bool):
        raise SnapshotError(f"{key} must be a boolean")
    return value


def _piece_to_record(piece: Optional[Piece]) -> Optional[Dict[str, Any]]:
    if piece is None:
        return None
    return {"kind": piece.kind.name, "rotation": piece.rotation, "x": piece.x, "y": piece.y}


def _piece_from_record(record: Any, key: str) -> Optional[Piece]:
    if record is None:
        return None
    if not isinstance(record, Mapping):
        raise SnapshotError(f"{key} must be an object or null")
    return Piece(
        kind=_kind(record.get("kind"), key),
        rotation=_int(record, "rotation") % 4,
        x=_int(record, "x"),
        y=_int(record, "y"),
    )


def to_record(state: GameState) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "board": _board_to_rows(state.board),
        "current_piece": _piece_to_record(state.current_piece),
        "next_piece": _piece_to_record(state.next_piece),
        "hold_piece": _piece_to_record(state.hold_piece),
        "can_hold": state.can_hold,
        "score": state.score,
        "lines": state.lines,
        "level": state.level,
        "is_game_over": state.is_game_over,
        "is_paused": state.is_paused,
        "phase": state.phase.value,
        "bag": "".join(kind.name for kind in state.bag),
        "bag_index": state.bag_index,
        "player_name": state.player_name,
    }


def from_record(record: Any) -> GameState:
    """Rebuild a GameState, validating shape and enum membership."""
    if not isinstance(record, Mapping):
        raise SnapshotError("snapshot must be an object")
    if record.get("version") != SNAPSHOT_VERSION:
        raise SnapshotError(f"unsupported snapshot version {record.get('version')!r}")

    try:
        phase = GamePhase(record.get("phase"))
    except ValueError:
        raise SnapshotError(f"unknown phase {record.get('phase')!r}") from None

    bag_text = record.get("bag")
    if not isinstance(bag_text, str):
        raise SnapshotError("bag must be a string")
    bag = tuple(_kind(ch, "bag") for ch in bag_text)
    if bag and sorted(bag) != sorted(TetrominoType):
        raise SnapshotError("bag must hold each piece kind exactly once")
    bag_index = _int(record, "bag_index", 0)
    if bag_index > len(bag):
        raise SnapshotError("bag_index is past the end of the bag")

    player_name = record.get("player_name", "")
    if not isinstance(player_name, str):
        raise SnapshotError("player_name must be a string")

    state = GameState(
        board=_rows_to_board(record.get("board")),
        current_piece=_piece_from_record(record.get("current_piece"), "current_piece"),
        next_piece=_piece_from_record(record.get("next_piece"), "next_piece"),
        hold_piece=_piece_from_record(record.get("hold_piece"), "hold_piece"),
        can_hold=_bool(record, "can_hold"),
        score=_int(record, "score", 0),
        lines=_int(record, "lines", 0),
        level=_int(record, "level", 1),
        is_game_over=_bool(record, "is_game_over"),
        is_paused=_bool(record, "is_paused"),
        phase=phase,
        bag=bag,
        bag_index=bag_index,
        player_name=player_name,
    )
    if state.phase in (GamePhase.PLAYING, GamePhase.PAUSED) and (
        state.current_piece is None or state.next_piece is None
    ):
        raise SnapshotError("an active game needs a current and a next piece")
    if state.is_game_over != (state.phase == GamePhase.GAME_OVER):
        raise SnapshotError("is_game_over disagrees with phase")
    if state.is_paused != (state.phase == GamePhase.PAUSED):
        raise SnapshotError("is_paused disagrees with phase")
    return state


def load_state(record: Any, engine: Optional[TetrominoEngine] = None, player_name: str = "") -> GameState:
    """Restore a snapshot, falling back to a fresh game if it is invalid."""
    try:
        return from_record(record)
    except SnapshotError as exc:
        logger.warning("Discarding invalid game snapshot: %s", exc)
        return (engine or TetrominoEngine()).initial_state(player_name)


def dumps(state: GameState) -> str:
    return json.dumps(to_record(state))


def loads(text: str, engine: Optional[TetrominoEngine] = None, player_name: str = "") -> GameState:
    try:
        record = json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.warning("Discarding unreadable game snapshot: %s", exc)
        return (engine or TetrominoEngine()).initial_state(player_name)
    return load_state(record, engine, player_name)
