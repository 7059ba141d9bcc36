from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

import numpy as np

from .pieces import BOARD_HEIGHT, BOARD_WIDTH, EMPTY, Piece, TetrominoType


Board = np.ndarray


@dataclass(frozen=True)
class ClearResult:
    board: Board
    count: int


def _frozen(board: Board) -> Board:
    board.flags.writeable = False
    return board


def create_empty_board() -> Board:
    """Board of BOARD_HEIGHT rows by BOARD_WIDTH columns, all empty.

    The grid uses 0 for empty cells and TetrominoType values for filled
    cells. Boards are read-only; every operation returns a new array.
    """
    return _frozen(np.zeros((BOARD_HEIGHT, BOARD_WIDTH), dtype=np.int8))


def can_place(board: Board, piece: Piece, x: Optional[int] = None, y: Optional[int] = None) -> bool:
    """Check that `piece` fits with its anchor at (x, y).

    Rows above the board (y < 0) are only checked against the side walls,
    so a piece spawning partly above the visible area is allowed.
    """
    x = piece.x if x is None else x
    y = piece.y if y is None else y
    for cx, cy in piece.cells_at(x, y):
        if cx < 0 or cx >= BOARD_WIDTH or cy >= BOARD_HEIGHT:
            return False
        if cy >= 0 and board[cy, cx] != EMPTY:
            return False
    return True


def place(board: Board, piece: Piece) -> Board:
    """Stamp `piece` onto a copy of `board`; cells above the top are dropped."""
    new_board = board.copy()
    value = int(piece.kind)
    for x, y in piece.cells():
        if 0 <= y < BOARD_HEIGHT and 0 <= x < BOARD_WIDTH:
            new_board[y, x] = value
    return _frozen(new_board)


def find_complete_lines(board: Board) -> List[int]:
    return [int(row) for row in np.where(np.all(board != EMPTY, axis=1))[0]]


def clear_lines(board: Board) -> ClearResult:
    full_rows = find_complete_lines(board)
    if not full_rows:
        return ClearResult(board=board, count=0)
    num = len(full_rows)
    # Remove full rows and add empty rows at the top
    kept = np.delete(board, full_rows, axis=0)
    new_rows = np.zeros((num, BOARD_WIDTH), dtype=np.int8)
    return ClearResult(board=_frozen(np.vstack((new_rows, kept))), count=num)


def hard_drop_distance(board: Board, piece: Piece) -> int:
    distance = 0
    while can_place(board, piece, piece.x, piece.y + distance + 1):
        distance += 1
    return distance


def ghost_piece(board: Board, piece: Piece) -> Piece:
    """The piece projected to where a hard drop would leave it."""
    return replace(piece, y=piece.y + hard_drop_distance(board, piece))


def board_with_piece(board: Board, piece: Optional[Piece], value: Optional[int] = None) -> Board:
    """Copy of `board` with `piece` overlaid for rendering.

    `value` overrides the cell value written (observations use a negative
    kind to tell the falling piece apart from locked cells).
    """
    overlay = board.copy()
    if piece is None:
        return overlay
    v = int(piece.kind) if value is None else int(value)
    for x, y in piece.cells():
        if 0 <= y < BOARD_HEIGHT and 0 <= x < BOARD_WIDTH:
            overlay[y, x] = v
    return overlay


def validate_board(board: object) -> bool:
    """True if `board` has the fixed dimensions and only known cell values."""
    try:
        arr = np.asarray(board)
    except (TypeError, ValueError):
        return False
    if arr.shape != (BOARD_HEIGHT, BOARD_WIDTH) or not np.issubdtype(arr.dtype, np.integer):
        return False
    return bool(np.all((arr >= EMPTY) & (arr <= int(max(TetrominoType)))))


def column_heights(board: Board) -> List[int]:
    heights: List[int] = []
    for x in range(BOARD_WIDTH):
        filled = np.nonzero(board[:, x])[0]
        heights.append(BOARD_HEIGHT - int(filled[0]) if filled.size else 0)
    return heights


def max_height(board: Board) -> int:
    # y=0 is top; find first non-empty from top
    non_empty_rows = np.where(np.any(board != EMPTY, axis=1))[0]
    if non_empty_rows.size == 0:
        return 0
    return BOARD_HEIGHT - int(non_empty_rows[0])


def count_holes(board: Board) -> int:
    holes = 0
    for x in range(BOARD_WIDTH):
        seen_block = False
        for cell in board[:, x]:
            if cell != EMPTY:
                seen_block = True
            elif seen_block:
                holes += 1
    return holes


def bumpiness(board: Board) -> int:
    heights = column_heights(board)
    return sum(abs(a - b) for a, b in zip(heights, heights[1:]))
