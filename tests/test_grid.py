import numpy as np
import pytest

from conftest import fill_row, make_board
from tetromino_rl.game import grid
from tetromino_rl.game.pieces import BOARD_HEIGHT, BOARD_WIDTH, Piece, TetrominoType, create_piece


def test_empty_board_has_fixed_dimensions_and_is_read_only():
    board = grid.create_empty_board()
    assert board.shape == (BOARD_HEIGHT, BOARD_WIDTH)
    assert not board.any()
    with pytest.raises(ValueError):
        board[0, 0] = 1


def test_spawn_above_the_board_is_allowed():
    board = grid.create_empty_board()
    vertical_i = Piece(TetrominoType.I, 1, 3, -1)
    assert (5, -1) in vertical_i.cells()
    assert grid.can_place(board, vertical_i)


def test_side_walls_and_floor_reject_placement():
    board = grid.create_empty_board()
    flat_i = create_piece(TetrominoType.I)
    assert not grid.can_place(board, flat_i, -1, 5)
    assert not grid.can_place(board, flat_i, 7, 5)
    assert grid.can_place(board, flat_i, 6, 5)
    assert grid.can_place(board, flat_i, 0, 18)
    assert not grid.can_place(board, flat_i, 0, 19)


def test_occupied_cells_collide():
    board = make_board([(4, 10, 3)])
    flat_i = create_piece(TetrominoType.I)
    assert not grid.can_place(board, flat_i, 3, 9)
    assert grid.can_place(board, flat_i, 3, 8)
    # Explicit coordinates override the piece's own anchor
    assert grid.can_place(board, flat_i.moved(0, 10), 3, 8)


def test_place_returns_new_board_and_drops_cells_above_top():
    board = grid.create_empty_board()
    vertical_i = Piece(TetrominoType.I, 1, 3, -1)
    placed = grid.place(board, vertical_i)
    assert not board.any()
    assert placed is not board
    assert int((placed == int(TetrominoType.I)).sum()) == 3
    assert list(placed[0:3, 5]) == [1, 1, 1]


def test_find_complete_lines_is_ascending():
    board = make_board()
    for y in (19, 12, 15):
        fill_row(board, y)
    fill_row(board, 14, skip=(0,))
    assert grid.find_complete_lines(board) == [12, 15, 19]


def test_clear_lines_shifts_rows_down():
    board = make_board([(0, 17, 2), (9, 16, 5)])
    fill_row(board, 18)
    fill_row(board, 19)
    result = grid.clear_lines(board)
    assert result.count == 2
    assert result.board.shape == (BOARD_HEIGHT, BOARD_WIDTH)
    assert result.board[19, 0] == 2
    assert result.board[18, 9] == 5
    assert not result.board[:18].any()


def test_clear_lines_without_complete_rows_is_identity():
    board = make_board([(1, 19, 4)])
    fill_row(board, 18, skip=(3,))
    result = grid.clear_lines(board)
    assert result.count == 0
    assert result.board is board


def test_place_then_clear_restores_row_count():
    board = fill_row(make_board(), 19, skip=(3, 4, 5, 6))
    placed = grid.place(board, Piece(TetrominoType.I, 0, 3, 18))
    assert grid.find_complete_lines(placed) == [19]
    assert all(placed[row].all() for row in grid.find_complete_lines(placed))
    cleared = grid.clear_lines(placed)
    assert cleared.board.shape[0] == BOARD_HEIGHT
    assert not cleared.board.any()


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_hard_drop_distance_lands_on_the_last_legal_row(kind):
    board = make_board([(x, 15, 7) for x in range(2, 8)])
    piece = create_piece(kind)
    d = grid.hard_drop_distance(board, piece)
    assert d >= 0
    assert grid.can_place(board, piece, piece.x, piece.y + d)
    assert not grid.can_place(board, piece, piece.x, piece.y + d + 1)


def test_hard_drop_distance_on_empty_board():
    assert grid.hard_drop_distance(grid.create_empty_board(), create_piece(TetrominoType.I)) == 19


def test_ghost_piece_and_overlay():
    board = grid.create_empty_board()
    piece = create_piece(TetrominoType.O)
    ghost = grid.ghost_piece(board, piece)
    assert (ghost.x, ghost.y, ghost.rotation) == (piece.x, 17, piece.rotation)

    overlay = grid.board_with_piece(board, ghost)
    assert not board.any()
    assert overlay[18, 4] == overlay[19, 5] == int(TetrominoType.O)
    marked = grid.board_with_piece(board, ghost, value=-2)
    assert int((marked == -2).sum()) == 4
    assert np.array_equal(grid.board_with_piece(board, None), board)


def test_validate_board():
    assert grid.validate_board(grid.create_empty_board())
    assert grid.validate_board(make_board([(0, 0, 7)]))
    assert not grid.validate_board(make_board([(0, 0, 8)]))
    assert not grid.validate_board(np.zeros((19, 10), dtype=np.int8))
    assert not grid.validate_board([["I"] * 10] * 20)
    assert not grid.validate_board([[0] * 10, [0] * 9])


def test_board_analytics():
    board = make_board([(0, 17, 1), (0, 19, 1), (1, 19, 1)])
    assert grid.column_heights(board)[:3] == [3, 1, 0]
    assert grid.max_height(board) == 3
    assert grid.count_holes(board) == 1
    assert grid.bumpiness(board) == 2 + 1
    assert grid.max_height(grid.create_empty_board()) == 0
