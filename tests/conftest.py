from __future__ import annotations

import random

import numpy as np
import pytest

from tetromino_rl.game import BOARD_HEIGHT, BOARD_WIDTH, Command, TetrominoEngine


@pytest.fixture
def engine() -> TetrominoEngine:
    return TetrominoEngine(rng=random.Random(1234))


@pytest.fixture
def started(engine):
    return engine.apply(engine.initial_state("ada"), Command.START)


def make_board(filled=()) -> np.ndarray:
    """Writable board with (x, y, value) cells set."""
    board = np.zeros((BOARD_HEIGHT, BOARD_WIDTH), dtype=np.int8)
    for x, y, value in filled:
        board[y, x] = value
    return board


def fill_row(board: np.ndarray, y: int, skip=(), value: int = 7) -> np.ndarray:
    for x in range(BOARD_WIDTH):
        if x not in skip:
            board[y, x] = value
    return board
