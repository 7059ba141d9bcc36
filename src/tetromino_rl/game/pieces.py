from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Tuple, Union

import numpy as np


BOARD_WIDTH = 10
BOARD_HEIGHT = 20
MASK_SIZE = 4

SPAWN_X = (BOARD_WIDTH - MASK_SIZE) // 2
SPAWN_Y = -1

EMPTY = 0


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7

    @classmethod
    def parse(cls, value: Union["TetrominoType", int, str]) -> "TetrominoType":
        """Accept an enum member, its integer cell value or its letter."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Invalid tetromino type: {value!r}") from None
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            return cls(int(value))
        raise ValueError(f"Invalid tetromino type: {value!r}")


Shape = np.ndarray

# Row strings, top to bottom, one entry per rotation state.
_SHAPE_ROWS: Dict[TetrominoType, Tuple[Tuple[str, ...], ...]] = {
    TetrominoType.I: (
        ("....", "####", "....", "...."),
        ("..#.", "..#.", "..#.", "..#."),
        ("....", "####", "....", "...."),
        ("..#.", "..#.", "..#.", "..#."),
    ),
    TetrominoType.O: (
        ("....", ".##.", ".##.", "...."),
    ) * 4,
    TetrominoType.T: (
        ("....", ".#..", "###.", "...."),
        ("....", ".#..", ".##.", ".#.."),
        ("....", "....", "###.", ".#.."),
        ("....", ".#..", "##..", ".#.."),
    ),
    TetrominoType.S: (
        ("....", ".##.", "##..", "...."),
        ("....", ".#..", ".##.", "..#."),
        ("....", ".##.", "##..", "...."),
        ("....", ".#..", ".##.", "..#."),
    ),
    TetrominoType.Z: (
        ("....", "##..", ".##.", "...."),
        ("....", "..#.", ".##.", ".#.."),
        ("....", "##..", ".##.", "...."),
        ("....", "..#.", ".##.", ".#.."),
    ),
    TetrominoType.J: (
        ("....", "#...", "###.", "...."),
        ("....", ".##.", ".#..", ".#.."),
        ("....", "....", "###.", "..#."),
        ("....", ".#..", ".#..", "##.."),
    ),
    TetrominoType.L: (
        ("....", "..#.", "###.", "...."),
        ("....", ".#..", ".#..", ".##."),
        ("....", "....", "###.", "#..."),
        ("....", "##..", ".#..", ".#.."),
    ),
}


def _build_mask(rows: Tuple[str, ...]) -> Shape:
    mask = np.array([[1 if c == "#" else 0 for c in row] for row in rows], dtype=np.int8)
    mask.flags.writeable = False
    return mask


SHAPES: Dict[TetrominoType, Tuple[Shape, ...]] = {
    kind: tuple(_build_mask(rows) for rows in rotations)
    for kind, rotations in _SHAPE_ROWS.items()
}


def shape_of(kind: Union[TetrominoType, int, str], rotation: int) -> Shape:
    """Return the 4x4 occupancy mask of `kind` at `rotation` (taken mod 4)."""
    return SHAPES[TetrominoType.parse(kind)][int(rotation) % 4]


@dataclass(frozen=True)
class Piece:
    kind: TetrominoType
    rotation: int = 0  # 0..3
    x: int = SPAWN_X
    y: int = SPAWN_Y

    def shape(self) -> Shape:
        return shape_of(self.kind, self.rotation)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        s = self.shape()
        cells: List[Tuple[int, int]] = []
        for dy in range(MASK_SIZE):
            for dx in range(MASK_SIZE):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def at_spawn(self) -> "Piece":
        return create_piece(self.kind)


def create_piece(kind: Union[TetrominoType, int, str]) -> Piece:
    """New piece of `kind` at the spawn anchor, rotation 0."""
    return Piece(kind=TetrominoType.parse(kind), rotation=0, x=SPAWN_X, y=SPAWN_Y)


def rotate_clockwise(piece: Piece) -> Piece:
    return replace(piece, rotation=(piece.rotation + 1) % 4)


def rotate_counter_clockwise(piece: Piece) -> Piece:
    return replace(piece, rotation=(piece.rotation + 3) % 4)
