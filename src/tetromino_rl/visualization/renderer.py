from __future__ import annotations

from typing import Optional

import numpy as np
import pygame

from tetromino_rl.game import GameState, Piece, ghost_piece, render_board
from tetromino_rl.game.rules import lines_until_next_level
from .palette import color_for_value, ghost_color


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 6) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_cells * cell_size
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, rows: int, cols: int) -> tuple[int, int]:
        width = self.margin * 3 + cols * self.cell_size + self.panel_width
        height = self.margin * 2 + rows * self.cell_size
        return width, height

    def _font_obj(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        return self._font

    def _cell_rect(self, ox: int, oy: int, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            ox + x * self.cell_size,
            oy + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, board: np.ndarray, ghost: Optional[Piece]) -> pygame.Surface:
        h, w = board.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                pygame.draw.rect(surf, color_for_value(int(board[y, x])), self._cell_rect(0, 0, x, y))
        if ghost is not None:
            for x, y in ghost.cells():
                if 0 <= y < h and 0 <= x < w and board[y, x] == 0:
                    pygame.draw.rect(surf, ghost_color(int(ghost.kind)), self._cell_rect(0, 0, x, y))
        return surf

    def _draw_preview(self, screen: pygame.Surface, label: str, piece: Optional[Piece], ox: int, oy: int) -> None:
        font = self._font_obj()
        screen.blit(font.render(label, True, (230, 230, 230)), (ox, oy))
        if piece is None:
            return
        shape = piece.shape()
        cell = self.cell_size // 2
        for y in range(shape.shape[0]):
            for x in range(shape.shape[1]):
                if shape[y, x]:
                    rect = pygame.Rect(ox + x * cell, oy + 24 + y * cell, cell - 1, cell - 1)
                    pygame.draw.rect(screen, color_for_value(int(piece.kind)), rect)

    def draw(self, screen: pygame.Surface, state: GameState) -> None:
        board = render_board(state)
        ghost = ghost_piece(state)
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(board, ghost), (self.margin, self.margin))

        panel_x = self.margin * 2 + board.shape[1] * self.cell_size
        y = self.margin
        self._draw_preview(screen, "Next", state.next_piece, panel_x, y)
        y += self.cell_size * 3
        self._draw_preview(screen, "Hold", state.hold_piece, panel_x, y)
        y += self.cell_size * 3

        font = self._font_obj()
        for text in (
            f"Score {state.score}",
            f"Lines {state.lines}",
            f"Level {state.level}",
            f"Next level in {lines_until_next_level(state.lines)}",
        ):
            screen.blit(font.render(text, True, (230, 230, 230)), (panel_x, y))
            y += 28

        banner = None
        if state.is_game_over:
            banner = "Game Over - R to restart, ESC to quit"
        elif state.is_paused:
            banner = "Paused - P to resume"
        elif state.current_piece is None:
            banner = "Press ENTER to start"
        if banner is not None:
            text = font.render(banner, True, (255, 255, 255))
            rect = text.get_rect(center=(screen.get_width() // 2, self.margin + board.shape[0] * self.cell_size // 2))
            screen.blit(text, rect)
        pygame.display.flip()
