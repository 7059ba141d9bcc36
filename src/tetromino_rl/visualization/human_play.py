from __future__ import annotations

import argparse
import logging
import random
from typing import Dict, Optional

import pygame

from tetromino_rl.game import BOARD_HEIGHT, BOARD_WIDTH, Command, GamePhase, GravityClock, TetrominoEngine
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_z: Command.ROTATE_CCW,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_c: Command.HOLD,
    pygame.K_RETURN: Command.START,
    pygame.K_r: Command.RESET,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block game with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--player", type=str, default="")
    p.add_argument("--cell_size", type=int, default=28)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def run(seed: Optional[int] = None, player_name: str = "", cell_size: int = 28) -> None:
    engine = TetrominoEngine(rng=random.Random(seed))
    state = engine.initial_state(player_name)
    gravity = GravityClock(engine.rules)
    renderer = Renderer(cell_size=cell_size)

    pygame.init()
    try:
        clock = pygame.time.Clock()
        screen = pygame.display.set_mode(renderer.window_size(BOARD_HEIGHT, BOARD_WIDTH))
        pygame.display.set_caption("Tetromino - Human Play")

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        toggle = Command.RESUME if state.phase == GamePhase.PAUSED else Command.PAUSE
                        state = engine.apply(state, toggle)
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            state = engine.apply(state, command)
                            if command in (Command.SOFT_DROP, Command.HARD_DROP):
                                gravity.reset()
                            elif command == Command.RESET:
                                state = engine.apply(state, Command.START)

            # Gravity
            for _ in range(gravity.advance(clock.get_time(), state)):
                state = engine.apply(state, Command.TICK)

            renderer.draw(screen, state)
            clock.tick(60)

        if state.is_game_over or state.score:
            print(f"Final score {state.score}, lines {state.lines}, level {state.level}")
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(seed=args.seed, player_name=args.player, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
