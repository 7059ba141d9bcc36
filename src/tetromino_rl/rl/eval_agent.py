from __future__ import annotations

import argparse

import pygame

from tetromino_rl.game import BOARD_HEIGHT, BOARD_WIDTH
from tetromino_rl.rl.train_ppo import make_env
from tetromino_rl.visualization.renderer import Renderer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--steps", type=int, default=2000)
    p.add_argument("--fps", type=int, default=20)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    args = build_parser().parse_args()
    from stable_baselines3 import PPO

    env = make_env(args.seed)
    model = PPO.load(args.model, device="auto")
    renderer = Renderer(cell_size=28)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(BOARD_HEIGHT, BOARD_WIDTH))
        pygame.display.set_caption("Tetromino - Agent Eval")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        total_reward = 0.0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            action, _ = model.predict(obs, deterministic=True)
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += float(reward)
            steps += 1
            if terminated or truncated:
                print(f"episode done: score {info['score']} lines {info['lines']}")
                obs, info = env.reset()

            renderer.draw(screen, env.unwrapped.state)
            clock.tick(args.fps)
        print(f"steps {steps} total reward {total_reward:.1f}")
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
