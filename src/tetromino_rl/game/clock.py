from __future__ import annotations

from typing import Optional

from .core import GamePhase, GameState
from .rules import ScoringRules


class GravityClock:
    """Turns elapsed wall-clock time into natural-fall ticks.

    The engine keeps no timers; the driving loop owns one of these, feeds it
    the milliseconds since its last frame and applies `Command.TICK` as many
    times as `advance` reports. Time spent outside active play is discarded.
    """

    def __init__(self, rules: Optional[ScoringRules] = None) -> None:
        self.rules = rules or ScoringRules()
        self.elapsed_ms = 0.0

    def reset(self) -> None:
        self.elapsed_ms = 0.0

    def interval_ms(self, state: GameState) -> int:
        return self.rules.drop_interval_ms(state.level)

    def advance(self, elapsed_ms: float, state: GameState) -> int:
        if state.phase != GamePhase.PLAYING or state.is_paused or state.is_game_over:
            self.reset()
            return 0
        self.elapsed_ms += max(0.0, float(elapsed_ms))
        interval = self.interval_ms(state)
        ticks = int(self.elapsed_ms // interval)
        self.elapsed_ms -= ticks * interval
        return ticks

    def next_tick_in(self, state: GameState) -> float:
        return max(0.0, self.interval_ms(state) - self.elapsed_ms)
