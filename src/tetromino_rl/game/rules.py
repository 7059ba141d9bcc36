from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)
    soft_drop_points: int = 1
    hard_drop_points: int = 2
    lines_per_level: int = 10
    initial_drop_ms: int = 1000
    drop_ms_per_level: int = 100
    min_drop_ms: int = 50

    def __post_init__(self) -> None:
        if self.min_drop_ms < 1:
            raise ValueError("min_drop_ms must be at least 1")
        if self.lines_per_level < 1:
            raise ValueError("lines_per_level must be at least 1")

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1] * level
        # Not reachable with 4-cell pieces; scale the single-line value
        return self.line_clear_scores[0] * lines * level

    def soft_drop_score(self, cells: int) -> int:
        return cells * self.soft_drop_points

    def hard_drop_score(self, cells: int) -> int:
        return cells * self.hard_drop_points

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def lines_until_next_level(self, total_lines: int) -> int:
        return self.level_for_lines(total_lines) * self.lines_per_level - total_lines

    def drop_interval_ms(self, level: int) -> int:
        """Automatic-fall cadence, strictly decreasing until the floor."""
        return max(self.min_drop_ms, self.initial_drop_ms - (level - 1) * self.drop_ms_per_level)


DEFAULT_RULES = ScoringRules()


def line_score(lines_cleared: int, level: int) -> int:
    return DEFAULT_RULES.score_for_lines(lines_cleared, level)


def soft_drop_score(cells: int) -> int:
    return DEFAULT_RULES.soft_drop_score(cells)


def hard_drop_score(cells: int) -> int:
    return DEFAULT_RULES.hard_drop_score(cells)


def level_for_lines(total_lines: int) -> int:
    return DEFAULT_RULES.level_for_lines(total_lines)


def lines_until_next_level(total_lines: int) -> int:
    return DEFAULT_RULES.lines_until_next_level(total_lines)


def drop_interval_ms(level: int) -> int:
    return DEFAULT_RULES.drop_interval_ms(level)


@dataclass(frozen=True)
class GameStats:
    score: int
    lines: int
    level: int
    duration_ms: int
    duration_formatted: str
    lines_per_minute: int
    points_per_line: int


def game_stats(score: int, lines: int, level: int, duration_ms: int) -> GameStats:
    """End-of-game summary; negative durations count as zero."""
    duration_ms = max(0, int(duration_ms))
    minutes = duration_ms // 60000
    seconds = (duration_ms % 60000) // 1000
    return GameStats(
        score=score,
        lines=lines,
        level=level,
        duration_ms=duration_ms,
        duration_formatted=f"{minutes}:{seconds:02d}",
        lines_per_minute=round(lines / minutes) if minutes > 0 else 0,
        points_per_line=round(score / lines) if lines > 0 else 0,
    )
