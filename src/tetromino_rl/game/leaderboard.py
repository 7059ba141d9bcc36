from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .core import GameState
from .rules import game_stats


@dataclass(frozen=True)
class LeaderboardEntry:
    entry_id: str
    player_name: str
    score: int
    lines: int
    level: int
    duration_ms: int
    duration_formatted: str
    lines_per_minute: int
    date: str


def create_entry(state: GameState, duration_ms: int, date: Optional[datetime] = None) -> LeaderboardEntry:
    stats = game_stats(state.score, state.lines, state.level, duration_ms)
    when = date or datetime.now(timezone.utc)
    return LeaderboardEntry(
        entry_id=uuid.uuid4().hex,
        player_name=state.player_name or "Player",
        score=state.score,
        lines=state.lines,
        level=state.level,
        duration_ms=stats.duration_ms,
        duration_formatted=stats.duration_formatted,
        lines_per_minute=stats.lines_per_minute,
        date=when.isoformat(),
    )


def qualifies(score: int, entries: Sequence[LeaderboardEntry], max_entries: int = 5) -> bool:
    """Whether `score` would make it onto a board ranked by `update`."""
    if len(entries) < max_entries:
        return True
    return score > entries[-1].score


def update(
    entries: Sequence[LeaderboardEntry], entry: LeaderboardEntry, max_entries: int = 10
) -> List[LeaderboardEntry]:
    ranked = sorted([*entries, entry], key=lambda e: (e.score, e.lines, e.level), reverse=True)
    return ranked[:max_entries]
