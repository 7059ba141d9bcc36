import pytest

from tetromino_rl.game.rules import (
    ScoringRules,
    drop_interval_ms,
    game_stats,
    hard_drop_score,
    level_for_lines,
    line_score,
    lines_until_next_level,
    soft_drop_score,
)


@pytest.mark.parametrize(
    "lines, level, expected",
    [(0, 1, 0), (1, 1, 40), (2, 1, 100), (3, 1, 300), (4, 1, 1200), (1, 3, 120), (4, 2, 2400)],
)
def test_line_score_table(lines, level, expected):
    assert line_score(lines, level) == expected


def test_line_score_beyond_four_lines_scales_single_value():
    assert line_score(5, 2) == 40 * 5 * 2


def test_drop_scores():
    assert soft_drop_score(3) == 3
    assert hard_drop_score(7) == 14


@pytest.mark.parametrize("total, level", [(0, 1), (9, 1), (10, 2), (25, 3), (100, 11)])
def test_level_threshold(total, level):
    assert level_for_lines(total) == level


def test_lines_until_next_level():
    assert lines_until_next_level(0) == 10
    assert lines_until_next_level(15) == 5
    assert lines_until_next_level(20) == 10


def test_drop_interval_is_floored():
    assert drop_interval_ms(1) == 1000
    assert drop_interval_ms(10) == 100
    assert drop_interval_ms(11) == 50
    assert drop_interval_ms(30) == 50


def test_drop_interval_strictly_decreases_until_floor():
    intervals = [drop_interval_ms(level) for level in range(1, 11)]
    assert all(a > b for a, b in zip(intervals, intervals[1:]))


def test_custom_rules():
    rules = ScoringRules(line_clear_scores=(100, 300, 500, 800), lines_per_level=5, min_drop_ms=200)
    assert rules.score_for_lines(4, 1) == 800
    assert rules.level_for_lines(5) == 2
    assert rules.drop_interval_ms(20) == 200


def test_game_stats():
    stats = game_stats(score=2500, lines=12, level=2, duration_ms=125_000)
    assert stats.duration_formatted == "2:05"
    assert stats.lines_per_minute == 6
    assert stats.points_per_line == 208

    empty = game_stats(score=0, lines=0, level=1, duration_ms=-50)
    assert empty.duration_ms == 0
    assert empty.duration_formatted == "0:00"
    assert (empty.lines_per_minute, empty.points_per_line) == (0, 0)


@pytest.mark.parametrize("kwargs", [{"min_drop_ms": 0}, {"min_drop_ms": -10}, {"lines_per_level": 0}])
def test_rules_reject_degenerate_values(kwargs):
    with pytest.raises(ValueError):
        ScoringRules(**kwargs)
