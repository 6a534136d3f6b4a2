import pytest

from questlog_app.progression import (
    experience_for_level,
    experience_to_reach,
    level_from_xp,
    progress_to_next_level,
)


def test_experience_curve_scales_by_half_each_level():
    assert experience_for_level(1) == 100
    assert experience_for_level(2) == 150
    assert experience_for_level(3) == 225
    assert experience_for_level(4) == 337


@pytest.mark.parametrize(
    "total_xp, expected",
    [(0, 1), (99, 1), (100, 2), (249, 2), (250, 3), (474, 3), (475, 4)],
)
def test_level_from_xp_thresholds(total_xp, expected):
    assert level_from_xp(total_xp) == expected


def test_level_from_xp_rejects_negative():
    with pytest.raises(ValueError):
        level_from_xp(-1)


def test_experience_to_reach_is_cumulative():
    assert experience_to_reach(1) == 0
    assert experience_to_reach(2) == 100
    assert experience_to_reach(3) == 250


def test_progress_to_next_level():
    progress = progress_to_next_level(175)
    assert progress.current == 75
    assert progress.required == 150
    assert progress.percent == 50


def test_progress_percent_is_floored():
    assert progress_to_next_level(0).percent == 0
    assert progress_to_next_level(99).percent == 99
    assert progress_to_next_level(100).current == 0


def test_level_is_monotonic_in_xp():
    levels = [level_from_xp(xp) for xp in range(0, 5000, 7)]
    assert levels == sorted(levels)
