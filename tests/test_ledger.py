from datetime import date, datetime, timedelta

import pytest

from conftest import RecordingRoller
from questlog_app.ledger import Ledger
from questlog_app.profile import LootSource, Profile


def test_first_completion(ledger, saved):
    result = ledger.complete_task(10, False, 0, None, goal_id="Write/Write.md")

    profile = ledger.profile
    assert result.xp_gained == 10
    assert not result.level_up
    assert result.new_achievements == ["tasks_1"]
    assert profile.total_xp == 10
    assert profile.level == 1
    assert profile.tasks_completed == 1
    assert profile.current_streak == 1
    assert profile.longest_streak == 1
    assert profile.stats.completed_by_day == {"2026-03-10": 1}
    assert profile.undo_history[0].goal_id == "Write/Write.md"
    assert saved == [profile]


def test_level_up_exactly_at_threshold(saved, roller, clock):
    ledger = Ledger(Profile(total_xp=90), saved.append, roller=roller, clock=clock)

    result = ledger.complete_task(10, False, 0, None)

    assert result.level_up
    assert result.old_level == 1
    assert result.new_level == 2
    assert ledger.profile.level == 2


def test_undo_history_keeps_ten_most_recent(ledger):
    for index in range(11):
        ledger.complete_task(10, False, 0, None, goal_id=f"goal-{index}")

    history = ledger.profile.undo_history
    assert len(history) == 10
    assert history[0].goal_id == "goal-10"
    assert history[-1].goal_id == "goal-1"


def test_boss_xp_is_applied_verbatim(ledger):
    result = ledger.complete_task(60, True, 2, None)

    profile = ledger.profile
    assert result.xp_gained == 60
    assert profile.total_xp == 60
    assert profile.bosses_defeated == 1
    assert profile.stats.deepest_depth == 2
    assert "bosses_1" in profile.achievements
    assert profile.undo_history[0].was_boss


def test_undo_reverses_counters_but_keeps_achievements(ledger, saved):
    ledger.complete_task(60, True, 2, None)

    result = ledger.perform_undo()

    profile = ledger.profile
    assert result.success
    assert result.xp_lost == 60
    assert result.message == "Undo: -60 XP"
    assert profile.total_xp == 0
    assert profile.tasks_completed == 0
    assert profile.bosses_defeated == 0
    assert profile.achievements == ["tasks_1", "bosses_1"]
    assert profile.current_streak == 1
    assert profile.undo_history == []
    assert profile.stats.completed_by_day["2026-03-10"] == 0
    assert len(saved) == 2


def test_undo_with_empty_history(ledger, saved):
    result = ledger.perform_undo()

    assert not result.success
    assert result.xp_lost == 0
    assert result.message == "Nothing to undo"
    assert saved == []


def test_undo_can_drop_a_level(saved, roller, clock):
    ledger = Ledger(Profile(total_xp=95), saved.append, roller=roller, clock=clock)
    ledger.complete_task(10, False, 0, None)
    assert ledger.profile.level == 2

    ledger.perform_undo()

    assert ledger.profile.total_xp == 95
    assert ledger.profile.level == 1


def test_streak_same_day_next_day_and_gap(ledger, clock):
    ledger.complete_task(10, False, 0, None)
    ledger.complete_task(10, False, 0, None)
    assert ledger.profile.current_streak == 1

    clock.now += timedelta(days=1)
    ledger.complete_task(10, False, 0, None)
    assert ledger.profile.current_streak == 2

    clock.now += timedelta(days=3)
    ledger.complete_task(10, False, 0, None)

    streak = ledger.streak_info()
    assert streak.current == 1
    assert streak.longest == 2
    assert streak.last_date == date(2026, 3, 14)


def test_longest_streak_never_below_current(ledger, clock):
    for _ in range(5):
        ledger.complete_task(10, False, 0, None)
        assert ledger.profile.longest_streak >= ledger.profile.current_streak
        clock.now += timedelta(days=1)
    assert "streak_3" in ledger.profile.achievements


def test_speedrun_when_created_today(ledger):
    ledger.complete_task(10, False, 0, "2026-03-10")

    assert ledger.profile.stats.speedruns == 1
    assert "speedrun" in ledger.profile.achievements


def test_created_earlier_is_not_a_speedrun(ledger):
    ledger.complete_task(10, False, 0, date(2026, 3, 1))
    assert ledger.profile.stats.speedruns == 0


def test_time_of_day_counters(saved, roller):
    night = Ledger(Profile(), saved.append, roller=roller, clock=lambda: datetime(2026, 3, 10, 3, 0))
    night.complete_task(10, False, 0, None)
    assert night.profile.stats.night_owl_tasks == 1
    assert night.profile.stats.early_bird_tasks == 1
    assert "nightowl" in night.profile.achievements

    dawn = Ledger(Profile(), saved.append, roller=roller, clock=lambda: datetime(2026, 3, 10, 5, 30))
    dawn.complete_task(10, False, 0, None)
    assert dawn.profile.stats.night_owl_tasks == 0
    assert dawn.profile.stats.early_bird_tasks == 1
    assert "earlybird" in dawn.profile.achievements


def test_loot_rolls_per_source_and_reports_first(saved, clock):
    roller = RecordingRoller(drop=True)
    ledger = Ledger(Profile(), saved.append, roller=roller, clock=clock)

    result = ledger.complete_task(100, False, 0, None)

    assert roller.calls == [LootSource.TASK, LootSource.LEVELUP, LootSource.ACHIEVEMENT]
    assert result.loot_dropped is not None
    assert result.loot_dropped.source is LootSource.TASK
    assert [item.source for item in result.loot_drops] == roller.calls
    assert len(ledger.profile.inventory) == 3


def test_boss_completion_rolls_boss_source(saved, clock):
    roller = RecordingRoller()
    ledger = Ledger(Profile(achievements=["tasks_1", "bosses_1"]), saved.append, roller=roller, clock=clock)

    result = ledger.complete_task(30, True, 0, None)

    assert roller.calls == [LootSource.BOSS]
    assert result.loot_dropped is None
    assert result.loot_drops == []


def test_negative_values_are_rejected_before_mutation(ledger, saved):
    with pytest.raises(ValueError):
        ledger.complete_task(-5, False, 0, None)
    with pytest.raises(ValueError):
        ledger.complete_task(5, False, -1, None)

    assert ledger.profile.total_xp == 0
    assert ledger.profile.tasks_completed == 0
    assert saved == []


def test_level_progress(saved, roller, clock):
    ledger = Ledger(Profile(total_xp=175), saved.append, roller=roller, clock=clock)
    progress = ledger.level_progress()
    assert (progress.current, progress.required, progress.percent) == (75, 150, 50)


def test_ten_small_goals_reach_level_two_on_the_tenth(ledger):
    for completion in range(1, 10):
        result = ledger.complete_task(10, False, 0, None)
        assert not result.level_up
        assert ledger.profile.level == 1, completion

    result = ledger.complete_task(10, False, 0, None)

    assert result.level_up
    assert ledger.profile.total_xp == 100
    assert ledger.profile.level == 2


def test_stale_level_is_recomputed_on_construction(saved, roller, clock):
    ledger = Ledger(Profile(total_xp=500), saved.append, roller=roller, clock=clock)
    assert ledger.profile.level == 4

    result = ledger.complete_task(10, False, 0, None)

    assert not result.level_up
    assert result.old_level == 4
