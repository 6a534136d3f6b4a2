import json
from datetime import date

import pytest

from questlog_app.profile import UNDO_HISTORY_LIMIT, LootItem, LootSource, Profile, Rarity, UndoEntry
from questlog_app.storage import AppState, StorageError, load_state, save_state
from questlog_app.themes import ThemeName


def test_missing_file_yields_defaults(tmp_path):
    state = load_state(tmp_path / "absent.json")

    assert state.settings.theme is ThemeName.DEFAULT
    assert state.profile.total_xp == 0
    assert state.profile.level == 1
    assert state.profile.achievements == []


def test_save_and_load_preserves_profile(tmp_path):
    path = tmp_path / "nested" / "questlog.json"
    state = AppState()
    state.settings.theme = ThemeName.PIRATE
    state.settings.ai_model = "gpt-4o"
    profile = state.profile
    profile.total_xp = 260
    profile.level = 3
    profile.tasks_completed = 9
    profile.current_streak = 2
    profile.longest_streak = 4
    profile.last_completion_date = date(2026, 3, 9)
    profile.achievements = ["tasks_1"]
    profile.inventory.append(
        LootItem(name="Rubber Duck", rarity=Rarity.COMMON, dropped_at="2026-03-09T10:00:00", source=LootSource.TASK)
    )
    profile.undo_history.append(UndoEntry(goal_id="A/A.md", xp_lost=10, was_boss=False, timestamp="2026-03-09T10:00:00"))
    profile.stats.completed_by_day["2026-03-09"] = 3

    save_state(state, path)
    loaded = load_state(path)

    assert loaded.settings.theme is ThemeName.PIRATE
    assert loaded.settings.ai_model == "gpt-4o"
    assert loaded.profile.to_dict() == profile.to_dict()


def test_persisted_keys_are_camel_case(tmp_path):
    path = tmp_path / "questlog.json"
    state = AppState()
    state.profile.undo_history.append(UndoEntry(goal_id="A/A.md", xp_lost=15, was_boss=True, timestamp="t"))
    save_state(state, path)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert set(payload) == {"settings", "profile"}
    assert payload["settings"] == {"theme": "default", "aiModel": "", "aiApiKey": ""}
    assert payload["profile"]["totalXP"] == 0
    assert payload["profile"]["undoHistory"] == [
        {"path": "A/A.md", "xpLost": 15, "wasBoss": True, "timestamp": "t"}
    ]
    assert "completedByDay" in payload["profile"]["stats"]


def test_malformed_json_raises_storage_error(tmp_path):
    path = tmp_path / "questlog.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        load_state(path)


def test_non_object_payload_falls_back_to_defaults(tmp_path):
    path = tmp_path / "questlog.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert load_state(path).profile.total_xp == 0


def test_profile_from_dict_repairs_bad_fields():
    profile = Profile.from_dict(
        {
            "totalXP": "250",
            "level": 99,
            "tasksCompleted": -4,
            "bossesDefeated": True,
            "currentStreak": 5,
            "longestStreak": 2,
            "lastCompletionDate": "yesterday",
            "achievements": ["tasks_1", "tasks_1", 7, ""],
            "inventory": [{"name": "Torch", "rarity": "shiny", "source": "nowhere"}, "junk"],
            "undoHistory": [{"path": f"g{i}.md", "xpLost": 10} for i in range(15)],
            "stats": {"completedByDay": {"2026-03-01": 2, "not-a-day": 5}},
        }
    )

    assert profile.total_xp == 250
    assert profile.level == 3
    assert profile.tasks_completed == 0
    assert profile.bosses_defeated == 0
    assert profile.longest_streak == 5
    assert profile.last_completion_date is None
    assert profile.achievements == ["tasks_1"]
    assert profile.inventory[0].rarity is Rarity.COMMON
    assert profile.inventory[0].source is LootSource.TASK
    assert len(profile.undo_history) == UNDO_HISTORY_LIMIT
    assert profile.stats.completed_by_day == {"2026-03-01": 2}


def test_profile_from_dict_ignores_non_list_collections():
    assert Profile.from_dict({"achievements": 5}).achievements == []
    assert Profile.from_dict({"achievements": "tasks_1"}).achievements == []
    assert Profile.from_dict({"inventory": 3}).inventory == []
    assert Profile.from_dict({"undoHistory": True}).undo_history == []


def test_state_with_wrong_typed_lists_still_loads(tmp_path):
    path = tmp_path / "questlog.json"
    path.write_text(
        json.dumps({"profile": {"totalXP": 40, "achievements": 7, "inventory": "sword", "undoHistory": False}}),
        encoding="utf-8",
    )

    profile = load_state(path).profile

    assert profile.total_xp == 40
    assert profile.achievements == []
    assert profile.inventory == []
    assert profile.undo_history == []


def test_unknown_theme_falls_back_to_default(tmp_path):
    path = tmp_path / "questlog.json"
    path.write_text(json.dumps({"settings": {"theme": "steampunk"}}), encoding="utf-8")

    assert load_state(path).settings.theme is ThemeName.DEFAULT
