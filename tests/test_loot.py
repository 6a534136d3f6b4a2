import random
from datetime import datetime

import pytest

from conftest import ScriptedRandom
from questlog_app.loot import (
    FALLBACK_ITEM_NAME,
    MAX_DROP_CHANCE,
    LootRoller,
    base_drop_chance,
    drop_chance,
    drop_chance_info,
    format_loot_item,
    group_by_rarity,
    inventory_stats,
    rarity_weights,
    roll_for_loot,
    select_item_name,
    select_rarity,
)
from questlog_app.profile import LootItem, LootSource, Rarity
from questlog_app.themes import ThemeDictionary, ThemeName, get_dictionary


def _item(name, rarity, dropped_at="2026-03-10T12:00:00"):
    return LootItem(name=name, rarity=rarity, dropped_at=dropped_at, source=LootSource.TASK)


def test_base_drop_chance_decays_to_floor():
    assert base_drop_chance(0) == pytest.approx(0.30)
    assert base_drop_chance(10) == pytest.approx(0.20)
    assert base_drop_chance(25) == pytest.approx(0.05)
    assert base_drop_chance(100) == pytest.approx(0.05)


def test_source_multipliers():
    assert drop_chance(0, LootSource.TASK) == pytest.approx(0.30)
    assert drop_chance(0, LootSource.BOSS) == pytest.approx(0.60)
    assert drop_chance(0, LootSource.ACHIEVEMENT) == pytest.approx(0.75)
    assert drop_chance(0, LootSource.LEVELUP) == pytest.approx(0.90)


def test_drop_chance_stays_in_bounds():
    for level in range(0, 201):
        for source in LootSource:
            assert 0.05 <= drop_chance(level, source) <= MAX_DROP_CHANCE


def test_rarity_weights_form_a_distribution():
    for level in range(0, 201):
        weights = rarity_weights(level)
        assert sum(weights.values()) == pytest.approx(1.0)
        assert all(weight >= 0 for weight in weights.values())


def test_rarity_weights_cap_at_high_levels():
    weights = rarity_weights(200)
    assert weights[Rarity.LEGENDARY] == pytest.approx(0.05)
    assert weights[Rarity.EPIC] == pytest.approx(0.10)
    assert weights[Rarity.RARE] == pytest.approx(0.20)
    assert weights[Rarity.UNCOMMON] == pytest.approx(0.30)
    assert weights[Rarity.COMMON] == pytest.approx(0.35)


def test_select_rarity_walks_common_first():
    weights = rarity_weights(0)
    assert select_rarity(weights, 0.0) is Rarity.COMMON
    assert select_rarity(weights, 0.85) is Rarity.UNCOMMON
    assert select_rarity(weights, 0.99) is Rarity.RARE


def test_roll_misses_when_roll_exceeds_chance():
    drop = roll_for_loot(0, LootSource.TASK, rng=ScriptedRandom(0.31))
    assert not drop.dropped
    assert drop.item is None


def test_roll_at_exact_chance_still_drops():
    drop = roll_for_loot(0, LootSource.TASK, rng=ScriptedRandom(0.30, 0.0))
    assert drop.dropped


def test_roll_builds_item_from_theme_pool():
    now = datetime(2026, 3, 10, 9, 30)
    drop = roll_for_loot(0, LootSource.BOSS, "fantasy", ScriptedRandom(0.1, 0.0), now)

    assert drop.item is not None
    assert drop.item.rarity is Rarity.COMMON
    assert drop.item.name == get_dictionary("fantasy").loot_pool(Rarity.COMMON)[0]
    assert drop.item.source is LootSource.BOSS
    assert drop.item.dropped_at == now.isoformat()


def test_empty_pool_falls_back_to_mystery_item():
    bare = ThemeDictionary(theme=ThemeName.DEFAULT, messages={}, achievements={}, loot={})
    assert select_item_name(Rarity.EPIC, bare, ScriptedRandom()) == FALLBACK_ITEM_NAME


def test_loot_roller_uses_its_rng():
    roller = LootRoller(ScriptedRandom(0.99))
    assert not roller(0, LootSource.TASK).dropped


def test_group_by_rarity_lists_legendary_first():
    grouped = group_by_rarity([_item("a", Rarity.COMMON), _item("b", Rarity.LEGENDARY)])
    assert list(grouped)[0] is Rarity.LEGENDARY
    assert [item.name for item in grouped[Rarity.COMMON]] == ["a"]


def test_inventory_stats():
    stats = inventory_stats(
        [
            _item("old", Rarity.RARE, "2026-03-01T10:00:00"),
            _item("new", Rarity.COMMON, "2026-03-09T10:00:00"),
        ]
    )
    assert stats.total == 2
    assert stats.by_rarity[Rarity.RARE] == 1
    assert stats.value == 26
    assert stats.most_recent.name == "new"


def test_inventory_stats_empty():
    stats = inventory_stats([])
    assert stats.total == 0
    assert stats.most_recent is None


def test_format_loot_item_uses_themed_rarity_name():
    line = format_loot_item(_item("Rusty Dagger", Rarity.COMMON), get_dictionary("fantasy"))
    assert line == "[.] [Mundane] Rusty Dagger"


def test_drop_chance_info_percentages():
    info = drop_chance_info(0, LootSource.TASK)
    assert info["base_chance"] == 30
    assert info["adjusted_chance"] == 30
    assert info["rarity_chances"][Rarity.COMMON] == 80


def test_seeded_rollers_are_deterministic():
    first = LootRoller(random.Random(7))
    second = LootRoller(random.Random(7))
    now = datetime(2026, 3, 10, 12, 0)

    for level in range(0, 40):
        assert first(level, LootSource.LEVELUP, now=now) == second(level, LootSource.LEVELUP, now=now)
