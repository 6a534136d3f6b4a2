"""Loot drop rolls and inventory summaries."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .profile import RARITY_ORDER, LootItem, LootSource, Rarity
from .themes import ThemeDictionary, get_dictionary

FALLBACK_ITEM_NAME = "Mystery Item"
MAX_DROP_CHANCE = 0.95

SOURCE_MULTIPLIERS: Dict[LootSource, float] = {
    LootSource.TASK: 1.0,
    LootSource.BOSS: 2.0,
    LootSource.ACHIEVEMENT: 2.5,
    LootSource.LEVELUP: 3.0,
}

RARITY_SYMBOLS: Dict[Rarity, str] = {
    Rarity.COMMON: "[.]",
    Rarity.UNCOMMON: "[+]",
    Rarity.RARE: "[*]",
    Rarity.EPIC: "[#]",
    Rarity.LEGENDARY: "[!]",
}

RARITY_VALUES: Dict[Rarity, int] = {
    Rarity.COMMON: 1,
    Rarity.UNCOMMON: 5,
    Rarity.RARE: 25,
    Rarity.EPIC: 100,
    Rarity.LEGENDARY: 500,
}


@dataclass(frozen=True)
class LootDrop:
    dropped: bool
    item: Optional[LootItem] = None


@dataclass(frozen=True)
class InventoryStats:
    total: int
    by_rarity: Dict[Rarity, int]
    value: int
    most_recent: Optional[LootItem]


def base_drop_chance(level: int) -> float:
    """Drop chance before source bonuses: 30% at level 0, floored at 5%."""

    return max(0.05, 0.30 - 0.01 * level)


def drop_chance(level: int, source: LootSource) -> float:
    return min(MAX_DROP_CHANCE, base_drop_chance(level) * SOURCE_MULTIPLIERS[source])


def rarity_weights(level: int) -> Dict[Rarity, float]:
    """Level-scaled rarity weights. Rarer tiers grow with level up to a cap."""

    legendary = min(0.05, 0.002 * level)
    epic = min(0.10, 0.004 * level)
    rare = min(0.20, 0.05 + 0.005 * level)
    uncommon = min(0.30, 0.15 + 0.005 * level)
    return {
        Rarity.COMMON: 1 - legendary - epic - rare - uncommon,
        Rarity.UNCOMMON: uncommon,
        Rarity.RARE: rare,
        Rarity.EPIC: epic,
        Rarity.LEGENDARY: legendary,
    }


def select_rarity(weights: Dict[Rarity, float], roll: float) -> Rarity:
    cumulative = 0.0
    for rarity in RARITY_ORDER:
        cumulative += weights[rarity]
        if roll < cumulative:
            return rarity
    return Rarity.COMMON


def select_item_name(rarity: Rarity, dictionary: ThemeDictionary, rng: random.Random) -> str:
    pool = dictionary.loot_pool(rarity)
    if not pool:
        return FALLBACK_ITEM_NAME
    return rng.choice(pool)


def roll_for_loot(
    level: int,
    source: LootSource,
    theme: Optional[str] = None,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> LootDrop:
    """Roll once for a drop from *source* at the given player level."""

    rng = rng or random.Random()
    if rng.random() > drop_chance(level, source):
        return LootDrop(dropped=False)

    rarity = select_rarity(rarity_weights(level), rng.random())
    item = LootItem(
        name=select_item_name(rarity, get_dictionary(theme), rng),
        rarity=rarity,
        dropped_at=(now or datetime.now()).isoformat(),
        source=source,
    )
    return LootDrop(dropped=True, item=item)


class LootRoller:
    """Callable roller bound to one random source, injected into the ledger."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def __call__(
        self,
        level: int,
        source: LootSource,
        theme: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LootDrop:
        return roll_for_loot(level, source, theme, self.rng, now)


def inventory_value(inventory: Iterable[LootItem]) -> int:
    return sum(RARITY_VALUES[item.rarity] for item in inventory)


def group_by_rarity(inventory: Iterable[LootItem]) -> Dict[Rarity, List[LootItem]]:
    """Group items by rarity, legendary first."""

    grouped: Dict[Rarity, List[LootItem]] = {rarity: [] for rarity in reversed(RARITY_ORDER)}
    for item in inventory:
        grouped[item.rarity].append(item)
    return grouped


def inventory_stats(inventory: Iterable[LootItem]) -> InventoryStats:
    items = list(inventory)
    by_rarity = {rarity: 0 for rarity in RARITY_ORDER}
    for item in items:
        by_rarity[item.rarity] += 1
    most_recent = max(items, key=lambda item: item.dropped_at) if items else None
    return InventoryStats(
        total=len(items),
        by_rarity=by_rarity,
        value=inventory_value(items),
        most_recent=most_recent,
    )


def format_loot_item(item: LootItem, dictionary: ThemeDictionary) -> str:
    return f"{RARITY_SYMBOLS[item.rarity]} [{dictionary.rarity_name(item.rarity)}] {item.name}"


def drop_chance_info(level: int, source: LootSource) -> Dict[str, object]:
    """Rounded percentages for display."""

    return {
        "base_chance": round(base_drop_chance(level) * 100),
        "adjusted_chance": round(drop_chance(level, source) * 100),
        "rarity_chances": {
            rarity: round(weight * 100) for rarity, weight in rarity_weights(level).items()
        },
    }


__all__ = [
    "FALLBACK_ITEM_NAME",
    "InventoryStats",
    "LootDrop",
    "LootRoller",
    "RARITY_SYMBOLS",
    "RARITY_VALUES",
    "SOURCE_MULTIPLIERS",
    "base_drop_chance",
    "drop_chance",
    "drop_chance_info",
    "format_loot_item",
    "group_by_rarity",
    "inventory_stats",
    "inventory_value",
    "rarity_weights",
    "roll_for_loot",
    "select_item_name",
    "select_rarity",
]
