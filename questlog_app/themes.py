"""Theme dictionaries: messages, achievement names, and loot vocabularies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .profile import Rarity


class ThemeName(str, Enum):
    DEFAULT = "default"
    FANTASY = "fantasy"
    SPACE = "space"
    CYBERPUNK = "cyberpunk"
    PIRATE = "pirate"


THEME_LABELS = {
    ThemeName.DEFAULT: "Default",
    ThemeName.FANTASY: "Fantasy RPG",
    ThemeName.SPACE: "Space Opera",
    ThemeName.CYBERPUNK: "Cyberpunk",
    ThemeName.PIRATE: "Pirates",
}


@dataclass(frozen=True)
class AchievementInfo:
    name: str
    desc: str


@dataclass(frozen=True)
class ThemeDictionary:
    theme: ThemeName
    messages: Dict[str, str]
    achievements: Dict[str, AchievementInfo]
    loot: Dict[Rarity, Tuple[str, ...]]
    rarities: Dict[Rarity, str] = field(
        default_factory=lambda: {rarity: rarity.value.capitalize() for rarity in Rarity}
    )

    def message(self, key: str) -> str:
        return self.messages.get(key, DEFAULT_MESSAGES[key])

    def loot_pool(self, rarity: Rarity) -> Tuple[str, ...]:
        return self.loot.get(rarity, ())

    def rarity_name(self, rarity: Rarity) -> str:
        return self.rarities.get(rarity, rarity.value.capitalize())


DEFAULT_MESSAGES = {
    "quest_completed": "Quest completed!",
    "level_up": "Level up!",
    "new_achievement": "Achievement unlocked!",
    "loot_dropped": "Loot dropped!",
    "boss_defeated": "Boss defeated!",
    "streak_bonus": "Streak bonus!",
    "task_blocked": "Task blocked",
    "task_unblocked": "Task unblocked",
    "deadline_set": "Deadline set",
    "deadline_overdue": "Deadline overdue!",
    "welcome_back": "Welcome back, adventurer",
}

STAT_LABELS = {
    "level": "Level",
    "xp": "XP",
    "tasks_completed": "Tasks completed",
    "bosses_defeated": "Bosses defeated",
    "current_streak": "Current streak",
    "longest_streak": "Longest streak",
    "inventory": "Inventory",
}


def _achievements(names: List[Tuple[str, str, str]]) -> Dict[str, AchievementInfo]:
    return {achievement_id: AchievementInfo(name, desc) for achievement_id, name, desc in names}


_DEFAULT = ThemeDictionary(
    theme=ThemeName.DEFAULT,
    messages=dict(DEFAULT_MESSAGES),
    achievements=_achievements(
        [
            ("tasks_1", "First Step", "Complete your first task"),
            ("tasks_10", "Getting Started", "Complete 10 tasks"),
            ("tasks_50", "Productive", "Complete 50 tasks"),
            ("tasks_100", "Centurion", "Complete 100 tasks"),
            ("tasks_500", "Machine", "Complete 500 tasks"),
            ("tasks_1000", "Legend", "Complete 1000 tasks"),
            ("bosses_1", "Boss Slayer", "Defeat your first boss"),
            ("bosses_5", "Boss Hunter", "Defeat 5 bosses"),
            ("bosses_10", "Boss Master", "Defeat 10 bosses"),
            ("bosses_25", "Boss Nemesis", "Defeat 25 bosses"),
            ("streak_3", "On Fire", "3 day streak"),
            ("streak_7", "Week Warrior", "7 day streak"),
            ("streak_14", "Unstoppable", "14 day streak"),
            ("streak_30", "Monthly Master", "30 day streak"),
            ("depth_3", "Deep Diver", "Complete a task at depth 3"),
            ("depth_5", "Abyss Walker", "Complete a task at depth 5"),
            ("depth_10", "Void Explorer", "Complete a task at depth 10"),
            ("speedrun", "Speedrunner", "Create and finish a task on the same day"),
            ("nightowl", "Night Owl", "Complete a task between midnight and 5am"),
            ("earlybird", "Early Bird", "Complete a task between 5am and 7am"),
        ]
    ),
    loot={
        Rarity.COMMON: ("Coffee Mug", "Sticky Note", "Rubber Duck", "Paper Clip", "Pencil Stub"),
        Rarity.UNCOMMON: ("Mechanical Keyboard", "Noise-Cancelling Headphones", "Standing Desk", "Second Monitor"),
        Rarity.RARE: ("Focus Crystal", "Deadline Extender", "Meeting Canceller"),
        Rarity.EPIC: ("Inbox Zero Amulet", "Flow State Potion"),
        Rarity.LEGENDARY: ("Golden Keyboard of Productivity", "Infinite Coffee Cup"),
    },
)

_FANTASY = ThemeDictionary(
    theme=ThemeName.FANTASY,
    messages={
        **DEFAULT_MESSAGES,
        "quest_completed": "Quest fulfilled!",
        "level_up": "Thy power grows!",
        "boss_defeated": "The dragon falls!",
        "loot_dropped": "Treasure found!",
        "welcome_back": "Welcome back, hero",
    },
    achievements=_achievements(
        [
            ("tasks_1", "Squire", "Fulfil thy first quest"),
            ("tasks_10", "Knight Errant", "Fulfil 10 quests"),
            ("tasks_50", "Knight of the Realm", "Fulfil 50 quests"),
            ("tasks_100", "Paladin", "Fulfil 100 quests"),
            ("tasks_500", "Champion", "Fulfil 500 quests"),
            ("tasks_1000", "Living Legend", "Fulfil 1000 quests"),
            ("bosses_1", "Dragonslayer", "Slay thy first dragon"),
            ("bosses_5", "Giant Killer", "Slay 5 great beasts"),
            ("bosses_10", "Bane of Monsters", "Slay 10 great beasts"),
            ("bosses_25", "Doom of Dragons", "Slay 25 great beasts"),
            ("streak_3", "Steadfast", "Quest 3 days in a row"),
            ("streak_7", "Vigilant", "Quest 7 days in a row"),
            ("streak_14", "Relentless", "Quest 14 days in a row"),
            ("streak_30", "Oathkeeper", "Quest 30 days in a row"),
            ("depth_3", "Cave Delver", "Descend 3 levels into the dungeon"),
            ("depth_5", "Underdark Wanderer", "Descend 5 levels into the dungeon"),
            ("depth_10", "Abyssal Lord", "Descend 10 levels into the dungeon"),
            ("speedrun", "Swift as the Wind", "Accept and fulfil a quest in one day"),
            ("nightowl", "Moonlit Ranger", "Fulfil a quest under the moon"),
            ("earlybird", "Herald of Dawn", "Fulfil a quest at first light"),
        ]
    ),
    loot={
        Rarity.COMMON: ("Rusty Sword", "Leather Boots", "Wooden Shield", "Healing Herb", "Torch"),
        Rarity.UNCOMMON: ("Steel Longsword", "Chainmail", "Elven Cloak", "Potion of Vigor"),
        Rarity.RARE: ("Enchanted Bow", "Mithril Vest", "Ring of Protection"),
        Rarity.EPIC: ("Staff of the Archmage", "Dragonscale Armor"),
        Rarity.LEGENDARY: ("Excalibur", "Crown of the Undying King"),
    },
    rarities={
        Rarity.COMMON: "Mundane",
        Rarity.UNCOMMON: "Fine",
        Rarity.RARE: "Enchanted",
        Rarity.EPIC: "Heroic",
        Rarity.LEGENDARY: "Mythic",
    },
)

_SPACE = ThemeDictionary(
    theme=ThemeName.SPACE,
    messages={
        **DEFAULT_MESSAGES,
        "quest_completed": "Mission accomplished!",
        "level_up": "Promotion granted!",
        "boss_defeated": "Mothership destroyed!",
        "loot_dropped": "Salvage recovered!",
        "welcome_back": "Welcome back, commander",
    },
    achievements=_achievements(
        [
            ("tasks_1", "Cadet", "Complete your first mission"),
            ("tasks_10", "Ensign", "Complete 10 missions"),
            ("tasks_50", "Lieutenant", "Complete 50 missions"),
            ("tasks_100", "Commander", "Complete 100 missions"),
            ("tasks_500", "Captain", "Complete 500 missions"),
            ("tasks_1000", "Admiral", "Complete 1000 missions"),
            ("bosses_1", "First Contact", "Destroy your first mothership"),
            ("bosses_5", "Fleet Breaker", "Destroy 5 motherships"),
            ("bosses_10", "Star Destroyer", "Destroy 10 motherships"),
            ("bosses_25", "Galactic Hero", "Destroy 25 motherships"),
            ("streak_3", "Orbit Stable", "3 day mission streak"),
            ("streak_7", "Warp Drive", "7 day mission streak"),
            ("streak_14", "Hyperspace", "14 day mission streak"),
            ("streak_30", "Light Year", "30 day mission streak"),
            ("depth_3", "Asteroid Miner", "Reach sector depth 3"),
            ("depth_5", "Nebula Diver", "Reach sector depth 5"),
            ("depth_10", "Event Horizon", "Reach sector depth 10"),
            ("speedrun", "Kessel Sprint", "Launch and finish a mission in one day"),
            ("nightowl", "Night Shift", "Finish a mission during the graveyard watch"),
            ("earlybird", "Sunrise Launch", "Finish a mission at planetary dawn"),
        ]
    ),
    loot={
        Rarity.COMMON: ("Ration Pack", "Spare Fuse", "Oxygen Canister", "Duct Tape Roll"),
        Rarity.UNCOMMON: ("Plasma Cutter", "Holo Map", "Repair Drone"),
        Rarity.RARE: ("Ion Blaster", "Shield Generator", "Quantum Compass"),
        Rarity.EPIC: ("Antimatter Core", "Cloaking Device"),
        Rarity.LEGENDARY: ("Star Forge Key", "Dyson Sphere Blueprint"),
    },
)

_CYBERPUNK = ThemeDictionary(
    theme=ThemeName.CYBERPUNK,
    messages={
        **DEFAULT_MESSAGES,
        "quest_completed": "Gig complete. Eddies transferred.",
        "level_up": "Street cred up!",
        "boss_defeated": "Corp exec flatlined!",
        "loot_dropped": "Data shard acquired!",
        "welcome_back": "Jacked back in, choom",
    },
    achievements=_achievements(
        [
            ("tasks_1", "Script Kiddie", "Finish your first gig"),
            ("tasks_10", "Runner", "Finish 10 gigs"),
            ("tasks_50", "Fixer's Favorite", "Finish 50 gigs"),
            ("tasks_100", "Edgerunner", "Finish 100 gigs"),
            ("tasks_500", "Night City Legend", "Finish 500 gigs"),
            ("tasks_1000", "Ghost in the Machine", "Finish 1000 gigs"),
            ("bosses_1", "Corp Breaker", "Flatline your first exec"),
            ("bosses_5", "ICE Cracker", "Flatline 5 execs"),
            ("bosses_10", "Tower Raider", "Flatline 10 execs"),
            ("bosses_25", "Megacorp Nightmare", "Flatline 25 execs"),
            ("streak_3", "Overclocked", "3 day uptime"),
            ("streak_7", "Always Online", "7 day uptime"),
            ("streak_14", "Zero Downtime", "14 day uptime"),
            ("streak_30", "Chrome Heart", "30 day uptime"),
            ("depth_3", "Subnet Diver", "Jack in 3 layers deep"),
            ("depth_5", "Deep Net", "Jack in 5 layers deep"),
            ("depth_10", "Blackwall", "Jack in 10 layers deep"),
            ("speedrun", "Zero Day", "Take and finish a gig on the same day"),
            ("nightowl", "Neon Shadow", "Finish a gig in the dead of night"),
            ("earlybird", "Smog Sunrise", "Finish a gig before the city wakes"),
        ]
    ),
    loot={
        Rarity.COMMON: ("Burner Phone", "Synth Noodles", "Cracked Datachip", "Neon Patch"),
        Rarity.UNCOMMON: ("Smart Pistol", "Optical Implant", "Spoofed ID"),
        Rarity.RARE: ("Mantis Blades", "Military Deck", "Reflex Booster"),
        Rarity.EPIC: ("Sandevistan", "Black ICE Breaker"),
        Rarity.LEGENDARY: ("Relic Chip", "Arasaka Master Key"),
    },
)

_PIRATE = ThemeDictionary(
    theme=ThemeName.PIRATE,
    messages={
        **DEFAULT_MESSAGES,
        "quest_completed": "Plunder secured, matey!",
        "level_up": "Ye've been promoted!",
        "boss_defeated": "The kraken sinks!",
        "loot_dropped": "Treasure ahoy!",
        "welcome_back": "Ahoy, captain",
    },
    achievements=_achievements(
        [
            ("tasks_1", "Deckhand", "Finish yer first job"),
            ("tasks_10", "Powder Monkey", "Finish 10 jobs"),
            ("tasks_50", "Boatswain", "Finish 50 jobs"),
            ("tasks_100", "First Mate", "Finish 100 jobs"),
            ("tasks_500", "Captain", "Finish 500 jobs"),
            ("tasks_1000", "Pirate King", "Finish 1000 jobs"),
            ("bosses_1", "Kraken Hunter", "Sink yer first sea monster"),
            ("bosses_5", "Terror of the Seas", "Sink 5 sea monsters"),
            ("bosses_10", "Scourge of the Navy", "Sink 10 sea monsters"),
            ("bosses_25", "Davy Jones' Rival", "Sink 25 sea monsters"),
            ("streak_3", "Fair Winds", "Sail 3 days straight"),
            ("streak_7", "Seven Seas", "Sail 7 days straight"),
            ("streak_14", "Long Voyage", "Sail 14 days straight"),
            ("streak_30", "Old Salt", "Sail 30 days straight"),
            ("depth_3", "Reef Diver", "Dive 3 fathoms deep"),
            ("depth_5", "Wreck Raider", "Dive 5 fathoms deep"),
            ("depth_10", "Locker Seeker", "Dive 10 fathoms deep"),
            ("speedrun", "Quick Plunder", "Start and finish a raid the same day"),
            ("nightowl", "Midnight Raider", "Raid under cover of darkness"),
            ("earlybird", "Dawn Patrol", "Raid at first light"),
        ]
    ),
    loot={
        Rarity.COMMON: ("Bottle of Rum", "Rope Coil", "Hardtack", "Tarnished Doubloon"),
        Rarity.UNCOMMON: ("Cutlass", "Spyglass", "Flintlock Pistol"),
        Rarity.RARE: ("Captain's Hat", "Cursed Compass", "Treasure Map"),
        Rarity.EPIC: ("Aztec Gold", "Ghost Ship Lantern"),
        Rarity.LEGENDARY: ("Trident of Poseidon", "Heart of Davy Jones"),
    },
)

THEMES: Dict[ThemeName, ThemeDictionary] = {
    theme_dict.theme: theme_dict for theme_dict in (_DEFAULT, _FANTASY, _SPACE, _CYBERPUNK, _PIRATE)
}


def resolve_theme(name: Optional[str]) -> ThemeName:
    """Return the matching theme, falling back to the default."""

    try:
        return ThemeName(str(name).strip().lower()) if name else ThemeName.DEFAULT
    except ValueError:
        return ThemeName.DEFAULT


def get_dictionary(name: Optional[str] = None) -> ThemeDictionary:
    return THEMES[resolve_theme(name)]


def available_themes() -> List[ThemeName]:
    return list(THEMES)


def theme_label(theme: ThemeName) -> str:
    return THEME_LABELS.get(theme, theme.value)


__all__ = [
    "AchievementInfo",
    "DEFAULT_MESSAGES",
    "STAT_LABELS",
    "THEMES",
    "ThemeDictionary",
    "ThemeName",
    "available_themes",
    "get_dictionary",
    "resolve_theme",
    "theme_label",
]
