"""Achievement thresholds, unlock evaluation, and themed lookups.

Achievement ids are persisted, so their format is fixed:
``<category>_<threshold>`` for threshold achievements (``tasks_100``) and the
literals ``speedrun``, ``nightowl`` and ``earlybird`` for one-shot specials.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .profile import Profile
from .themes import AchievementInfo, get_dictionary

ACHIEVEMENT_THRESHOLDS: Dict[str, Tuple[int, ...]] = {
    "tasks": (1, 10, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
    "bosses": (1, 5, 10, 25, 50, 100, 250, 500),
    "streak": (3, 7, 14, 30, 60, 90, 180, 365),
    "depth": (3, 5, 7, 10, 15, 20),
    "level": (5, 10, 25, 50, 100, 150, 200),
    "xp": (1000, 5000, 10000, 50000, 100000, 500000, 1000000),
}

SPEEDRUN = "speedrun"
NIGHT_OWL = "nightowl"
EARLY_BIRD = "earlybird"
SPECIAL_ACHIEVEMENTS = (SPEEDRUN, NIGHT_OWL, EARLY_BIRD)

NIGHT_OWL_HOURS = range(0, 5)
EARLY_BIRD_HOURS = range(5, 7)

# Evaluation order matters: new ids are reported in this order.
_COUNTERS: List[Tuple[str, Callable[[Profile], int]]] = [
    ("tasks", lambda profile: profile.tasks_completed),
    ("bosses", lambda profile: profile.bosses_defeated),
    ("depth", lambda profile: profile.stats.deepest_depth),
    ("streak", lambda profile: profile.current_streak),
    ("level", lambda profile: profile.level),
    ("xp", lambda profile: profile.total_xp),
]
_COUNTER_LOOKUP = dict(_COUNTERS)


@dataclass(frozen=True)
class NextAchievement:
    id: str
    info: AchievementInfo
    current: int
    target: int


def achievement_id(category: str, threshold: int) -> str:
    return f"{category}_{threshold}"


def parse_achievement_id(value: str) -> Optional[Tuple[str, int]]:
    """Split a threshold id into ``(category, threshold)``."""

    category, sep, raw_threshold = value.rpartition("_")
    if not sep or not category or not raw_threshold.isdigit():
        return None
    return category, int(raw_threshold)


def evaluate_achievements(profile: Profile, *, speedrun: bool, hour: int) -> List[str]:
    """Unlock every achievement the profile now qualifies for.

    Mutates ``profile.achievements`` (append only) and returns the ids that
    were newly added.
    """

    unlocked: List[str] = []

    def unlock(candidate: str) -> None:
        if candidate not in profile.achievements:
            profile.achievements.append(candidate)
            unlocked.append(candidate)

    for category, counter in _COUNTERS:
        value = counter(profile)
        for threshold in ACHIEVEMENT_THRESHOLDS[category]:
            if value >= threshold:
                unlock(achievement_id(category, threshold))

    if speedrun:
        unlock(SPEEDRUN)
    if hour in NIGHT_OWL_HOURS:
        unlock(NIGHT_OWL)
    if hour in EARLY_BIRD_HOURS:
        unlock(EARLY_BIRD)

    return unlocked


def achievement_info(value: str, theme: Optional[str] = None) -> AchievementInfo:
    """Themed name and description; generated for ids the theme lacks."""

    dictionary = get_dictionary(theme)
    info = dictionary.achievements.get(value)
    if info is not None:
        return info

    parsed = parse_achievement_id(value)
    if parsed is None:
        return AchievementInfo(name=value.capitalize() or "Unknown", desc="Unlocked")

    category, threshold = parsed
    return AchievementInfo(
        name=f"{category.capitalize()} {threshold}",
        desc=f"Reach {threshold} {category}",
    )


def next_achievements(profile: Profile, theme: Optional[str] = None) -> List[NextAchievement]:
    """The next locked task, boss, and streak milestone."""

    upcoming: List[NextAchievement] = []
    for category in ("tasks", "bosses", "streak"):
        for threshold in ACHIEVEMENT_THRESHOLDS[category]:
            candidate = achievement_id(category, threshold)
            if candidate in profile.achievements:
                continue
            upcoming.append(
                NextAchievement(
                    id=candidate,
                    info=achievement_info(candidate, theme),
                    current=_COUNTER_LOOKUP[category](profile),
                    target=threshold,
                )
            )
            break
    return upcoming


__all__ = [
    "ACHIEVEMENT_THRESHOLDS",
    "EARLY_BIRD",
    "NIGHT_OWL",
    "NextAchievement",
    "SPECIAL_ACHIEVEMENTS",
    "SPEEDRUN",
    "achievement_id",
    "achievement_info",
    "evaluate_achievements",
    "next_achievements",
    "parse_achievement_id",
]
