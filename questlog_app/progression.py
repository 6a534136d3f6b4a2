"""Experience curve and level math. Pure functions, no I/O."""

from __future__ import annotations

import math
from dataclasses import dataclass

BASE_LEVEL_XP = 100
LEVEL_SCALING = 1.5


@dataclass(frozen=True)
class LevelProgress:
    """Experience earned inside the current level."""

    current: int
    required: int
    percent: int


def experience_for_level(level: int) -> int:
    """XP needed to go from *level* to *level + 1*."""

    return math.floor(BASE_LEVEL_XP * LEVEL_SCALING ** (level - 1))


def _check_xp(total_xp: int) -> None:
    if total_xp < 0:
        raise ValueError(f"total_xp must be non-negative, got {total_xp}")


def level_from_xp(total_xp: int) -> int:
    """Return the level a player is at given their total XP."""

    _check_xp(total_xp)
    level = 1
    spent = 0
    while spent + experience_for_level(level) <= total_xp:
        spent += experience_for_level(level)
        level += 1
    return level


def experience_to_reach(level: int) -> int:
    """Total cumulative XP required to *reach* the given level."""

    return sum(experience_for_level(step) for step in range(1, level))


def progress_to_next_level(total_xp: int) -> LevelProgress:
    level = level_from_xp(total_xp)
    current = total_xp - experience_to_reach(level)
    required = experience_for_level(level)
    return LevelProgress(
        current=current,
        required=required,
        percent=math.floor(current / required * 100),
    )


__all__ = [
    "LevelProgress",
    "experience_for_level",
    "experience_to_reach",
    "level_from_xp",
    "progress_to_next_level",
]
