"""Player profile data model and its JSON mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .progression import level_from_xp

UNDO_HISTORY_LIMIT = 10


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    @property
    def rank(self) -> int:
        return RARITY_ORDER.index(self)


RARITY_ORDER = [Rarity.COMMON, Rarity.UNCOMMON, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY]


class LootSource(str, Enum):
    TASK = "task"
    LEVELUP = "levelup"
    ACHIEVEMENT = "achievement"
    BOSS = "boss"


@dataclass(frozen=True)
class LootItem:
    name: str
    rarity: Rarity
    dropped_at: str
    source: LootSource

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "rarity": self.rarity.value,
            "droppedAt": self.dropped_at,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LootItem":
        return cls(
            name=str(data.get("name") or "Mystery Item"),
            rarity=_coerce_enum(Rarity, data.get("rarity"), Rarity.COMMON),
            dropped_at=str(data.get("droppedAt") or ""),
            source=_coerce_enum(LootSource, data.get("source"), LootSource.TASK),
        )


@dataclass(frozen=True)
class UndoEntry:
    """One reversible completion. ``goal_id`` is the goal note path."""

    goal_id: str
    xp_lost: int
    was_boss: bool
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.goal_id,
            "xpLost": self.xp_lost,
            "wasBoss": self.was_boss,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UndoEntry":
        return cls(
            goal_id=str(data.get("path") or ""),
            xp_lost=_coerce_int(data.get("xpLost")),
            was_boss=bool(data.get("wasBoss", False)),
            timestamp=str(data.get("timestamp") or ""),
        )


@dataclass
class ProfileStats:
    completed_by_day: Dict[str, int] = field(default_factory=dict)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    deepest_depth: int = 0
    speedruns: int = 0
    night_owl_tasks: int = 0
    early_bird_tasks: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completedByDay": dict(self.completed_by_day),
            "createdAt": self.created_at,
            "deepestDepth": self.deepest_depth,
            "speedruns": self.speedruns,
            "nightOwlTasks": self.night_owl_tasks,
            "earlyBirdTasks": self.early_bird_tasks,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ProfileStats":
        if not isinstance(data, dict):
            return cls()
        by_day = data.get("completedByDay")
        completed_by_day: Dict[str, int] = {}
        if isinstance(by_day, dict):
            for day, count in by_day.items():
                if _parse_date(day) is not None:
                    completed_by_day[str(day)] = _coerce_int(count)
        stats = cls(
            completed_by_day=completed_by_day,
            deepest_depth=_coerce_int(data.get("deepestDepth")),
            speedruns=_coerce_int(data.get("speedruns")),
            night_owl_tasks=_coerce_int(data.get("nightOwlTasks")),
            early_bird_tasks=_coerce_int(data.get("earlyBirdTasks")),
        )
        if data.get("createdAt"):
            stats.created_at = str(data["createdAt"])
        return stats


@dataclass
class Profile:
    total_xp: int = 0
    level: int = 1
    tasks_completed: int = 0
    bosses_defeated: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_completion_date: Optional[date] = None
    achievements: List[str] = field(default_factory=list)
    inventory: List[LootItem] = field(default_factory=list)
    undo_history: List[UndoEntry] = field(default_factory=list)
    stats: ProfileStats = field(default_factory=ProfileStats)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "totalXP": self.total_xp,
            "level": self.level,
            "tasksCompleted": self.tasks_completed,
            "bossesDefeated": self.bosses_defeated,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "achievements": list(self.achievements),
            "inventory": [item.to_dict() for item in self.inventory],
            "undoHistory": [entry.to_dict() for entry in self.undo_history],
            "stats": self.stats.to_dict(),
        }
        if self.last_completion_date is not None:
            payload["lastCompletionDate"] = self.last_completion_date.isoformat()
        return payload

    @classmethod
    def from_dict(cls, data: Any) -> "Profile":
        """Build a complete profile, defaulting anything missing or malformed."""

        if not isinstance(data, dict):
            return cls()

        total_xp = _coerce_int(data.get("totalXP"))
        current_streak = _coerce_int(data.get("currentStreak"))

        achievements: List[str] = []
        for raw in _list_field(data, "achievements"):
            if isinstance(raw, str) and raw and raw not in achievements:
                achievements.append(raw)

        inventory = [
            LootItem.from_dict(item)
            for item in _list_field(data, "inventory")
            if isinstance(item, dict)
        ]
        undo_history = [
            UndoEntry.from_dict(entry)
            for entry in _list_field(data, "undoHistory")
            if isinstance(entry, dict)
        ][:UNDO_HISTORY_LIMIT]

        return cls(
            total_xp=total_xp,
            level=level_from_xp(total_xp),
            tasks_completed=_coerce_int(data.get("tasksCompleted")),
            bosses_defeated=_coerce_int(data.get("bossesDefeated")),
            current_streak=current_streak,
            longest_streak=max(current_streak, _coerce_int(data.get("longestStreak"))),
            last_completion_date=_parse_date(data.get("lastCompletionDate")),
            achievements=achievements,
            inventory=inventory,
            undo_history=undo_history,
            stats=ProfileStats.from_dict(data.get("stats")),
        )


def _list_field(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _coerce_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(0, number)


def _coerce_enum(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _parse_date(value: Any) -> Optional[date]:
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


__all__ = [
    "LootItem",
    "LootSource",
    "Profile",
    "ProfileStats",
    "RARITY_ORDER",
    "Rarity",
    "UNDO_HISTORY_LIMIT",
    "UndoEntry",
]
