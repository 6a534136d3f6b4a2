"""Completion and undo ledger: the only code that mutates a Profile."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, List, Optional, Union

from .achievements import evaluate_achievements
from .loot import LootDrop, LootRoller
from .profile import UNDO_HISTORY_LIMIT, LootItem, LootSource, Profile, UndoEntry
from .progression import LevelProgress, level_from_xp, progress_to_next_level

logger = logging.getLogger(__name__)

SaveCallback = Callable[[Profile], None]
Roller = Callable[..., LootDrop]
CreatedAt = Union[str, date, datetime, None]

EARLY_BIRD_COUNTER_HOURS = range(0, 6)
NIGHT_OWL_COUNTER_HOURS = range(0, 5)


@dataclass(frozen=True)
class CompletionResult:
    xp_gained: int
    level_up: bool
    old_level: int
    new_level: int
    new_achievements: List[str]
    loot_dropped: Optional[LootItem] = None
    loot_drops: List[LootItem] = field(default_factory=list)


@dataclass(frozen=True)
class UndoResult:
    success: bool
    xp_lost: int
    message: str


@dataclass(frozen=True)
class StreakInfo:
    current: int
    longest: int
    last_date: Optional[date]


def _to_date(value: CreatedAt) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


class Ledger:
    """Applies goal completions and undos to a profile.

    ``save_callback`` receives the profile after every mutation and is
    expected to persist it wholesale. Mutations are serialised with a lock so
    a shared ledger never interleaves two read-modify-write sequences.
    """

    def __init__(
        self,
        profile: Optional[Profile],
        save_callback: SaveCallback,
        *,
        roller: Optional[Roller] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.profile = profile or Profile()
        self.profile.level = level_from_xp(self.profile.total_xp)
        self._save_callback = save_callback
        self._roll = roller or LootRoller()
        self._clock = clock or datetime.now
        self._lock = threading.Lock()

    def _save(self) -> None:
        self.profile.level = level_from_xp(self.profile.total_xp)
        self._save_callback(self.profile)

    def _update_streak(self, today: date) -> None:
        profile = self.profile
        last = profile.last_completion_date
        if last is None:
            profile.current_streak = 1
        else:
            gap = (today - last).days
            if gap == 1:
                profile.current_streak += 1
            elif gap > 1:
                profile.current_streak = 1
        profile.longest_streak = max(profile.longest_streak, profile.current_streak)
        profile.last_completion_date = today

    def complete_task(
        self,
        xp: int,
        is_boss: bool,
        depth: int,
        created_at: CreatedAt,
        theme: Optional[str] = None,
        goal_id: str = "",
    ) -> CompletionResult:
        """Record a goal completion worth exactly ``xp`` experience."""

        if xp < 0:
            raise ValueError(f"xp must be non-negative, got {xp}")
        if depth < 0:
            raise ValueError(f"depth must be non-negative, got {depth}")

        with self._lock:
            profile = self.profile
            now = self._clock()
            today = now.date()
            created_date = _to_date(created_at)
            speedrun = created_date is not None and created_date == today

            old_level = profile.level
            profile.total_xp += xp
            profile.tasks_completed += 1
            if is_boss:
                profile.bosses_defeated += 1

            stats = profile.stats
            if speedrun:
                stats.speedruns += 1
            if now.hour in EARLY_BIRD_COUNTER_HOURS:
                stats.early_bird_tasks += 1
            if now.hour in NIGHT_OWL_COUNTER_HOURS:
                stats.night_owl_tasks += 1
            stats.deepest_depth = max(stats.deepest_depth, depth)

            self._update_streak(today)

            day_key = today.isoformat()
            stats.completed_by_day[day_key] = stats.completed_by_day.get(day_key, 0) + 1

            profile.level = level_from_xp(profile.total_xp)
            level_up = profile.level > old_level

            new_achievements = evaluate_achievements(profile, speedrun=speedrun, hour=now.hour)

            sources = [LootSource.BOSS if is_boss else LootSource.TASK]
            if level_up:
                sources.append(LootSource.LEVELUP)
            if new_achievements:
                sources.append(LootSource.ACHIEVEMENT)

            drops: List[LootItem] = []
            for source in sources:
                result = self._roll(profile.level, source, theme, now)
                if result.dropped and result.item is not None:
                    profile.inventory.append(result.item)
                    drops.append(result.item)

            profile.undo_history.insert(
                0,
                UndoEntry(
                    goal_id=goal_id,
                    xp_lost=xp,
                    was_boss=is_boss,
                    timestamp=now.isoformat(),
                ),
            )
            del profile.undo_history[UNDO_HISTORY_LIMIT:]

            self._save()

        logger.debug(
            "Completed %s for %s XP (level %s -> %s, %d achievements, %d drops)",
            goal_id or "goal",
            xp,
            old_level,
            profile.level,
            len(new_achievements),
            len(drops),
        )
        return CompletionResult(
            xp_gained=xp,
            level_up=level_up,
            old_level=old_level,
            new_level=profile.level,
            new_achievements=new_achievements,
            loot_dropped=drops[0] if drops else None,
            loot_drops=drops,
        )

    def perform_undo(self) -> UndoResult:
        """Reverse the most recent completion's XP and counters.

        Achievements, inventory and streak state are left untouched. The
        per-day counter adjusted is always today's bucket.
        """

        with self._lock:
            profile = self.profile
            if not profile.undo_history:
                return UndoResult(success=False, xp_lost=0, message="Nothing to undo")

            entry = profile.undo_history.pop(0)
            profile.total_xp = max(0, profile.total_xp - entry.xp_lost)
            profile.tasks_completed = max(0, profile.tasks_completed - 1)
            if entry.was_boss:
                profile.bosses_defeated = max(0, profile.bosses_defeated - 1)
            profile.level = level_from_xp(profile.total_xp)

            day_key = self._clock().date().isoformat()
            by_day = profile.stats.completed_by_day
            if by_day.get(day_key):
                by_day[day_key] = max(0, by_day[day_key] - 1)

            self._save()

        logger.debug("Undid %s (-%s XP)", entry.goal_id or "goal", entry.xp_lost)
        return UndoResult(success=True, xp_lost=entry.xp_lost, message=f"Undo: -{entry.xp_lost} XP")

    def level_progress(self) -> LevelProgress:
        return progress_to_next_level(self.profile.total_xp)

    def streak_info(self) -> StreakInfo:
        return StreakInfo(
            current=self.profile.current_streak,
            longest=self.profile.longest_streak,
            last_date=self.profile.last_completion_date,
        )


__all__ = ["CompletionResult", "Ledger", "StreakInfo", "UndoResult"]
