"""The welcome note: a dashboard regenerated after every profile change."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from .achievements import achievement_info
from .analytics import render_progress_bar
from .goals import GoalConfig, collect_goals
from .loot import RARITY_SYMBOLS, group_by_rarity
from .profile import Profile
from .progression import progress_to_next_level

WELCOME_NOTE_NAME = "Welcome to Questlog.md"
OPEN_LIMIT = 10
COMPLETED_LIMIT = 5

BANNER = r"""```
  |
  |
  + \
  \.G_.*=.
   `(#'/.\  |
    .>' (_--.
 _=/d   ,^\
~~ \)-'   '
   / |   qlg
  '  '

╔═════════════════════════════╗
║     Welcome to Questlog     ║
╚═════════════════════════════╝

Turn your tasks into a dungeon crawl.
Complete quests, earn XP, level up!
```"""

HELP = """```
=== QUESTLOG ===

Commands:
  questlog goal "name"       Create a goal
  questlog plan "topic"      Draft goals with AI
  questlog done <note>       Toggle done/open
  questlog boss <note>       Toggle boss (3x XP)
  questlog undo              Revert last completion
  questlog map <note>        Generate a dungeon map
  questlog chart "prompt"    Generate a chart
  questlog journal           Update this note

Goal Format:
  status:: open
  boss:: false
  xp:: 25
  deadline:: 2026-02-15
  author:: [[Your Name]]
  blocker:: [[other task]]
  created:: 2026-01-30

XP System:
  Base task           10 XP
  Per depth level     +5 XP
  Boss multiplier     3x

Loot:
  [.] Common      ~25%
  [+] Uncommon    ~15%
  [*] Rare        ~8%
  [#] Epic        ~3%
  [!] Legendary   ~1%
```"""


def _is_blocked(goal: GoalConfig) -> bool:
    return bool(goal.blocked_by)


def journal_section(goals: Sequence[GoalConfig], today: date) -> str:
    if not goals:
        return "## Journal\n\n```\nNo active tasks. Use `questlog goal` to create goals!\n```\n"

    today_key = today.isoformat()
    active = [goal for goal in goals if goal.status != "done"]
    overdue = [goal for goal in active if goal.deadline and goal.deadline < today_key]
    upcoming = sorted(
        (goal for goal in active if goal.deadline and goal.deadline >= today_key),
        key=lambda goal: goal.deadline or "",
    )
    blocked = [goal for goal in active if _is_blocked(goal)]
    open_goals = [goal for goal in active if not goal.deadline and not _is_blocked(goal)]
    done = [goal for goal in goals if goal.status == "done"]

    def boss(goal: GoalConfig) -> str:
        return "[BOSS] " if goal.is_boss else ""

    lines: List[str] = ["## Journal", "", "```", "=== TASK LOG ==="]

    if overdue:
        lines += ["", f"OVERDUE ({len(overdue)}):"]
        lines += [f"  ! {boss(goal)}{goal.name} ({goal.deadline})" for goal in overdue]

    if upcoming:
        lines += ["", f"UPCOMING ({len(upcoming)}):"]
        lines += [f"  > {boss(goal)}{goal.name} ({goal.deadline})" for goal in upcoming]

    if blocked:
        lines += ["", f"BLOCKED ({len(blocked)}):"]
        lines += [f"  x {goal.name}" for goal in blocked]

    if open_goals:
        lines += ["", f"OPEN ({len(open_goals)}):"]
        lines += [f"  * {boss(goal)}{goal.name}" for goal in open_goals[:OPEN_LIMIT]]
        if len(open_goals) > OPEN_LIMIT:
            lines.append(f"  ... and {len(open_goals) - OPEN_LIMIT} more")

    if done:
        lines += ["", f"COMPLETED ({len(done)}):"]
        lines += [f"  ✓ {goal.name}" for goal in done[:COMPLETED_LIMIT]]
        if len(done) > COMPLETED_LIMIT:
            lines.append(f"  ... and {len(done) - COMPLETED_LIMIT} more")

    lines.append("```")
    return "\n".join(lines) + "\n"


def welcome_content(
    profile: Profile,
    theme: Optional[str],
    goals: Sequence[GoalConfig],
    today: date,
) -> str:
    progress = progress_to_next_level(profile.total_xp)
    bar = render_progress_bar(progress.percent)

    sections = [
        "# Welcome to Questlog",
        BANNER,
        "---",
        journal_section(goals, today).rstrip("\n"),
        "---",
        "\n".join(
            [
                "## Profile",
                "",
                f"level:: {profile.level}",
                f"xp:: {profile.total_xp}",
                f"xp-to-next:: {progress.required - progress.current}",
                f"progress:: {bar} {progress.current}/{progress.required} ({progress.percent}%)",
            ]
        ),
        "---",
        "\n".join(
            [
                "## Stats",
                "",
                f"tasks-completed:: {profile.tasks_completed}",
                f"bosses-defeated:: {profile.bosses_defeated}",
                f"current-streak:: {profile.current_streak} days",
                f"longest-streak:: {profile.longest_streak} days",
                f"deepest-depth:: {profile.stats.deepest_depth}",
                f"speedruns:: {profile.stats.speedruns}",
            ]
        ),
        "---",
        _achievements_block(profile, theme),
        "---",
        _inventory_block(profile),
        "---",
        "## Help\n\n" + HELP,
    ]
    return "\n\n".join(sections) + "\n"


def _achievements_block(profile: Profile, theme: Optional[str]) -> str:
    lines = ["## Achievements", "", f"unlocked:: {len(profile.achievements)}", ""]
    if not profile.achievements:
        lines.append("*Complete goals to unlock achievements!*")
    for achievement in profile.achievements:
        info = achievement_info(achievement, theme)
        lines.append(f"{info.name}:: {info.desc}")
    return "\n".join(lines)


def _inventory_block(profile: Profile) -> str:
    lines = ["## Inventory", "", f"items:: {len(profile.inventory)}", ""]
    if not profile.inventory:
        lines.append("*Complete goals to find loot!*")
    for items in group_by_rarity(profile.inventory).values():
        for item in items:
            lines.append(f"{RARITY_SYMBOLS[item.rarity]}:: {item.name}")
    return "\n".join(lines)


def update_welcome_note(
    vault: Path,
    profile: Profile,
    theme: Optional[str] = None,
    today: Optional[date] = None,
) -> Path:
    """Regenerate the welcome note at the vault root and return its path."""

    vault.mkdir(parents=True, exist_ok=True)
    content = welcome_content(profile, theme, collect_goals(vault), today or date.today())
    path = vault / WELCOME_NOTE_NAME
    path.write_text(content, encoding="utf-8")
    return path


__all__ = ["WELCOME_NOTE_NAME", "journal_section", "update_welcome_note", "welcome_content"]
