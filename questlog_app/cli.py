"""Command-line interface entry point for questlog."""

from __future__ import annotations

import logging
import re
import sys
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple, TypeVar

from .achievements import achievement_info, next_achievements
from .analytics import completions_by_day, render_progress_bar, render_sparkline
from .briefing import get_agent_brief
from .config import get_settings
from .editor import launch_editor
from .goals import (
    GoalConfig,
    GoalNotFoundError,
    SchemaNode,
    create_goal_with_note,
    create_goals_from_schema,
    find_goal_note,
    goal_tree_context,
    is_goal_note,
    parse_goal_note,
    toggle_boss_status,
    toggle_goal_status,
    update_goal_note,
)
from .ledger import CompletionResult, Ledger
from .loot import drop_chance_info, format_loot_item, group_by_rarity, inventory_stats
from .profile import LootSource, Profile, RARITY_ORDER
from .services import openai_service
from .services.openai_service import AIServiceError
from .storage import AppState, StorageError, load_state, save_state
from .themes import STAT_LABELS, available_themes, get_dictionary, resolve_theme, theme_label
from .welcome import update_welcome_note

logger = logging.getLogger(__name__)

Draft = TypeVar("Draft")

HEADING_LINE = re.compile(r"^#\s+.+$", re.MULTILINE)
REQUIREMENTS_SEPARATOR = "\n\nAdditional requirements: "


def _vault() -> Path:
    return get_settings().vault_dir


def _require_api_key() -> bool:
    if openai_service.is_configured():
        return True
    print("❌ Error: OPENAI_API_KEY not found in environment")
    print("Create a .env file with: OPENAI_API_KEY=sk-... or run `questlog settings --api-key ...`")
    return False


def _extract_flag(args: Sequence[str], flag: str) -> Tuple[bool, list[str]]:
    args_list = list(args)
    found = False
    while flag in args_list:
        args_list.remove(flag)
        found = True
    return found, args_list


def _extract_option(args: Sequence[str], option: str) -> Tuple[Optional[str], list[str]]:
    args_list = list(args)
    if option not in args_list:
        return None, args_list
    index = args_list.index(option)
    if index + 1 >= len(args_list):
        raise ValueError(f"{option} requires a value")
    value = args_list[index + 1]
    del args_list[index : index + 2]
    return value, args_list


class Session:
    """Loaded state plus a ledger whose saves also refresh the welcome note."""

    def __init__(self) -> None:
        self.vault = _vault()
        self.state: AppState = load_state()
        openai_service.configure(self.state.settings.ai_api_key, self.state.settings.ai_model)
        self.ledger = Ledger(self.state.profile, self._persist)

    @property
    def theme(self) -> str:
        return self.state.settings.theme.value

    @property
    def profile(self) -> Profile:
        return self.ledger.profile

    def _persist(self, profile: Profile) -> None:
        self.state.profile = profile
        self.save()

    def save(self) -> None:
        save_state(self.state)
        self.refresh_welcome()

    def refresh_welcome(self) -> Optional[Path]:
        try:
            return update_welcome_note(self.vault, self.state.profile, self.theme)
        except OSError:
            logger.exception("Failed to update welcome note in %s", self.vault)
            return None


def _resolve_note(vault: Path, raw: str) -> str:
    """Accept a goal note path or its folder, relative to the vault."""

    candidate = vault / raw
    if candidate.is_dir():
        note = find_goal_note(candidate)
        if note is None:
            raise GoalNotFoundError(f"No goal note inside {raw}")
        return note.relative_to(vault).as_posix()
    if not candidate.is_file() and (vault / f"{raw}.md").is_file():
        return f"{raw}.md"
    return raw


def _append_section(vault: Path, note_path: str, block: str) -> None:
    target = vault / note_path
    content = target.read_text(encoding="utf-8")
    if not content.endswith("\n"):
        content += "\n"
    target.write_text(content + "\n" + block.rstrip("\n") + "\n", encoding="utf-8")


def _review_draft(
    generate: Callable[[str], Draft],
    render: Callable[[Draft], str],
    *,
    question: str = "Use this draft?",
    allow_edit: bool = False,
) -> Optional[Draft]:
    """Preview loop: accept, discard, regenerate with comments, or edit text."""

    draft = generate("")
    choices = "y/n/regenerate" + ("/edit" if allow_edit else "")
    while True:
        print("\n" + "=" * 60)
        print(render(draft))
        print("=" * 60)
        choice = input(f"{question} ({choices}): ").strip().lower()
        if choice == "y":
            return draft
        if choice == "n":
            return None
        if choice in {"regenerate", "r"}:
            comments = input("Additional requirements (blank for none): ").strip()
            print("Regenerating...")
            draft = generate(f"{REQUIREMENTS_SEPARATOR}{comments}" if comments else "")
            continue
        if choice == "edit" and allow_edit:
            edited = launch_editor(str(draft))
            if edited is None:
                print("⚠️ Draft unchanged: no editor found or it exited with an error. Set $VISUAL or $EDITOR.")
            else:
                draft = edited.strip()  # type: ignore[assignment]
            continue
        print(f"Please enter one of: {choices.replace('/', ', ')}.")


def _render_schema(node: SchemaNode, prefix: str = "") -> str:
    lines = []
    marker = "@" if node.is_boss else "*"
    detail = f" ({node.deadline})" if node.deadline else ""
    lines.append(f"{prefix}{marker} {node.name}{detail}")
    for child in node.children:
        lines.append(_render_schema(child, prefix + "    "))
    return "\n".join(lines)


def _print_completion(result: CompletionResult, goal: GoalConfig, theme: str) -> None:
    dictionary = get_dictionary(theme)
    key = "boss_defeated" if goal.is_boss else "quest_completed"
    print(f"✅ {dictionary.message(key)} +{result.xp_gained} XP")

    if result.level_up:
        print(f"⬆️  {dictionary.message('level_up')} Level {result.new_level}!")

    for achievement in result.new_achievements:
        info = achievement_info(achievement, theme)
        print(f"🏆 {dictionary.message('new_achievement')} {info.name} – {info.desc}")

    if result.loot_dropped is not None:
        print(f"🎁 {dictionary.message('loot_dropped')} {format_loot_item(result.loot_dropped, dictionary)}")


def _handle_goal(args: Sequence[str]) -> int:
    try:
        is_boss, remaining = _extract_flag(args, "--boss")
        parent, remaining = _extract_option(remaining, "--parent")
        deadline, remaining = _extract_option(remaining, "--deadline")
        description, remaining = _extract_option(remaining, "--description")
        raw_xp, remaining = _extract_option(remaining, "--xp")
        xp = int(raw_xp) if raw_xp is not None else None
    except ValueError as exc:
        print(f"❌ {exc}")
        return 1
    if xp is not None and xp < 0:
        print("❌ --xp must be zero or more")
        return 1

    if not remaining or not remaining[0].strip():
        print('Usage: questlog goal "name" [--parent P] [--boss] [--deadline YYYY-MM-DD] [--xp N]')
        return 1

    session = Session()
    folder, note_path = create_goal_with_note(
        session.vault,
        parent or "",
        remaining[0],
        deadline=deadline,
        description=description,
        is_boss=is_boss,
        xp=xp,
    )
    session.refresh_welcome()
    print(f"✅ Goal created: {note_path}")
    return 0


def _handle_plan(args: Sequence[str]) -> int:
    try:
        parent, remaining = _extract_option(args, "--parent")
    except ValueError as exc:
        print(f"❌ {exc}")
        return 1
    if not remaining:
        print('Usage: questlog plan "goal or topic" [--parent P]')
        return 1

    session = Session()
    if not _require_api_key():
        return 1

    prompt = remaining[0]
    context = goal_tree_context(session.vault, parent or "")
    print("Generating goal structure...")
    try:
        schema = _review_draft(
            lambda extra: openai_service.generate_schema(prompt + extra, context),
            _render_schema,
            question="Create these goals?",
        )
    except AIServiceError as exc:
        print(f"❌ {exc}")
        return 1

    if schema is None:
        print("❌ No goals created")
        return 1

    count = create_goals_from_schema(session.vault, schema, parent or "")
    session.refresh_welcome()
    print(f"✅ Created {count} goals!")
    return 0


def _handle_done(args: Sequence[str]) -> int:
    if not args:
        print("Usage: questlog done <goal note or folder>")
        return 1

    session = Session()
    note_path = _resolve_note(session.vault, args[0])
    if not is_goal_note(session.vault, note_path):
        print("❌ This is not a goal note")
        return 1

    new_status, goal = toggle_goal_status(session.vault, note_path)
    if new_status == "done":
        result = session.ledger.complete_task(
            goal.xp,
            goal.is_boss,
            goal.depth,
            goal.created_at,
            session.theme,
            goal_id=note_path,
        )
        _print_completion(result, goal, session.theme)
        return 0

    undo = session.ledger.perform_undo()
    print(f"↩️  Goal reopened. {undo.message}")
    return 0


def _handle_boss(args: Sequence[str]) -> int:
    if not args:
        print("Usage: questlog boss <goal note or folder>")
        return 1

    session = Session()
    note_path = _resolve_note(session.vault, args[0])
    if not is_goal_note(session.vault, note_path):
        print("❌ This is not a goal note")
        return 1

    is_boss, goal = toggle_boss_status(session.vault, note_path)
    session.refresh_welcome()
    print("💀 Marked as boss (3x XP)" if is_boss else "Removed boss status")
    print(f"   xp:: {goal.xp}  note: {goal.note_path}")
    return 0


def _handle_undo() -> int:
    session = Session()
    history = session.profile.undo_history
    if history and history[0].goal_id:
        note_path = history[0].goal_id
        try:
            goal = parse_goal_note(session.vault, note_path)
        except GoalNotFoundError:
            logger.info("Undo target %s no longer exists", note_path)
        else:
            if goal.status == "done":
                update_goal_note(session.vault, note_path, status="open", completed_at=None)

    result = session.ledger.perform_undo()
    if not result.success:
        print(f"⚠️ {result.message}")
        return 1
    print(f"↩️  {result.message}")
    return 0


def _handle_profile(args: Sequence[str]) -> int:
    days = 14
    if args and args[0].isdigit():
        days = max(1, int(args[0]))

    session = Session()
    profile = session.profile
    progress = session.ledger.level_progress()
    streak = session.ledger.streak_info()
    history = completions_by_day(profile.stats.completed_by_day, days, date.today())

    lines = [
        f"🧙 {get_dictionary(session.theme).message('welcome_back')}",
        "=" * 40,
        f"{STAT_LABELS['level']}: {profile.level}",
        f"{STAT_LABELS['xp']}: {profile.total_xp}",
        f"Progress: {render_progress_bar(progress.percent)} {progress.current}/{progress.required} ({progress.percent}%)",
        f"{STAT_LABELS['tasks_completed']}: {profile.tasks_completed}",
        f"{STAT_LABELS['bosses_defeated']}: {profile.bosses_defeated}",
        f"{STAT_LABELS['current_streak']}: {streak.current} days",
        f"{STAT_LABELS['longest_streak']}: {streak.longest} days",
        f"Deepest depth: {profile.stats.deepest_depth}",
        f"Speedruns: {profile.stats.speedruns}",
        f"{STAT_LABELS['inventory']}: {len(profile.inventory)} items",
        "",
        f"Completions (last {len(history)} days):",
        f"  {render_sparkline([count for _, count in history])}",
    ]
    print("\n".join(lines))
    return 0


def _handle_inventory() -> int:
    session = Session()
    profile = session.profile
    dictionary = get_dictionary(session.theme)
    stats = inventory_stats(profile.inventory)

    print(f"🎒 Inventory ({stats.total} items, worth {stats.value})")
    print("=" * 40)
    if not stats.total:
        print("Complete goals to find loot!")
    for items in group_by_rarity(profile.inventory).values():
        for item in items:
            print(f"  {format_loot_item(item, dictionary)}")

    chances = drop_chance_info(profile.level, LootSource.TASK)
    print("")
    print(f"Drop chance at level {profile.level}: {chances['adjusted_chance']}% per task")
    rarity_chances = chances["rarity_chances"]
    print(
        "  "
        + "  ".join(
            f"{dictionary.rarity_name(rarity)} {rarity_chances[rarity]}%"  # type: ignore[index]
            for rarity in RARITY_ORDER
        )
    )
    return 0


def _handle_achievements() -> int:
    session = Session()
    profile = session.profile

    print(f"🏆 Achievements ({len(profile.achievements)} unlocked)")
    print("=" * 40)
    for achievement in profile.achievements:
        info = achievement_info(achievement, session.theme)
        print(f"  {info.name} – {info.desc}")

    upcoming = next_achievements(profile, session.theme)
    if upcoming:
        print("\nNext up:")
        for item in upcoming:
            print(f"  {item.info.name}: {item.current}/{item.target}")
    return 0


def _handle_journal() -> int:
    session = Session()
    path = session.refresh_welcome()
    if path is None:
        print("❌ Could not update the welcome note")
        return 1
    print(f"📜 Welcome note updated: {path}")
    return 0


def _handle_map(args: Sequence[str]) -> int:
    if not args:
        print("Usage: questlog map <goal note or folder>")
        return 1

    session = Session()
    if not _require_api_key():
        return 1

    note_path = _resolve_note(session.vault, args[0])
    goal = parse_goal_note(session.vault, note_path)
    tree = goal_tree_context(session.vault, goal.folder)
    if not tree:
        print("No tasks found to map")
        return 1

    print("Generating map...")
    try:
        dungeon = _review_draft(
            lambda extra: openai_service.generate_map(tree + extra),
            str,
            question="Insert this map?",
        )
    except AIServiceError as exc:
        print(f"❌ Error generating map: {exc}")
        return 1

    if dungeon is None:
        return 0
    _append_section(session.vault, note_path, f"## Map\n\n```\n{dungeon}\n```")
    print("✅ Map inserted!")
    return 0


def _handle_chart(args: Sequence[str]) -> int:
    try:
        into, remaining = _extract_option(args, "--into")
    except ValueError as exc:
        print(f"❌ {exc}")
        return 1
    if not remaining:
        print('Usage: questlog chart "describe the diagram" [--into <note>]')
        return 1

    session = Session()
    if not _require_api_key():
        return 1

    prompt = remaining[0]
    print("Generating chart...")
    try:
        chart = _review_draft(
            lambda extra: openai_service.generate_chart(prompt + extra),
            str,
            question="Keep this chart?",
        )
    except AIServiceError as exc:
        print(f"❌ Error generating chart: {exc}")
        return 1

    if chart is None:
        return 0
    if into:
        note_path = _resolve_note(session.vault, into)
        _append_section(session.vault, note_path, f"## Chart\n\n```\n{chart}\n```")
        print("✅ Chart inserted!")
    else:
        print(chart)
    return 0


def _handle_prompt(args: Sequence[str]) -> int:
    if not args:
        print('Usage: questlog prompt <note> ["what should change"]')
        return 1

    session = Session()
    if not _require_api_key():
        return 1

    note_path = _resolve_note(session.vault, args[0])
    target = session.vault / note_path
    if not target.is_file():
        print(f"❌ No note at {note_path}")
        return 1
    existing = target.read_text(encoding="utf-8")

    title = None
    if is_goal_note(session.vault, note_path):
        title = parse_goal_note(session.vault, note_path).name

    request = args[1] if len(args) > 1 else ""
    if not request:
        label = f' for "{title}"' if title else ""
        request = input(f"What content should be added/updated{label}? ").strip()
    if not request:
        print("❌ Prompt cannot be empty")
        return 1

    instructions = (
        f"Generate markdown content{f' for a note titled {title!r}' if title else ''}.\n"
        f"The user wants: {request}\n"
        "Consider the existing content and add/update accordingly.\n"
        "Write concise, actionable content in markdown format."
    )
    print("Generating content...")
    try:
        content = _review_draft(
            lambda extra: openai_service.generate_content(instructions + extra, existing),
            str,
            question="Insert this content?",
            allow_edit=True,
        )
    except AIServiceError as exc:
        print(f"❌ {exc}")
        return 1

    if content is None:
        return 0
    _append_section(session.vault, note_path, content)
    print("✅ Content inserted!")
    return 0


def _handle_header(args: Sequence[str]) -> int:
    if not args:
        print("Usage: questlog header <note>")
        return 1

    session = Session()
    if not _require_api_key():
        return 1

    note_path = _resolve_note(session.vault, args[0])
    target = session.vault / note_path
    if not target.is_file():
        print(f"❌ No note at {note_path}")
        return 1
    content = target.read_text(encoding="utf-8")
    if not content.strip():
        print("No content to generate header from")
        return 1

    print("Generating header...")
    try:
        header = _review_draft(
            lambda extra: openai_service.generate_title(content + extra),
            str,
            question="Use this header?",
            allow_edit=True,
        )
    except AIServiceError as exc:
        print(f"❌ {exc}")
        return 1

    if not header:
        return 0

    if HEADING_LINE.search(content):
        content = HEADING_LINE.sub(f"# {header}", content, count=1)
    else:
        content = f"# {header}\n\n{content}"
    target.write_text(content, encoding="utf-8")

    renamed = target.with_name(f"{header}.md")
    try:
        target.rename(renamed)
    except OSError:
        print("✅ Header set! (Could not rename file)")
        return 0
    print(f'✅ Header set and file renamed to "{header}"')
    return 0


def _handle_theme(args: Sequence[str]) -> int:
    session = Session()
    if not args:
        current = session.state.settings.theme
        for theme in available_themes():
            marker = "*" if theme == current else " "
            print(f" {marker} {theme.value:<10} {theme_label(theme)}")
        return 0

    theme = resolve_theme(args[0])
    if theme.value != args[0].strip().lower():
        print(f"❌ Unknown theme: {args[0]}")
        return 1
    session.state.settings.theme = theme
    session.save()
    print(f"🎨 Theme set to {theme_label(theme)}")
    return 0


def _handle_settings(args: Sequence[str]) -> int:
    try:
        api_key, remaining = _extract_option(args, "--api-key")
        model, remaining = _extract_option(remaining, "--model")
    except ValueError as exc:
        print(f"❌ {exc}")
        return 1

    session = Session()
    prefs = session.state.settings
    if api_key is None and model is None:
        masked = f"{prefs.ai_api_key[:6]}…" if prefs.ai_api_key else "(from environment)"
        print(f"Theme: {theme_label(prefs.theme)}")
        print(f"AI key: {masked}")
        print(f"AI model: {prefs.ai_model or get_settings().gpt_model}")
        return 0

    if api_key is not None:
        prefs.ai_api_key = api_key
    if model is not None:
        prefs.ai_model = model
    save_state(session.state)
    print("✅ Settings saved")
    return 0


def _print_help() -> None:
    print("⚔️  questlog - Turn your goals into a dungeon crawl")
    print("\nCommands:")
    print('  goal "name"           - Create a goal (--parent, --boss, --deadline, --xp)')
    print('  plan "topic"          - Draft a goal breakdown with AI')
    print("  done <note>           - Toggle a goal done/open")
    print("  boss <note>           - Toggle boss status (3x XP)")
    print("  undo                  - Revert the most recent completion")
    print("  profile [days]        - Level, stats, and completion sparkline")
    print("  inventory             - Loot collected so far")
    print("  achievements          - Unlocked and upcoming achievements")
    print("  journal               - Regenerate the welcome note")
    print("  map <note>            - AI dungeon map of a goal's subtree")
    print('  chart "prompt"        - AI ASCII chart (--into <note>)')
    print("  prompt <note>         - AI content for a note")
    print("  header <note>         - AI title for a note")
    print("  theme [name]          - Show or set the theme")
    print("  settings              - Show or set AI key/model (--api-key, --model)")
    print("  agent-brief           - Print architecture overview for agents")
    print("  help                  - Show this help message")


def main(argv: Sequence[str] | None = None) -> int:
    args = list(argv) if argv is not None else sys.argv[1:]
    logging.basicConfig(level=get_settings().log_level, format="%(levelname)s %(name)s: %(message)s")

    if not args:
        _print_help()
        return 1

    command, *rest = args

    try:
        if command == "goal":
            return _handle_goal(rest)
        if command == "plan":
            return _handle_plan(rest)
        if command == "done":
            return _handle_done(rest)
        if command == "boss":
            return _handle_boss(rest)
        if command == "undo":
            return _handle_undo()
        if command == "profile":
            return _handle_profile(rest)
        if command == "inventory":
            return _handle_inventory()
        if command == "achievements":
            return _handle_achievements()
        if command == "journal":
            return _handle_journal()
        if command == "map":
            return _handle_map(rest)
        if command == "chart":
            return _handle_chart(rest)
        if command == "prompt":
            return _handle_prompt(rest)
        if command == "header":
            return _handle_header(rest)
        if command == "theme":
            return _handle_theme(rest)
        if command == "settings":
            return _handle_settings(rest)
    except StorageError as exc:
        print(f"❌ {exc}")
        return 1
    except GoalNotFoundError as exc:
        print(f"❌ {exc}")
        return 1
    except AIServiceError as exc:
        print(f"❌ {exc}")
        return 1

    if command == "help":
        _print_help()
        return 0

    if command == "agent-brief":
        print(get_agent_brief())
        return 0

    print(f"Unknown command: {command}")
    print("Use 'questlog help' to see available commands")
    return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
