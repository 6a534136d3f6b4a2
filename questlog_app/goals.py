"""Goal notes inside a vault directory.

A goal is a folder holding one markdown note with inline ``key:: value``
fields. Goal identifiers are vault-relative POSIX paths to that note.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, Optional, Tuple

GOAL_STATUSES = ("open", "done", "blocked")
BASE_XP = 10
DEPTH_XP_BONUS = 5
BOSS_MULTIPLIER = 3
BOSS_PREFIX = "[BOSS] "
DEFAULT_AUTHOR = "Me"

INLINE_FIELD = re.compile(r"^([a-z-]+)::\s*(.*)$", re.IGNORECASE)
WIKI_LINK = re.compile(r"\[\[([^\]]+)\]\]")
HEADING = re.compile(r"^#\s+(.+)$", re.MULTILINE)
DESCRIPTION = re.compile(r"## Description\n\n([\s\S]*?)(?=\n## |\Z)")
SCHEMA_SECTION = re.compile(r"## (?:Schema|Chart)\n\n[\s\S]*?(?=\n## |\Z)")
MAP_SECTION = re.compile(r"## Map\n\n[\s\S]*?(?=\n## |\Z)")
INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')
BOSS_FOLDER = re.compile(r"^\[BOSS\]\s*", re.IGNORECASE)


class GoalNotFoundError(LookupError):
    """Raised when a path does not point at a goal note."""


@dataclass
class GoalConfig:
    name: str
    status: str = "open"
    xp: int = BASE_XP
    is_boss: bool = False
    deadline: Optional[str] = None
    completed_at: Optional[str] = None
    blocked_by: List[str] = field(default_factory=list)
    description: Optional[str] = None
    created_at: str = field(default_factory=lambda: date.today().isoformat())
    author: Optional[str] = None
    note_path: Optional[str] = None

    @property
    def folder(self) -> str:
        if not self.note_path:
            return ""
        parent = PurePosixPath(self.note_path).parent
        return "" if str(parent) == "." else str(parent)

    @property
    def depth(self) -> int:
        return calculate_depth(self.folder)


@dataclass
class SchemaNode:
    """One node of an AI-drafted goal tree."""

    name: str
    is_boss: bool = False
    description: Optional[str] = None
    deadline: Optional[str] = None
    blockers: List[str] = field(default_factory=list)
    children: List["SchemaNode"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaNode":
        children = [cls.from_dict(child) for child in data.get("children") or [] if isinstance(child, dict)]
        blockers = data.get("blockers") or []
        return cls(
            name=str(data.get("name") or "Untitled goal"),
            is_boss=bool(data.get("isBoss", False)),
            description=data.get("description") or None,
            deadline=data.get("deadline") or None,
            blockers=[str(item) for item in blockers] if isinstance(blockers, list) else [],
            children=children,
        )

    def count(self) -> int:
        return 1 + sum(child.count() for child in self.children)


def parse_inline_fields(text: str) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for line in text.split("\n"):
        match = INLINE_FIELD.match(line)
        if match:
            fields[match.group(1).lower()] = match.group(2).strip()
    return fields


def generate_inline_fields(fields: Dict[str, Any]) -> str:
    lines = []
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        lines.append(f"{key}:: {value}")
    return "\n".join(lines)


def safe_folder_name(name: str, is_boss: bool = False) -> str:
    """Sentence-case a goal name into a filesystem-safe folder name."""

    cleaned = INVALID_NAME_CHARS.sub("", name.strip())
    cleaned = re.sub(r"\s+", " ", cleaned)
    if cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]
    if is_boss:
        cleaned = f"{BOSS_PREFIX}{cleaned}"
    return cleaned


def calculate_depth(folder: str) -> int:
    return len([part for part in folder.split("/") if part])


def calculate_xp(depth: int, is_boss: bool = False) -> int:
    """XP for a goal: base plus a depth bonus, tripled for bosses."""

    return (BASE_XP + depth * DEPTH_XP_BONUS) * (BOSS_MULTIPLIER if is_boss else 1)


def goal_note_content(config: GoalConfig) -> str:
    author = f"[[{config.author}]]" if config.author else "not set"
    blockers = ", ".join(f"[[{item}]]" for item in config.blocked_by) if config.blocked_by else "none"
    fields: Dict[str, Any] = {
        "status": config.status,
        "boss": config.is_boss,
        "xp": config.xp,
        "deadline": config.deadline or "not set",
        "author": author,
        "blocker": blockers,
        "created": config.created_at[:10],
    }
    if config.status == "done":
        fields["completed"] = config.completed_at[:10] if config.completed_at else None

    content = f"# {config.name}\n\n{generate_inline_fields(fields)}\n"
    if config.description:
        content += f"\n## Description\n\n{config.description}\n"
    return content


def parse_goal_text(text: str, fallback_name: str, note_path: Optional[str] = None) -> GoalConfig:
    fields = parse_inline_fields(text)

    heading = HEADING.search(text)
    description = DESCRIPTION.search(text)

    status = fields.get("status", "open").lower()
    if status not in GOAL_STATUSES:
        status = "open"

    blocker_field = fields.get("blocker", "none")
    blocked_by = WIKI_LINK.findall(blocker_field) if blocker_field != "none" else []

    deadline = fields.get("deadline")
    author_links = WIKI_LINK.findall(fields.get("author", ""))

    try:
        xp = int(fields.get("xp", BASE_XP))
    except ValueError:
        xp = BASE_XP
    if xp < 0:
        xp = BASE_XP

    return GoalConfig(
        name=heading.group(1).strip() if heading else fallback_name,
        status=status,
        xp=xp,
        is_boss=fields.get("boss", "false").lower() == "true",
        deadline=deadline if deadline and deadline != "not set" else None,
        completed_at=fields.get("completed") or None,
        blocked_by=blocked_by,
        description=description.group(1).strip() if description and description.group(1).strip() else None,
        created_at=fields.get("created") or date.today().isoformat(),
        author=author_links[0] if author_links else None,
        note_path=note_path,
    )


def _normalize(path: str) -> str:
    cleaned = str(PurePosixPath(path.replace("\\", "/")))
    return "" if cleaned == "." else cleaned.strip("/")


def is_goal_note(vault: Path, note_path: str) -> bool:
    target = vault / _normalize(note_path)
    if not target.is_file() or target.suffix != ".md":
        return False
    return "status::" in target.read_text(encoding="utf-8")


def parse_goal_note(vault: Path, note_path: str) -> GoalConfig:
    rel = _normalize(note_path)
    target = vault / rel
    if not target.is_file():
        raise GoalNotFoundError(f"No goal note at {rel}")
    return parse_goal_text(target.read_text(encoding="utf-8"), target.stem, rel)


def find_goal_note(folder: Path) -> Optional[Path]:
    notes = sorted(path for path in folder.iterdir() if path.is_file() and path.suffix == ".md")
    return notes[0] if notes else None


def create_goal_with_note(
    vault: Path,
    parent: str,
    name: str,
    *,
    deadline: Optional[str] = None,
    description: Optional[str] = None,
    is_boss: bool = False,
    xp: Optional[int] = None,
    blockers: Optional[Iterable[str]] = None,
    author: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[str, str]:
    """Create a goal folder and its note. Returns ``(folder, note_path)``."""

    safe_name = safe_folder_name(name, is_boss)
    parent = _normalize(parent)
    folder = f"{parent}/{safe_name}" if parent else safe_name
    (vault / folder).mkdir(parents=True, exist_ok=True)

    note_path = f"{folder}/{safe_name}.md"
    config = GoalConfig(
        name=name,
        status="open",
        xp=xp if xp is not None else calculate_xp(calculate_depth(folder), is_boss),
        is_boss=is_boss,
        deadline=deadline,
        blocked_by=list(blockers or []),
        description=description,
        created_at=(today or date.today()).isoformat(),
        author=author or DEFAULT_AUTHOR,
    )
    (vault / note_path).write_text(goal_note_content(config), encoding="utf-8")
    return folder, note_path


def create_goals_from_schema(
    vault: Path,
    schema: SchemaNode,
    parent: str = "",
    today: Optional[date] = None,
) -> int:
    """Create a goal for every schema node, nesting children in folders."""

    folder, _ = create_goal_with_note(
        vault,
        parent,
        schema.name,
        deadline=schema.deadline,
        description=schema.description,
        is_boss=schema.is_boss,
        blockers=schema.blockers,
        today=today,
    )
    count = 1
    for child in schema.children:
        count += create_goals_from_schema(vault, child, folder, today)
    return count


def update_goal_note(vault: Path, note_path: str, **updates: Any) -> GoalConfig:
    """Rewrite a goal note's fields, keeping any schema, chart, or map section."""

    config = parse_goal_note(vault, note_path)
    target = vault / config.note_path
    content = target.read_text(encoding="utf-8")

    updated = replace(config, **updates)
    new_content = goal_note_content(updated)
    for pattern in (SCHEMA_SECTION, MAP_SECTION):
        preserved = pattern.search(content)
        if preserved:
            new_content += "\n" + preserved.group(0)

    target.write_text(new_content, encoding="utf-8")
    return updated


def toggle_goal_status(vault: Path, note_path: str, today: Optional[date] = None) -> Tuple[str, GoalConfig]:
    config = parse_goal_note(vault, note_path)
    new_status = "open" if config.status == "done" else "done"
    completed_at = (today or date.today()).isoformat() if new_status == "done" else None
    updated = update_goal_note(vault, note_path, status=new_status, completed_at=completed_at)
    return new_status, updated


def toggle_boss_status(vault: Path, note_path: str) -> Tuple[bool, GoalConfig]:
    """Flip boss status, recompute XP, and rename the folder to match.

    The returned config carries the note path after the rename.
    """

    config = parse_goal_note(vault, note_path)
    is_boss = not config.is_boss
    updated = update_goal_note(
        vault,
        note_path,
        is_boss=is_boss,
        xp=calculate_xp(config.depth, is_boss),
    )

    folder = PurePosixPath(config.folder)
    if not config.folder:
        return is_boss, updated

    base_name = BOSS_FOLDER.sub("", folder.name)
    new_name = f"{BOSS_PREFIX}{base_name}" if is_boss else base_name
    if new_name != folder.name:
        new_folder = folder.with_name(new_name)
        (vault / str(folder)).rename(vault / str(new_folder))
        updated = replace(updated, note_path=str(new_folder / PurePosixPath(config.note_path).name))
    return is_boss, updated


def _goal_folders(directory: Path) -> List[Path]:
    return sorted(
        child for child in directory.iterdir() if child.is_dir() and not child.name.startswith(".")
    )


def _read_goal(vault: Path, folder: Path) -> Optional[GoalConfig]:
    note = find_goal_note(folder)
    if note is None:
        return None
    text = note.read_text(encoding="utf-8")
    if "status::" not in text:
        return None
    return parse_goal_text(text, note.stem, note.relative_to(vault).as_posix())


def collect_goals(vault: Path, folder: str = "") -> List[GoalConfig]:
    """Every goal under ``folder``, depth-first."""

    root = vault / _normalize(folder)
    if not root.is_dir():
        return []

    goals: List[GoalConfig] = []

    def walk(directory: Path) -> None:
        for child in _goal_folders(directory):
            goal = _read_goal(vault, child)
            if goal is not None:
                goals.append(goal)
            walk(child)

    walk(root)
    return goals


def goal_tree_context(vault: Path, folder: str = "") -> str:
    """Box-drawing tree of goals for AI prompts."""

    rel = _normalize(folder)
    root = vault / rel
    if not root.is_dir():
        return ""
    max_depth = 5 if rel else 3

    def build(directory: Path, prefix: str, depth: int) -> str:
        if depth >= max_depth:
            return ""
        lines = ""
        children = _goal_folders(directory)
        for index, child in enumerate(children):
            is_last = index == len(children) - 1
            connector = "└── " if is_last else "├── "
            next_prefix = prefix + ("    " if is_last else "│   ")

            display = BOSS_FOLDER.sub("", child.name)
            tags: List[str] = []
            goal = _read_goal(vault, child)
            if goal is not None:
                display = goal.name
                if goal.status == "done":
                    tags.append("DONE")
                if goal.is_boss:
                    tags.append("BOSS")
                if goal.deadline:
                    tags.append(goal.deadline)

            tag_text = f" [{'] ['.join(tags)}]" if tags else ""
            lines += f"{prefix}{connector}{display}{tag_text}\n"
            lines += build(child, next_prefix, depth + 1)
        return lines

    return build(root, "", 0)


__all__ = [
    "GOAL_STATUSES",
    "GoalConfig",
    "GoalNotFoundError",
    "SchemaNode",
    "calculate_depth",
    "calculate_xp",
    "collect_goals",
    "create_goal_with_note",
    "create_goals_from_schema",
    "find_goal_note",
    "generate_inline_fields",
    "goal_note_content",
    "goal_tree_context",
    "is_goal_note",
    "parse_goal_note",
    "parse_goal_text",
    "parse_inline_fields",
    "safe_folder_name",
    "toggle_boss_status",
    "toggle_goal_status",
    "update_goal_note",
]
