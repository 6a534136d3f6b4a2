"""OpenAI helpers for goal drafting, maps, charts, content, and titles."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

import openai
from openai import OpenAI, OpenAIError

from ..config import get_settings
from ..goals import SchemaNode


class AIServiceError(RuntimeError):
    """Raised when the OpenAI service cannot fulfill a request."""


_client: OpenAI | None = None
_api_key_override: str | None = None
_model_override: str | None = None

JSON_BLOCK = re.compile(r"\{[\s\S]*\}")
CODE_FENCE = re.compile(r"```[a-z]*\n?", re.IGNORECASE)
TITLE_INPUT_LIMIT = 2000


def configure(api_key: str | None = None, model: str | None = None) -> None:
    """Prefer persisted credentials over the environment."""

    global _client, _api_key_override, _model_override
    _api_key_override = api_key or None
    _model_override = model or None
    _client = None


def _api_key() -> str | None:
    return _api_key_override or get_settings().openai_api_key


def _model() -> str:
    return _model_override or get_settings().gpt_model


def is_configured() -> bool:
    return bool(_api_key())


def _get_client() -> OpenAI:
    global _client
    if _client is None:
        api_key = _api_key()
        if not api_key:
            raise AIServiceError("OPENAI_API_KEY is not configured.")
        _client = openai.OpenAI(api_key=api_key)
    return _client


def _chat(
    prompt: str,
    *,
    system: str | None = None,
    max_tokens: int = 1500,
    temperature: float = 0.7,
    error_message: str,
) -> str:
    client = _get_client()
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    try:
        response = client.chat.completions.create(
            model=_model(),
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except OpenAIError as exc:
        raise AIServiceError(error_message) from exc

    choices = getattr(response, "choices", None)
    if not choices:
        raise AIServiceError("OpenAI response did not contain choices")

    content = (choices[0].message.content or "").strip()
    if not content:
        raise AIServiceError("Empty response from OpenAI")
    return content


def _strip_code_fences(text: str) -> str:
    return CODE_FENCE.sub("", text).replace("```", "").strip()


def _build_schema_prompt(existing_context: str | None) -> str:
    sections = [
        "You are a task breakdown assistant. Output a SHORT hierarchical task list.",
        "",
        "JSON format (omit description, deadline, blockers if empty):",
        '{"name": "Goal", "children": [{"name": "Step 1", "isBoss": false, "children": []}]}',
        "",
        "Rules:",
        "- VERY SHORT: max 3-5 tasks total. Prefer 3.",
        "- Task names: 2-4 words only. No sentences.",
        '- No "description" field unless critical.',
        '- "isBoss": true for one main milestone only.',
        "- Max 2 levels deep, max 2 children per task.",
        "- Deadlines only if user explicitly asks (YYYY-MM-DD).",
        "- Blockers only if user mentions dependencies.",
        "- Output ONLY valid JSON, no text before or after.",
        "- DO NOT duplicate existing tasks from context.",
    ]
    if existing_context:
        sections.append("")
        sections.append("Existing tasks in this folder (DO NOT duplicate these):")
        sections.append(existing_context)
    return "\n".join(sections)


def generate_schema(prompt: str, existing_context: str | None = None) -> SchemaNode:
    """Draft a goal tree for ``prompt`` without repeating existing goals."""

    content = _chat(
        f"Goal to break down:\n{prompt}",
        system=_build_schema_prompt(existing_context),
        temperature=0.4,
        error_message="Failed to generate goal schema from OpenAI",
    )

    match = JSON_BLOCK.search(content)
    if not match:
        raise AIServiceError("Could not parse JSON from response")
    try:
        payload: Dict[str, Any] = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise AIServiceError("OpenAI returned malformed goal schema JSON") from exc
    if not isinstance(payload, dict):
        raise AIServiceError("Goal schema must be a JSON object")

    return SchemaNode.from_dict(payload)


def generate_content(prompt: str, existing_content: str | None = None) -> str:
    """Generate markdown for a note, optionally informed by what it already says."""

    user_content = prompt
    if existing_content:
        user_content += f"\n\nExisting note content for context:\n{existing_content}"
    return _chat(user_content, error_message="Failed to generate note content")


MAP_SYSTEM_PROMPT = """You are a dungeon map artist for a roguelike game. Create an ASCII dungeon map that looks like a real game level.

WIDTH: 60-70 characters max (fits on screen but allows side-by-side rooms)

STYLE: Make it look like a real dungeon/game map with:
- Multiple rooms connected by corridors
- Rooms can be side by side (not just vertical)
- Interesting shapes (L-shaped, T-shaped rooms)
- Secret passages, treasure rooms
- Different room sizes based on importance
- Boss rooms should be larger and more decorated

SYMBOLS:
█ or # for walls
░ for floor/corridors
+ for doors
* open tasks
x completed [DONE]
@ boss [BOSS] (in decorated rooms)
! blocked
♦ treasure/loot
≈ water/hazard

Finish with a legend line: * Task  x Done  @ Boss  ♦ Loot  + Door
Respond with ONLY the ASCII art, no explanations."""

CHART_SYSTEM_PROMPT = """You are a diagram artist. Create a COMPACT ASCII art chart/diagram.

IMPORTANT: Keep the diagram NARROW - max 50 characters wide to fit on screen.

Use box-drawing characters and symbols:
┌ ┐ └ ┘ ─ │ ├ ┤ ┬ ┴ ┼ for boxes
→ ← ↑ ↓ for arrows
* + - for bullet points

Keep it:
- MAX WIDTH: 50 characters
- Vertical layout preferred
- Clear and readable
- No unnecessary decoration

Respond with ONLY the ASCII art, no explanations."""


def generate_map(tree_content: str) -> str:
    """Render a goal tree as an ASCII dungeon map."""

    content = _chat(
        f"Task tree:\n{tree_content}",
        system=MAP_SYSTEM_PROMPT,
        error_message="Failed to generate map",
    )
    return _strip_code_fences(content)


def generate_chart(prompt: str) -> str:
    content = _chat(
        f"Create a chart for:\n{prompt}",
        system=CHART_SYSTEM_PROMPT,
        error_message="Failed to generate chart",
    )
    return _strip_code_fences(content)


def generate_title(content: str, is_selection: bool = False) -> str:
    """Suggest a 3-7 word heading for a selection or title for a whole note."""

    kind = "heading" if is_selection else "title"
    subject = "the following text" if is_selection else "this note based on its content"
    system = (
        f"Generate a SHORT, descriptive {kind} (3-7 words) for {subject}. "
        "It should capture the main topic. "
        f"Respond with ONLY the {kind} text, no markdown, no #, just plain text."
    )
    title = _chat(
        f"Content:\n{content[:TITLE_INPUT_LIMIT]}",
        system=system,
        max_tokens=100,
        temperature=0.3,
        error_message="Failed to generate title",
    )
    return title.strip().lstrip("#").strip()


__all__ = [
    "AIServiceError",
    "configure",
    "generate_chart",
    "generate_content",
    "generate_map",
    "generate_schema",
    "generate_title",
    "is_configured",
]
