"""Storage utilities for persisting preferences and the player profile."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_settings
from .profile import Profile
from .themes import ThemeName, resolve_theme

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the state file cannot be read."""


@dataclass
class Preferences:
    theme: ThemeName = ThemeName.DEFAULT
    ai_model: str = ""
    ai_api_key: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"theme": self.theme.value, "aiModel": self.ai_model, "aiApiKey": self.ai_api_key}

    @classmethod
    def from_dict(cls, data: Any) -> "Preferences":
        if not isinstance(data, dict):
            return cls()
        return cls(
            theme=resolve_theme(data.get("theme")),
            ai_model=str(data.get("aiModel") or ""),
            ai_api_key=str(data.get("aiApiKey") or ""),
        )


@dataclass
class AppState:
    settings: Preferences = field(default_factory=Preferences)
    profile: Profile = field(default_factory=Profile)

    def to_dict(self) -> Dict[str, Any]:
        return {"settings": self.settings.to_dict(), "profile": self.profile.to_dict()}


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _state_path(path: Optional[Path]) -> Path:
    return path or get_settings().state_file


def load_state(path: Optional[Path] = None) -> AppState:
    """Load state, filling defaults for anything missing."""

    source = _state_path(path)
    if not source.exists():
        return AppState()

    try:
        with source.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise StorageError(f"Failed to parse state file at {source}") from exc

    if not isinstance(payload, dict):
        logger.warning("State file %s is not an object; starting fresh", source)
        return AppState()

    return AppState(
        settings=Preferences.from_dict(payload.get("settings")),
        profile=Profile.from_dict(payload.get("profile")),
    )


def save_state(state: AppState, path: Optional[Path] = None) -> None:
    """Persist the full state, overwriting the previous snapshot."""

    target = _state_path(path)
    _ensure_parent(target)

    with target.open("w", encoding="utf-8") as handle:
        json.dump(state.to_dict(), handle, indent=2)


__all__ = ["AppState", "Preferences", "StorageError", "load_state", "save_state"]
