"""Configuration helpers for the questlog CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_PATH = PROJECT_ROOT / ".env"

# Load .env from the project root (if present) regardless of current working dir
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Runtime configuration loaded from environment variables."""

    openai_api_key: Optional[str]
    gpt_model: str
    data_dir: Path
    vault_dir: Path
    log_level: str

    @property
    def state_file(self) -> Path:
        return self.data_dir / "questlog.json"


def _resolve_dir(raw_value: str | None, default: Path) -> Path:
    if not raw_value:
        return default

    path = Path(raw_value).expanduser()
    if not path.is_absolute():
        path = (PROJECT_ROOT / path).resolve()
    else:
        path = path.resolve()
    return path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    data_dir = _resolve_dir(os.getenv("DATA_DIR"), PROJECT_ROOT)
    data_dir.mkdir(parents=True, exist_ok=True)
    vault_dir = _resolve_dir(os.getenv("VAULT_DIR"), data_dir / "vault")

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        gpt_model=os.getenv("GPT_MODEL", "gpt-4o-mini"),
        data_dir=data_dir,
        vault_dir=vault_dir,
        log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
    )


__all__ = ["Settings", "get_settings", "PROJECT_ROOT"]
