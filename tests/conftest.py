"""Shared fixtures: fixed clocks, scripted loot rollers, and an isolated vault."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List

import pytest

from questlog_app.config import get_settings
from questlog_app.ledger import Ledger
from questlog_app.loot import LootDrop
from questlog_app.profile import LootItem, LootSource, Profile, Rarity
from questlog_app.services import openai_service


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class RecordingRoller:
    """Loot roller that records each call and drops only when told to."""

    def __init__(self, drop: bool = False) -> None:
        self.drop = drop
        self.calls: List[LootSource] = []

    def __call__(self, level, source, theme=None, now=None) -> LootDrop:
        self.calls.append(source)
        if not self.drop:
            return LootDrop(dropped=False)
        item = LootItem(
            name=f"{source.value} prize",
            rarity=Rarity.RARE,
            dropped_at=(now or datetime(2026, 3, 10)).isoformat(),
            source=source,
        )
        return LootDrop(dropped=True, item=item)


class ScriptedRandom:
    """Stand-in for random.Random returning queued values."""

    def __init__(self, *values: float) -> None:
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0)

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 10, 14, 0))


@pytest.fixture
def roller() -> RecordingRoller:
    return RecordingRoller()


@pytest.fixture
def saved() -> List[Profile]:
    return []


@pytest.fixture
def ledger(saved, roller, clock) -> Ledger:
    return Ledger(Profile(), saved.append, roller=roller, clock=clock)


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    path = tmp_path / "vault"
    path.mkdir()
    return path


@pytest.fixture
def isolated_settings(monkeypatch, tmp_path):
    """Point DATA_DIR and VAULT_DIR at a temp dir and forget any API key."""

    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("VAULT_DIR", str(tmp_path / "data" / "vault"))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("GPT_MODEL", raising=False)
    get_settings.cache_clear()
    openai_service.configure()
    yield get_settings()
    get_settings.cache_clear()
    openai_service.configure()
