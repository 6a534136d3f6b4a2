"""Agent-facing project brief output."""

from __future__ import annotations

from textwrap import dedent

from .config import get_settings


def get_agent_brief() -> str:
    settings = get_settings()

    return dedent(
        f"""
        questlog – terminal-first goal tracking dressed as a roguelike
        ---------------------------------------------------------------
        Purpose: Treat folders of markdown goal notes as quests. Completing a goal grants XP, levels, loot, and achievements; a welcome note is regenerated as a dashboard.

        Runtime layout:
        - questlog_app/cli.py – command dispatch and user prompts
        - questlog_app/ledger.py – completion/undo ledger, the only Profile mutator
        - questlog_app/progression.py – XP curve (100 * 1.5^(level-1) per level)
        - questlog_app/loot.py – level-scaled drop chance and rarity rolls
        - questlog_app/achievements.py – threshold tables and one-shot specials
        - questlog_app/themes.py – themed messages, achievement names, loot pools
        - questlog_app/goals.py – goal notes with inline `key:: value` fields
        - questlog_app/welcome.py – dashboard note generation
        - questlog_app/services/openai_service.py – goal drafting, maps, charts, content, titles
        - questlog_app/storage.py – JSON state (settings + profile) at {settings.state_file}
        - questlog_app/config.py – dotenv-backed settings loader

        Vault: {settings.vault_dir}

        CLI commands:
        - goal "name" [--parent P] [--boss] [--deadline D] [--xp N] – create a goal
        - plan "topic" [--parent P] – AI goal breakdown with preview
        - done <note> – toggle done/open (completion awards XP, reopening undoes it)
        - boss <note> – toggle boss status (3x XP)
        - undo – revert the most recent completion
        - profile / inventory / achievements – progress views
        - journal – regenerate the welcome note
        - map <note>, chart "prompt", prompt <note>, header <note> – AI helpers
        - theme [name], settings – preferences
        - agent-brief – print this orientation block

        Config: .env keys OPENAI_API_KEY, GPT_MODEL, DATA_DIR, VAULT_DIR, LOG_LEVEL. `questlog settings --api-key/--model` persists overrides in the state file.
        """
    ).strip()


__all__ = ["get_agent_brief"]
