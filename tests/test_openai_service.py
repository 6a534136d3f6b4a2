from types import SimpleNamespace

import pytest

from questlog_app.services import openai_service
from questlog_app.services.openai_service import AIServiceError


class FakeCompletions:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.reply is None:
            return SimpleNamespace(choices=[])
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.reply))])


def _install(monkeypatch, reply):
    completions = FakeCompletions(reply)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(openai_service, "_client", client)
    return completions


def test_configure_prefers_persisted_key(isolated_settings):
    assert not openai_service.is_configured()

    openai_service.configure("sk-test", "gpt-4o")

    assert openai_service.is_configured()


def test_missing_key_raises(isolated_settings):
    with pytest.raises(AIServiceError):
        openai_service.generate_chart("flow")


def test_generate_schema_extracts_json(isolated_settings, monkeypatch):
    completions = _install(
        monkeypatch,
        'Sure!\n{"name": "Run a 10k", "children": [{"name": "Base miles", "isBoss": false},'
        ' {"name": "Race day", "isBoss": true, "children": []}]}\nGood luck.',
    )

    schema = openai_service.generate_schema("run a 10k", "├── Existing task\n")

    assert schema.name == "Run a 10k"
    assert [child.name for child in schema.children] == ["Base miles", "Race day"]
    assert schema.children[1].is_boss
    system = completions.calls[0]["messages"][0]["content"]
    assert "Existing task" in system
    assert completions.calls[0]["model"] == "gpt-4o-mini"


def test_generate_schema_without_json(isolated_settings, monkeypatch):
    _install(monkeypatch, "I cannot help with that.")
    with pytest.raises(AIServiceError):
        openai_service.generate_schema("anything")


def test_empty_choices_raise(isolated_settings, monkeypatch):
    _install(monkeypatch, None)
    with pytest.raises(AIServiceError):
        openai_service.generate_content("write")


def test_map_strips_code_fences(isolated_settings, monkeypatch):
    _install(monkeypatch, "```text\n####\n#@ #\n####\n```")
    assert openai_service.generate_map("└── Boss [BOSS]\n") == "####\n#@ #\n####"


def test_generate_content_includes_existing_note(isolated_settings, monkeypatch):
    completions = _install(monkeypatch, "- step one")

    assert openai_service.generate_content("add steps", "# Note\n") == "- step one"
    assert "Existing note content for context:\n# Note" in completions.calls[0]["messages"][-1]["content"]


def test_generate_title_truncates_and_cleans(isolated_settings, monkeypatch):
    completions = _install(monkeypatch, "# Weekly Planning Notes")

    title = openai_service.generate_title("x" * 5000)

    assert title == "Weekly Planning Notes"
    prompt = completions.calls[0]["messages"][-1]["content"]
    assert len(prompt) == len("Content:\n") + 2000
