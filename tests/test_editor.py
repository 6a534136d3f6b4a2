from pathlib import Path
from types import SimpleNamespace

from questlog_app import editor


def test_editor_command_splits_arguments(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.setenv("EDITOR", "code --wait")
    assert editor.editor_command() == ["code", "--wait"]


def test_no_editor_available(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.setattr(editor.shutil, "which", lambda name: None)

    assert editor.editor_command() is None
    assert editor.launch_editor("draft") is None


def test_launch_editor_returns_edited_text(monkeypatch):
    seen = {}

    def fake_run(argv, check):
        path = Path(argv[-1])
        seen["argv"] = argv
        seen["path"] = path
        path.write_text(path.read_text(encoding="utf-8") + " (edited)", encoding="utf-8")
        return SimpleNamespace(returncode=0)

    monkeypatch.setenv("VISUAL", "myeditor -n")
    monkeypatch.setattr(editor.subprocess, "run", fake_run)

    assert editor.launch_editor("- step one") == "- step one (edited)"
    assert seen["argv"][:2] == ["myeditor", "-n"]
    assert seen["path"].suffix == ".md"
    assert not seen["path"].exists()


def test_failed_editor_discards_draft(monkeypatch):
    monkeypatch.setenv("VISUAL", "myeditor")
    monkeypatch.setattr(editor.subprocess, "run", lambda argv, check: SimpleNamespace(returncode=1))

    assert editor.launch_editor("draft") is None


def test_missing_editor_binary(monkeypatch):
    def fake_run(argv, check):
        raise FileNotFoundError(argv[0])

    monkeypatch.setenv("VISUAL", "no-such-editor")
    monkeypatch.setattr(editor.subprocess, "run", fake_run)

    assert editor.launch_editor("draft") is None
