"""Hand an AI draft to the user's editor before it is written into a note."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

FALLBACK_EDITORS = ("nano", "vi")
DRAFT_PREFIX = "questlog-draft-"


def editor_command() -> Optional[List[str]]:
    """``$VISUAL`` or ``$EDITOR`` split into argv (``code --wait`` works), else a terminal fallback."""

    configured = os.environ.get("VISUAL") or os.environ.get("EDITOR")
    if configured:
        return shlex.split(configured)
    for name in FALLBACK_EDITORS:
        found = shutil.which(name)
        if found:
            return [found]
    return None


def launch_editor(draft: str, suffix: str = ".md") -> Optional[str]:
    """Return the revised draft, or None when no editor ran successfully."""

    command = editor_command()
    if not command:
        return None

    draft_dir = Path(tempfile.mkdtemp(prefix=DRAFT_PREFIX))
    draft_file = draft_dir / f"draft{suffix}"
    draft_file.write_text(draft, encoding="utf-8")
    try:
        try:
            completed = subprocess.run([*command, str(draft_file)], check=False)
        except OSError:
            return None
        if completed.returncode != 0:
            return None
        return draft_file.read_text(encoding="utf-8")
    finally:
        shutil.rmtree(draft_dir, ignore_errors=True)


__all__ = ["editor_command", "launch_editor"]
