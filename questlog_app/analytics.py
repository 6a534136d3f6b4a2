"""Rendering helpers for progress bars and completion sparklines."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Sequence, Tuple

SPARKLINE_SYMBOLS = " .:-=+*#"
BAR_CELLS = 20


def render_sparkline(counts: Sequence[int]) -> str:
    """Return a simple sparkline string for a sequence of counts."""

    if not counts:
        return "(no data)"
    max_count = max(counts)
    if max_count == 0:
        return SPARKLINE_SYMBOLS[1] * len(counts)
    scale = len(SPARKLINE_SYMBOLS) - 1
    return "".join(SPARKLINE_SYMBOLS[int((count / max_count) * scale)] for count in counts)


def render_progress_bar(percent: int, cells: int = BAR_CELLS) -> str:
    """Fixed-width bar, one cell per 5% at the default width."""

    filled = max(0, min(cells, percent * cells // 100))
    return f"[{'█' * filled}{'░' * (cells - filled)}]"


def completions_by_day(
    completed_by_day: Dict[str, int],
    days: int,
    today: date,
) -> List[Tuple[str, int]]:
    """Counts for the last ``days`` calendar days, oldest first, gaps as zero."""

    history = []
    for offset in range(days - 1, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        history.append((day, completed_by_day.get(day, 0)))
    return history


__all__ = ["completions_by_day", "render_progress_bar", "render_sparkline"]
