"""Positional completion identifiers for checklist items."""

from __future__ import annotations

from typing import Iterable, List

from models import RoadmapResult

TASK_ID_PREFIX = "task-"


def task_id(index: int) -> str:
    return f"{TASK_ID_PREFIX}{index}"


def task_ids(result: RoadmapResult) -> List[str]:
    # Reordering the checklist between generations invalidates stored ids.
    return [task_id(i) for i in range(len(result.actionable_task_checklist))]


def toggle_task(completed: Iterable[str], identifier: str) -> List[str]:
    """Return a new completed list with ``identifier`` added or removed."""
    current = list(completed)
    if identifier in current:
        return [item for item in current if item != identifier]
    return current + [identifier]


def progress_percentage(result: RoadmapResult, completed: Iterable[str]) -> int:
    valid = set(task_ids(result))
    if not valid:
        return 0
    done = len(valid.intersection(completed))
    return round(done / len(valid) * 100)
