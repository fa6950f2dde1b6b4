from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import List, Optional

from roadmap.core.levels import MAX_LEVEL, read_level, round_half_up

# Lower bounds, checked top-down; 100 is reported as "Complete".
_STATUS_THRESHOLDS = (
    (75, "Almost There"),
    (50, "On Track"),
    (25, "In Progress"),
)


def _tasks_of(phase: object) -> List[object]:
    if isinstance(phase, Mapping):
        tasks = phase.get("tasks")
    else:
        tasks = getattr(phase, "tasks", None)
    if tasks is None or isinstance(tasks, (str, bytes, Mapping)):
        return []
    try:
        return list(tasks)
    except TypeError:
        return []


def _flatten(phases: Optional[Iterable[object]]) -> List[object]:
    if phases is None:
        return []
    try:
        items = list(phases)
    except TypeError:
        return []
    return [task for phase in items if phase is not None for task in _tasks_of(phase)]


def compute_progress(visible_phases: Optional[Iterable[object]]) -> int:
    """Overall completion of the visible phases as an integer percentage.

    ``round(100 * sum(levels) / (5 * task_count))`` with halves rounded up;
    0 when there are no tasks. Missing or non-numeric levels count as 0.
    """
    tasks = _flatten(visible_phases)
    if not tasks:
        return 0
    total = sum(read_level(task) for task in tasks)
    return round_half_up(100 * total / (MAX_LEVEL * len(tasks)))


def phase_progress(phase: object) -> int:
    return compute_progress([phase])


def completed_task_count(phase: object) -> int:
    """Number of tasks at the top of the scale."""
    return sum(1 for task in _tasks_of(phase) if read_level(task) == MAX_LEVEL)


def task_percent(task: object) -> int:
    """Fill of a single task's bar, 0-100."""
    return read_level(task) * 100 // MAX_LEVEL


def progress_status(progress: int) -> str:
    if progress >= 100:
        return "Complete"
    for threshold, label in _STATUS_THRESHOLDS:
        if progress >= threshold:
            return label
    return "Getting Started"
