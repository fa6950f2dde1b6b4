from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import yaml

from roadmap.core import levels
from roadmap.core.enrollment import enrollment_from_flags

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "phases.yaml"


def _duplicates(ids: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    dupes: List[str] = []
    for item in ids:
        if item in seen and item not in dupes:
            dupes.append(item)
        seen.add(item)
    return dupes


@dataclass(frozen=True)
class Task:
    """A unit of work rated on the 0-5 completion scale."""

    id: str
    name: str
    description: str = ""
    level: int = 0


@dataclass(frozen=True)
class Phase:
    """An ordered group of tasks. Task order drives display and numbering."""

    id: str
    title: str
    description: str = ""
    tasks: Tuple[Task, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", tuple(self.tasks))
        dupes = _duplicates([task.id for task in self.tasks])
        if dupes:
            raise ValueError(f"{self.id}: duplicate task ids {dupes}")

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    def task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


@dataclass(frozen=True)
class PhaseStore:
    """Immutable snapshot of the phase roster.

    Updates never mutate a snapshot: they return a new one that shares
    every untouched ``Phase`` and ``Task`` with its predecessor.
    """

    phases: Tuple[Phase, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "phases", tuple(self.phases))
        dupes = _duplicates([phase.id for phase in self.phases])
        if dupes:
            raise ValueError(f"duplicate phase ids {dupes}")

    def __iter__(self) -> Iterator[Phase]:
        return iter(self.phases)

    def __len__(self) -> int:
        return len(self.phases)

    def get_phases(self) -> Tuple[Phase, ...]:
        return self.phases

    def get(self, phase_id: str) -> Optional[Phase]:
        for phase in self.phases:
            if phase.id == phase_id:
                return phase
        return None

    def apply_level_update(self, phase_id: object, task_id: object, new_level: object) -> PhaseStore:
        """Return a snapshot with one task's level set (clamped to 0-5).

        Stale or malformed references are ignored and ``self`` is returned.
        """
        return levels.apply_level_update(self, phase_id, task_id, new_level)

    def with_task_level(self, phase_id: str, task_id: str, level: int) -> PhaseStore:
        """Replace a single task's level; expects ids already validated."""
        level = levels.clamp_level(level)
        for position, phase in enumerate(self.phases):
            if phase.id == phase_id:
                break
        else:
            logger.debug("Level update for unknown phase %r ignored", phase_id)
            return self

        for index, task in enumerate(phase.tasks):
            if task.id == task_id:
                break
        else:
            logger.debug("Level update for unknown task %r in %s ignored", task_id, phase_id)
            return self

        if task.level == level:
            return self

        tasks = phase.tasks[:index] + (replace(task, level=level),) + phase.tasks[index + 1 :]
        updated = replace(phase, tasks=tasks)
        return PhaseStore(self.phases[:position] + (updated,) + self.phases[position + 1 :])


class PhaseRepository:
    """Loads the seeded phase roster and default enrollment from YAML."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_SEED_PATH
        self._project_name, self._phases, self._enrolled = self._load_phases()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def project_name(self) -> str:
        return self._project_name

    def all(self) -> List[Phase]:
        return list(self._phases)

    def get(self, phase_id: str) -> Phase:
        for phase in self._phases:
            if phase.id == phase_id:
                return phase
        raise KeyError(phase_id)

    def store(self) -> PhaseStore:
        return PhaseStore(tuple(self._phases))

    def default_enrollment(self) -> Dict[int, bool]:
        return enrollment_from_flags(self._enrolled)

    def _load_phases(self) -> Tuple[str, List[Phase], List[bool]]:
        if not self._path.exists():
            raise FileNotFoundError(f"Seed file not found: {self._path}")

        name = self._path.name
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{name}: expected YAML mapping with 'phases'")
        entries = raw.get("phases")
        if not isinstance(entries, list) or not entries:
            raise ValueError(f"{name}: 'phases' must be a non-empty list")

        project = str(raw.get("project") or "").strip()
        phases: List[Phase] = []
        enrolled: List[bool] = []
        seen_tasks: set[str] = set()
        for number, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict):
                raise ValueError(f"{name}: phase #{number} is not a mapping")
            phase_id = self._required_text(entry, "id", f"{name}: phase #{number}")
            title = self._required_text(entry, "title", f"{name}: {phase_id}")
            tasks = [
                self._parse_task(item, f"{name}: {phase_id}") for item in entry.get("tasks") or []
            ]
            for task in tasks:
                if task.id in seen_tasks:
                    raise ValueError(f"{name}: duplicate task id {task.id!r}")
                seen_tasks.add(task.id)
            try:
                phases.append(
                    Phase(
                        id=phase_id,
                        title=title,
                        description=str(entry.get("description") or "").strip(),
                        tasks=tuple(tasks),
                    )
                )
            except ValueError as e:
                raise ValueError(f"{name}: {e}") from e
            enrolled.append(bool(entry.get("enrolled", True)))

        dupes = _duplicates([phase.id for phase in phases])
        if dupes:
            raise ValueError(f"{name}: duplicate phase ids {dupes}")

        logger.info("Loaded %d phases from %s", len(phases), self._path)
        return project, phases, enrolled

    @staticmethod
    def _required_text(entry: dict, key: str, context: str) -> str:
        value = entry.get(key)
        if value is None or not str(value).strip():
            raise ValueError(f"{context}: missing or invalid '{key}'")
        return str(value).strip()

    def _parse_task(self, item: object, context: str) -> Task:
        if not isinstance(item, dict):
            raise ValueError(f"{context}: task entries must be mappings")
        task_id = self._required_text(item, "id", context)
        name = self._required_text(item, "name", f"{context}/{task_id}")
        level = item.get("level", levels.MIN_LEVEL)
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValueError(f"{context}/{task_id}: level must be an integer, got {level!r}")
        clamped = levels.clamp_level(level)
        if clamped != level:
            logger.warning("%s/%s: level %d clamped to %d", context, task_id, level, clamped)
        return Task(
            id=task_id,
            name=name,
            description=str(item.get("description") or "").strip(),
            level=clamped,
        )
