from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from roadmap.core.enrollment import set_enrolled, visible_phases
from roadmap.core.phases import Phase, PhaseRepository, PhaseStore
from roadmap.core.progress import compute_progress, progress_status
from roadmap.core.submission import SubmissionOutcome


@dataclass(frozen=True)
class DashboardState:
    """Snapshot of everything the dashboard renders.

    Each ``with_*`` call returns a new snapshot (or ``self`` when nothing
    changed); the owner keeps a reference to the latest one. Progress is
    derived on read and never stored.
    """

    store: PhaseStore
    enrollment: Mapping[int, bool] = field(default_factory=dict)
    outcome: Optional[SubmissionOutcome] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "enrollment", MappingProxyType(dict(self.enrollment)))

    @classmethod
    def from_repository(cls, repository: PhaseRepository) -> DashboardState:
        return cls(store=repository.store(), enrollment=repository.default_enrollment())

    @property
    def phases(self) -> Tuple[Phase, ...]:
        return self.store.phases

    @property
    def visible_phases(self) -> Tuple[Phase, ...]:
        return visible_phases(self.store.phases, self.enrollment)

    @property
    def progress(self) -> int:
        return compute_progress(self.visible_phases)

    @property
    def status(self) -> str:
        return progress_status(self.progress)

    def with_task_level(self, phase_id: object, task_id: object, level: object) -> DashboardState:
        store = self.store.apply_level_update(phase_id, task_id, level)
        if store is self.store:
            return self
        return replace(self, store=store)

    def with_enrollment(self, position: int, enrolled: bool) -> DashboardState:
        enrollment = set_enrolled(self.enrollment, position, enrolled)
        if enrollment == dict(self.enrollment):
            return self
        return replace(self, enrollment=enrollment)

    def with_outcome(self, outcome: Optional[SubmissionOutcome]) -> DashboardState:
        return replace(self, outcome=outcome)

    def without_outcome(self) -> DashboardState:
        if self.outcome is None:
            return self
        return replace(self, outcome=None)
