"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, List

from roadmap.core.dashboard import DashboardState
from roadmap.core.enrollment import is_enrolled
from roadmap.core.phases import Phase
from roadmap.core.progress import completed_task_count


@dataclass
class PhaseCardState:
    """UI state for one visible phase card."""

    phase: Phase
    completed: int
    expanded: bool = False
    submitting: bool = False

    @property
    def total(self) -> int:
        return len(self.phase.tasks)

    @property
    def summary(self) -> str:
        return f"{self.completed}/{self.total} tasks completed"


@dataclass
class EnrollmentOption:
    """One checkbox in the phase selector."""

    position: int
    label: str
    task_count: int
    checked: bool


def build_card_states(
    state: DashboardState,
    expanded: AbstractSet[str],
    submitting: AbstractSet[str] = frozenset(),
) -> List[PhaseCardState]:
    return [
        PhaseCardState(
            phase=phase,
            completed=completed_task_count(phase),
            expanded=phase.id in expanded,
            submitting=phase.id in submitting,
        )
        for phase in state.visible_phases
    ]


def build_enrollment_options(state: DashboardState) -> List[EnrollmentOption]:
    options = []
    for position, phase in enumerate(state.phases, start=1):
        label = f"{phase.title}: {phase.description}" if phase.description else phase.title
        options.append(
            EnrollmentOption(
                position=position,
                label=label,
                task_count=len(phase.tasks),
                checked=is_enrolled(state.enrollment, position),
            )
        )
    return options


def initially_expanded(state: DashboardState) -> set[str]:
    """The first visible phase starts expanded."""
    visible = state.visible_phases
    return {visible[0].id} if visible else set()
