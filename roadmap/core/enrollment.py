"""Phase enrollment: which phases are shown and counted towards progress.

Enrollment is keyed by 1-based phase position in seed order. A position
missing from the map means the phase is hidden.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from roadmap.core.phases import Phase

EnrollmentMap = Mapping[int, bool]


def _is_position(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def is_enrolled(enrollment: Optional[EnrollmentMap], position: int) -> bool:
    """Return True when the phase at *position* is visible."""
    if not isinstance(enrollment, Mapping) or not _is_position(position):
        return False
    value = fallback = None
    for key, flag in enrollment.items():
        # True == 1, so a bool key would otherwise match position 1.
        if isinstance(key, bool):
            continue
        if key == position:
            value = flag
        elif key == str(position):
            # Maps decoded from JSON carry string keys.
            fallback = flag
    return bool(fallback if value is None else value)


def visible_phases(
    phases: Optional[Iterable[Optional[Phase]]],
    enrollment: Optional[EnrollmentMap],
) -> Tuple[Phase, ...]:
    """Return the enrolled phases, in their original order."""
    if phases is None or not isinstance(enrollment, Mapping):
        return ()
    try:
        items = list(phases)
    except TypeError:
        return ()
    return tuple(
        phase
        for position, phase in enumerate(items, start=1)
        if phase is not None and is_enrolled(enrollment, position)
    )


def enrollment_from_flags(flags: Sequence[bool]) -> Dict[int, bool]:
    return {position: bool(flag) for position, flag in enumerate(flags, start=1)}


def default_enrollment(phases: Iterable[Phase]) -> Dict[int, bool]:
    """Enrollment map with every phase visible."""
    return enrollment_from_flags([True for _ in phases])


def set_enrolled(enrollment: Optional[EnrollmentMap], position: int, enrolled: bool) -> Dict[int, bool]:
    """Return a copy of *enrollment* with *position* toggled.

    Positions that are not positive integers are ignored.
    """
    updated: Dict[int, bool] = dict(enrollment) if isinstance(enrollment, Mapping) else {}
    if _is_position(position):
        updated[position] = bool(enrolled)
    return updated
