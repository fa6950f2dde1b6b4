"""Task completion levels and the single-task level update transition."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from numbers import Integral, Real
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from roadmap.core.phases import PhaseStore

logger = logging.getLogger(__name__)

MIN_LEVEL = 0
MAX_LEVEL = 5

# Levels offered on the per-task scale (0 is the untouched state).
SCALE = tuple(range(MIN_LEVEL + 1, MAX_LEVEL + 1))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def clamp_level(value: float) -> int:
    """Round *value* to an integer level and clamp it into [MIN_LEVEL, MAX_LEVEL]."""
    if value <= MIN_LEVEL:
        return MIN_LEVEL
    if value >= MAX_LEVEL:
        return MAX_LEVEL
    return round_half_up(value)


def normalize_level_request(value: object) -> Optional[int]:
    """Return the clamped level for a requested value, or None if it is not a finite number.

    Booleans are rejected even though Python treats them as integers.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if isinstance(value, Integral):
        return clamp_level(value)
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # Exact rationals too large for a float are still finite.
        finite = True
    if not finite:
        return None
    return clamp_level(value)


def read_level(task: object) -> int:
    """Level of a task record; missing or non-numeric levels read as 0.

    Accepts ``Task`` objects as well as plain mappings, so partially
    initialised records never break an aggregate.
    """
    if isinstance(task, Mapping):
        raw = task.get("level")
    else:
        raw = getattr(task, "level", None)
    level = normalize_level_request(raw)
    return MIN_LEVEL if level is None else level


def is_identifier(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def apply_level_update(
    store: PhaseStore,
    phase_id: object,
    task_id: object,
    requested_level: object,
) -> PhaseStore:
    """Set one task's level and return the resulting snapshot.

    Invalid ids, non-numeric levels and unknown phase/task references
    leave *store* untouched and return it as is. Out-of-range levels are
    clamped. Never raises.
    """
    if not (is_identifier(phase_id) and is_identifier(task_id)):
        logger.debug("Ignoring level update with invalid ids: phase=%r task=%r", phase_id, task_id)
        return store
    level = normalize_level_request(requested_level)
    if level is None:
        logger.debug("Ignoring non-numeric level %r for %s/%s", requested_level, phase_id, task_id)
        return store
    return store.with_task_level(phase_id, task_id, level)
