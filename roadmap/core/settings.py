"""Runtime settings read from ``ROADMAP_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from roadmap.core.submission import OUTCOME_LIFETIME_MS

logger = logging.getLogger(__name__)

DEFAULT_SUBMIT_DELAY_MS = 1500
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int_setting(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", key, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r: must not be negative, using %d", key, raw, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    project_name: Optional[str] = None
    seed_path: Optional[Path] = None
    submit_delay_ms: int = DEFAULT_SUBMIT_DELAY_MS
    toast_ms: int = OUTCOME_LIFETIME_MS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ

        project_name = (env.get("ROADMAP_PROJECT_NAME") or "").strip() or None
        seed_file = (env.get("ROADMAP_SEED_FILE") or "").strip()

        log_level = (env.get("ROADMAP_LOG_LEVEL") or "INFO").strip().upper()
        if log_level not in _LOG_LEVELS:
            logger.warning("Unknown ROADMAP_LOG_LEVEL %r, using INFO", log_level)
            log_level = "INFO"

        return cls(
            project_name=project_name,
            seed_path=Path(seed_file).expanduser() if seed_file else None,
            submit_delay_ms=_int_setting(env, "ROADMAP_SUBMIT_DELAY_MS", DEFAULT_SUBMIT_DELAY_MS),
            toast_ms=_int_setting(env, "ROADMAP_TOAST_MS", OUTCOME_LIFETIME_MS),
            log_level=log_level,
        )
