"""Simulated remote submission driven by the Qt event loop."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer

from roadmap.core.submission import Completion, SubmissionPayload

logger = logging.getLogger(__name__)


class TimerSubmitter:
    """Completes every submission successfully after a fixed delay.

    The timer is bound to *context*; if that object is destroyed first the
    completion never fires.
    """

    def __init__(self, context: QObject, delay_ms: int) -> None:
        self._context = context
        self._delay_ms = max(0, int(delay_ms))

    def __call__(self, payload: SubmissionPayload, complete: Completion) -> None:
        logger.debug("Simulating submission of %s (%d ms)", payload.phase_id, self._delay_ms)
        QTimer.singleShot(self._delay_ms, self._context, lambda: complete(None))
