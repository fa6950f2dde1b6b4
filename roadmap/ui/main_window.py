from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Optional, Set

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QCheckBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from roadmap.core.dashboard import DashboardState
from roadmap.core.settings import Settings
from roadmap.core.submission import SubmissionOutcome, Submitter, submit_phase
from roadmap.ui.colors import RoadmapColors
from roadmap.ui.models import build_card_states, build_enrollment_options, initially_expanded
from roadmap.ui.overlays import SubmitOverlay, Toast
from roadmap.ui.phase_cards import PhaseListWidget
from roadmap.ui.submitter import TimerSubmitter
from roadmap.ui.widgets import GlassCard, GoldProgressBar

logger = logging.getLogger(__name__)

_PROGRESS_HELP = (
    "How progress is calculated:\n"
    "Combined completion across all visible phases.\n"
    "Each task uses a 0–5 scale (5 = complete).\n"
    "Progress = (Sum of all task levels) ÷ (Total possible points) × 100"
)


class MainWindow(QMainWindow):
    """Project completion roadmap: progress header, phase selector and phase cards.

    Holds the latest ``DashboardState`` and replaces it after every user
    action, then re-renders from it.
    """

    def __init__(
        self,
        state: DashboardState,
        *,
        project_name: str,
        settings: Optional[Settings] = None,
        submitter: Optional[Submitter] = None,
    ) -> None:
        super().__init__()
        self._settings = settings or Settings()
        self._state = state
        self._project_name = project_name
        self._submitter = submitter or TimerSubmitter(self, self._settings.submit_delay_ms)
        self._expanded: Set[str] = initially_expanded(state)
        self._submitting: Set[str] = set()

        self._progress_bar: Optional[GoldProgressBar] = None
        self._progress_value: Optional[QLabel] = None
        self._progress_status: Optional[QLabel] = None
        self._checkboxes: Dict[int, QCheckBox] = {}
        self._phase_list: Optional[PhaseListWidget] = None
        self._empty_label: Optional[QLabel] = None

        self.setWindowTitle(f"{project_name} · Project Completion Roadmap")
        self._build_ui()
        self._overlay = SubmitOverlay(self.centralWidget())
        self._overlay.send_requested.connect(self._send_submission)
        self._overlay.rejected_file.connect(self._show_outcome)
        self._toast = Toast(self.centralWidget())
        self._toast.dismissed.connect(self._clear_outcome)
        self._refresh()

    @property
    def state(self) -> DashboardState:
        return self._state

    def _build_ui(self) -> None:
        root = QWidget()
        root.setObjectName("roadmapRoot")
        root.setStyleSheet(
            f"""
            QWidget#roadmapRoot {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {RoadmapColors.BG_TOP}, stop:1 {RoadmapColors.BG_BOTTOM});
            }}
            QLabel {{ color: {RoadmapColors.TEXT_PRIMARY}; }}
            QCheckBox {{ color: {RoadmapColors.TEXT_PRIMARY}; font-size: 13px; }}
            """
        )
        layout = QVBoxLayout(root)
        layout.setContentsMargins(28, 20, 28, 20)
        layout.setSpacing(18)
        layout.addWidget(self._build_top_nav())

        content = QHBoxLayout()
        content.setSpacing(18)

        self._phase_list = PhaseListWidget(
            on_toggle=self._toggle_phase,
            on_level=self._set_task_level,
            on_submit=self._open_submission,
        )
        phases_column = QWidget()
        phases_layout = QVBoxLayout(phases_column)
        phases_layout.setContentsMargins(0, 0, 0, 0)
        self._empty_label = QLabel(
            "📋  No phases selected\n"
            "Select at least one phase to view your tasks and track progress."
        )
        self._empty_label.setAlignment(Qt.AlignCenter)
        self._empty_label.setStyleSheet(f"color: {RoadmapColors.TEXT_MUTED}; font-size: 14px;")
        phases_layout.addWidget(self._empty_label)
        phases_layout.addWidget(self._phase_list, 1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setStyleSheet("background: transparent;")
        scroll.setWidget(phases_column)
        content.addWidget(scroll, 3)
        content.addWidget(self._build_enrollment_panel(), 1, Qt.AlignTop)
        layout.addLayout(content, 1)

        self.setCentralWidget(root)

    def _build_top_nav(self) -> QWidget:
        nav = GlassCard(object_name="topNav")
        row = QHBoxLayout(nav)
        row.setContentsMargins(20, 14, 20, 14)
        row.setSpacing(18)

        pill = QLabel("Ongoing")
        pill.setStyleSheet(
            f"background: {RoadmapColors.GOLD}; color: {RoadmapColors.BG_TOP};"
            " border-radius: 10px; padding: 3px 10px; font-weight: 800; font-size: 11px;"
        )
        row.addWidget(pill, 0)
        name = QLabel(self._project_name)
        name.setStyleSheet("font-size: 18px; font-weight: 900;")
        row.addWidget(name, 0)
        row.addStretch(1)

        progress_box = QVBoxLayout()
        label_row = QHBoxLayout()
        title = QLabel("Overall Progress")
        title.setStyleSheet(f"color: {RoadmapColors.TEXT_SECONDARY}; font-size: 12px; font-weight: 600;")
        info = QLabel("ⓘ")
        info.setToolTip(_PROGRESS_HELP)
        info.setAccessibleName("Progress information")
        info.setStyleSheet(f"color: {RoadmapColors.GOLD}; font-size: 13px;")
        label_row.addWidget(title)
        label_row.addWidget(info)
        label_row.addStretch(1)
        progress_box.addLayout(label_row)

        self._progress_bar = GoldProgressBar(height=12, accessible_name="Overall progress")
        self._progress_bar.setMinimumWidth(280)
        progress_box.addWidget(self._progress_bar)

        value_row = QHBoxLayout()
        self._progress_value = QLabel("0%")
        self._progress_value.setStyleSheet(f"color: {RoadmapColors.GOLD_LIGHT}; font-size: 16px; font-weight: 900;")
        self._progress_status = QLabel("")
        self._progress_status.setStyleSheet(f"color: {RoadmapColors.TEXT_SECONDARY}; font-size: 12px;")
        value_row.addWidget(self._progress_value)
        value_row.addStretch(1)
        value_row.addWidget(self._progress_status)
        progress_box.addLayout(value_row)
        row.addLayout(progress_box, 0)
        return nav

    def _build_enrollment_panel(self) -> QWidget:
        panel = GlassCard(object_name="enrollmentPanel")
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(18, 16, 18, 16)
        layout.setSpacing(10)

        title = QLabel("Select Phases to View")
        title.setStyleSheet(f"color: {RoadmapColors.GOLD}; font-size: 14px; font-weight: 800;")
        layout.addWidget(title)
        hint = QLabel("Toggle phases you're enrolled in to see your tasks")
        hint.setWordWrap(True)
        hint.setStyleSheet(f"color: {RoadmapColors.TEXT_MUTED}; font-size: 12px;")
        layout.addWidget(hint)

        for option in build_enrollment_options(self._state):
            box = QCheckBox(f"{option.label}  ({option.task_count} tasks)")
            box.setChecked(option.checked)
            box.setAccessibleName(option.label)
            box.toggled.connect(lambda checked, pos=option.position: self._set_enrolled(pos, checked))
            self._checkboxes[option.position] = box
            layout.addWidget(box)
        return panel

    def _refresh(self) -> None:
        state = self._state
        progress = state.progress
        if self._progress_bar is not None:
            self._progress_bar.set_progress(progress, 100)
        if self._progress_value is not None:
            self._progress_value.setText(f"{progress}%")
        if self._progress_status is not None:
            self._progress_status.setText(state.status)

        visible = state.visible_phases
        if self._empty_label is not None:
            self._empty_label.setVisible(not visible)
        if self._phase_list is not None:
            self._phase_list.set_states(build_card_states(state, self._expanded, self._submitting))

    def _toggle_phase(self, phase_id: str) -> None:
        if phase_id in self._expanded:
            self._expanded.discard(phase_id)
        else:
            self._expanded.add(phase_id)
        self._refresh()

    def _set_task_level(self, phase_id: str, task_id: str, level: int) -> None:
        updated = self._state.with_task_level(phase_id, task_id, level)
        if updated is self._state:
            return
        self._state = updated
        logger.debug("Set %s/%s to level %s", phase_id, task_id, level)
        self._refresh()

    def _set_enrolled(self, position: int, enrolled: bool) -> None:
        self._state = self._state.with_enrollment(position, enrolled)
        visible_ids = {phase.id for phase in self._state.visible_phases}
        self._expanded &= visible_ids
        if not self._expanded:
            self._expanded = initially_expanded(self._state)
        self._refresh()

    def _open_submission(self, phase_id: str) -> None:
        phase = self._state.store.get(phase_id)
        if phase is None or phase_id in self._submitting:
            return
        self._overlay.open_for(phase)

    def _send_submission(self, phase_id: str) -> None:
        phase = self._state.store.get(phase_id)
        # One submission per phase at a time.
        if phase is None or phase_id in self._submitting:
            return
        self._submitting.add(phase_id)
        self._overlay.set_submitting(True)
        self._refresh()
        submit_phase(
            phase,
            self._overlay.draft,
            self._submitter,
            lambda outcome: self._on_submission_outcome(phase_id, outcome),
        )

    def _on_submission_outcome(self, phase_id: str, outcome: SubmissionOutcome) -> None:
        self._submitting.discard(phase_id)
        overlay_phase = self._overlay.phase
        if overlay_phase is not None and overlay_phase.id == phase_id and self._overlay.isVisible():
            if outcome.is_success:
                self._overlay.finish()
            else:
                self._overlay.set_submitting(False)
        self._show_outcome(outcome)
        self._refresh()

    def _show_outcome(self, outcome: SubmissionOutcome) -> None:
        outcome = replace(outcome, lifetime_ms=self._settings.toast_ms)
        self._state = self._state.with_outcome(outcome)
        self._toast.show_outcome(outcome)

    def _clear_outcome(self) -> None:
        self._state = self._state.without_outcome()

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._submitting:
            logger.info("Closing with submissions in flight: %s", sorted(self._submitting))
        super().closeEvent(event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        QTimer.singleShot(0, self._refresh)
