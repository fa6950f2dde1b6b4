"""Phase list UI: PhaseCard, TaskRow and PhaseListWidget."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from roadmap.core.levels import MAX_LEVEL, SCALE, read_level
from roadmap.core.phases import Task
from roadmap.ui.colors import RoadmapColors, level_color
from roadmap.ui.models import PhaseCardState
from roadmap.ui.widgets import GlassCard, GoldProgressBar

LevelHandler = Callable[[str, str, int], None]


def _scale_button_style(active: bool, current: bool) -> str:
    background = RoadmapColors.GOLD if active else "transparent"
    color = RoadmapColors.BG_TOP if active else RoadmapColors.TEXT_SECONDARY
    border = RoadmapColors.GOLD_LIGHT if current else RoadmapColors.CARD_BORDER
    return f"""
        QPushButton {{
            background: {background};
            color: {color};
            border: 1px solid {border};
            border-radius: 13px;
            font-weight: 800;
            font-size: 12px;
        }}
        QPushButton:hover {{ border-color: {RoadmapColors.GOLD_LIGHT}; }}
    """


class TaskRow(QWidget):
    """One task: number, name, description, level bar and the 1-5 scale."""

    def __init__(
        self,
        *,
        phase_id: str,
        task: Task,
        number: int,
        on_level: LevelHandler,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        level = read_level(task)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 8)
        layout.setSpacing(6)

        top = QHBoxLayout()
        number_label = QLabel(f"Task {number}")
        number_label.setStyleSheet(f"color: {RoadmapColors.GOLD}; font-size: 11px; font-weight: 700;")
        name_label = QLabel(task.name)
        name_label.setStyleSheet(f"color: {RoadmapColors.TEXT_PRIMARY}; font-size: 14px; font-weight: 800;")
        top.addWidget(number_label, 0)
        top.addWidget(name_label, 1)
        layout.addLayout(top)

        if task.description:
            desc = QLabel(task.description)
            desc.setWordWrap(True)
            desc.setStyleSheet(f"color: {RoadmapColors.TEXT_SECONDARY}; font-size: 12px;")
            layout.addWidget(desc)

        bar_row = QHBoxLayout()
        bar = GoldProgressBar(height=8, accessible_name=f"{task.name} progress")
        bar.set_progress(level, MAX_LEVEL, level_color(level))
        bar_row.addWidget(bar, 1)
        level_label = QLabel(f"{level}/{MAX_LEVEL} completion")
        level_label.setStyleSheet(f"color: {RoadmapColors.TEXT_MUTED}; font-size: 11px;")
        bar_row.addWidget(level_label, 0)
        layout.addLayout(bar_row)

        scale = QHBoxLayout()
        scale.setSpacing(6)
        for num in SCALE:
            btn = QPushButton(str(num))
            btn.setFixedSize(26, 26)
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            btn.setToolTip(f"Click to set progress to level {num}")
            btn.setAccessibleName(f"Set {task.name} progress to level {num}")
            btn.setStyleSheet(_scale_button_style(level >= num, level == num))
            btn.clicked.connect(lambda _=False, n=num: on_level(phase_id, task.id, n))
            scale.addWidget(btn)
        scale.addStretch(1)
        layout.addLayout(scale)


class PhaseCard(GlassCard):
    """Collapsible card for one phase."""

    def __init__(
        self,
        *,
        on_toggle: Callable[[str], None],
        on_level: LevelHandler,
        on_submit: Callable[[str], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent, object_name="phaseCard")
        self._on_toggle = on_toggle
        self._on_level = on_level
        self._on_submit = on_submit
        self._phase_id = ""

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 14, 18, 14)
        layout.setSpacing(10)

        self._header = QPushButton()
        self._header.setCursor(Qt.CursorShape.PointingHandCursor)
        self._header.setStyleSheet(
            f"""
            QPushButton {{
                background: transparent;
                border: none;
                text-align: left;
                color: {RoadmapColors.TEXT_PRIMARY};
                font-size: 15px;
                font-weight: 800;
            }}
            """
        )
        self._header.clicked.connect(lambda: self._on_toggle(self._phase_id))
        layout.addWidget(self._header)

        self._count_label = QLabel("")
        self._count_label.setStyleSheet(f"color: {RoadmapColors.GOLD}; font-size: 12px; font-weight: 600;")
        layout.addWidget(self._count_label)

        self._body = QWidget()
        self._body_layout = QVBoxLayout(self._body)
        self._body_layout.setContentsMargins(0, 0, 0, 0)
        self._body_layout.setSpacing(4)
        layout.addWidget(self._body)

        self._submit_btn = QPushButton("Submit All Tasks")
        self._submit_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self._submit_btn.setStyleSheet(
            f"""
            QPushButton {{
                background: {RoadmapColors.GOLD};
                color: {RoadmapColors.BG_TOP};
                padding: 9px 16px;
                border: none;
                border-radius: 12px;
                font-weight: 800;
            }}
            QPushButton:disabled {{ background: {RoadmapColors.TRACK}; color: {RoadmapColors.TEXT_MUTED}; }}
            """
        )
        self._submit_btn.clicked.connect(lambda: self._on_submit(self._phase_id))
        self._body_layout.addWidget(self._submit_btn, 0, Qt.AlignRight)

    def set_state(self, state: PhaseCardState) -> None:
        phase = state.phase
        self._phase_id = phase.id
        arrow = "▾" if state.expanded else "▸"
        subtitle = phase.description or "Ongoing Task Details"
        self._header.setText(f"{arrow}  {phase.title}  ·  {subtitle}")
        self._header.setAccessibleName(f"{'Collapse' if state.expanded else 'Expand'} {phase.title}")
        self._count_label.setText(state.summary)

        # Rebuild task rows; the submit button stays last.
        while self._body_layout.count() > 1:
            item = self._body_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        if not phase.tasks:
            empty = QLabel("No tasks available for this phase.")
            empty.setStyleSheet(f"color: {RoadmapColors.TEXT_MUTED}; font-size: 12px;")
            self._body_layout.insertWidget(0, empty)
        for index, task in enumerate(phase.tasks):
            row = TaskRow(phase_id=phase.id, task=task, number=index + 1, on_level=self._on_level)
            self._body_layout.insertWidget(index, row)

        self._submit_btn.setEnabled(bool(phase.tasks) and not state.submitting)
        self._submit_btn.setText("Sending..." if state.submitting else "Submit All Tasks")
        self._body.setVisible(state.expanded)


class PhaseListWidget(QWidget):
    """Vertical list of phase cards, reusing cards across refreshes."""

    def __init__(
        self,
        *,
        on_toggle: Callable[[str], None],
        on_level: LevelHandler,
        on_submit: Callable[[str], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._on_toggle = on_toggle
        self._on_level = on_level
        self._on_submit = on_submit
        self._cards: Dict[str, PhaseCard] = {}
        self.setStyleSheet("background: transparent;")

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(14)
        self._layout.addStretch(1)

    def set_states(self, states: List[PhaseCardState]) -> None:
        wanted = [s.phase.id for s in states]
        for phase_id in list(self._cards):
            if phase_id not in wanted:
                card = self._cards.pop(phase_id)
                self._layout.removeWidget(card)
                card.deleteLater()

        for index, state in enumerate(states):
            card = self._cards.get(state.phase.id)
            if card is None:
                card = PhaseCard(
                    on_toggle=self._on_toggle,
                    on_level=self._on_level,
                    on_submit=self._on_submit,
                    parent=self,
                )
                self._cards[state.phase.id] = card
            else:
                self._layout.removeWidget(card)
            self._layout.insertWidget(index, card)
            card.set_state(state)
