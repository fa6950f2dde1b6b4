"""In-window overlays: phase submission dialog and outcome toast."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QEvent, QMimeDatabase, Qt, QTimer, Signal
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QFileDialog,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from roadmap.core.phases import Phase
from roadmap.core.submission import Attachment, SubmissionDraft, SubmissionOutcome
from roadmap.ui.colors import RoadmapColors


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(0, 0, 0, 0.55);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


def _button_style(primary: bool) -> str:
    if primary:
        return f"""
            QPushButton {{
                background: {RoadmapColors.GOLD};
                color: {RoadmapColors.BG_TOP};
                padding: 10px 16px;
                border: none;
                border-radius: 12px;
                font-weight: 800;
            }}
            QPushButton:hover {{ background: {RoadmapColors.GOLD_LIGHT}; }}
            QPushButton:disabled {{ background: {RoadmapColors.TRACK}; color: {RoadmapColors.TEXT_MUTED}; }}
        """
    return f"""
        QPushButton {{
            background: transparent;
            color: {RoadmapColors.TEXT_SECONDARY};
            padding: 10px 16px;
            border: 1px solid {RoadmapColors.CARD_BORDER};
            border-radius: 12px;
            font-weight: 600;
        }}
        QPushButton:hover {{ color: {RoadmapColors.GOLD_LIGHT}; border-color: {RoadmapColors.GOLD}; }}
    """


class SubmitOverlay(QWidget):
    """Modal overlay collecting notes and a PDF for one phase."""

    send_requested = Signal(str)  # phase id
    rejected_file = Signal(object)  # SubmissionOutcome
    closed = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._phase: Optional[Phase] = None
        self._draft = SubmissionDraft()
        self._submitting = False
        self._mime_db = QMimeDatabase()

        main_layout = QGridLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setRowStretch(0, 1)
        main_layout.setColumnStretch(0, 1)
        main_layout.addWidget(_overlay_background(self, self.request_close), 0, 0)

        container = QFrame()
        container.setObjectName("submitContainer")
        container.setMinimumWidth(420)
        container.setMaximumWidth(520)
        container.setStyleSheet(
            f"""
            QFrame#submitContainer {{
                background: {RoadmapColors.BG_BOTTOM};
                border: 1px solid {RoadmapColors.CARD_BORDER};
                border-radius: 20px;
            }}
            """
        )
        content = QVBoxLayout(container)
        content.setContentsMargins(26, 22, 26, 22)
        content.setSpacing(14)

        header = QHBoxLayout()
        self._title = QLabel("")
        self._title.setStyleSheet(f"color: {RoadmapColors.GOLD}; font-size: 17px; font-weight: 800;")
        header.addWidget(self._title, 1)
        self._close_btn = QPushButton("×")
        self._close_btn.setFixedSize(28, 28)
        self._close_btn.setAccessibleName("Close modal")
        self._close_btn.setStyleSheet(_button_style(False))
        self._close_btn.clicked.connect(self.request_close)
        header.addWidget(self._close_btn, 0)
        content.addLayout(header)

        hint = QLabel("Add notes or upload a PDF document to submit all tasks in this phase.")
        hint.setWordWrap(True)
        hint.setStyleSheet(f"color: {RoadmapColors.TEXT_SECONDARY}; font-size: 12px;")
        content.addWidget(hint)

        self._notes = QTextEdit()
        self._notes.setPlaceholderText("Add notes, links, or context about your submission...")
        self._notes.setAccessibleName("Submission notes")
        self._notes.setStyleSheet(
            f"color: {RoadmapColors.TEXT_PRIMARY}; background: {RoadmapColors.BG_TOP};"
            f" border: 1px solid {RoadmapColors.CARD_BORDER}; border-radius: 10px;"
        )
        self._notes.textChanged.connect(self._on_notes_changed)
        content.addWidget(self._notes, 1)

        file_row = QHBoxLayout()
        self._upload_btn = QPushButton("📄 Upload PDF Document")
        self._upload_btn.setStyleSheet(_button_style(False))
        self._upload_btn.clicked.connect(self._pick_file)
        file_row.addWidget(self._upload_btn, 1)
        self._remove_btn = QPushButton("×")
        self._remove_btn.setFixedSize(28, 28)
        self._remove_btn.setAccessibleName("Remove file")
        self._remove_btn.setStyleSheet(_button_style(False))
        self._remove_btn.clicked.connect(self._remove_file)
        file_row.addWidget(self._remove_btn, 0)
        content.addLayout(file_row)

        actions = QHBoxLayout()
        self._cancel_btn = QPushButton("Cancel")
        self._cancel_btn.setStyleSheet(_button_style(False))
        self._cancel_btn.clicked.connect(self.request_close)
        actions.addWidget(self._cancel_btn, 1)
        self._send_btn = QPushButton("Send to Admin")
        self._send_btn.setStyleSheet(_button_style(True))
        self._send_btn.clicked.connect(self._request_send)
        actions.addWidget(self._send_btn, 1)
        content.addLayout(actions)

        main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)

        QShortcut(QKeySequence("Esc"), self, activated=self.request_close)
        QShortcut(QKeySequence("Ctrl+Return"), self, activated=self._request_send)
        QShortcut(QKeySequence("Ctrl+Enter"), self, activated=self._request_send)

        self.hide()

    @property
    def phase(self) -> Optional[Phase]:
        return self._phase

    @property
    def draft(self) -> SubmissionDraft:
        return self._draft

    def open_for(self, phase: Phase) -> None:
        self._phase = phase
        self._draft = SubmissionDraft()
        self._notes.blockSignals(True)
        self._notes.clear()
        self._notes.blockSignals(False)
        self._title.setText(f"Submit all tasks for {phase.title}")
        self.set_submitting(False)
        self.show()
        self.raise_()
        self._notes.setFocus()

    def set_submitting(self, submitting: bool) -> None:
        self._submitting = submitting
        for widget in (self._notes, self._upload_btn, self._remove_btn, self._cancel_btn, self._close_btn):
            widget.setEnabled(not submitting)
        self._send_btn.setText("Sending..." if submitting else "Send to Admin")
        self._refresh()

    def finish(self) -> None:
        """Close after the submission completed; the draft is discarded."""
        self._submitting = False
        self._draft = SubmissionDraft()
        self.hide()
        self.closed.emit()

    def request_close(self) -> None:
        if self._submitting or not self.isVisible():
            return
        self.hide()
        self.closed.emit()

    def _on_notes_changed(self) -> None:
        self._draft = self._draft.with_notes(self._notes.toPlainText())
        self._refresh()

    def _pick_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Upload PDF Document", "", "PDF Documents (*.pdf);;All Files (*)"
        )
        if not path:
            return
        media_type = self._mime_db.mimeTypeForFile(path).name()
        self._draft, outcome = self._draft.with_attachment(Attachment.from_path(path, media_type))
        if outcome is not None:
            self.rejected_file.emit(outcome)
        self._refresh()

    def _remove_file(self) -> None:
        self._draft = self._draft.without_attachment()
        self._refresh()

    def _request_send(self) -> None:
        if self._phase is None or self._submitting or not self.isVisible():
            return
        self.send_requested.emit(self._phase.id)

    def _refresh(self) -> None:
        attachment = self._draft.attachment
        self._upload_btn.setText(f"✓ {attachment.name}" if attachment else "📄 Upload PDF Document")
        self._remove_btn.setVisible(attachment is not None)
        self._send_btn.setEnabled(self._draft.can_submit and not self._submitting)

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)


class Toast(QFrame):
    """Transient outcome banner that hides itself after the outcome's lifetime."""

    dismissed = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("toast")
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.dismiss)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 10, 10, 10)
        self._label = QLabel("")
        self._label.setWordWrap(True)
        layout.addWidget(self._label, 1)
        close_btn = QPushButton("×")
        close_btn.setFixedSize(24, 24)
        close_btn.setAccessibleName("Close")
        close_btn.setStyleSheet("background: transparent; border: none; color: white; font-weight: 900;")
        close_btn.clicked.connect(self.dismiss)
        layout.addWidget(close_btn, 0)
        self.hide()

    def show_outcome(self, outcome: SubmissionOutcome) -> None:
        color = RoadmapColors.SUCCESS if outcome.is_success else RoadmapColors.ERROR
        self.setStyleSheet(
            f"QFrame#toast {{ background: {color}; border-radius: 12px; }}"
            " QLabel { color: white; font-weight: 700; }"
        )
        self._label.setText(outcome.message)
        self.adjustSize()
        self._reposition()
        self.show()
        self.raise_()
        self._timer.start(max(0, outcome.lifetime_ms))

    def dismiss(self) -> None:
        self._timer.stop()
        if self.isVisible():
            self.hide()
            self.dismissed.emit()

    def _reposition(self) -> None:
        parent = self.parentWidget()
        if parent is None:
            return
        width = min(420, max(260, parent.width() // 3))
        self.setFixedWidth(width)
        self.adjustSize()
        self.move(parent.width() - width - 24, parent.height() - self.height() - 24)
