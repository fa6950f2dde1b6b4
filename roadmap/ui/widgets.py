"""Shared painted widgets: progress bar and card frame."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QLinearGradient, QPainter
from PySide6.QtWidgets import QFrame, QGraphicsDropShadowEffect, QWidget

from roadmap.ui.colors import RoadmapColors


class GoldProgressBar(QWidget):
    """Rounded gradient bar for a value out of a maximum."""

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        height: int = 10,
        accessible_name: str = "",
    ) -> None:
        super().__init__(parent)
        self._value = 0
        self._max_value = 100
        self._color_start = RoadmapColors.GOLD_DARK
        self._color_end = RoadmapColors.GOLD_LIGHT
        self.setFixedHeight(height)
        self.setMinimumWidth(80)
        if accessible_name:
            self.setAccessibleName(accessible_name)

    @property
    def value(self) -> int:
        return self._value

    def set_progress(self, value: int, max_value: int, color_end: Optional[str] = None) -> None:
        self._max_value = max(1, int(max_value))
        self._value = max(0, min(int(value), self._max_value))
        if color_end:
            self._color_end = color_end
        self.setAccessibleDescription(f"{self._value} of {self._max_value}")
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(Qt.NoPen)

        radius = min(8, self.height() // 2)
        painter.setBrush(QColor(RoadmapColors.TRACK))
        painter.drawRoundedRect(0, 0, self.width(), self.height(), radius, radius)

        fill = int(self.width() * self._value / self._max_value)
        if fill <= 0:
            return
        gradient = QLinearGradient(0, 0, fill, 0)
        gradient.setColorAt(0, QColor(self._color_start))
        gradient.setColorAt(1, QColor(self._color_end))
        painter.setBrush(gradient)
        painter.drawRoundedRect(0, 0, fill, self.height(), radius, radius)


class GlassCard(QFrame):
    """Translucent bordered card with a soft shadow."""

    def __init__(self, parent: Optional[QWidget] = None, *, object_name: str = "glassCard") -> None:
        super().__init__(parent)
        self.setObjectName(object_name)
        self.setStyleSheet(
            f"""
            QFrame#{object_name} {{
                background: {RoadmapColors.CARD_BG};
                border: 1px solid {RoadmapColors.CARD_BORDER};
                border-radius: 18px;
            }}
            """
        )
        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(28)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(0, 0, 0, 120))
        self.setGraphicsEffect(shadow)
