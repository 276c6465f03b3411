from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPoint, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QPainter, QPolygon
from PySide6.QtWidgets import QWidget

from ..motion import Direction

# Arrow pointing up in a 6x6 grid centred on the origin.
ARROW_SHAPE = QPolygon(
    [
        QPoint(0, -2),
        QPoint(2, 0),
        QPoint(1, 0),
        QPoint(1, 2),
        QPoint(-1, 2),
        QPoint(-1, 0),
        QPoint(-2, 0),
        QPoint(0, -2),
    ]
)
_GRID_UNITS = 6


class ArrowView(QWidget):
    """Draws the current heading as an arrow, or a gray square when stopped."""

    def __init__(
        self,
        *,
        background: QColor = QColor(Qt.black),
        arrow_color: QColor = QColor(Qt.white),
        stopped_color: QColor = QColor(Qt.gray),
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._direction = Direction.STOPPED
        self._background = background
        self._arrow_color = arrow_color
        self._stopped_color = stopped_color
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(64, 64)

    @property
    def direction(self) -> Direction:
        return self._direction

    def set_direction(self, direction: Direction) -> None:
        direction = Direction(direction)
        if direction == self._direction:
            return
        self._direction = direction
        self.update()

    def sizeHint(self) -> QSize:  # noqa: N802 (Qt naming)
        return QSize(256, 256)

    def paintEvent(self, event) -> None:  # noqa: N802 (Qt naming)
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.Antialiasing)
            painter.fillRect(self.rect(), self._background)

            side = min(self.width(), self.height())
            painter.translate(self.width() / 2, self.height() / 2)
            painter.scale(side / _GRID_UNITS, side / _GRID_UNITS)
            painter.setPen(Qt.NoPen)

            angle = self._direction.angle_degrees
            if angle is None:
                painter.setBrush(self._stopped_color)
                painter.drawRect(QRectF(-1, -1, 2, 2))
            else:
                painter.rotate(angle)
                painter.setBrush(self._arrow_color)
                painter.drawPolygon(ARROW_SHAPE)
        finally:
            painter.end()
