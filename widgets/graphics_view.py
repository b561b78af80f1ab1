from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPainter, QWheelEvent
from PyQt5.QtWidgets import QGraphicsView

from widgets.toast import ToastLabel


class CustomGraphicsView(QGraphicsView):
    """
    Canvas shared by every structure:
    - normal wheel: vertical panning only
    - Ctrl + wheel: zoom by 1.1, clamped
    - hosts the toast that controllers report through
    """

    MIN_ZOOM = 0.1
    MAX_ZOOM = 4.0

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRenderHints(self.renderHints() | QPainter.Antialiasing | QPainter.TextAntialiasing)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setInteractive(True)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)
        self.toast = ToastLabel(self)

    def show_message(self, message, severity="info", duration_ms=3000):
        self.toast.notify(message, severity, duration_ms)

    def zoom_level(self) -> float:
        return self.transform().m11()

    def wheelEvent(self, event: QWheelEvent):
        if event.modifiers() & Qt.ControlModifier:
            factor = 1.1 if event.angleDelta().y() > 0 else (1 / 1.1)
            target = self.zoom_level() * factor
            if self.MIN_ZOOM <= target <= self.MAX_ZOOM:
                self.scale(factor, factor)
        else:
            self.translate(0, -event.angleDelta().y() * 0.2)
        event.accept()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self.toast.isVisible():
            self.toast.reposition()
