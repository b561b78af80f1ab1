from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtWidgets import QLabel

SEVERITY_STYLES = {
    "info": ("#1e3a8a", "#dbeafe"),
    "success": ("#14532d", "#dcfce7"),
    "error": ("#7f1d1d", "#fee2e2"),
}


class ToastLabel(QLabel):
    """Transient message pinned to the top center of its parent widget."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setWordWrap(True)
        self.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.hide()

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.hide)
        self.severity = None

    def notify(self, message: str, severity: str = "info", duration_ms: int = 3000):
        background, foreground = SEVERITY_STYLES.get(severity, SEVERITY_STYLES["info"])
        self.severity = severity
        self.setStyleSheet(
            f"QLabel {{ background: {background}; color: {foreground};"
            " border-radius: 8px; padding: 8px 16px; font-size: 14px; }"
        )
        self.setText(message)
        self.reposition()
        self.show()
        self.raise_()
        self._timer.start(max(1, duration_ms))

    def reposition(self):
        parent = self.parentWidget()
        if parent is not None:
            self.setMaximumWidth(max(200, parent.width() - 40))
        self.adjustSize()
        if parent is not None:
            self.move((parent.width() - self.width()) // 2, 16)
