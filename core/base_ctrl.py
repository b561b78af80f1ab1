import logging
import re
from typing import Dict, Tuple

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import QGroupBox, QVBoxLayout, QWidget

from core.errors import BusyRejection, UserInputError
from core.gate import OperationGate
from core.scheduler import QtScheduler

logger = logging.getLogger(__name__)


class BaseStructureController(QWidget):
    """
    Shared plumbing for the structure panels: one gate per visualizer,
    the scheduler used for timed holds, toast/status signals and the
    boundary where user-facing errors are turned into messages.
    """

    messageRequested = pyqtSignal(str, str, int)  # message, severity, duration ms
    statusChanged = pyqtSignal(str, str)  # complexity, status text

    # operation -> (complexity, default status)
    INFO: Dict[str, Tuple[str, str]] = {}

    def __init__(self, global_ctrl, scheduler=None):
        super().__init__()
        self.global_ctrl = global_ctrl
        self.gate = OperationGate(self)
        self.scheduler = scheduler or QtScheduler(global_ctrl)
        self.panel_index = -1
        self.panel = None
        self.view = None
        self.gate.lockChanged.connect(self._on_lock_state)

    # ---------- Controller lifecycle ----------

    def build_panel(self):
        return self.panel

    def on_activate(self, graphics_view):
        self.view.bind_canvas(graphics_view)

    def on_deactivate(self):
        pass

    # ---------- Notifications ----------

    def notify(self, message: str, severity: str = "info", duration_ms: int = 0):
        duration = duration_ms or int(self.global_ctrl.settings.get("toast_ms", 3000))
        self.messageRequested.emit(message, severity, duration)

    def update_info(self, operation=None, status=None):
        if operation in self.INFO:
            complexity, default_status = self.INFO[operation]
            self.statusChanged.emit(complexity, status or default_status)
        else:
            self.statusChanged.emit("O(?)", status or "Ready")

    def _dispatch(self, operation, *args):
        """Runs a user-triggered operation and reports rejections as toasts."""
        try:
            return operation(*args)
        except BusyRejection as exc:
            logger.debug("rejected %s: %s", getattr(operation, "__name__", operation), exc)
            self.notify(str(exc), "info")
        except UserInputError as exc:
            logger.info("invalid input for %s: %s", getattr(operation, "__name__", operation), exc)
            self.notify(str(exc), "error")
        return None

    def _require_idle(self):
        self.gate.ensure_free()

    # ---------- Panel state ----------

    def _on_lock_state(self, locked):
        self._update_panel_enabled_state()

    def _update_panel_enabled_state(self):
        pass

    @staticmethod
    def _single_button_group(title, *buttons):
        group = QGroupBox(title)
        group.setStyleSheet("QGroupBox { color: white; }")
        vlayout = QVBoxLayout(group)
        vlayout.setContentsMargins(12, 10, 12, 12)
        vlayout.setSpacing(6)
        for button in buttons:
            vlayout.addWidget(button)
        return group

    # ---------- Input parsing ----------

    @staticmethod
    def _split_tokens(text: str):
        if not text:
            return []
        normalized = text.replace("，", ",")
        return [
            part.strip()
            for part in re.split(r"[,\s]+", normalized)
            if part.strip()
        ]

    @staticmethod
    def _coerce_value(value):
        try:
            return int(value)
        except ValueError:
            try:
                return float(value)
            except ValueError:
                return value

    @staticmethod
    def _coerce_numeric(value):
        text = str(value).strip()
        if not text:
            raise UserInputError("Please enter a valid number.")
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            raise UserInputError(f"{text!r} is not a number.")
