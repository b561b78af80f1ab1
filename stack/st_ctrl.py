import logging

from PyQt5.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from core.base_ctrl import BaseStructureController
from core.errors import UserInputError
from core.global_ctrl import GlobalController
from core.operation import Frame, OperationRunner
from stack.st_model import StackModel
from stack.st_view import StackView

logger = logging.getLogger(__name__)

GROUP_STYLE = """
QGroupBox {
    border: 1px solid #d5d5d5;
    border-radius: 6px;
    margin-top: 12px;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 10px;
    padding: 0 6px;
    color: #ffffff;
}
"""


class StackController(BaseStructureController):
    """Controller for the stack visualization."""

    INFO = {
        "push": ("O(1)", "Pushing element..."),
        "pop": ("O(1)", "Popping element..."),
        "peek": ("O(1)", "Peeking at top element..."),
        "isEmpty": ("O(1)", "Checking if stack is empty..."),
        "size": ("O(1)", "Getting stack size..."),
        "clear": ("O(n)", "Clearing stack..."),
    }

    def __init__(self, global_ctrl: GlobalController, scheduler=None):
        super().__init__(global_ctrl, scheduler)
        self.settings = global_ctrl.section("stack")
        self.max_size = int(self.settings.get("max_size", 8))

        self.model = StackModel()
        self.view = StackView(global_ctrl, self.gate)
        self.runner = OperationRunner(self.view.render, self.gate, self.scheduler, parent=self)
        self.runner.statusChanged.connect(lambda text: self.update_info(None, text))

        self.panel = self._build_panel()
        self.view.clearAllRequested.connect(lambda: self._dispatch(self.clear))
        self._update_panel_enabled_state()

    def _build_panel(self):
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        push_group = QGroupBox("Push")
        push_group.setStyleSheet(GROUP_STYLE)
        push_group_layout = QVBoxLayout(push_group)
        push_group_layout.setContentsMargins(12, 20, 12, 12)
        push_group_layout.setSpacing(8)

        self.push_input = QLineEdit()
        self.push_input.setPlaceholderText("Value")
        self.push_input.returnPressed.connect(self._on_push)
        push_group_layout.addWidget(self.push_input)

        self.push_btn = QPushButton("Push")
        self.push_btn.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.push_btn.clicked.connect(self._on_push)
        push_group_layout.addWidget(self.push_btn)
        layout.addWidget(push_group)

        ops_group = QGroupBox("Operations")
        ops_group.setStyleSheet(GROUP_STYLE)
        ops_layout = QVBoxLayout(ops_group)
        ops_layout.setContentsMargins(12, 20, 12, 12)
        ops_layout.setSpacing(8)

        self.pop_btn = QPushButton("Pop")
        self.pop_btn.clicked.connect(lambda: self._dispatch(self.pop))
        self.peek_btn = QPushButton("Peek")
        self.peek_btn.clicked.connect(lambda: self._dispatch(self.peek))
        row = QHBoxLayout()
        row.addWidget(self.pop_btn)
        row.addWidget(self.peek_btn)
        ops_layout.addLayout(row)

        self.empty_btn = QPushButton("Is Empty?")
        self.empty_btn.clicked.connect(lambda: self._dispatch(self.is_empty))
        self.size_btn = QPushButton("Size")
        self.size_btn.clicked.connect(lambda: self._dispatch(self.size))
        row = QHBoxLayout()
        row.addWidget(self.empty_btn)
        row.addWidget(self.size_btn)
        ops_layout.addLayout(row)

        self.clear_btn = QPushButton("Clear")
        self.clear_btn.clicked.connect(lambda: self._dispatch(self.clear))
        ops_layout.addWidget(self.clear_btn)
        layout.addWidget(ops_group)

        layout.addStretch(1)
        return container

    # ---------- Operations ----------

    def push(self, value):
        self._require_idle()
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise UserInputError("Please enter a value to push.")
            value = self._coerce_value(value)
        if len(self.model) >= self.max_size:
            raise UserInputError("Stack is full!")

        info = self.model.push(value)
        self.update_info("push", f"Pushing {value}")

        def _done():
            self.update_info(None, f"Pushed {value}")
            self.notify(f"Pushed {value} onto the stack", "success")

        self.view.animate_push(self.model.snapshot(), info, on_finished=_done)
        return info["value"]

    def pop(self):
        self._require_idle()
        if len(self.model) == 0:
            raise UserInputError("Stack is empty!")

        popped = self.model.pop()
        value = popped["value"]
        self.update_info("pop", f"Popping {value}")

        def _done():
            self.update_info(None, f"Popped {value}")
            self.notify(f"Popped {value} from the stack", "success")

        self.view.animate_pop(self.model.snapshot(), popped, on_finished=_done)
        return value

    def peek(self):
        self._require_idle()
        if len(self.model) == 0:
            raise UserInputError("Stack is empty!")

        snapshot = self.model.snapshot()
        value = self.model.peek()["value"]
        self.update_info("peek")
        frames = [
            Frame(
                snapshot,
                {len(snapshot) - 1: "peek"},
                int(self.settings.get("peek_ms", 800)),
                f"Top element is {value}",
            )
        ]

        def _done():
            self.notify(f"Top element is {value}", "info")

        self.runner.run("stack peek", frames, on_finished=_done)
        return value

    def is_empty(self) -> bool:
        self._require_idle()
        empty = len(self.model) == 0
        self.update_info("isEmpty", "Stack is empty" if empty else "Stack is not empty")
        self.notify("Stack is empty." if empty else "Stack is not empty.", "info")
        return empty

    def size(self) -> int:
        self._require_idle()
        count = len(self.model)
        self.update_info("size", f"Stack size: {count}")
        self.notify(f"Stack size: {count}", "info")
        return count

    def clear(self):
        self._require_idle()
        if len(self.model) == 0:
            return

        snapshot = self.model.snapshot()
        self.model.clear()
        self.update_info("clear")
        hold = int(self.settings.get("clear_ms", 150))
        # top-down, one frame per element still standing
        frames = [
            Frame(snapshot[:k], {k - 1: "pop"}, hold)
            for k in range(len(snapshot), 0, -1)
        ]

        def _done():
            self.update_info(None, "Stack cleared")
            self.notify("Stack has been cleared.", "success")

        self.runner.run("stack clear", frames, on_finished=_done, final_snapshot=[])

    # ---------- UI handlers ----------

    def _on_push(self):
        if self._dispatch(self.push, self.push_input.text()) is not None:
            self.push_input.clear()

    def _update_panel_enabled_state(self):
        locked = self.gate.is_held
        for widget in (
            self.push_input,
            self.push_btn,
            self.pop_btn,
            self.peek_btn,
            self.empty_btn,
            self.size_btn,
            self.clear_btn,
        ):
            widget.setDisabled(locked)
