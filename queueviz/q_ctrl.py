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
from queueviz.q_model import QueueModel
from queueviz.q_view import QueueView
from stack.st_ctrl import GROUP_STYLE

logger = logging.getLogger(__name__)


class QueueController(BaseStructureController):
    """Controller for the queue visualization."""

    INFO = {
        "enqueue": ("O(1)", "Enqueueing element..."),
        "dequeue": ("O(n)", "Dequeueing element..."),
        "peek": ("O(1)", "Peeking at front element..."),
        "isEmpty": ("O(1)", "Checking if queue is empty..."),
        "size": ("O(1)", "Getting queue size..."),
        "clear": ("O(n)", "Clearing the queue..."),
    }

    def __init__(self, global_ctrl: GlobalController, scheduler=None):
        super().__init__(global_ctrl, scheduler)
        self.settings = global_ctrl.section("queue")
        self.max_size = int(self.settings.get("max_size", 7))

        self.model = QueueModel()
        self.view = QueueView(global_ctrl, self.gate)
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

        enqueue_group = QGroupBox("Enqueue")
        enqueue_group.setStyleSheet(GROUP_STYLE)
        enqueue_layout = QVBoxLayout(enqueue_group)
        enqueue_layout.setContentsMargins(12, 20, 12, 12)
        enqueue_layout.setSpacing(8)

        self.enqueue_input = QLineEdit()
        self.enqueue_input.setPlaceholderText("Value")
        self.enqueue_input.returnPressed.connect(self._on_enqueue)
        enqueue_layout.addWidget(self.enqueue_input)

        self.enqueue_btn = QPushButton("Enqueue")
        self.enqueue_btn.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.enqueue_btn.clicked.connect(self._on_enqueue)
        enqueue_layout.addWidget(self.enqueue_btn)
        layout.addWidget(enqueue_group)

        ops_group = QGroupBox("Operations")
        ops_group.setStyleSheet(GROUP_STYLE)
        ops_layout = QVBoxLayout(ops_group)
        ops_layout.setContentsMargins(12, 20, 12, 12)
        ops_layout.setSpacing(8)

        self.dequeue_btn = QPushButton("Dequeue")
        self.dequeue_btn.clicked.connect(lambda: self._dispatch(self.dequeue))
        self.peek_btn = QPushButton("Peek")
        self.peek_btn.clicked.connect(lambda: self._dispatch(self.peek))
        row = QHBoxLayout()
        row.addWidget(self.dequeue_btn)
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

    def enqueue(self, value):
        self._require_idle()
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise UserInputError("Please enter a value to enqueue.")
            value = self._coerce_value(value)
        if len(self.model) >= self.max_size:
            raise UserInputError(f"Queue is full (max {self.max_size} elements)!")

        self.model.enqueue(value)
        snapshot = self.model.snapshot()
        self.update_info("enqueue", f"Enqueueing {value}")
        frames = [Frame(snapshot, {len(snapshot) - 1: "inserted"}, self._hold("enqueue_ms", 600))]

        def _done():
            self.update_info(None, f"Enqueued {value}")
            self.notify(f"Enqueued {value}", "success")

        self.runner.run("queue enqueue", frames, on_finished=_done)
        return value

    def dequeue(self):
        self._require_idle()
        if len(self.model) == 0:
            raise UserInputError("Queue is empty!")

        before = self.model.snapshot()
        value = self.model.dequeue()["value"]
        self.update_info("dequeue", f"Dequeueing {value}")
        frames = [Frame(before, {0: "delete"}, self._hold("dequeue_ms", 600))]

        def _done():
            self.update_info(None, f"Dequeued {value}")
            self.notify(f"Dequeued {value}", "success")

        self.runner.run(
            "queue dequeue", frames, on_finished=_done, final_snapshot=self.model.snapshot()
        )
        return value

    def peek(self):
        self._require_idle()
        if len(self.model) == 0:
            raise UserInputError("Queue is empty!")

        snapshot = self.model.snapshot()
        value = self.model.peek()["value"]
        self.update_info("peek")
        frames = [Frame(snapshot, {0: "peek"}, self._hold("peek_ms", 800), f"Front element is {value}")]

        def _done():
            self.notify(f"Front element is {value}", "info")

        self.runner.run("queue peek", frames, on_finished=_done)
        return value

    def is_empty(self) -> bool:
        self._require_idle()
        empty = len(self.model) == 0
        self.update_info("isEmpty", "Queue is empty" if empty else "Queue is not empty")
        self.notify(
            f"Is the queue empty? {'Yes' if empty else 'No'}.",
            "success" if empty else "info",
        )
        return empty

    def size(self) -> int:
        self._require_idle()
        count = len(self.model)
        self.update_info("size", f"Queue size: {count}")
        self.notify(f"The queue has {count} elements.", "info")
        return count

    def clear(self):
        self._require_idle()
        if len(self.model) == 0:
            return

        snapshot = self.model.snapshot()
        self.model.clear()
        self.update_info("clear")
        hold = self._hold("clear_ms", 150)
        # front first, one frame per element still waiting
        frames = [Frame(snapshot[k:], {0: "delete"}, hold) for k in range(len(snapshot))]

        def _done():
            self.update_info(None, "Queue cleared")
            self.notify("Queue has been cleared.", "success")

        self.runner.run("queue clear", frames, on_finished=_done, final_snapshot=[])

    def _hold(self, key, default):
        return int(self.settings.get(key, default))

    # ---------- UI handlers ----------

    def _on_enqueue(self):
        if self._dispatch(self.enqueue, self.enqueue_input.text()) is not None:
            self.enqueue_input.clear()

    def _update_panel_enabled_state(self):
        locked = self.gate.is_held
        for widget in (
            self.enqueue_input,
            self.enqueue_btn,
            self.dequeue_btn,
            self.peek_btn,
            self.empty_btn,
            self.size_btn,
            self.clear_btn,
        ):
            widget.setDisabled(locked)
