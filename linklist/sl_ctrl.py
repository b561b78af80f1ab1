import logging

from PyQt5.QtWidgets import (
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QInputDialog,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QWidget,
)

from core.base_ctrl import BaseStructureController
from core.errors import UserInputError
from core.global_ctrl import GlobalController
from core.operation import Frame, OperationRunner
from linklist.sl_model import LinkedListModel
from linklist.sl_view import LinkedListView

logger = logging.getLogger(__name__)


class LinkedListController(BaseStructureController):
    """
    Linked list panel. Edits land in the model first; the runner then walks
    the pre-edit list node by node before showing the result.
    """

    INFO = {
        "create": ("O(n)", "Building list..."),
        "addFirst": ("O(1)", "Adding to the front..."),
        "addLast": ("O(n)", "Adding to the end..."),
        "insert": ("O(n)", "Inserting..."),
        "removeFirst": ("O(1)", "Removing from the front..."),
        "removeLast": ("O(n)", "Removing from the end..."),
        "remove": ("O(n)", "Removing..."),
        "search": ("O(n)", "Searching..."),
        "clear": ("O(1)", "Clearing list..."),
    }

    def __init__(self, global_ctrl: GlobalController, scheduler=None):
        super().__init__(global_ctrl, scheduler)
        self.settings = global_ctrl.section("linked_list")
        self.max_size = int(self.settings.get("max_size", 10))

        self.model = LinkedListModel()
        self.view = LinkedListView(global_ctrl, self.gate)
        self.runner = OperationRunner(self.view.render, self.gate, self.scheduler, parent=self)
        self.runner.statusChanged.connect(lambda text: self.update_info(None, text))

        self._build_inputs()
        self.panel = self._create_panel()

        self.view.deleteRequested.connect(self._handle_delete_from_node)
        self.view.clearAllRequested.connect(lambda: self._dispatch(self.clear))
        self._update_panel_enabled_state()

    # ---------- Panel UI ----------

    def _build_inputs(self):
        self.value_edit = QLineEdit()
        self.value_edit.setPlaceholderText("Value")

        self.insert_index_spin = QSpinBox()
        self.insert_index_spin.setRange(0, 0)
        self.insert_value_edit = QLineEdit()
        self.insert_value_edit.setPlaceholderText("Value")

        self.delete_index_spin = QSpinBox()
        self.delete_index_spin.setRange(0, 0)

        self.search_value_edit = QLineEdit()
        self.search_value_edit.setPlaceholderText("Value")
        self.search_value_edit.returnPressed.connect(self._on_search)

    def _create_panel(self):
        container = QWidget()
        layout = QGridLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setHorizontalSpacing(12)
        layout.setVerticalSpacing(12)
        layout.setColumnStretch(0, 1)
        layout.setColumnStretch(1, 1)

        self.create_btn = QPushButton("Create From List")
        self.create_btn.clicked.connect(self._on_create)
        self.clear_btn = QPushButton("Clear")
        self.clear_btn.clicked.connect(lambda: self._dispatch(self.clear))
        layout.addWidget(self._single_button_group("Create", self.create_btn, self.clear_btn), 0, 0)

        add_group = QGroupBox("Add")
        add_group.setStyleSheet("QGroupBox { color: white; }")
        add_layout = QFormLayout()
        add_layout.setContentsMargins(12, 8, 12, 12)
        add_layout.setSpacing(6)
        add_layout.addRow("Value:", self.value_edit)
        self.add_first_btn = QPushButton("Add First")
        self.add_first_btn.clicked.connect(lambda: self._on_add(self.add_first))
        self.add_last_btn = QPushButton("Add Last")
        self.add_last_btn.clicked.connect(lambda: self._on_add(self.add_last))
        add_layout.addRow(self.add_first_btn)
        add_layout.addRow(self.add_last_btn)
        add_group.setLayout(add_layout)
        layout.addWidget(add_group, 1, 0)

        insert_group = QGroupBox("Insert At")
        insert_group.setStyleSheet("QGroupBox { color: white; }")
        insert_layout = QFormLayout()
        insert_layout.setContentsMargins(12, 8, 12, 12)
        insert_layout.setSpacing(6)
        insert_layout.addRow("Index:", self.insert_index_spin)
        insert_layout.addRow("Value:", self.insert_value_edit)
        self.insert_btn = QPushButton("Insert")
        self.insert_btn.clicked.connect(self._on_insert)
        insert_layout.addRow(self.insert_btn)
        insert_group.setLayout(insert_layout)
        layout.addWidget(insert_group, 2, 0)

        self.remove_first_btn = QPushButton("Remove First")
        self.remove_first_btn.clicked.connect(lambda: self._dispatch(self.remove_first))
        self.remove_last_btn = QPushButton("Remove Last")
        self.remove_last_btn.clicked.connect(lambda: self._dispatch(self.remove_last))
        layout.addWidget(
            self._single_button_group("Remove", self.remove_first_btn, self.remove_last_btn), 0, 1
        )

        delete_group = QGroupBox("Delete At")
        delete_group.setStyleSheet("QGroupBox { color: white; }")
        delete_layout = QFormLayout()
        delete_layout.setContentsMargins(12, 8, 12, 12)
        delete_layout.setSpacing(6)
        delete_layout.addRow("Index:", self.delete_index_spin)
        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(
            lambda: self._dispatch(self.remove, self.delete_index_spin.value())
        )
        delete_layout.addRow(self.delete_btn)
        delete_group.setLayout(delete_layout)
        layout.addWidget(delete_group, 1, 1)

        search_group = QGroupBox("Search")
        search_group.setStyleSheet("QGroupBox { color: white; }")
        search_layout = QFormLayout()
        search_layout.setContentsMargins(12, 8, 12, 12)
        search_layout.setSpacing(6)
        search_layout.addRow("Value:", self.search_value_edit)
        self.search_btn = QPushButton("Search")
        self.search_btn.clicked.connect(self._on_search)
        search_layout.addRow(self.search_btn)
        search_group.setLayout(search_layout)
        layout.addWidget(search_group, 2, 1)

        layout.setRowStretch(3, 1)
        return container

    # ---------- Operations ----------

    def create(self, values):
        self._require_idle()
        values = [self._coerce_value(v) for v in values]
        if not values:
            raise UserInputError("Please enter at least one value.")
        if len(values) > self.max_size:
            raise UserInputError(f"A linked list holds at most {self.max_size} nodes.")

        self.model.create_from_iterable(values)
        self.update_info("create")

        def _done():
            self.update_info(None)
            self.notify(f"Linked list built with {len(values)} nodes.", "success")

        self.view.animate_build(self.model.snapshot(), on_finished=_done)

    def add_first(self, value):
        return self.insert(0, value, op="addFirst", where="to the front")

    def add_last(self, value):
        self._require_idle()
        return self.insert(len(self.model), value, op="addLast", where="to the end")

    def insert(self, index, value, op="insert", where=None):
        self._require_idle()
        value = self._parse_value(value)
        if len(self.model) >= self.max_size:
            raise UserInputError(f"List is full (max {self.max_size} nodes)!")
        if not 0 <= index <= len(self.model):
            raise UserInputError(f"Index must be between 0 and {len(self.model)}.")

        before = self.model.snapshot()
        self.model.insert(index, value)
        after = self.model.snapshot()
        message = f"Added {value} {where}" if where else f"Inserted {value} at index {index}"

        frames = self._walk(before, index)
        frames.append(Frame(after, {index: "inserted"}, self._hold("inserted_ms", 600)))
        self.update_info(op, f"Adding {value}...")

        def _done():
            self.update_info(None, message)
            self.notify(message, "success")

        self.runner.run(f"linked list {op}", frames, on_finished=_done)
        return value

    def remove_first(self):
        return self.remove(0, op="removeFirst", where="from the front")

    def remove_last(self):
        self._require_idle()
        self._require_nodes()
        return self.remove(len(self.model) - 1, op="removeLast", where="from the end")

    def remove(self, index, op="remove", where=None):
        self._require_idle()
        self._require_nodes()
        if not 0 <= index < len(self.model):
            raise UserInputError(f"Index must be between 0 and {len(self.model) - 1}.")

        before = self.model.snapshot()
        removed = self.model.delete(index)
        value = removed["value"]
        message = f"Removed {value} {where}" if where else f"Removed {value} at index {index}"

        # the predecessor stays lit while its successor is unlinked
        frames = self._walk(before, max(0, index - 1))
        highlights = {index: "delete"}
        if index > 0:
            highlights[index - 1] = "visit"
        frames.append(Frame(before, highlights, self._hold("delete_ms", 600)))
        self.update_info(op, f"Removing {value}...")

        def _done():
            self.update_info(None, message)
            self.notify(message, "success")

        self.runner.run(
            f"linked list {op}", frames, on_finished=_done, final_snapshot=self.model.snapshot()
        )
        return value

    def search(self, value):
        self._require_idle()
        self._require_nodes()
        value = self._parse_value(value)
        snapshot = self.model.snapshot()
        index = self.model.index_of(value)

        frames = self._walk(snapshot, len(snapshot) if index < 0 else index)
        if index >= 0:
            frames.append(Frame(snapshot, {index: "found"}, self._hold("found_ms", 1000)))
        self.update_info("search", f"Searching for {value}...")

        def _done():
            self.update_info(None)
            if index < 0:
                self.notify(f"{value} not found.", "error")
            else:
                self.notify(f"Found {value}!", "success")

        self.runner.run("linked list search", frames, on_finished=_done, final_snapshot=snapshot)
        return index

    def clear(self):
        self._require_idle()
        self.model.clear()
        self.view.reset()
        self.update_info(None)
        self._update_panel_enabled_state()

    # ---------- Helpers ----------

    def _walk(self, snapshot, count):
        """One amber frame per node passed on the way to position ``count``."""
        hold = self._hold("walk_ms", 400)
        return [Frame(snapshot, {k: "visit"}, hold) for k in range(count)]

    def _hold(self, key, default):
        return int(self.settings.get(key, default))

    def _parse_value(self, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise UserInputError("Please enter a value.")
            value = self._coerce_value(value)
        return value

    def _require_nodes(self):
        if len(self.model) == 0:
            raise UserInputError("The list is empty.")

    # ---------- UI handlers ----------

    def _on_create(self):
        text, ok = QInputDialog.getText(
            self,
            "Create Linked List",
            "Enter values (comma-separated):",
        )
        if not ok:
            return
        self._dispatch(self.create, self._split_tokens(text))

    def _on_add(self, operation):
        if self._dispatch(operation, self.value_edit.text()) is not None:
            self.value_edit.clear()

    def _on_insert(self):
        index = self.insert_index_spin.value()
        if self._dispatch(self.insert, index, self.insert_value_edit.text()) is not None:
            self.insert_value_edit.clear()

    def _on_search(self):
        self._dispatch(self.search, self.search_value_edit.text())

    def _handle_delete_from_node(self, node_id):
        order = [node["id"] for node in self.model.snapshot()]
        if node_id in order:
            self._dispatch(self.remove, order.index(node_id))

    def _update_panel_enabled_state(self):
        length = len(self.model)
        locked = self.gate.is_held
        self.insert_index_spin.setRange(0, length)
        self.delete_index_spin.setRange(0, max(0, length - 1))

        for widget in (
            self.create_btn,
            self.clear_btn,
            self.value_edit,
            self.add_first_btn,
            self.add_last_btn,
            self.insert_index_spin,
            self.insert_value_edit,
            self.insert_btn,
        ):
            widget.setDisabled(locked)

        for widget in (
            self.remove_first_btn,
            self.remove_last_btn,
            self.delete_index_spin,
            self.delete_btn,
            self.search_value_edit,
            self.search_btn,
        ):
            widget.setDisabled(locked or length == 0)
