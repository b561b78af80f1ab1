import logging

from PyQt5.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QInputDialog,
    QLineEdit,
    QPushButton,
    QWidget,
)

from bst.bst_model import BSTModel
from bst.bst_steps import (
    TRAVERSALS,
    balance_steps,
    build_frames,
    diameter_steps,
    path_frames,
    traversal_steps,
)
from bst.bst_view import BSTView
from core.base_ctrl import BaseStructureController
from core.errors import UserInputError
from core.global_ctrl import GlobalController
from core.operation import Frame, OperationRunner

logger = logging.getLogger(__name__)


class BSTController(BaseStructureController):
    """
    BST panel. Every operation mutates the model up front and then plays a
    short list of highlight frames over the tree through the runner.
    """

    INFO = {
        "create": ("O(n log n)", "Building tree..."),
        "insert": ("O(h)", "Inserting..."),
        "delete": ("O(h)", "Deleting..."),
        "search": ("O(h)", "Searching..."),
        "balanced": ("O(n)", "Checking if tree is balanced..."),
        "diameter": ("O(n)", "Calculating tree diameter..."),
        "clear": ("O(1)", "Clearing tree..."),
    }
    INFO.update({key: (t.complexity, f"{t.label} traversal") for key, t in TRAVERSALS.items()})

    def __init__(self, global_ctrl: GlobalController, scheduler=None):
        super().__init__(global_ctrl, scheduler)
        self.settings = global_ctrl.section("bst")

        self.model = BSTModel()
        self.view = BSTView(global_ctrl, self.gate)
        self.runner = OperationRunner(self.view.render, self.gate, self.scheduler, parent=self)
        self.runner.statusChanged.connect(lambda text: self.update_info(None, text))

        self._build_inputs()
        self.panel = self._create_panel()

        self.view.deleteRequested.connect(self._handle_delete_from_view)
        self.view.findRequested.connect(self._handle_find_from_view)
        self.view.clearAllRequested.connect(lambda: self._dispatch(self.clear))

        self._update_panel_enabled_state()

    # ---------- Panel UI ----------

    def _build_inputs(self):
        self.insert_value_edit = QLineEdit()
        self.insert_value_edit.setPlaceholderText("Value")
        self.insert_value_edit.returnPressed.connect(self._on_insert)

        self.delete_value_edit = QLineEdit()
        self.delete_value_edit.setPlaceholderText("Value")
        self.delete_value_edit.returnPressed.connect(self._on_delete)

        self.find_value_edit = QLineEdit()
        self.find_value_edit.setPlaceholderText("Value")
        self.find_value_edit.returnPressed.connect(self._on_find)

        self.traversal_combo = QComboBox()
        for key, traversal in TRAVERSALS.items():
            self.traversal_combo.addItem(traversal.label, key)

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

        self.insert_btn = QPushButton("Insert")
        self.insert_btn.clicked.connect(self._on_insert)
        layout.addWidget(self._value_group("Insert", self.insert_value_edit, self.insert_btn), 1, 0)

        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(self._on_delete)
        layout.addWidget(self._value_group("Delete", self.delete_value_edit, self.delete_btn), 2, 0)

        self.find_btn = QPushButton("Search")
        self.find_btn.clicked.connect(self._on_find)
        layout.addWidget(self._value_group("Search", self.find_value_edit, self.find_btn), 0, 1)

        traverse_group = QGroupBox("Traverse")
        traverse_group.setStyleSheet("QGroupBox { color: white; }")
        traverse_layout = QFormLayout()
        traverse_layout.setContentsMargins(12, 8, 12, 12)
        traverse_layout.setSpacing(6)
        traverse_layout.addRow("Order:", self.traversal_combo)
        self.traverse_btn = QPushButton("Traverse")
        self.traverse_btn.clicked.connect(
            lambda: self._dispatch(self.traverse, self.traversal_combo.currentData())
        )
        traverse_layout.addRow(self.traverse_btn)
        traverse_group.setLayout(traverse_layout)
        layout.addWidget(traverse_group, 1, 1)

        self.balanced_btn = QPushButton("Is Balanced?")
        self.balanced_btn.clicked.connect(lambda: self._dispatch(self.check_balanced))
        self.diameter_btn = QPushButton("Diameter")
        self.diameter_btn.clicked.connect(lambda: self._dispatch(self.find_diameter))
        layout.addWidget(
            self._single_button_group("Analyze", self.balanced_btn, self.diameter_btn), 2, 1
        )

        layout.setRowStretch(3, 1)
        return container

    @staticmethod
    def _value_group(title, edit, button):
        group = QGroupBox(title)
        group.setStyleSheet("QGroupBox { color: white; }")
        form = QFormLayout()
        form.setContentsMargins(12, 8, 12, 12)
        form.setSpacing(6)
        form.addRow("Value:", edit)
        form.addRow(button)
        group.setLayout(form)
        return group

    # ---------- Operations ----------

    def create(self, values):
        self._require_idle()
        values = [self._coerce_numeric(v) for v in values]
        if not values:
            raise UserInputError("Please enter at least one value.")
        self.model.create_from_iterable(values)
        self.update_info("create")

        def _done():
            self.update_info(None)
            self.notify(f"Tree built with {self.model.length} nodes.", "success")

        self.view.animate_build(self.model.snapshot(), on_finished=_done)

    def insert(self, value):
        self._require_idle()
        value = self._coerce_numeric(value)
        before = self.model.snapshot()
        new_id, path = self.model.insert(value)
        frames = path_frames(before, path, int(self.settings.get("insert_path_ms", 400)))
        self.update_info("insert", f"Inserting {value}...")

        if new_id is None:
            def _duplicate():
                self.update_info(None)
                self.notify(f"Value {value} already exists in the tree.", "error")

            self.runner.run("bst insert", frames, on_finished=_duplicate, final_snapshot=before)
            return None

        after = self.model.snapshot()
        frames.append(
            Frame(after, {new_id: "inserted"}, int(self.settings.get("inserted_ms", 600)))
        )
        self.runner.run("bst insert", frames, on_finished=self._operation_finished)
        return new_id

    def delete(self, value):
        self._require_idle()
        self._require_nodes()
        value = self._coerce_numeric(value)
        before = self.model.snapshot()
        removed_id, path = self.model.delete(value)
        frames = path_frames(before, path, int(self.settings.get("insert_path_ms", 400)))
        self.update_info("delete", f"Deleting {value}...")

        if removed_id is None:
            def _missing():
                self.update_info(None)
                self.notify(f"{value} not found.", "error")

            self.runner.run("bst delete", frames, on_finished=_missing, final_snapshot=before)
            return None

        frames.append(
            Frame(before, {removed_id: "delete"}, int(self.settings.get("delete_ms", 600)))
        )

        def _done():
            self._operation_finished()
            self.notify(f"Deleted {value}.", "success")

        self.runner.run(
            "bst delete", frames, on_finished=_done, final_snapshot=self.model.snapshot()
        )
        return removed_id

    def search(self, value):
        self._require_idle()
        self._require_nodes()
        value = self._coerce_numeric(value)
        snapshot = self.model.snapshot()
        found_id, path = self.model.find(value)
        frames = path_frames(snapshot, path, int(self.settings.get("search_path_ms", 500)))
        if found_id is not None:
            frames.append(
                Frame(snapshot, {found_id: "found"}, int(self.settings.get("found_ms", 600)))
            )
        self.update_info("search", f"Searching for {value}...")

        def _done():
            self.update_info(None)
            if found_id is None:
                self.notify(f"{value} not found.", "error")
            else:
                self.notify(f"Found {value}!", "success")

        self.runner.run("bst search", frames, on_finished=_done)
        return found_id

    def traverse(self, order):
        self._require_idle()
        traversal = TRAVERSALS.get(order)
        if traversal is None:
            raise UserInputError(f"Unknown traversal: {order}")
        self._require_nodes()

        snapshot = self.model.snapshot()
        steps = traversal_steps(snapshot, order)
        holds = {
            "visit": int(self.settings.get("visit_ms", 400)),
            "visited": int(self.settings.get("visited_ms", 200)),
        }

        def _status(step, done):
            return f"{traversal.label} traversal: " + " -> ".join(str(v) for v in done)

        frames = build_frames(snapshot, steps, holds, _status)
        last = frames[-1]
        frames.append(
            Frame(snapshot, last.highlights, int(self.settings.get("traversal_end_ms", 1000)))
        )
        self.update_info(order, f"{traversal.label} traversal: ...")
        visited = [step.value for step in steps if step.token == "visited"]
        self.runner.run("bst traversal", frames, on_finished=self._operation_finished)
        return visited

    def check_balanced(self):
        self._require_idle()
        self._require_nodes()
        snapshot = self.model.snapshot()
        steps, balanced = balance_steps(snapshot)
        hold = int(self.settings.get("check_ms", 400))
        frames = build_frames(snapshot, steps, {"visit": hold, "visited": hold, "unbalanced": hold})
        self.update_info("balanced")

        def _done():
            self.update_info(None)
            self.notify(
                f"Is the tree balanced? {'Yes' if balanced else 'No'}.",
                "success" if balanced else "error",
            )

        self.runner.run("bst balance check", frames, on_finished=_done)
        return balanced

    def find_diameter(self):
        self._require_idle()
        self._require_nodes()
        snapshot = self.model.snapshot()
        steps, diameter = diameter_steps(snapshot)
        frames = build_frames(snapshot, steps, {"visit": int(self.settings.get("check_ms", 400))})
        self.update_info("diameter")

        def _done():
            self.update_info(None)
            self.notify(f"The diameter of the tree is {diameter}.", "info")

        self.runner.run("bst diameter", frames, on_finished=_done)
        return diameter

    def clear(self):
        self._require_idle()
        self.model.clear()
        self.view.reset()
        self.update_info(None)
        self._update_panel_enabled_state()

    # ---------- UI handlers ----------

    def _on_create(self):
        text, ok = QInputDialog.getText(
            self,
            "Create BST",
            "Enter values (comma-separated):",
        )
        if not ok:
            return
        self._dispatch(self.create, self._split_tokens(text))

    def _on_insert(self):
        if self._dispatch(self.insert, self.insert_value_edit.text()) is not None:
            self.insert_value_edit.clear()

    def _on_delete(self):
        self._dispatch(self.delete, self.delete_value_edit.text())

    def _on_find(self):
        self._dispatch(self.search, self.find_value_edit.text())

    def _handle_delete_from_view(self, node_id):
        value = self.model.value_of(node_id)
        if value is None:
            return
        self.delete_value_edit.setText(str(value))
        self._on_delete()

    def _handle_find_from_view(self, node_id):
        value = self.model.value_of(node_id)
        if value is None:
            return
        self.find_value_edit.setText(str(value))
        self._on_find()

    # ---------- State helpers ----------

    def _require_nodes(self):
        if self.model.length == 0:
            raise UserInputError("The tree is empty.")

    def _operation_finished(self):
        self.update_info(None)
        self._update_panel_enabled_state()

    def _update_panel_enabled_state(self):
        has_nodes = self.model.length > 0
        locked = self.gate.is_held
        for widget in (self.create_btn, self.clear_btn, self.insert_btn, self.insert_value_edit):
            widget.setDisabled(locked)

        for widget in (
            self.delete_btn,
            self.delete_value_edit,
            self.find_btn,
            self.find_value_edit,
            self.traversal_combo,
            self.traverse_btn,
            self.balanced_btn,
            self.diameter_btn,
        ):
            widget.setDisabled(locked or not has_nodes)
