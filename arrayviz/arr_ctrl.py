import logging
import random

from PyQt5.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QWidget,
)

from arrayviz.arr_model import ArrayModel
from arrayviz.arr_steps import SORT_ALGORITHMS, produce_steps
from arrayviz.arr_view import ArrayView
from core.base_ctrl import BaseStructureController
from core.errors import UserInputError
from core.global_ctrl import GlobalController
from core.playback import PlaybackController, PlaybackState

logger = logging.getLogger(__name__)


class ArrayController(BaseStructureController):
    """
    Array panel: structural edits animated by the view, and sorting
    visualized by recording steps and replaying them through a
    PlaybackController that shares this panel's gate.
    """

    INFO = {
        "create": ("O(n)", "Creating array..."),
        "insert": ("O(n)", "Inserting element..."),
        "update": ("O(1)", "Updating element..."),
        "delete": ("O(n)", "Deleting element..."),
        "clear": ("O(1)", "Clearing array..."),
    }
    INFO.update(
        {key: (algo.complexity, algo.label) for key, algo in SORT_ALGORITHMS.items()}
    )

    def __init__(self, global_ctrl: GlobalController, scheduler=None, rng=None):
        super().__init__(global_ctrl, scheduler)
        self.settings = global_ctrl.section("array")
        self.max_size = int(self.settings.get("max_size", 15))
        self._rng = rng or random.Random()
        self._algorithm = None

        self.model = ArrayModel()
        self.view = ArrayView(global_ctrl, self.gate)

        playback_cfg = global_ctrl.section("playback")
        self.playback = PlaybackController(
            self.model,
            self.view.render,
            self.gate,
            self.scheduler,
            cadence_ms=int(playback_cfg.get("cadence_ms", 400)),
            hold_ms=playback_cfg.get("hold_ms", {}),
            parent=self,
        )
        self.playback.stateChanged.connect(self._on_playback_state)
        self.playback.stepStarted.connect(self._on_step_started)
        self.playback.runCompleted.connect(self._on_run_completed)
        self.playback.playbackFailed.connect(self._on_playback_failed)

        self._build_inputs()
        self.panel = self._create_panel()

        self.view.deleteRequested.connect(self._handle_delete_from_view)
        self.view.editRequested.connect(self._handle_edit_from_view)
        self.view.clearAllRequested.connect(lambda: self._dispatch(self.clear))

        self._refresh_spins()

    # ---------- Panel UI ----------

    def _build_inputs(self):
        self.create_size_spin = QSpinBox()
        self.create_size_spin.setRange(1, self.max_size)
        self.create_size_spin.setValue(min(8, self.max_size))

        self.insert_index_spin = QSpinBox()
        self.insert_index_spin.setRange(0, 0)
        self.insert_value_edit = QLineEdit()
        self.insert_value_edit.setPlaceholderText("Value")

        self.update_index_spin = QSpinBox()
        self.update_index_spin.setRange(0, 0)
        self.update_value_edit = QLineEdit()
        self.update_value_edit.setPlaceholderText("New value")

        self.delete_index_spin = QSpinBox()
        self.delete_index_spin.setRange(0, 0)

        self.sort_combo = QComboBox()
        for key, algo in SORT_ALGORITHMS.items():
            self.sort_combo.addItem(algo.label, key)

        self.step_label = QLabel("Step 0 / 0")

    def _create_panel(self):
        container = QWidget()
        layout = QGridLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setHorizontalSpacing(12)
        layout.setVerticalSpacing(12)
        layout.setColumnStretch(0, 1)
        layout.setColumnStretch(1, 1)
        layout.setColumnStretch(2, 1)

        # Create
        random_btn = QPushButton("Random")
        random_btn.clicked.connect(self._on_create_random)
        list_btn = QPushButton("From List")
        list_btn.clicked.connect(self._on_create_from_list)
        create_group = QGroupBox("Create")
        create_group.setStyleSheet("QGroupBox { color: white; }")
        create_layout = QFormLayout()
        create_layout.setContentsMargins(12, 8, 12, 12)
        create_layout.setSpacing(6)
        create_layout.addRow("Size:", self.create_size_spin)
        create_layout.addRow(random_btn)
        create_layout.addRow(list_btn)
        create_group.setLayout(create_layout)
        layout.addWidget(create_group, 0, 0)

        # Insert / Append
        insert_btn = QPushButton("Insert")
        insert_btn.clicked.connect(self._on_insert)
        append_btn = QPushButton("Append")
        append_btn.clicked.connect(self._on_append)
        insert_group = QGroupBox("Insert")
        insert_group.setStyleSheet("QGroupBox { color: white; }")
        insert_layout = QFormLayout()
        insert_layout.setContentsMargins(12, 8, 12, 12)
        insert_layout.setSpacing(6)
        insert_layout.addRow("Index:", self.insert_index_spin)
        insert_layout.addRow("Value:", self.insert_value_edit)
        buttons = QHBoxLayout()
        buttons.addWidget(insert_btn)
        buttons.addWidget(append_btn)
        insert_layout.addRow(buttons)
        insert_group.setLayout(insert_layout)
        layout.addWidget(insert_group, 1, 0)

        # Update
        update_btn = QPushButton("Update")
        update_btn.clicked.connect(self._on_update_value)
        update_group = QGroupBox("Update")
        update_group.setStyleSheet("QGroupBox { color: white; }")
        update_layout = QFormLayout()
        update_layout.setContentsMargins(12, 8, 12, 12)
        update_layout.setSpacing(6)
        update_layout.addRow("Index:", self.update_index_spin)
        update_layout.addRow("Value:", self.update_value_edit)
        update_layout.addRow(update_btn)
        update_group.setLayout(update_layout)
        layout.addWidget(update_group, 0, 1)

        # Delete
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(self._on_delete)
        delete_group = QGroupBox("Delete")
        delete_group.setStyleSheet("QGroupBox { color: white; }")
        delete_layout = QFormLayout()
        delete_layout.setContentsMargins(12, 8, 12, 12)
        delete_layout.setSpacing(6)
        delete_layout.addRow("Index:", self.delete_index_spin)
        delete_layout.addRow(delete_btn)
        delete_group.setLayout(delete_layout)
        layout.addWidget(delete_group, 1, 1)

        # Sort playback
        prepare_btn = QPushButton("Prepare")
        prepare_btn.clicked.connect(self._on_prepare)
        play_btn = QPushButton("Play")
        play_btn.clicked.connect(lambda: self._dispatch(self.toggle_play))
        step_btn = QPushButton("Step")
        step_btn.clicked.connect(lambda: self._dispatch(self.step_once))
        sort_group = QGroupBox("Sort")
        sort_group.setStyleSheet("QGroupBox { color: white; }")
        sort_layout = QFormLayout()
        sort_layout.setContentsMargins(12, 8, 12, 12)
        sort_layout.setSpacing(6)
        sort_layout.addRow("Algorithm:", self.sort_combo)
        sort_layout.addRow(prepare_btn)
        controls = QHBoxLayout()
        controls.addWidget(play_btn)
        controls.addWidget(step_btn)
        sort_layout.addRow(controls)
        sort_layout.addRow(self.step_label)
        sort_group.setLayout(sort_layout)
        layout.addWidget(sort_group, 0, 2, 2, 1)

        layout.setRowStretch(2, 1)

        self.random_btn = random_btn
        self.list_btn = list_btn
        self.insert_btn = insert_btn
        self.append_btn = append_btn
        self.update_btn = update_btn
        self.delete_btn = delete_btn
        self.prepare_btn = prepare_btn
        self.play_btn = play_btn
        self.step_btn = step_btn

        return container

    # ---------- Controller lifecycle ----------

    def on_deactivate(self):
        if self.playback.state is PlaybackState.PLAYING:
            self.playback.pause()

    # ---------- Operations ----------

    def create(self, size: int):
        self._require_idle()
        if size < 1 or size > self.max_size:
            raise UserInputError(f"Please enter a size between 1 and {self.max_size}.")
        low = int(self.settings.get("random_min", 10))
        high = int(self.settings.get("random_max", 99))
        values = [self._rng.randint(low, high) for _ in range(size)]
        self._rebuild(values)
        self.notify(f"Array of size {size} created.", "success")

    def create_from_values(self, values):
        self._require_idle()
        values = list(values)
        if not values:
            raise UserInputError("Please enter at least one value.")
        if len(values) > self.max_size:
            raise UserInputError(f"At most {self.max_size} values are allowed.")
        self._rebuild(values)
        self.notify(f"Array of size {len(values)} created.", "success")

    def append(self, value):
        self.insert(self.model.length, value)

    def insert(self, index: int, value):
        self._require_idle()
        if self.model.length >= self.max_size:
            raise UserInputError(f"Array is full (max {self.max_size}).")
        if index < 0 or index > self.model.length:
            raise UserInputError(f"Index must be between 0 and {self.model.length}.")
        inserted_id = self.model.insert(index, value)
        self.playback.invalidate()
        self.update_info("insert", f"Inserting {value} at index {index}")
        self.view.animate_insert(
            self.model.snapshot(), inserted_id, index, on_finished=self._operation_finished
        )
        self._refresh_spins()

    def update(self, index: int, value):
        self._require_idle()
        self._check_index(index)
        self.model.update_value(index, value)
        self.playback.invalidate()
        self.update_info("update", f"Setting index {index} to {value}")
        self.view.animate_update_value(
            self.model.snapshot(), index, on_finished=self._operation_finished
        )
        self._refresh_spins()

    def delete(self, index: int):
        self._require_idle()
        self._check_index(index)
        removed = self.model.delete(index)
        self.playback.invalidate()
        self.update_info("delete", f"Deleting element at index {index}")
        self.view.animate_delete(
            self.model.snapshot(), removed["id"], index, on_finished=self._operation_finished
        )
        self._refresh_spins()

    def clear(self):
        self._require_idle()
        self.model.clear()
        self.playback.invalidate()
        self.view.reset()
        self.update_info(None)
        self._refresh_spins()

    def prepare_run(self, selector: str):
        self._require_idle()
        if selector not in SORT_ALGORITHMS:
            raise UserInputError(f"Unknown sort algorithm: {selector}")
        if self.model.length <= 1:
            raise UserInputError("Add at least two elements before sorting.")

        steps = produce_steps(selector, self.model.values())
        self._algorithm = selector
        self.playback.prepare(steps)
        self.update_info(selector)
        self._update_step_label()
        self._update_panel_enabled_state()
        self.notify("Ready to visualize. Press Play or Step.", "info")

    def play(self) -> bool:
        return self.playback.play()

    def pause(self) -> bool:
        return self.playback.pause()

    def toggle_play(self) -> bool:
        return self.playback.toggle()

    def step_once(self) -> bool:
        return self.playback.step_once()

    # ---------- Playback signals ----------

    def _on_playback_state(self, state):
        self.play_btn.setText("Pause" if state == PlaybackState.PLAYING.value else "Play")
        self._update_panel_enabled_state()

    def _on_step_started(self, cursor, total, narration):
        self.update_info(self._algorithm, narration)
        self._update_step_label()

    def _on_run_completed(self):
        self._update_step_label()
        self.update_info(None, "Sort complete!")
        self.notify("Sort complete!", "success")

    def _on_playback_failed(self, message):
        self.update_info(None)
        self.notify(message, "error")

    # ---------- UI handlers ----------

    def _on_create_random(self):
        self._dispatch(self.create, self.create_size_spin.value())

    def _on_create_from_list(self):
        text, ok = QInputDialog.getText(
            self,
            "Create Array",
            "Enter numbers (comma-separated):",
        )
        if not ok:
            return
        self._dispatch(self._create_from_text, text)

    def _create_from_text(self, text):
        values = [self._coerce_numeric(token) for token in self._split_tokens(text)]
        self.create_from_values(values)

    def _on_append(self):
        self._dispatch(self._insert_from_fields, True)

    def _on_insert(self):
        self._dispatch(self._insert_from_fields, False)

    def _insert_from_fields(self, at_end):
        value = self._coerce_numeric(self.insert_value_edit.text())
        index = self.model.length if at_end else self.insert_index_spin.value()
        self.insert(index, value)
        self.insert_value_edit.clear()

    def _on_update_value(self):
        self._dispatch(self._update_from_fields)

    def _update_from_fields(self):
        value = self._coerce_numeric(self.update_value_edit.text())
        self.update(self.update_index_spin.value(), value)

    def _on_delete(self):
        self._dispatch(self.delete, self.delete_index_spin.value())

    def _on_prepare(self):
        self._dispatch(self.prepare_run, self.sort_combo.currentData())

    def _handle_delete_from_view(self, index):
        self._dispatch(self.delete, index)

    def _handle_edit_from_view(self, index):
        if index < 0 or index >= self.model.length or self.gate.is_held:
            return
        current_value = str(self.model[index])
        text, ok = QInputDialog.getText(
            self,
            "Edit Value",
            f"Index {index} value:",
            text=current_value,
        )
        if not ok:
            return
        self._dispatch(lambda: self.update(index, self._coerce_numeric(text or current_value)))

    # ---------- State helpers ----------

    def _rebuild(self, values):
        self.model.create_from_iterable(values)
        self.playback.invalidate()
        self.update_info("create")
        self.view.animate_build(self.model.snapshot(), on_finished=self._operation_finished)
        self._refresh_spins()

    def _check_index(self, index):
        if index < 0 or index >= self.model.length:
            if self.model.length == 0:
                raise UserInputError("The array is empty.")
            raise UserInputError(f"Index must be between 0 and {self.model.length - 1}.")

    def _operation_finished(self):
        self.update_info(None)
        self._refresh_spins()

    def _update_step_label(self):
        queue = self.playback.queue
        self.step_label.setText(f"Step {queue.cursor} / {len(queue)}")

    def _refresh_spins(self):
        length = self.model.length
        self.insert_index_spin.setMaximum(length)
        if self.insert_index_spin.value() > length:
            self.insert_index_spin.setValue(length)

        max_index = max(0, length - 1)
        for spin in (self.update_index_spin, self.delete_index_spin):
            spin.setMaximum(max_index)
            if spin.value() > max_index:
                spin.setValue(max_index)

        self._update_step_label()
        self._update_panel_enabled_state()

    def _update_panel_enabled_state(self):
        has_items = self.model.length > 0
        locked = self.gate.is_held
        playing = self.playback.state is PlaybackState.PLAYING
        has_steps = not self.playback.queue.is_exhausted()
        full = self.model.length >= self.max_size

        for widget in (self.random_btn, self.list_btn, self.create_size_spin):
            widget.setDisabled(locked)

        for widget in (self.insert_btn, self.append_btn, self.insert_index_spin, self.insert_value_edit):
            widget.setDisabled(locked or full)

        for widget in (
            self.update_btn,
            self.update_index_spin,
            self.update_value_edit,
            self.delete_btn,
            self.delete_index_spin,
        ):
            widget.setDisabled(locked or not has_items)

        self.sort_combo.setDisabled(locked)
        self.prepare_btn.setDisabled(locked or self.model.length <= 1)
        self.play_btn.setEnabled(playing or (not locked and has_steps))
        self.step_btn.setEnabled(not locked and has_steps)
