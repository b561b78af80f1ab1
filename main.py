import logging
import sys
from pathlib import Path

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QApplication,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QSlider,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from arrayviz.arr_ctrl import ArrayController
from bst.bst_ctrl import BSTController
from core.config import load_settings
from core.global_ctrl import GlobalController
from linklist.sl_ctrl import LinkedListController
from queueviz.q_ctrl import QueueController
from stack.st_ctrl import StackController
from widgets.graphics_view import CustomGraphicsView

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
STYLE_SHEET = Path(__file__).parent / "resources" / "styles.qss"


def configure_logging(level="INFO"):
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


class MainWindow(QMainWindow):
    """
    Structure picker, shared canvas and speed slider on top; the active
    structure's panel below; complexity and status in the status bar.
    """

    STRUCTURES = (
        ("Array", ArrayController),
        ("Stack", StackController),
        ("Queue", QueueController),
        ("Linked List", LinkedListController),
        ("Binary Search Tree", BSTController),
    )

    def __init__(self, global_ctrl=None):
        super().__init__()
        self.setWindowTitle("Data Structure Visualizer")
        self.resize(1280, 760)

        self.global_ctrl = global_ctrl or GlobalController()
        self._active_name = None
        self._controllers = {}

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)
        layout.addLayout(self._picker_row())
        self.graphics_view = CustomGraphicsView()
        layout.addWidget(self.graphics_view, 1)
        layout.addLayout(self._speed_row())
        self.controls_stack = QStackedWidget()
        layout.addWidget(self.controls_stack)
        self.setCentralWidget(central)
        self._build_status_bar()

        for name, controller_cls in self.STRUCTURES:
            self._add_controller(name, controller_cls(self.global_ctrl))

        if STYLE_SHEET.exists():
            self.setStyleSheet(STYLE_SHEET.read_text(encoding="utf-8"))

        self.ds_combo.currentTextChanged.connect(self._activate_controller)
        self._activate_controller(self.ds_combo.currentText())

    # ---------- Layout pieces ----------

    def _picker_row(self):
        row = QHBoxLayout()
        row.setSpacing(6)
        label = QLabel("Data Structure:")
        label.setObjectName("structureSelectLabel")
        self.ds_combo = QComboBox()
        self.ds_combo.setObjectName("structureSelectCombo")
        row.addWidget(label)
        row.addWidget(self.ds_combo, 1)
        return row

    def _speed_row(self):
        speed = self.global_ctrl.speed
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(
            int(GlobalController.MIN_SPEED * 100), int(GlobalController.MAX_SPEED * 100)
        )
        self.speed_slider.setValue(int(speed * 100))
        self.speed_slider.valueChanged.connect(self._on_speed_changed)
        self.speed_value_label = QLabel(f"{speed:.1f}×")

        row = QHBoxLayout()
        row.addWidget(QLabel("Animation Speed"))
        row.addWidget(self.speed_slider, 1)
        row.addWidget(self.speed_value_label)
        return row

    def _build_status_bar(self):
        self.status_label = QLabel("Ready")
        self.status_label.setObjectName("statusLabel")
        self.complexity_label = QLabel("Complexity: -")
        self.complexity_label.setObjectName("complexityLabel")
        self.statusBar().addWidget(self.status_label, 1)
        self.statusBar().addPermanentWidget(self.complexity_label)

    def _add_controller(self, name, controller):
        controller.panel_index = self.controls_stack.addWidget(controller.build_panel())
        controller.messageRequested.connect(self.graphics_view.show_message)
        controller.statusChanged.connect(self._on_status_changed)
        self._controllers[name] = controller
        self.ds_combo.addItem(name)

    # ---------- Slots ----------

    def _on_speed_changed(self, value):
        speed = value / 100.0
        self.speed_value_label.setText(f"{speed:.1f}×")
        self.global_ctrl.set_speed(speed)

    def _on_status_changed(self, complexity, status):
        # background panels keep running but do not own the status bar
        if self.sender() is not self._controllers.get(self._active_name):
            return
        self.complexity_label.setText(f"Complexity: {complexity}")
        self.status_label.setText(status)

    def _activate_controller(self, name):
        controller = self._controllers.get(name)
        if controller is None or name == self._active_name:
            return
        if self._active_name:
            self._controllers[self._active_name].on_deactivate()

        self._active_name = name
        controller.on_activate(self.graphics_view)
        self.controls_stack.setCurrentIndex(controller.panel_index)
        controller.update_info(None)
        logger.debug("activated %s", name)


def main():
    settings = load_settings()
    configure_logging(settings.get("log_level", "INFO"))
    app = QApplication(sys.argv)
    window = MainWindow(GlobalController(settings))
    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
