from PyQt5.QtWidgets import QWidget

from main import MainWindow, configure_logging
from widgets.toast import ToastLabel


def test_toast_shows_then_hides(qtbot):
    host = QWidget()
    host.resize(600, 400)
    qtbot.addWidget(host)
    toast = ToastLabel(host)

    toast.notify("Stack is full!", "error", 50)
    assert toast.isVisibleTo(host)
    assert toast.text() == "Stack is full!"
    assert toast.severity == "error"
    qtbot.waitUntil(lambda: not toast.isVisibleTo(host), timeout=2000)


def test_window_switches_structures_and_shows_status(qtbot, global_ctrl):
    window = MainWindow(global_ctrl)
    qtbot.addWidget(window)
    assert window.ds_combo.count() == 5
    assert window._active_name == "Array"

    window.ds_combo.setCurrentText("Stack")
    stack = window._controllers["Stack"]
    assert window.graphics_view.scene() is stack.view.scene
    assert window.controls_stack.currentIndex() == stack.panel_index

    stack.update_info("push")
    assert window.complexity_label.text() == "Complexity: O(1)"
    assert window.status_label.text() == "Pushing element..."

    # inactive panels do not overwrite the status line
    window._controllers["Array"].update_info("delete")
    assert window.status_label.text() == "Pushing element..."


def test_toasts_reach_the_canvas(qtbot, global_ctrl):
    window = MainWindow(global_ctrl)
    qtbot.addWidget(window)
    window._controllers["Array"].notify("Sort complete!", "success")
    assert window.graphics_view.toast.text() == "Sort complete!"


def test_speed_slider_updates_global_speed(qtbot, global_ctrl):
    window = MainWindow(global_ctrl)
    qtbot.addWidget(window)
    window.speed_slider.setValue(150)
    assert global_ctrl.speed == 1.5
    assert window.speed_value_label.text() == "1.5×"


def test_configure_logging_accepts_names():
    configure_logging("debug")
    configure_logging("not-a-level")


def test_queue_and_linked_list_bind_their_scenes(qtbot, global_ctrl):
    window = MainWindow(global_ctrl)
    qtbot.addWidget(window)
    for name in ("Queue", "Linked List"):
        window.ds_combo.setCurrentText(name)
        controller = window._controllers[name]
        assert window.graphics_view.scene() is controller.view.scene
        assert window.controls_stack.currentIndex() == controller.panel_index
