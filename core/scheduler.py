from typing import Callable

from PyQt5.QtCore import QTimer


class QtScheduler:
    """
    Timed suspension points on the Qt event loop.

    ``call_later`` is the only way playback and highlight sequences wait;
    anything with the same method can stand in for it (tests drive a manual
    scheduler so that every hold is a countable, synchronous step).
    """

    def __init__(self, global_ctrl=None):
        self.global_ctrl = global_ctrl

    def call_later(self, delay_ms: int, callback: Callable[[], None]):
        if self.global_ctrl is not None:
            delay_ms = self.global_ctrl.scale_duration(delay_ms)
        QTimer.singleShot(max(0, int(delay_ms)), callback)
