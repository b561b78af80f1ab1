import logging
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from core.errors import BusyRejection

logger = logging.getLogger(__name__)


class OperationGate(QObject):
    """
    Mutual-exclusion flag for one visualizer instance.

    Every operation that spans more than one rendered frame (view animations,
    sort playback, highlight sequences) holds the gate for its whole duration.
    Anything attempted meanwhile is rejected instead of interleaved.
    """

    lockChanged = pyqtSignal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._holder: Optional[str] = None

    @property
    def is_held(self) -> bool:
        return self._holder is not None

    @property
    def holder(self) -> Optional[str]:
        return self._holder

    def ensure_free(self):
        if self._holder is not None:
            raise BusyRejection(f"Busy: {self._holder} is still running.")

    def acquire(self, owner: str):
        self.ensure_free()
        self._holder = owner
        logger.debug("gate acquired by %s", owner)
        self.lockChanged.emit(True)

    def release(self, owner: str):
        if self._holder != owner:
            raise RuntimeError(
                f"gate released by {owner!r} but held by {self._holder!r}"
            )
        self._holder = None
        logger.debug("gate released by %s", owner)
        self.lockChanged.emit(False)
