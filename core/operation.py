import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from PyQt5.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    snapshot: Any
    highlights: Dict[Any, str] = field(default_factory=dict)
    hold_ms: int = 0
    status: Optional[str] = None


class OperationRunner(QObject):
    """
    Plays a fixed list of frames (render, then hold) while holding the gate.

    Used for the short highlight sequences of push/peek/clear, tree searches
    and traversals. A started sequence always runs to its last frame.
    """

    statusChanged = pyqtSignal(str)

    def __init__(self, render: Callable, gate, scheduler, parent=None):
        super().__init__(parent)
        self._render = render
        self.gate = gate
        self.scheduler = scheduler

    def run(
        self,
        owner: str,
        frames: Sequence[Frame],
        on_finished: Optional[Callable[[], None]] = None,
        final_snapshot: Any = None,
    ):
        self.gate.acquire(owner)
        pending: List[Frame] = list(frames)
        if final_snapshot is None and pending:
            final_snapshot = pending[-1].snapshot
        logger.debug("%s: %d frames", owner, len(pending))

        def _advance():
            if not pending:
                self._render(final_snapshot, {})
                self.gate.release(owner)
                if on_finished:
                    on_finished()
                return
            frame = pending.pop(0)
            self._render(frame.snapshot, dict(frame.highlights))
            if frame.status:
                self.statusChanged.emit(frame.status)
            self.scheduler.call_later(frame.hold_ms, _advance)

        _advance()
