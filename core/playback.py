import logging
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from core.anim_queue import AnimationQueue
from core.errors import BusyRejection, ExhaustedError
from core.steps import (
    Step,
    active_highlights,
    apply_step,
    is_mutating,
    settled_highlights,
)

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETE = "complete"


class PlaybackController(QObject):
    """
    Replays a recorded step list against the live data.

    State machine::

        IDLE/COMPLETE --prepare--> IDLE (or COMPLETE for an empty run)
        IDLE/PAUSED   --play-----> PLAYING --pause--> PAUSED
        IDLE/PAUSED   --step_once> PAUSED (COMPLETE after the last step)
        PLAYING       --queue exhausted--> COMPLETE

    While a step is in flight (single step or autoplay) the gate is held, so
    no other operation of the same visualizer can start. ``pause`` only stops
    the loop from starting the next step; a begun step always completes.

    ``data`` is the live sequence: item access on values plus ``snapshot()``
    for the renderer. ``render(snapshot, highlights)`` draws one frame.
    """

    stateChanged = pyqtSignal(str)
    stepStarted = pyqtSignal(int, int, str)  # cursor after advance, total, narration
    runCompleted = pyqtSignal()
    playbackFailed = pyqtSignal(str)

    OWNER = "sort playback"

    def __init__(
        self,
        data,
        render: Callable,
        gate,
        scheduler,
        cadence_ms: int = 400,
        hold_ms: Optional[Dict[str, int]] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.data = data
        self._render = render
        self.gate = gate
        self.scheduler = scheduler
        self.cadence_ms = cadence_ms
        self.hold_ms = dict(hold_ms or {})
        self.queue = AnimationQueue()
        self._state = PlaybackState.IDLE

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self.gate.holder == self.OWNER

    # ---------- Control surface ----------

    def prepare(self, steps: Iterable[Step]):
        """Installs a new run; any previous queue and cursor are discarded."""
        self.gate.ensure_free()
        self.queue.replace(steps)
        if self.queue.is_exhausted():
            self._set_state(PlaybackState.COMPLETE)
        else:
            self._set_state(PlaybackState.IDLE)
        logger.info("prepared run with %d steps", len(self.queue))
        self._draw()

    def invalidate(self):
        """Drops the queue after the live data changed outside playback."""
        if self.is_busy:
            raise BusyRejection("Playback is running.")
        if len(self.queue):
            logger.debug("discarding %d recorded steps", len(self.queue))
        self.queue.replace(())
        self._set_state(PlaybackState.IDLE)

    def play(self) -> bool:
        self._ensure_can_start()
        if self.queue.is_exhausted():
            return False
        self.gate.acquire(self.OWNER)
        self._set_state(PlaybackState.PLAYING)
        self._next_step()
        return True

    def pause(self) -> bool:
        if self._state is not PlaybackState.PLAYING:
            return False
        self._set_state(PlaybackState.PAUSED)
        return True

    def toggle(self) -> bool:
        if self._state is PlaybackState.PLAYING:
            return self.pause()
        return self.play()

    def step_once(self) -> bool:
        self._ensure_can_start()
        if self._state is PlaybackState.COMPLETE or self.queue.is_exhausted():
            return False
        self.gate.acquire(self.OWNER)
        self._next_step()
        return True

    # ---------- Step application ----------

    def _ensure_can_start(self):
        if self._state is PlaybackState.PLAYING:
            raise BusyRejection("Playback is running.")
        self.gate.ensure_free()

    def _next_step(self):
        try:
            step = self.queue.advance()
        except ExhaustedError:
            logger.exception("playback advanced past the end of its queue")
            self._set_state(PlaybackState.IDLE)
            self.gate.release(self.OWNER)
            self.playbackFailed.emit("Playback stopped unexpectedly.")
            return

        self.stepStarted.emit(self.queue.cursor, len(self.queue), step.narration)
        self._draw(active_highlights(step))
        if is_mutating(step):
            self.scheduler.call_later(
                self.hold_ms.get(step.kind, 0), lambda: self._commit(step)
            )
        else:
            self.scheduler.call_later(self.cadence_ms, self._settle)

    def _commit(self, step: Step):
        apply_step(self.data, step)
        self._draw(settled_highlights(step))
        self.scheduler.call_later(self.cadence_ms, self._settle)

    def _settle(self):
        self._draw()
        if self.queue.is_exhausted():
            self._set_state(PlaybackState.COMPLETE)
            self.gate.release(self.OWNER)
            self.runCompleted.emit()
            return

        if self._state is PlaybackState.PLAYING:
            self._next_step()
            return

        # single step finished, or pause() arrived while the step was running
        self._set_state(PlaybackState.PAUSED)
        self.gate.release(self.OWNER)

    # ---------- Helpers ----------

    def _draw(self, highlights=None):
        self._render(self.data.snapshot(), dict(highlights or {}))

    def _set_state(self, state: PlaybackState):
        if state is self._state:
            return
        logger.debug("playback %s -> %s", self._state.value, state.value)
        self._state = state
        self.stateChanged.emit(state.value)
