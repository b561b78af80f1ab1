import copy
import os
from collections import deque

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.config import DEFAULT_SETTINGS, _merge  # noqa: E402
from core.global_ctrl import GlobalController  # noqa: E402


class ManualScheduler:
    """Queues callbacks instead of waiting; tests decide when each hold ends."""

    def __init__(self):
        self.pending = deque()
        self.delays = []

    def call_later(self, delay_ms, callback):
        self.delays.append(delay_ms)
        self.pending.append(callback)

    def run_next(self):
        callback = self.pending.popleft()
        callback()

    def run_all(self, limit=10000):
        ran = 0
        while self.pending:
            self.run_next()
            ran += 1
            if ran > limit:
                raise AssertionError("scheduler did not drain")
        return ran

    def run_until(self, predicate, limit=10000):
        ran = 0
        while self.pending and not predicate():
            self.run_next()
            ran += 1
            if ran > limit:
                raise AssertionError("condition never reached")
        return ran


class RenderRecorder:
    def __init__(self):
        self.frames = []

    def __call__(self, snapshot, highlights):
        self.frames.append((snapshot, dict(highlights)))

    @property
    def last(self):
        return self.frames[-1]


@pytest.fixture(autouse=True)
def _qt_app(qapp):
    return qapp


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def recorder():
    return RenderRecorder()


@pytest.fixture
def make_global():
    def _make(**overrides):
        settings = _merge(copy.deepcopy(DEFAULT_SETTINGS), {"speed": 3.0})
        return GlobalController(_merge(settings, overrides))

    return _make


@pytest.fixture
def global_ctrl(make_global):
    return make_global()


@pytest.fixture
def toasts():
    """Returns a function that records a controller's toasts as (text, severity)."""

    def _listen(controller):
        sink = []
        controller.messageRequested.connect(
            lambda text, severity, ms: sink.append((text, severity))
        )
        return sink

    return _listen
