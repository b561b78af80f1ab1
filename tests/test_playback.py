import pytest

from arrayviz.arr_model import ArrayModel
from arrayviz.arr_steps import bubble_sort_steps, insertion_sort_steps
from core.errors import BusyRejection, ExhaustedError
from core.gate import OperationGate
from core.playback import PlaybackController, PlaybackState
from core.steps import apply_step

HOLDS = {"compare": 0, "swap": 250, "shift": 250, "insert": 250}


@pytest.fixture
def gate():
    return OperationGate()


@pytest.fixture
def make_playback(gate, scheduler, recorder):
    def _make(values):
        model = ArrayModel()
        model.create_from_iterable(values)
        playback = PlaybackController(model, recorder, gate, scheduler, 400, HOLDS)
        return model, playback

    return _make


def values_of(snapshot):
    return [cell["value"] for cell in snapshot]


def test_full_run_sorts_live_data(make_playback, scheduler, gate):
    model, playback = make_playback([5, 3, 4, 1])
    completed = []
    playback.runCompleted.connect(lambda: completed.append(True))

    playback.prepare(bubble_sort_steps(model.values()))
    assert playback.state is PlaybackState.IDLE
    assert playback.play()
    assert playback.state is PlaybackState.PLAYING
    assert gate.holder == PlaybackController.OWNER

    scheduler.run_all()

    assert model.values() == [1, 3, 4, 5]
    assert playback.state is PlaybackState.COMPLETE
    assert not gate.is_held
    assert completed == [True]


def test_gate_rejects_other_operations_while_playing(make_playback, gate):
    model, playback = make_playback([2, 1])
    playback.prepare(bubble_sort_steps(model.values()))
    playback.play()

    with pytest.raises(BusyRejection):
        gate.acquire("insert")
    with pytest.raises(BusyRejection):
        playback.play()
    with pytest.raises(BusyRejection):
        playback.step_once()
    with pytest.raises(BusyRejection):
        playback.prepare([])
    with pytest.raises(BusyRejection):
        playback.invalidate()


def test_pause_lets_current_step_finish(make_playback, scheduler, gate):
    values = [5, 3, 4, 1]
    model, playback = make_playback(values)
    steps = bubble_sort_steps(values)
    playback.prepare(steps)
    playback.play()

    # first step is a compare: its cadence callback is pending
    assert playback.pause()
    assert playback.state is PlaybackState.PAUSED
    assert gate.is_held

    scheduler.run_all()
    assert playback.queue.cursor == 1
    assert not gate.is_held
    assert playback.state is PlaybackState.PAUSED

    playback.play()
    scheduler.run_all()
    assert model.values() == sorted(values)


def test_pause_then_resume_matches_uninterrupted_run(make_playback, scheduler, recorder):
    values = [9, 4, 7, 1, 8]
    steps = insertion_sort_steps(values)

    model, playback = make_playback(values)
    playback.prepare(steps)
    playback.play()
    scheduler.run_all()
    uninterrupted = [values_of(s) for s, _ in recorder.frames]
    recorder.frames.clear()

    model.create_from_iterable(values)
    playback.prepare(steps)
    playback.play()
    for _ in range(5):
        scheduler.run_next()
    playback.pause()
    scheduler.run_all()
    playback.play()
    scheduler.run_all()
    interrupted = [values_of(s) for s, _ in recorder.frames]

    # the interrupted run draws the same data sequence, give or take the paused frame
    assert interrupted[-1] == uninterrupted[-1] == sorted(values)
    assert [f for f in interrupted if f not in uninterrupted] == []


def test_live_data_tracks_step_prefix(make_playback, scheduler):
    values = [6, 2, 5, 1]
    steps = insertion_sort_steps(values)
    model, playback = make_playback(values)
    playback.prepare(steps)

    for k in range(1, len(steps) + 1):
        assert playback.step_once()
        scheduler.run_all()
        expected = list(values)
        for step in steps[:k]:
            apply_step(expected, step)
        assert model.values() == expected

    assert playback.state is PlaybackState.COMPLETE
    assert not playback.step_once()


def test_step_once_pauses_after_one_step(make_playback, scheduler, gate):
    model, playback = make_playback([3, 2, 1])
    playback.prepare(bubble_sort_steps(model.values()))
    started = []
    playback.stepStarted.connect(lambda cursor, total, text: started.append((cursor, total, text)))

    playback.step_once()
    assert gate.is_held
    scheduler.run_all()

    assert started == [(1, 6, "Comparing 3 and 2")]
    assert playback.state is PlaybackState.PAUSED
    assert not gate.is_held


def test_mutating_steps_hold_before_applying(make_playback, scheduler, recorder):
    model, playback = make_playback([2, 1])
    playback.prepare(bubble_sort_steps(model.values()))
    playback.step_once()
    scheduler.run_all()
    scheduler.delays.clear()
    recorder.frames.clear()

    playback.step_once()  # the swap
    assert model.values() == [2, 1]
    assert recorder.last[1] == {0: "swap", 1: "swap"}
    scheduler.run_next()
    assert model.values() == [1, 2]
    assert recorder.last[1] == {0: "swapped", 1: "swapped"}
    scheduler.run_all()
    assert recorder.last[1] == {}
    assert scheduler.delays == [250, 400]


def test_invalidate_discards_recorded_run(make_playback):
    model, playback = make_playback([2, 1])
    playback.prepare(bubble_sort_steps(model.values()))
    playback.invalidate()
    assert len(playback.queue) == 0
    assert playback.state is PlaybackState.IDLE
    assert not playback.play()


def test_empty_run_is_immediately_complete(make_playback, gate):
    model, playback = make_playback([1])
    playback.prepare([])
    assert playback.state is PlaybackState.COMPLETE
    assert not playback.play()
    assert not gate.is_held


def test_exhausted_queue_mid_run_fails_cleanly(make_playback, scheduler, gate, monkeypatch):
    model, playback = make_playback([2, 1])
    playback.prepare(bubble_sort_steps(model.values()))
    failures = []
    playback.playbackFailed.connect(failures.append)

    def _broken():
        raise ExhaustedError("gone")

    monkeypatch.setattr(playback.queue, "advance", _broken)
    playback.play()

    assert failures == ["Playback stopped unexpectedly."]
    assert playback.state is PlaybackState.IDLE
    assert not gate.is_held


def test_state_changes_are_broadcast(make_playback, scheduler):
    model, playback = make_playback([2, 1])
    states = []
    playback.stateChanged.connect(states.append)
    playback.prepare(bubble_sort_steps(model.values()))
    playback.play()
    scheduler.run_all()
    assert states == ["playing", "complete"]


def test_toggle(make_playback):
    model, playback = make_playback([3, 1, 2])
    playback.prepare(bubble_sort_steps(model.values()))
    assert playback.toggle()
    assert playback.state is PlaybackState.PLAYING
    assert playback.toggle()
    assert playback.state is PlaybackState.PAUSED
