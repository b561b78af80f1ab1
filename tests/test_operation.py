import pytest

from core.errors import BusyRejection
from core.gate import OperationGate
from core.operation import Frame, OperationRunner


@pytest.fixture
def runner(recorder, scheduler):
    return OperationRunner(recorder, OperationGate(), scheduler)


def test_frames_render_in_order_with_their_holds(runner, recorder, scheduler):
    frames = [
        Frame([1, 2], {1: "peek"}, 800, "Top element is 2"),
        Frame([1], {0: "pop"}, 150),
    ]
    statuses = []
    runner.statusChanged.connect(statuses.append)

    runner.run("peek", frames)
    assert runner.gate.holder == "peek"
    assert recorder.frames == [([1, 2], {1: "peek"})]

    scheduler.run_all()
    assert recorder.frames == [([1, 2], {1: "peek"}), ([1], {0: "pop"}), ([1], {})]
    assert scheduler.delays == [800, 150]
    assert statuses == ["Top element is 2"]
    assert not runner.gate.is_held


def test_final_snapshot_and_callback(runner, recorder, scheduler):
    done = []
    runner.run("clear", [Frame([3], {0: "pop"}, 150)], on_finished=lambda: done.append(True),
               final_snapshot=[])
    scheduler.run_all()
    assert recorder.last == ([], {})
    assert done == [True]


def test_runner_refuses_to_start_while_gate_is_held(runner):
    runner.gate.acquire("animation")
    with pytest.raises(BusyRejection):
        runner.run("peek", [Frame([1])])
