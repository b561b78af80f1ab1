import pytest

from core.errors import BusyRejection, UserInputError
from queueviz.q_ctrl import QueueController
from queueviz.q_model import QueueModel


@pytest.fixture
def make_ctrl(make_global, scheduler, qtbot):
    def _make(**overrides):
        ctrl = QueueController(make_global(**overrides), scheduler=scheduler)
        qtbot.addWidget(ctrl)
        return ctrl

    return _make


@pytest.fixture
def ctrl(make_ctrl):
    return make_ctrl()


def enqueue_all(ctrl, scheduler, *values):
    for value in values:
        ctrl.enqueue(value)
        scheduler.run_all()


def queue_values(ctrl):
    return [info["value"] for info in ctrl.model.snapshot()]


def test_model_is_first_in_first_out():
    model = QueueModel()
    for value in "abc":
        model.enqueue(value)
    assert model.peek()["value"] == "a"
    assert model.dequeue()["value"] == "a"
    assert [e["value"] for e in model.snapshot()] == ["b", "c"]
    model.clear()
    with pytest.raises(IndexError):
        model.dequeue()
    with pytest.raises(IndexError):
        model.peek()


def test_enqueue_highlights_new_rear(ctrl, scheduler, toasts):
    enqueue_all(ctrl, scheduler, 1)
    log = toasts(ctrl)
    assert ctrl.enqueue(" 8 ") == 8
    assert ctrl.gate.holder == "queue enqueue"
    assert ctrl.view.nodes[ctrl.view.order[-1]].fill_color == ctrl.view.token_color("inserted")

    scheduler.run_all()
    assert scheduler.delays == [600, 600]
    assert not ctrl.gate.is_held
    assert queue_values(ctrl) == [1, 8]
    assert log == [("Enqueued 8", "success")]
    assert ctrl.view.front_label.isVisible()
    assert not ctrl.view.empty_label.isVisible()


def test_enqueue_empty_value(ctrl):
    with pytest.raises(UserInputError, match="Please enter a value to enqueue."):
        ctrl.enqueue("  ")


def test_enqueue_when_full(make_ctrl, scheduler):
    ctrl = make_ctrl(queue={"max_size": 2})
    enqueue_all(ctrl, scheduler, 1, 2)
    with pytest.raises(UserInputError, match=r"Queue is full \(max 2 elements\)!"):
        ctrl.enqueue(3)


@pytest.mark.parametrize("operation", ["dequeue", "peek"])
def test_empty_queue_is_reported(ctrl, operation):
    with pytest.raises(UserInputError, match="Queue is empty!"):
        getattr(ctrl, operation)()


def test_dequeue_removes_front_after_highlight(ctrl, scheduler, toasts):
    enqueue_all(ctrl, scheduler, "x", "y")
    log = toasts(ctrl)
    assert ctrl.dequeue() == "x"
    assert queue_values(ctrl) == ["y"]
    # the front stays on screen, in red, until the hold ends
    assert len(ctrl.view.nodes) == 2
    assert ctrl.view.nodes[ctrl.view.order[0]].fill_color == ctrl.view.token_color("delete")

    scheduler.run_all()
    assert len(ctrl.view.nodes) == 1
    assert log == [("Dequeued x", "success")]


def test_peek_keeps_the_queue(ctrl, scheduler, toasts):
    enqueue_all(ctrl, scheduler, 4, 9)
    log = toasts(ctrl)
    assert ctrl.peek() == 4
    with pytest.raises(BusyRejection):
        ctrl.size()
    scheduler.run_all()
    assert scheduler.delays[-1] == 800
    assert queue_values(ctrl) == [4, 9]
    assert log == [("Front element is 4", "info")]


def test_clear_sweeps_from_the_front(ctrl, scheduler, toasts):
    enqueue_all(ctrl, scheduler, "a", "b", "c")
    log = toasts(ctrl)
    scheduler.delays.clear()
    ctrl.clear()
    assert len(ctrl.model) == 0

    scheduler.run_next()
    assert [ctrl.view.nodes[nid].value() for nid in ctrl.view.order] == ["b", "c"]
    scheduler.run_all()
    assert scheduler.delays == [150, 150, 150]
    assert ctrl.view.nodes == {}
    assert ctrl.view.empty_label.isVisible()
    assert log == [("Queue has been cleared.", "success")]


def test_clear_on_empty_queue_is_a_no_op(ctrl, scheduler):
    ctrl.clear()
    assert not ctrl.gate.is_held
    assert not scheduler.pending


def test_is_empty_and_size(ctrl, scheduler, toasts):
    log = toasts(ctrl)
    assert ctrl.is_empty()
    enqueue_all(ctrl, scheduler, 3, 5)
    assert not ctrl.is_empty()
    assert ctrl.size() == 2
    assert log[0] == ("Is the queue empty? Yes.", "success")
    assert ("Is the queue empty? No.", "info") in log
    assert log[-1] == ("The queue has 2 elements.", "info")


def test_panel_locks_while_an_operation_plays(ctrl, scheduler):
    ctrl.enqueue(1)
    assert not ctrl.enqueue_btn.isEnabled()
    assert ctrl._dispatch(ctrl.dequeue) is None
    scheduler.run_all()
    assert ctrl.enqueue_btn.isEnabled()
