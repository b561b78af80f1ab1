import pytest

from core.errors import BusyRejection
from core.gate import OperationGate


def test_acquire_and_release():
    gate = OperationGate()
    changes = []
    gate.lockChanged.connect(changes.append)

    gate.acquire("push")
    assert gate.is_held
    assert gate.holder == "push"
    gate.release("push")
    assert not gate.is_held
    assert changes == [True, False]


def test_second_acquire_is_rejected():
    gate = OperationGate()
    gate.acquire("sort playback")
    with pytest.raises(BusyRejection, match="sort playback"):
        gate.acquire("insert")
    with pytest.raises(BusyRejection):
        gate.ensure_free()
    assert gate.holder == "sort playback"


def test_release_by_wrong_owner():
    gate = OperationGate()
    gate.acquire("a")
    with pytest.raises(RuntimeError):
        gate.release("b")
    assert gate.holder == "a"
