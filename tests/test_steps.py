import pytest

from core.steps import (
    Compare,
    Insert,
    Shift,
    Swap,
    active_highlights,
    apply_step,
    is_mutating,
    settled_highlights,
)


def test_compare_does_not_touch_the_sequence():
    seq = [4, 2]
    apply_step(seq, Compare(0, 1, 4, 2))
    assert seq == [4, 2]


def test_swap_exchanges_values():
    seq = [4, 2, 9]
    apply_step(seq, Swap(0, 2, 4, 9))
    assert seq == [9, 2, 4]


def test_shift_copies_source_and_leaves_it_in_place():
    seq = [7, 1]
    apply_step(seq, Shift(0, 1, 7))
    assert seq == [7, 7]


def test_insert_writes_payload():
    seq = [7, 7]
    apply_step(seq, Insert(0, 1))
    assert seq == [1, 7]


def test_unknown_step_kind_is_rejected():
    with pytest.raises(TypeError):
        apply_step([1], object())
    with pytest.raises(TypeError):
        active_highlights("swap")


def test_mutating_kinds():
    assert not is_mutating(Compare(0, 1))
    assert all(is_mutating(s) for s in (Swap(0, 1), Shift(0, 1, 3), Insert(0, 3)))


@pytest.mark.parametrize(
    "step, active, settled",
    [
        (Compare(1, 2), {1: "compare", 2: "compare"}, {1: "compare", 2: "compare"}),
        (Swap(0, 3), {0: "swap", 3: "swap"}, {0: "swapped", 3: "swapped"}),
        (Shift(2, 3, 8), {2: "shift", 3: "shift"}, {3: "shifted"}),
        (Insert(1, 5), {1: "insert"}, {1: "inserted"}),
    ],
)
def test_highlights_per_kind(step, active, settled):
    assert active_highlights(step) == active
    assert settled_highlights(step) == settled


def test_narration_mentions_values():
    assert Compare(0, 1, 5, 3).narration == "Comparing 5 and 3"
    assert Swap(0, 1, 5, 3).narration == "Swapping 5 and 3"
    assert Shift(0, 1, 5).narration == "Shifting 5 from index 0 to 1"
    assert Insert(0, 3).narration == "Inserting 3 at index 0"


def test_steps_are_immutable():
    step = Swap(0, 1)
    with pytest.raises(Exception):
        step.left = 3
