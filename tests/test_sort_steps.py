import random

import pytest

from arrayviz.arr_steps import (
    SORT_ALGORITHMS,
    bubble_sort_steps,
    insertion_sort_steps,
    produce_steps,
    selection_sort_steps,
)
from core.steps import Compare, Insert, Shift, Swap, apply_step

PRODUCERS = [bubble_sort_steps, selection_sort_steps, insertion_sort_steps]


def replay(values, steps):
    seq = list(values)
    for step in steps:
        apply_step(seq, step)
    return seq


def test_bubble_sort_example():
    steps = bubble_sort_steps([5, 3, 4, 1])
    assert [type(s) for s in steps] == [
        Compare, Swap, Compare, Swap, Compare, Swap,
        Compare, Compare, Swap,
        Compare, Swap,
    ]
    assert steps[0] == Compare(0, 1, 5, 3)
    assert steps[1] == Swap(0, 1, 5, 3)


def test_selection_sort_example():
    steps = selection_sort_steps([5, 3, 4, 1])
    swaps = [s for s in steps if isinstance(s, Swap)]
    assert swaps == [Swap(0, 3, 5, 1)]
    assert sum(isinstance(s, Compare) for s in steps) == 6


def test_insertion_sort_example():
    steps = insertion_sort_steps([5, 3, 4, 1])
    assert steps[:3] == [Compare(0, 1, 5, 3), Shift(0, 1, 5), Insert(0, 3)]
    assert steps[3:7] == [Compare(1, 2, 5, 4), Shift(1, 2, 5), Compare(0, 1, 3, 4), Insert(1, 4)]
    assert len(steps) == 14


@pytest.mark.parametrize("producer", PRODUCERS)
def test_replay_sorts_and_leaves_input_alone(producer):
    rng = random.Random(7)
    for _ in range(25):
        values = [rng.randint(0, 20) for _ in range(rng.randint(0, 12))]
        original = list(values)
        steps = producer(values)
        assert values == original
        assert replay(values, steps) == sorted(values)


@pytest.mark.parametrize("selector", sorted(SORT_ALGORITHMS))
@pytest.mark.parametrize("values", [[9, 4, 7, 1, 8, 2], [3, 3, 1, 2, 1], [1, 2, 3], [5, 4, 3, 2, 1]])
def test_live_copy_matches_working_copy_after_every_step(selector, values):
    trace = []
    steps = produce_steps(selector, values, trace)
    assert len(trace) == len(steps)

    live = list(values)
    for k, step in enumerate(steps):
        apply_step(live, step)
        assert live == trace[k], f"diverged after step {k + 1}: {step}"
    assert trace[-1] == sorted(values)


@pytest.mark.parametrize("producer", PRODUCERS)
@pytest.mark.parametrize("values", [[], [42]])
def test_trivial_inputs_have_no_steps(producer, values):
    assert producer(values) == []


@pytest.mark.parametrize("n", [2, 5, 8])
def test_quadratic_compare_counts(n):
    ascending = list(range(n))
    descending = ascending[::-1]

    def compares(producer, values):
        return sum(isinstance(s, Compare) for s in producer(values))

    for producer in (bubble_sort_steps, selection_sort_steps):
        assert compares(producer, ascending) == n * (n - 1) // 2
        assert compares(producer, descending) == n * (n - 1) // 2
    assert compares(insertion_sort_steps, ascending) == n - 1
    assert compares(insertion_sort_steps, descending) == n * (n - 1) // 2


def test_sorted_input_needs_no_movement():
    values = [1, 2, 3, 4, 5]
    assert not any(isinstance(s, Swap) for s in bubble_sort_steps(values))
    assert not any(isinstance(s, Swap) for s in selection_sort_steps(values))
    steps = insertion_sort_steps(values)
    assert not any(isinstance(s, Shift) for s in steps)
    assert sum(isinstance(s, Insert) for s in steps) == len(values) - 1


def test_duplicates_are_not_swapped_by_bubble_sort():
    steps = bubble_sort_steps([2, 2, 2])
    assert all(isinstance(s, Compare) for s in steps)


def test_registry_lookup():
    assert set(SORT_ALGORITHMS) == {"bubble_sort", "selection_sort", "insertion_sort"}
    assert produce_steps("bubble_sort", [2, 1]) == bubble_sort_steps([2, 1])
    with pytest.raises(KeyError):
        produce_steps("quick_sort", [2, 1])
