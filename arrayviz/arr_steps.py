"""
Sorting step producers.

Each producer runs the textbook algorithm on its own copy of the values and
records one step per comparison and one per data movement, in the
algorithm's own order. Nothing here renders, waits, or touches live data.

Passing a ``trace`` list makes a producer append a copy of its working
array after every recorded step, so the recording can be checked against
what the algorithm itself saw.
"""

from collections import namedtuple
from typing import Any, Dict, List, Optional, Sequence

from core.steps import Compare, Insert, Shift, Step, Swap

SortAlgorithm = namedtuple("SortAlgorithm", ["label", "complexity", "producer"])


class _Recording:
    def __init__(self, values, trace):
        self.arr = list(values)
        self.steps: List[Step] = []
        self._trace = trace

    def record(self, step):
        """Call after the working array already reflects ``step``."""
        self.steps.append(step)
        if self._trace is not None:
            self._trace.append(list(self.arr))


def bubble_sort_steps(values: Sequence[Any], trace: Optional[list] = None) -> List[Step]:
    run = _Recording(values, trace)
    arr = run.arr
    n = len(arr)
    for i in range(n - 1):
        for j in range(n - i - 1):
            run.record(Compare(j, j + 1, arr[j], arr[j + 1]))
            if arr[j] > arr[j + 1]:
                swap = Swap(j, j + 1, arr[j], arr[j + 1])
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
                run.record(swap)
    return run.steps


def selection_sort_steps(values: Sequence[Any], trace: Optional[list] = None) -> List[Step]:
    run = _Recording(values, trace)
    arr = run.arr
    n = len(arr)
    for i in range(n - 1):
        min_idx = i
        for j in range(i + 1, n):
            run.record(Compare(j, min_idx, arr[j], arr[min_idx]))
            if arr[j] < arr[min_idx]:
                min_idx = j
        if min_idx != i:
            swap = Swap(i, min_idx, arr[i], arr[min_idx])
            arr[i], arr[min_idx] = arr[min_idx], arr[i]
            run.record(swap)
    return run.steps


def insertion_sort_steps(values: Sequence[Any], trace: Optional[list] = None) -> List[Step]:
    run = _Recording(values, trace)
    arr = run.arr
    for i in range(1, len(arr)):
        key = arr[i]
        j = i - 1
        while j >= 0:
            # slot j + 1 is the hole the key will eventually fill
            run.record(Compare(j, j + 1, arr[j], key))
            if not arr[j] > key:
                break
            arr[j + 1] = arr[j]
            run.record(Shift(j, j + 1, arr[j]))
            j -= 1
        arr[j + 1] = key
        run.record(Insert(j + 1, key))
    return run.steps


SORT_ALGORITHMS: Dict[str, SortAlgorithm] = {
    "bubble_sort": SortAlgorithm("Bubble Sort", "O(n²)", bubble_sort_steps),
    "selection_sort": SortAlgorithm("Selection Sort", "O(n²)", selection_sort_steps),
    "insertion_sort": SortAlgorithm("Insertion Sort", "O(n²)", insertion_sort_steps),
}


def produce_steps(selector: str, values: Sequence[Any], trace: Optional[list] = None) -> List[Step]:
    """Raises KeyError for an unknown selector."""
    return SORT_ALGORITHMS[selector].producer(values, trace)
