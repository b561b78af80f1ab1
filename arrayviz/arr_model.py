import itertools
from typing import Any, Dict, List


class ArrayModel:
    """
    Sequential array model. Cells carry stable ids so the view can animate
    them incrementally; item access reads and writes values, which is what
    sort playback mutates.
    """

    def __init__(self):
        self._ids = itertools.count()
        self._cells: List[Dict[str, Any]] = []

    @property
    def length(self) -> int:
        return len(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, index: int):
        return self._cells[index]["value"]

    def __setitem__(self, index: int, value):
        self._cells[index]["value"] = value

    def values(self) -> List[Any]:
        """Independent copy of the current values."""
        return [cell["value"] for cell in self._cells]

    def clear(self):
        self._cells = []
        self._ids = itertools.count()

    def create_from_iterable(self, values):
        self.clear()
        self._cells = [self._cell(value) for value in values]

    def append(self, value):
        return self.insert(len(self._cells), value)

    def insert(self, index: int, value):
        """Returns the id of the new cell."""
        self._check(index, allow_end=True)
        cell = self._cell(value)
        self._cells.insert(index, cell)
        return cell["id"]

    def delete(self, index: int):
        """Removes and returns the cell dict at ``index``."""
        self._check(index)
        return self._cells.pop(index)

    def update_value(self, index: int, value):
        self._check(index)
        self._cells[index]["value"] = value
        return self._cells[index]["id"]

    def snapshot(self):
        return [dict(cell) for cell in self._cells]

    def _cell(self, value):
        return {"id": next(self._ids), "value": value}

    def _check(self, index, allow_end=False):
        upper = len(self._cells) if allow_end else len(self._cells) - 1
        if not 0 <= index <= upper:
            raise IndexError(f"index {index} outside 0..{upper}")
