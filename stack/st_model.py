import itertools
from typing import Dict, List


class StackModel:
    """List-backed stack whose entries keep a stable id for the view."""

    def __init__(self):
        self._ids = itertools.count()
        self._entries: List[Dict] = []

    def __len__(self):
        return len(self._entries)

    def snapshot(self):
        """Entries from bottom to top, as copies."""
        return [dict(entry) for entry in self._entries]

    def push(self, value):
        entry = {"id": next(self._ids), "value": value}
        self._entries.append(entry)
        return dict(entry)

    def pop(self):
        return self._top(remove=True)

    def peek(self):
        return self._top(remove=False)

    def clear(self):
        del self._entries[:]

    def _top(self, remove):
        if not self._entries:
            raise IndexError("stack is empty")
        return self._entries.pop() if remove else dict(self._entries[-1])
