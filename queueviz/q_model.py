import itertools
from collections import deque
from typing import Deque, Dict


class QueueModel:
    """FIFO queue whose entries keep a stable id for the view."""

    def __init__(self):
        self._ids = itertools.count()
        self._entries: Deque[Dict] = deque()

    def __len__(self):
        return len(self._entries)

    def snapshot(self):
        """Entries from front to rear, as copies."""
        return [dict(entry) for entry in self._entries]

    def enqueue(self, value):
        entry = {"id": next(self._ids), "value": value}
        self._entries.append(entry)
        return dict(entry)

    def dequeue(self):
        if not self._entries:
            raise IndexError("queue is empty")
        return self._entries.popleft()

    def peek(self):
        if not self._entries:
            raise IndexError("queue is empty")
        return dict(self._entries[0])

    def clear(self):
        self._entries.clear()
