import itertools
from typing import Dict, List, Optional


class LinkedListModel:
    """
    Singly linked list kept as a dict of nodes keyed by id, so the view can
    follow a node across edits without holding any Qt object here.
    """

    def __init__(self):
        self._id_iter = itertools.count()
        self.head: Optional[int] = None
        self.nodes: Dict[int, Dict] = {}
        self.length = 0

    def __len__(self):
        return self.length

    def _new_node(self, value):
        node_id = next(self._id_iter)
        return node_id, {"id": node_id, "value": value, "next": None}

    def clear(self):
        self.head = None
        self.nodes.clear()
        self.length = 0

    def create_from_iterable(self, values):
        self.clear()
        prev_id = None
        for value in values:
            node_id, node = self._new_node(value)
            self.nodes[node_id] = node
            if self.head is None:
                self.head = node_id
            if prev_id is not None:
                self.nodes[prev_id]["next"] = node_id
            prev_id = node_id
            self.length += 1

    def snapshot(self) -> List[Dict]:
        """Nodes from head to tail as ``{id, value}`` copies."""
        ordered = []
        current = self.head
        while current is not None:
            node = self.nodes[current]
            ordered.append({"id": node["id"], "value": node["value"]})
            current = node["next"]
        return ordered

    def values(self) -> List:
        return [node["value"] for node in self.snapshot()]

    def insert(self, index: int, value) -> int:
        if index < 0 or index > self.length:
            raise IndexError("Index out of range")

        node_id, node = self._new_node(value)
        if index == 0:
            node["next"] = self.head
            self.head = node_id
        else:
            prev_id = self._node_id_at(index - 1)
            node["next"] = self.nodes[prev_id]["next"]
            self.nodes[prev_id]["next"] = node_id

        self.nodes[node_id] = node
        self.length += 1
        return node_id

    def add_first(self, value) -> int:
        return self.insert(0, value)

    def add_last(self, value) -> int:
        return self.insert(self.length, value)

    def delete(self, index: int) -> Dict:
        if index < 0 or index >= self.length:
            raise IndexError("Index out of range")

        if index == 0:
            removed_id = self.head
            self.head = self.nodes[removed_id]["next"]
        else:
            prev_id = self._node_id_at(index - 1)
            removed_id = self.nodes[prev_id]["next"]
            self.nodes[prev_id]["next"] = self.nodes[removed_id]["next"]

        removed = self.nodes.pop(removed_id)
        self.length -= 1
        return {"id": removed["id"], "value": removed["value"]}

    def remove_first(self) -> Dict:
        return self.delete(0)

    def remove_last(self) -> Dict:
        return self.delete(self.length - 1)

    def index_of(self, value) -> int:
        """Position of the first node holding ``value``, or -1."""
        for idx, node in enumerate(self.snapshot()):
            if node["value"] == value:
                return idx
        return -1

    def _node_id_at(self, index: int) -> int:
        if index < 0 or index >= self.length:
            raise IndexError("Index out of range")
        current = self.head
        for _ in range(index):
            current = self.nodes[current]["next"]
        return current
