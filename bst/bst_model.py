import itertools
from typing import Any, Dict, List, Optional, Tuple


class BSTModel:
    """
    Binary search tree over numeric values. Nodes carry stable ids so the
    view can match items across snapshots.
    """

    def __init__(self):
        self._ids = itertools.count()
        self._nodes: Dict[int, Dict[str, Any]] = {}
        self._root: Optional[int] = None

    @property
    def length(self) -> int:
        return len(self._nodes)

    @property
    def root(self) -> Optional[int]:
        return self._root

    def __len__(self):
        return len(self._nodes)

    def clear(self):
        self._nodes.clear()
        self._root = None
        self._ids = itertools.count()

    def create_from_iterable(self, values):
        """Rebuilds the tree; duplicates are skipped. Returns the ids inserted."""
        self.clear()
        created = []
        for value in values:
            node_id, _ = self.insert(value)
            if node_id is not None:
                created.append(node_id)
        return created

    def insert(self, value) -> Tuple[Optional[int], List[int]]:
        """
        Returns (new node id, ids visited on the way down). The id is None
        when the value is already present; the path then ends on that node.
        """
        found, path, side = self._descend(value)
        if found is not None:
            return None, path

        node_id = next(self._ids)
        self._nodes[node_id] = {"value": value, "left": None, "right": None}
        self._link(path[-1] if path else None, side, node_id)
        return node_id, path

    def delete(self, value) -> Tuple[Optional[int], List[int]]:
        """
        Returns (removed node id, search path). The path continues down to
        the in-order successor when the node has two children. The id is
        None when the value is absent.
        """
        found, path, side = self._descend(value)
        if found is None:
            return None, path

        parent = path[-2] if len(path) > 1 else None
        node = self._nodes.pop(found)
        if node["left"] is None or node["right"] is None:
            child = node["left"] if node["left"] is not None else node["right"]
            self._link(parent, side, child)
            return found, path

        # two children: the leftmost node of the right subtree takes its place
        successor_parent, successor = found, node["right"]
        path.append(successor)
        while self._nodes[successor]["left"] is not None:
            successor_parent, successor = successor, self._nodes[successor]["left"]
            path.append(successor)

        moved = self._nodes[successor]
        if successor_parent != found:
            self._nodes[successor_parent]["left"] = moved["right"]
            moved["right"] = node["right"]
        moved["left"] = node["left"]
        self._link(parent, side, successor)
        return found, path

    def find(self, value) -> Tuple[Optional[int], List[int]]:
        found, path, _ = self._descend(value)
        return found, path

    def snapshot(self) -> Dict[str, Any]:
        return {
            "root": self._root,
            "nodes": [dict(node, id=node_id) for node_id, node in self._nodes.items()],
        }

    def value_of(self, node_id: int):
        node = self._nodes.get(node_id)
        return node["value"] if node else None

    def inorder_values(self) -> List[Any]:
        values = []
        pending = []
        node_id = self._root
        while pending or node_id is not None:
            if node_id is not None:
                pending.append(node_id)
                node_id = self._nodes[node_id]["left"]
                continue
            node_id = pending.pop()
            values.append(self._nodes[node_id]["value"])
            node_id = self._nodes[node_id]["right"]
        return values

    # ---------- Internal helpers ----------

    def _descend(self, value):
        """
        Walks from the root towards ``value``. Returns (matching id or None,
        ids visited, side of the last node taken). When found, the match is
        the last entry of the path and ``side`` is the side its parent
        links it through.
        """
        path: List[int] = []
        side = None
        node_id = self._root
        while node_id is not None:
            node = self._nodes[node_id]
            path.append(node_id)
            if value == node["value"]:
                return node_id, path, side
            side = "left" if value < node["value"] else "right"
            node_id = node[side]
        return None, path, side

    def _link(self, parent_id, side, child_id):
        if parent_id is None:
            self._root = child_id
        else:
            self._nodes[parent_id][side] = child_id
