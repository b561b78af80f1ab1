"""
Tree walks recorded as highlight steps.

Every producer reads a tree snapshot (``{"root": id, "nodes": [...]}``) and
returns the node visits in the order the recursive algorithm makes them.
``build_frames`` turns them into cumulative-highlight frames for the
OperationRunner.
"""

from collections import deque, namedtuple
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from core.operation import Frame

Traversal = namedtuple("Traversal", ["label", "complexity"])

TRAVERSALS: Dict[str, Traversal] = {
    "inorder": Traversal("In-order", "O(n)"),
    "preorder": Traversal("Pre-order", "O(n)"),
    "postorder": Traversal("Post-order", "O(n)"),
    "bfs": Traversal("BFS", "O(n)"),
}


@dataclass(frozen=True)
class Visit:
    node: int
    value: Any = None
    token: str = "visit"

    kind: ClassVar[str] = "visit"

    @property
    def operands(self) -> Tuple[int, ...]:
        return (self.node,)

    @property
    def narration(self) -> str:
        return f"Visiting {self.value}"


def index_nodes(snapshot) -> Dict[int, Dict[str, Any]]:
    return {node["id"]: node for node in snapshot["nodes"]}


def traversal_order(snapshot, order: str) -> List[int]:
    if order not in TRAVERSALS:
        raise KeyError(order)
    tree = index_nodes(snapshot)
    result: List[int] = []

    def walk(node_id):
        if node_id is None:
            return
        node = tree[node_id]
        if order == "preorder":
            result.append(node_id)
        walk(node["left"])
        if order == "inorder":
            result.append(node_id)
        walk(node["right"])
        if order == "postorder":
            result.append(node_id)

    if order == "bfs":
        queue = deque([snapshot["root"]] if snapshot["root"] is not None else [])
        while queue:
            node_id = queue.popleft()
            result.append(node_id)
            node = tree[node_id]
            for child in (node["left"], node["right"]):
                if child is not None:
                    queue.append(child)
    else:
        walk(snapshot["root"])
    return result


def traversal_steps(snapshot, order: str) -> List[Visit]:
    tree = index_nodes(snapshot)
    steps: List[Visit] = []
    for node_id in traversal_order(snapshot, order):
        value = tree[node_id]["value"]
        steps.append(Visit(node_id, value, "visit"))
        steps.append(Visit(node_id, value, "visited"))
    return steps


def balance_steps(snapshot) -> Tuple[List[Visit], bool]:
    """
    Post-order height check. Each node is entered, then marked ``visited``
    or ``unbalanced`` once both subtree heights are known.
    """
    tree = index_nodes(snapshot)
    steps: List[Visit] = []
    balanced = True

    def height(node_id) -> int:
        nonlocal balanced
        if node_id is None:
            return 0
        node = tree[node_id]
        steps.append(Visit(node_id, node["value"], "visit"))
        left = height(node["left"])
        right = height(node["right"])
        if abs(left - right) > 1:
            balanced = False
            steps.append(Visit(node_id, node["value"], "unbalanced"))
        else:
            steps.append(Visit(node_id, node["value"], "visited"))
        return max(left, right) + 1

    height(snapshot["root"])
    return steps, balanced


def diameter_steps(snapshot) -> Tuple[List[Visit], int]:
    """Longest path between two nodes, counted in edges."""
    tree = index_nodes(snapshot)
    steps: List[Visit] = []
    diameter = 0

    def height(node_id) -> int:
        nonlocal diameter
        if node_id is None:
            return 0
        node = tree[node_id]
        steps.append(Visit(node_id, node["value"], "visit"))
        left = height(node["left"])
        right = height(node["right"])
        diameter = max(diameter, left + right)
        steps.append(Visit(node_id, node["value"], "visited"))
        return max(left, right) + 1

    height(snapshot["root"])
    return steps, diameter


def build_frames(
    snapshot,
    steps: List[Visit],
    hold_ms: Mapping[str, int],
    status_for: Optional[Any] = None,
) -> List[Frame]:
    """
    One frame per step; each frame keeps the marks of earlier steps.
    ``status_for(step, done_values)`` may return a status line.
    """
    highlights: Dict[int, str] = {}
    done: List[Any] = []
    frames: List[Frame] = []
    for step in steps:
        highlights[step.node] = step.token
        if step.token != "visit":
            done.append(step.value)
        status = status_for(step, done) if status_for else None
        frames.append(Frame(snapshot, dict(highlights), int(hold_ms.get(step.token, 0)), status))
    return frames


def path_frames(snapshot, path: List[int], hold_ms: int, token: str = "visit") -> List[Frame]:
    """Single moving highlight down a search path."""
    return [Frame(snapshot, {node_id: token}, hold_ms) for node_id in path]
