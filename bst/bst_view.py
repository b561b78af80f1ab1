from typing import Dict

from PyQt5.QtCore import QEvent, QLineF, QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPen, QTransform
from PyQt5.QtWidgets import QGraphicsLineItem, QGraphicsObject, QMenu

from core.base_view import BaseStructureView


class BSTView(BaseStructureView):
    """
    Tree laid out by in-order rank (x) and depth (y), so every left
    subtree sits strictly left of its parent and every right subtree right.
    """

    deleteRequested = pyqtSignal(int)
    findRequested = pyqtSignal(int)
    clearAllRequested = pyqtSignal()

    COLUMN = 64
    ROW = 110
    BUILD_DROP = 160

    def __init__(self, global_ctrl, gate):
        super().__init__(global_ctrl, gate)
        self.scene.installEventFilter(self)

        self.node_items: Dict[int, BSTNodeItem] = {}
        self.edge_items: Dict[tuple, QGraphicsLineItem] = {}
        self._layout_key = None

    # ---------- Renderer ----------

    def render(self, snapshot, highlights):
        """``highlights`` maps node ids to palette tokens."""
        positions = self.layout(snapshot)
        for node_id in [nid for nid in self.node_items if nid not in positions]:
            item = self.node_items.pop(node_id)
            if item.scene():
                self.scene.removeItem(item)

        default = self.token_color("default")
        for info in snapshot["nodes"]:
            item = self.node_items.get(info["id"]) or self._add_node(info["id"], info["value"])
            item.setOpacity(1.0)
            item.set_value(info["value"])
            item.setPos(positions[info["id"]])
            token = highlights.get(info["id"])
            item.setFillColor(self.token_color(token) if token else default)
            item.setZValue(3 if token else 2)

        self._draw_edges(snapshot, positions)

        # refit on shape changes only, not on every highlight frame
        layout_key = tuple(sorted((k, p.x(), p.y()) for k, p in positions.items()))
        if layout_key != self._layout_key:
            self._layout_key = layout_key
            self.fit_to_content()

    # ---------- Structural animations ----------

    def reset(self):
        self.scene.clear()
        self.node_items.clear()
        self.edge_items.clear()
        self._layout_key = None
        self.fit_to_content()

    def animate_build(self, snapshot, on_finished=None):
        """Drops the nodes in level by level, then draws the edges."""
        self.reset()
        if not snapshot["nodes"]:
            if on_finished:
                on_finished()
            return

        positions = self.layout(snapshot)
        values = {info["id"]: info["value"] for info in snapshot["nodes"]}
        sequence = self.anim.sequential()
        for level in self._levels(snapshot):
            drops = []
            for node_id in level:
                item = self._add_node(node_id, values[node_id])
                target = positions[node_id]
                item.setPos(QPointF(target.x(), target.y() - self.BUILD_DROP))
                item.setOpacity(0.0)
                drops.append(self.anim.move_item(item, target, duration=480))
                drops.append(self.anim.fade_item(item, 0.0, 1.0, duration=480))
            sequence.addAnimation(self.anim.parallel(*drops))
        sequence.addAnimation(self.anim.pause(140))
        self.fit_to_content()

        def _finish():
            self.render(snapshot, {})
            if on_finished:
                on_finished()

        self._track_animation(sequence, finalizer=_finish)

    # ---------- Layout ----------

    def layout(self, snapshot) -> Dict[int, QPointF]:
        """Top-left corner of every node, keyed by id."""
        nodes = {info["id"]: info for info in snapshot["nodes"]}
        positions = {}
        rank = 0
        stack = []
        node_id = snapshot.get("root")
        depth = 0
        # iterative in-order walk carrying depth
        while stack or node_id is not None:
            while node_id is not None:
                stack.append((node_id, depth))
                node_id = nodes[node_id]["left"]
                depth += 1
            node_id, depth = stack.pop()
            positions[node_id] = QPointF(rank * self.COLUMN, depth * self.ROW)
            rank += 1
            node_id = nodes[node_id]["right"]
            depth += 1

        # center the root on x = 0
        root = snapshot.get("root")
        if root is not None:
            shift = positions[root].x()
            for pos in positions.values():
                pos.setX(pos.x() - shift)
        return positions

    @staticmethod
    def _levels(snapshot):
        nodes = {info["id"]: info for info in snapshot["nodes"]}
        level = [snapshot["root"]] if snapshot.get("root") is not None else []
        while level:
            yield level
            level = [
                child
                for node_id in level
                for child in (nodes[node_id]["left"], nodes[node_id]["right"])
                if child is not None
            ]

    def _add_node(self, node_id, value):
        item = BSTNodeItem(node_id, value, self.token_color("default"))
        item.contextDelete.connect(self.deleteRequested.emit)
        item.contextFind.connect(self.findRequested.emit)
        self.scene.addItem(item)
        self.node_items[node_id] = item
        return item

    def _draw_edges(self, snapshot, positions):
        for edge in self.edge_items.values():
            if edge.scene():
                self.scene.removeItem(edge)
        self.edge_items.clear()

        pen = QPen(QColor("#94a3b8"), 2)
        pen.setCapStyle(Qt.RoundCap)
        radius = BSTNodeItem.size / 2
        for info in snapshot["nodes"]:
            for child_id in (info["left"], info["right"]):
                if child_id is None:
                    continue
                line = QLineF(
                    positions[info["id"]] + QPointF(radius, radius),
                    positions[child_id] + QPointF(radius, radius),
                )
                # trim both ends to the circle outlines
                if line.length() > 2 * radius:
                    unit = line.unitVector()
                    step = QPointF(unit.dx() * radius, unit.dy() * radius)
                    line = QLineF(line.p1() + step, line.p2() - step)
                edge = QGraphicsLineItem(line)
                edge.setPen(pen)
                edge.setZValue(1)
                self.scene.addItem(edge)
                self.edge_items[(info["id"], child_id)] = edge

    # ---------- Context menu ----------

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            item = self.scene.itemAt(event.scenePos(), QTransform())
            if not isinstance(item, BSTNodeItem):
                menu = QMenu()
                clear_action = menu.addAction("Clear Tree")
                if menu.exec_(event.screenPos()) == clear_action:
                    self.clearAllRequested.emit()
                event.accept()
                return True
        return super().eventFilter(watched, event)


class BSTNodeItem(QGraphicsObject):
    contextDelete = pyqtSignal(int)
    contextFind = pyqtSignal(int)

    size = 56

    def __init__(self, node_id, value, fill_color=None):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self.fillColor = QColor(fill_color or "#b8b8d6")
        self.setZValue(2)

    def boundingRect(self):
        return QRectF(0, 0, self.size, self.size)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(QColor("#4a4a52"), 2))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawEllipse(self.boundingRect().adjusted(1, 1, -1, -1))

        font = painter.font()
        font.setPointSize(12)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor("#1f1f24"))
        painter.drawText(self.boundingRect(), Qt.AlignCenter, self._value)

    def set_value(self, value):
        text = str(value)
        if text != self._value:
            self._value = text
            self.update()

    def setFillColor(self, color: QColor):
        self.fillColor = QColor(color)
        self.update()

    def contextMenuEvent(self, event):
        menu = QMenu()
        find_action = menu.addAction("Find Node")
        delete_action = menu.addAction("Delete Node")
        chosen = menu.exec_(event.screenPos())
        if chosen == find_action:
            self.contextFind.emit(self.node_id)
        elif chosen == delete_action:
            self.contextDelete.emit(self.node_id)
