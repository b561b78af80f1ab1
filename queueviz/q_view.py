from PyQt5.QtCore import QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPen, QTransform
from PyQt5.QtWidgets import QGraphicsItem, QGraphicsObject, QGraphicsSimpleTextItem, QMenu

from core.base_view import BaseStructureView


class QueueView(BaseStructureView):
    """Queue drawn left to right, front first, with Front and Rear markers."""

    clearAllRequested = pyqtSignal()

    SPACING = 100
    ORIGIN = QPointF(0, 0)

    def __init__(self, global_ctrl, gate):
        super().__init__(global_ctrl, gate)
        self.scene.installEventFilter(self)
        self.nodes = {}  # id -> QueueNodeItem
        self.order = []  # front -> rear
        self._add_decorations()

    def _add_decorations(self):
        self.front_label = self._caption("Front", "#90a4ae", 12, bold=True)
        self.rear_label = self._caption("Rear", "#90a4ae", 12, bold=True)
        self.empty_label = self._caption("Queue is empty", "#64748b", 14)
        self._update_decorations()

    def _caption(self, text, color, size, bold=False):
        item = QGraphicsSimpleTextItem(text)
        item.setBrush(QColor(color))
        font = item.font()
        font.setPointSize(size)
        font.setBold(bold)
        item.setFont(font)
        item.setZValue(4)
        self.scene.addItem(item)
        return item

    # ---------- Renderer ----------

    def render(self, snapshot, highlights):
        """``highlights`` keys are positions counted from the front."""
        resized = len(snapshot) != len(self.order)
        live = {info["id"] for info in snapshot}
        for node_id in [nid for nid in self.nodes if nid not in live]:
            node = self.nodes.pop(node_id)
            if node.scene():
                self.scene.removeItem(node)

        self.order = [info["id"] for info in snapshot]
        default = self.token_color("default")
        for idx, info in enumerate(snapshot):
            node = self.nodes.get(info["id"]) or self._add_node(info["id"], info["value"])
            node.set_value(info["value"])
            node.setPos(self._slot_position(idx))
            token = highlights.get(idx)
            node.setFillColor(self.token_color(token) if token else default)

        self._update_decorations()
        if resized:
            self.fit_to_content()

    def reset(self):
        self.scene.clear()
        self.nodes.clear()
        self.order.clear()
        self._add_decorations()
        self.fit_to_content()

    # ---------- Layout ----------

    def _add_node(self, node_id, value):
        node = QueueNodeItem(node_id, value, self.token_color("default"))
        node.setZValue(1)
        self.scene.addItem(node)
        self.nodes[node_id] = node
        return node

    def _slot_position(self, index_from_front: int) -> QPointF:
        return QPointF(self.ORIGIN.x() + index_from_front * self.SPACING, self.ORIGIN.y())

    def content_rect(self) -> QRectF:
        count = max(1, len(self.order))
        width = (count - 1) * self.SPACING + QueueNodeItem.size
        return QRectF(self.ORIGIN.x(), self.ORIGIN.y() - 40, width, QueueNodeItem.size + 80)

    def _update_decorations(self):
        front = self.nodes.get(self.order[0]) if self.order else None
        rear = self.nodes.get(self.order[-1]) if self.order else None
        for label, node, above in ((self.front_label, front, True), (self.rear_label, rear, False)):
            label.setVisible(node is not None)
            if node is None:
                continue
            rect = label.boundingRect()
            y = node.y() - rect.height() - 10 if above else node.y() + QueueNodeItem.size + 10
            label.setPos(node.x() + (QueueNodeItem.size - rect.width()) / 2, y)

        self.empty_label.setVisible(not self.order)
        rect = self.empty_label.boundingRect()
        self.empty_label.setPos(self.ORIGIN.x(), self.ORIGIN.y() + (QueueNodeItem.size - rect.height()) / 2)

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            if self.scene.itemAt(event.scenePos(), QTransform()) is None:
                menu = QMenu()
                clear_action = menu.addAction("Clear Queue")
                if menu.exec_(event.screenPos()) == clear_action:
                    self.clearAllRequested.emit()
                event.accept()
                return True
        return super().eventFilter(watched, event)


class QueueNodeItem(QGraphicsObject):
    size = 80

    def __init__(self, node_id, value, fill_color=None):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self.fill_color = QColor(fill_color or "#b8b8d6")
        self.setCacheMode(QGraphicsItem.DeviceCoordinateCache)

    def boundingRect(self):
        return QRectF(0, 0, self.size, self.size)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(QColor("#4a4a52"), 2))
        painter.setBrush(QBrush(self.fill_color))
        painter.drawRoundedRect(self.boundingRect().adjusted(4, 4, -4, -4), 8, 8)

        font = painter.font()
        font.setPointSize(14)
        painter.setFont(font)
        painter.setPen(QColor("#1f1f24"))
        painter.drawText(self.boundingRect(), Qt.AlignCenter, self._value)

    def value(self):
        return self._value

    def set_value(self, value):
        text = str(value)
        if text != self._value:
            self._value = text
            self.update()

    def setFillColor(self, color: QColor):
        self.fill_color = QColor(color)
        self.update()
