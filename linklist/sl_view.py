import math

from PyQt5.QtCore import QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QFont, QFontMetrics, QPainterPath, QPen, QTransform
from PyQt5.QtWidgets import (
    QGraphicsItem,
    QGraphicsObject,
    QGraphicsPathItem,
    QGraphicsSimpleTextItem,
    QMenu,
)

from core.base_view import BaseStructureView


class LinkedListView(BaseStructureView):
    """Nodes laid out head to tail on one row, linked by arcing arrows."""

    deleteRequested = pyqtSignal(int)  # node id
    clearAllRequested = pyqtSignal()

    GAP = 70
    ORIGIN = QPointF(0, 0)

    def __init__(self, global_ctrl, gate):
        super().__init__(global_ctrl, gate)
        self.scene.installEventFilter(self)

        self.node_items = {}  # id -> LinkedListNodeItem
        self.order = []  # node ids, head first
        self.arrow_items = {}  # (start id, end id) -> ArrowItem
        self._add_decorations()

    def _add_decorations(self):
        self._head_label = QGraphicsSimpleTextItem("head")
        self._head_label.setBrush(QColor("#ff6b3b"))
        font = self._head_label.font()
        font.setBold(True)
        self._head_label.setFont(font)
        self._head_label.setZValue(50)
        self._head_label.setVisible(False)
        self.scene.addItem(self._head_label)

        self.empty_label = QGraphicsSimpleTextItem("List is empty")
        self.empty_label.setBrush(QColor("#64748b"))
        font = self.empty_label.font()
        font.setPointSize(14)
        self.empty_label.setFont(font)
        self.scene.addItem(self.empty_label)

    # ---------- Renderer ----------

    def render(self, snapshot, highlights):
        """``highlights`` keys are positions counted from the head."""
        live = {info["id"] for info in snapshot}
        for node_id in [nid for nid in self.node_items if nid not in live]:
            node = self.node_items.pop(node_id)
            if node.scene():
                self.scene.removeItem(node)

        default = self.token_color("default")
        self.order = [info["id"] for info in snapshot]
        for idx, info in enumerate(snapshot):
            node = self.node_items.get(info["id"]) or self._add_node(info["id"], info["value"])
            node.setOpacity(1.0)
            node.set_value(info["value"])
            token = highlights.get(idx)
            node.setFillColor(self.token_color(token) if token else default)

        self._layout_nodes()
        self._refresh_connectivity()

    # ---------- Structural animations ----------

    def reset(self):
        self.scene.clear()
        self.node_items.clear()
        self.order.clear()
        self.arrow_items.clear()
        self._add_decorations()
        self._refresh_connectivity()
        self.fit_to_content()

    def animate_build(self, snapshot, on_finished=None):
        """Drops the nodes in one after another, head first."""
        self.reset()
        sequence = self.anim.sequential()
        for info in snapshot:
            node = self._add_node(info["id"], info["value"])
            node.setOpacity(0.0)
            self.order.append(info["id"])
        targets = self._slot_positions()

        for node_id in self.order:
            node = self.node_items[node_id]
            target = targets[node_id]
            node.setPos(QPointF(target.x(), target.y() - 120))
            sequence.addAnimation(
                self.anim.parallel(
                    self.anim.fade_item(node, 0.0, 1.0, duration=600),
                    self.anim.move_item(node, target, duration=800),
                )
            )
        self.empty_label.setVisible(False)
        self.fit_to_content()
        sequence.addAnimation(self.anim.pause(150))

        def _finish():
            self.render(snapshot, {})
            self.fit_to_content()
            if on_finished:
                on_finished()

        self._track_animation(sequence, finalizer=_finish)

    # ---------- Layout ----------

    def _add_node(self, node_id, value):
        node = LinkedListNodeItem(node_id, value, self.token_color("default"))
        node.positionChanged.connect(self._refresh_arrow_paths)
        node.contextDelete.connect(self.deleteRequested.emit)
        self.scene.addItem(node)
        self.node_items[node_id] = node
        return node

    def _slot_positions(self):
        positions = {}
        x = self.ORIGIN.x()
        for node_id in self.order:
            positions[node_id] = QPointF(x, self.ORIGIN.y())
            x += self.node_items[node_id].total_width() + self.GAP
        return positions

    def _layout_nodes(self):
        for node_id, pos in self._slot_positions().items():
            self.node_items[node_id].setPos(pos)

    def content_rect(self) -> QRectF:
        rect = QRectF(self.ORIGIN.x(), self.ORIGIN.y() - 60, 240, LinkedListNodeItem.height + 140)
        for node in self.node_items.values():
            rect = rect.united(node.sceneBoundingRect())
        return rect

    def _refresh_connectivity(self):
        self._rebuild_arrows()
        self._update_head_label()
        tail_id = self.order[-1] if self.order else None
        for node_id, node in self.node_items.items():
            node.set_tail(node_id == tail_id)
        self.empty_label.setVisible(not self.order)
        self.empty_label.setPos(self.ORIGIN.x(), self.ORIGIN.y() + 12)

    def _rebuild_arrows(self):
        for arrow in self.arrow_items.values():
            if arrow.scene():
                self.scene.removeItem(arrow)
        self.arrow_items.clear()

        for start_id, end_id in zip(self.order, self.order[1:]):
            arrow = ArrowItem(self.node_items[start_id], self.node_items[end_id])
            self.scene.addItem(arrow)
            self.arrow_items[(start_id, end_id)] = arrow

    def _refresh_arrow_paths(self):
        for arrow in self.arrow_items.values():
            arrow.update_path()
        self._update_head_label()

    def _update_head_label(self):
        head = self.node_items.get(self.order[0]) if self.order else None
        if head is None:
            self._head_label.setVisible(False)
            return
        top_center = head.mapToScene(QPointF(head.data_width / 2, 0))
        label_rect = self._head_label.boundingRect()
        self._head_label.setPos(
            top_center.x() - label_rect.width() / 2,
            top_center.y() - label_rect.height() - 12,
        )
        self._head_label.setVisible(True)

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            item = self.scene.itemAt(event.scenePos(), QTransform())
            if item is None or isinstance(item, QGraphicsSimpleTextItem):
                menu = QMenu()
                clear_action = menu.addAction("Clear List")
                if menu.exec_(event.screenPos()) == clear_action:
                    self.clearAllRequested.emit()
                event.accept()
                return True
        return super().eventFilter(watched, event)


class LinkedListNodeItem(QGraphicsObject):
    """Data cell plus pointer cell; the tail's pointer cell reads NULL."""

    positionChanged = pyqtSignal()
    contextDelete = pyqtSignal(int)

    height = 50
    pointer_size = height
    data_base_width = 100

    def __init__(self, node_id, value, fill_color=None):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self.fill_color = QColor(fill_color or "#b8b8d6")
        self.stroke_color = QColor("#4a4a52")
        self.data_width = self.data_base_width
        self._label_font = QFont()
        self._label_font.setPointSize(14)
        self._is_tail = False
        self.setFlags(QGraphicsItem.ItemIsMovable | QGraphicsItem.ItemSendsGeometryChanges)
        self._adjust_data_width()

    def boundingRect(self):
        return QRectF(0, 0, self.total_width(), self.height)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(self.stroke_color, 2.2))
        painter.setBrush(QBrush(self.fill_color))
        painter.drawRect(self.boundingRect())

        painter.setPen(QPen(self.stroke_color, 1.8))
        painter.drawLine(
            QPointF(self.data_width, 1.0),
            QPointF(self.data_width, self.height - 1.0),
        )

        painter.setFont(self._label_font)
        painter.setPen(QColor("#1f1f24"))
        text_rect = QRectF(0, 0, self.data_width, self.height).adjusted(10, 0, -10, 0)
        painter.drawText(text_rect, Qt.AlignCenter, self._value)

        if self._is_tail:
            tail_font = QFont(self._label_font)
            tail_font.setPointSize(7)
            tail_font.setBold(True)
            painter.setFont(tail_font)
            painter.setPen(self.stroke_color)
            painter.drawText(self.pointer_rect().adjusted(4, 4, -4, -4), Qt.AlignCenter, "NULL")

    def value(self):
        return self._value

    def set_value(self, value):
        text = str(value)
        if text != self._value:
            self._value = text
            self._adjust_data_width()
            self.update()

    def setFillColor(self, color: QColor):
        self.fill_color = QColor(color)
        self.update()

    def set_tail(self, is_tail: bool):
        if self._is_tail != is_tail:
            self._is_tail = is_tail
            self.update()

    @property
    def is_tail(self):
        return self._is_tail

    def total_width(self):
        return self.data_width + self.pointer_size

    def pointer_rect(self):
        return QRectF(self.data_width, 0, self.pointer_size, self.pointer_size)

    def pointer_center(self):
        return QPointF(self.data_width + self.pointer_size / 2.0, self.height / 2.0)

    def entry_point(self):
        """Where an incoming arrow aims: the middle of the left edge."""
        return QPointF(0, self.height / 2.0)

    def itemChange(self, change, value):
        if change == QGraphicsItem.ItemPositionHasChanged:
            self.positionChanged.emit()
        return super().itemChange(change, value)

    def contextMenuEvent(self, event):
        menu = QMenu()
        delete_action = menu.addAction("Delete")
        if menu.exec_(event.screenPos()) == delete_action:
            self.contextDelete.emit(self.node_id)

    def _adjust_data_width(self):
        metrics = QFontMetrics(self._label_font)
        required = metrics.horizontalAdvance(self._value) + 32
        new_width = max(self.data_base_width, required)
        if new_width != self.data_width:
            self.prepareGeometryChange()
            self.data_width = new_width


class ArrowItem(QGraphicsPathItem):
    """Arc from a node's pointer cell to the next node, with an open head."""

    HEAD_LENGTH = 14
    HEAD_ANGLE = 26

    def __init__(self, start_item: LinkedListNodeItem, end_item: LinkedListNodeItem):
        super().__init__()
        self.start_item = start_item
        self.end_item = end_item

        pen = QPen(QColor("#ff8c00"), 3)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        self.setPen(pen)
        self.setZValue(5)
        self.update_path()

    def update_path(self):
        start = self.start_item.mapToScene(self.start_item.pointer_center())
        end = self.end_item.mapToScene(self.end_item.entry_point())

        horizontal = max(1.0, abs(end.x() - start.x()))
        arc_height = max(20.0, min(60.0, horizontal * 0.2))
        ctrl = QPointF((start.x() + end.x()) / 2.0, (start.y() + end.y()) / 2.0 - arc_height)

        path = QPainterPath(start)
        path.quadTo(ctrl, end)
        path.addPath(self._arrow_head(path))
        self.setPath(path)

    def _arrow_head(self, path: QPainterPath) -> QPainterPath:
        tip = path.pointAtPercent(1.0)
        tangent = path.angleAtPercent(1.0)
        head = QPainterPath()
        for side in (-self.HEAD_ANGLE, self.HEAD_ANGLE):
            angle = math.radians(tangent + 180 + side)
            head.moveTo(tip)
            head.lineTo(
                QPointF(
                    tip.x() + self.HEAD_LENGTH * math.cos(angle),
                    tip.y() - self.HEAD_LENGTH * math.sin(angle),
                )
            )
        return head
