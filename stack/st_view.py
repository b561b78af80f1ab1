from PyQt5.QtCore import QEasingCurve, QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPainterPath, QPen, QTransform
from PyQt5.QtWidgets import (
    QGraphicsItem,
    QGraphicsObject,
    QGraphicsPathItem,
    QGraphicsSimpleTextItem,
    QMenu,
)

from core.base_view import BaseStructureView


class StackView(BaseStructureView):
    """Stack drawn bottom-up inside an open-topped container."""

    clearAllRequested = pyqtSignal()

    SPACING = 52
    PADDING = 8
    HEADROOM = 48  # empty space above the top node inside the container
    ENTRY_GAP = 12

    def __init__(self, global_ctrl, gate):
        super().__init__(global_ctrl, gate)
        self.scene.installEventFilter(self)

        self.nodes = {}  # id -> StackNodeItem
        self.order = []  # bottom -> top
        self.floor = QPointF(-StackNodeItem.width / 2, 140)  # bottom-left of the first slot
        self._add_decorations()

    def _add_decorations(self):
        self.container_item = QGraphicsPathItem()
        pen = QPen(QColor("#000000"), 3, Qt.SolidLine, Qt.RoundCap, Qt.RoundJoin)
        self.container_item.setPen(pen)
        self.container_item.setZValue(0)
        self.scene.addItem(self.container_item)

        self.top_label = self._caption("TOP", "#90a4ae", 13, bold=True)
        self.empty_label = self._caption("Stack is empty", "#64748b", 14)
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
        """``highlights`` keys are positions counted from the bottom."""
        live = {info["id"] for info in snapshot}
        for node_id in [nid for nid in self.nodes if nid not in live]:
            node = self.nodes.pop(node_id)
            if node.scene():
                self.scene.removeItem(node)

        self.order = [info["id"] for info in snapshot]
        default = self.token_color("default")
        for idx, info in enumerate(snapshot):
            node = self.nodes.get(info["id"]) or self._add_node(info["id"], info["value"])
            node.setOpacity(1.0)
            node.set_value(info["value"])
            node.setPos(self._slot_position(idx))
            token = highlights.get(idx)
            node.setFillColor(self.token_color(token) if token else default)

        self._update_decorations()

    # ---------- Structural animations ----------

    def reset(self):
        self.scene.clear()
        self.nodes.clear()
        self.order.clear()
        self._add_decorations()
        self.fit_to_content()

    def animate_push(self, stack_snapshot, pushed_info, on_finished=None):
        node = self._add_node(pushed_info["id"], pushed_info["value"])
        target = self._slot_position(len(stack_snapshot) - 1)
        mouth = self._mouth_above(target)
        node.setPos(QPointF(mouth.x(), mouth.y() - StackNodeItem.height - self.ENTRY_GAP))
        node.setOpacity(0.0)

        fly_in = self.anim.parallel(
            self._glide(node, [mouth, target], 540),
            self.anim.fade_item(node, 0.0, 1.0, duration=540),
        )
        flash = self.anim.flash_token(
            setter=node.setFillColor, start_color=node.fill_color, token="push", duration=300
        )
        self.order.append(node.node_id)
        self._update_decorations()
        self.fit_to_content()
        self._track_animation(
            self.anim.sequential(fly_in, flash),
            finalizer=self._finisher(stack_snapshot, on_finished),
        )

    def animate_pop(self, stack_snapshot, popped_info, on_finished=None):
        node = self.nodes.get(popped_info["id"])
        if node is None:
            self._finisher(stack_snapshot, on_finished)()
            return

        mouth = self._mouth_above(node.pos())
        exit_pos = QPointF(mouth.x(), mouth.y() - StackNodeItem.height - self.ENTRY_GAP)
        flash = self.anim.flash_token(
            setter=node.setFillColor, start_color=node.fill_color, token="pop", duration=300
        )
        sequence = self.anim.sequential(
            flash,
            self._glide(node, [mouth, exit_pos], 420),
            self.anim.fade_item(node, 1.0, 0.0, duration=300),
        )
        self._track_animation(sequence, finalizer=self._finisher(stack_snapshot, on_finished))

    # ---------- Internal helpers ----------

    def _glide(self, node, waypoints, duration):
        """Straight legs through ``waypoints``; time split by leg length."""
        legs = []
        start = node.pos()
        lengths = []
        for point in waypoints:
            lengths.append((point - start).manhattanLength())
            start = point
        total = sum(lengths) or 1
        for point, length in zip(waypoints, lengths):
            legs.append(
                self.anim.move_item(
                    node,
                    point,
                    duration=max(1, int(duration * length / total)),
                    easing=QEasingCurve.Linear,
                )
            )
        return self.anim.sequential(*legs)

    def _finisher(self, snapshot, on_finished):
        def _finish():
            self.render(snapshot, {})
            self.fit_to_content()
            if on_finished:
                on_finished()

        return _finish

    def _add_node(self, node_id, value):
        node = StackNodeItem(node_id, value, self.token_color("default"))
        node.setZValue(1)
        self.scene.addItem(node)
        self.nodes[node_id] = node
        return node

    def _slot_position(self, index_from_bottom: int) -> QPointF:
        return QPointF(
            self.floor.x(),
            self.floor.y() - StackNodeItem.height - index_from_bottom * self.SPACING,
        )

    def _mouth_above(self, pos: QPointF) -> QPointF:
        """Point level with the container's open top, straight above ``pos``."""
        return QPointF(pos.x(), pos.y() - self.HEADROOM)

    def _stack_rect(self) -> QRectF:
        count = max(1, len(self.order))
        top = self._slot_position(count - 1)
        return QRectF(
            self.floor.x(),
            top.y(),
            StackNodeItem.width,
            self.floor.y() - top.y(),
        )

    def content_rect(self) -> QRectF:
        return self._stack_rect().adjusted(0, -self.HEADROOM - StackNodeItem.height, 0, 0)

    def _update_decorations(self):
        rect = self._stack_rect().adjusted(
            -self.PADDING, -self.PADDING - self.HEADROOM, self.PADDING, self.PADDING / 4
        )
        path = QPainterPath(rect.topLeft())
        path.lineTo(rect.bottomLeft())
        path.lineTo(rect.bottomRight())
        path.lineTo(rect.topRight())
        self.container_item.setPath(path)

        top_node = self.nodes.get(self.order[-1]) if self.order else None
        self.top_label.setVisible(top_node is not None)
        if top_node is not None:
            label_rect = self.top_label.boundingRect()
            self.top_label.setPos(
                top_node.x() - label_rect.width() - 28,
                top_node.y() + (StackNodeItem.height - label_rect.height()) / 2,
            )

        self.empty_label.setVisible(not self.order)
        label_rect = self.empty_label.boundingRect()
        self.empty_label.setPos(
            self.floor.x() + (StackNodeItem.width - label_rect.width()) / 2,
            self.floor.y() - StackNodeItem.height - 40 - label_rect.height(),
        )

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            item = self.scene.itemAt(event.scenePos(), QTransform())
            if item is None or item is self.container_item:
                menu = QMenu()
                clear_action = menu.addAction("Clear Stack")
                if menu.exec_(event.screenPos()) == clear_action:
                    self.clearAllRequested.emit()
                event.accept()
                return True
        return super().eventFilter(watched, event)


class StackNodeItem(QGraphicsObject):
    width = 120
    height = 48

    def __init__(self, node_id, value, fill_color=None):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self.fill_color = QColor(fill_color or "#b8b8d6")
        self.setCacheMode(QGraphicsItem.DeviceCoordinateCache)

    def boundingRect(self):
        return QRectF(0, 0, self.width, self.height)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(QColor("#4a4a52"), 2))
        painter.setBrush(QBrush(self.fill_color))
        painter.drawRoundedRect(self.boundingRect(), 10, 10)

        font = painter.font()
        font.setPointSize(14)
        painter.setFont(font)
        painter.setPen(QColor("#1f1f24"))
        painter.drawText(self.boundingRect(), Qt.AlignCenter, self._value)

    def set_value(self, value):
        text = str(value)
        if text != self._value:
            self._value = text
            self.update()

    def setFillColor(self, color: QColor):
        self.fill_color = QColor(color)
        self.update()
