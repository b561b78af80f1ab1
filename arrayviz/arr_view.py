from PyQt5.QtCore import QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPen, QTransform
from PyQt5.QtWidgets import (
    QGraphicsItem,
    QGraphicsObject,
    QGraphicsSimpleTextItem,
    QMenu,
)

from core.base_view import BaseStructureView


class ArrayView(BaseStructureView):
    """Row of cells with index labels underneath."""

    deleteRequested = pyqtSignal(int)
    editRequested = pyqtSignal(int)
    clearAllRequested = pyqtSignal()

    CELL_GAP = 8
    DROP_HEIGHT = 110

    def __init__(self, global_ctrl, gate):
        super().__init__(global_ctrl, gate)
        self.scene.installEventFilter(self)

        self.cells = {}  # id -> ArrayCellItem
        self.order = []  # ids, left -> right
        self.index_labels = []
        self.origin = QPointF(-360, -ArrayCellItem.height / 2)

    # ---------- Renderer ----------

    def render(self, snapshot, highlights):
        """Places every cell at its slot and colors it by highlight token."""
        self._sync_cells(snapshot)
        default = self.token_color("default")
        for idx, node_id in enumerate(self.order):
            cell = self.cells[node_id]
            token = highlights.get(idx)
            cell.setFillColor(self.token_color(token) if token else default)
            cell.setZValue(3 if token else 2)

    # ---------- Structural animations ----------

    def reset(self):
        self.scene.clear()
        self.cells.clear()
        self.order.clear()
        self.index_labels.clear()
        self.fit_to_content()

    def animate_build(self, snapshot, on_finished=None):
        self.reset()
        if not snapshot:
            if on_finished:
                on_finished()
            return

        sequence = self.anim.sequential()
        for idx, info in enumerate(snapshot):
            cell = self._add_cell(info["id"], info["value"])
            sequence.addAnimation(self._drop_in(cell, idx, 360))
        sequence.addAnimation(self.anim.pause(120))
        self._track_animation(sequence, finalizer=self._finisher(snapshot, on_finished))

    def animate_insert(self, snapshot, inserted_id, index, on_finished=None):
        # make room from the right end, then drop the new cell in
        tail = [info["id"] for info in snapshot[index + 1:] if info["id"] in self.cells]
        sequence = self.anim.sequential()
        if tail:
            sequence.addAnimation(self._shift_cells(reversed(tail), +1))

        cell = self._add_cell(inserted_id, snapshot[index]["value"])
        sequence.addAnimation(self._drop_in(cell, index, 420))
        sequence.addAnimation(self._flash(cell, "inserted", 400))
        self._track_animation(sequence, finalizer=self._finisher(snapshot, on_finished))

    def animate_delete(self, snapshot, removed_id, index, on_finished=None):
        cell = self.cells.get(removed_id)
        if cell is None:
            self._finisher(snapshot, on_finished)()
            return

        lift = self.anim.parallel(
            self.anim.move_item(cell, self._above_slot(index), duration=360),
            self.anim.fade_item(cell, 1.0, 0.0, duration=360),
        )
        sequence = self.anim.sequential(self._flash(cell, "delete", 400), lift)

        tail = [info["id"] for info in snapshot[index:] if info["id"] in self.cells]
        if tail:
            sequence.addAnimation(self._shift_cells(tail, -1))
        self._track_animation(sequence, finalizer=self._finisher(snapshot, on_finished))

    def animate_update_value(self, snapshot, index, on_finished=None):
        cell = self.cells.get(snapshot[index]["id"]) if 0 <= index < len(snapshot) else None
        if cell is None:
            self._finisher(snapshot, on_finished)()
            return
        cell.set_value(snapshot[index]["value"])
        pulse = self.anim.flash_token(
            setter=cell.setFillColor,
            start_color=cell.fillColor,
            token="inserted",
            duration=360,
            loops=2,
        )
        self._track_animation(pulse, finalizer=self._finisher(snapshot, on_finished))

    def index_of(self, node_id):
        return self.order.index(node_id) if node_id in self.order else -1

    # ---------- Animation pieces ----------

    def _drop_in(self, cell, index, duration):
        cell.setOpacity(0.0)
        cell.setPos(self._above_slot(index))
        return self.anim.parallel(
            self.anim.move_item(cell, self._slot_position(index), duration=duration),
            self.anim.fade_item(cell, 0.0, 1.0, duration=duration),
        )

    def _shift_cells(self, ids, offset):
        """Moves each cell ``offset`` slots, one after another."""
        ids = list(ids)
        # the more cells move, the quicker each one goes
        duration = max(120, 520 - 35 * (len(ids) - 1))
        sequence = self.anim.sequential()
        for node_id in ids:
            target = self.order.index(node_id) + offset
            sequence.addAnimation(
                self.anim.move_item(self.cells[node_id], self._slot_position(target), duration)
            )
        return sequence

    def _flash(self, cell, token, duration):
        return self.anim.flash_token(
            setter=cell.setFillColor, start_color=cell.fillColor, token=token, duration=duration
        )

    def _finisher(self, snapshot, on_finished):
        def _finish():
            self.render(snapshot, {})
            self.fit_to_content()
            if on_finished:
                on_finished()

        return _finish

    # ---------- Layout ----------

    def _slot_position(self, index: int) -> QPointF:
        return QPointF(
            self.origin.x() + index * (ArrayCellItem.width + self.CELL_GAP), self.origin.y()
        )

    def _above_slot(self, index: int) -> QPointF:
        slot = self._slot_position(index)
        return QPointF(slot.x(), slot.y() - ArrayCellItem.height - self.DROP_HEIGHT)

    def _add_cell(self, node_id, value):
        cell = ArrayCellItem(node_id, value, self.token_color("default"))
        cell.contextDelete.connect(lambda nid: self._emit_for(nid, self.deleteRequested))
        cell.contextEdit.connect(lambda nid: self._emit_for(nid, self.editRequested))
        self.scene.addItem(cell)
        self.cells[node_id] = cell
        return cell

    def _emit_for(self, node_id, signal):
        idx = self.index_of(node_id)
        if idx != -1:
            signal.emit(idx)

    def _sync_cells(self, snapshot):
        live = {info["id"] for info in snapshot}
        for node_id in [nid for nid in self.cells if nid not in live]:
            cell = self.cells.pop(node_id)
            if cell.scene():
                self.scene.removeItem(cell)

        self.order = [info["id"] for info in snapshot]
        for idx, info in enumerate(snapshot):
            cell = self.cells.get(info["id"]) or self._add_cell(info["id"], info["value"])
            cell.setOpacity(1.0)
            cell.set_value(info["value"])
            cell.setPos(self._slot_position(idx))
        self._sync_index_labels()

    def _sync_index_labels(self):
        while len(self.index_labels) > len(self.order):
            label = self.index_labels.pop()
            if label.scene():
                self.scene.removeItem(label)

        while len(self.index_labels) < len(self.order):
            label = QGraphicsSimpleTextItem(str(len(self.index_labels)))
            label.setBrush(QColor("#90a4ae"))
            font = label.font()
            font.setPointSize(12)
            label.setFont(font)
            label.setZValue(1)
            self.scene.addItem(label)
            self.index_labels.append(label)

        for idx, label in enumerate(self.index_labels):
            slot = self._slot_position(idx)
            rect = label.boundingRect()
            label.setPos(
                slot.x() + (ArrayCellItem.width - rect.width()) / 2,
                slot.y() + ArrayCellItem.height + 8,
            )

    # ---------- Context menu ----------

    def _show_background_menu(self, screen_pos):
        menu = QMenu()
        clear_action = menu.addAction("Clear Array")
        if menu.exec_(screen_pos) == clear_action:
            self.clearAllRequested.emit()

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            if self.scene.itemAt(event.scenePos(), QTransform()) is None:
                self._show_background_menu(event.screenPos())
                event.accept()
                return True
        return super().eventFilter(watched, event)


class ArrayCellItem(QGraphicsObject):
    contextDelete = pyqtSignal(int)
    contextEdit = pyqtSignal(int)

    width = 80
    height = 64

    def __init__(self, node_id, value, fill_color=None):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self.fillColor = QColor(fill_color or "#b8b8d6")
        self.setZValue(2)
        self.setAcceptedMouseButtons(Qt.LeftButton | Qt.RightButton)
        self.setCacheMode(QGraphicsItem.DeviceCoordinateCache)

    @property
    def value_text(self) -> str:
        return self._value

    def boundingRect(self):
        return QRectF(0, 0, self.width, self.height)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(QColor("#4a4a52"), 2))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawRoundedRect(self.boundingRect(), 6, 6)

        font = painter.font()
        font.setPointSize(14)
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

    def mouseDoubleClickEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.contextEdit.emit(self.node_id)
        super().mouseDoubleClickEvent(event)

    def contextMenuEvent(self, event):
        menu = QMenu()
        edit_action = menu.addAction("Edit Value")
        delete_action = menu.addAction("Delete")
        chosen = menu.exec_(event.screenPos())
        if chosen == edit_action:
            self.contextEdit.emit(self.node_id)
        elif chosen == delete_action:
            self.contextDelete.emit(self.node_id)
