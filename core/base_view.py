from PyQt5.QtCore import QObject, QRectF, Qt
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import QGraphicsScene

from core.animation import AnimationToolkit


class BaseStructureView(QObject):
    """
    Base class for structure-specific views, providing:
    - shared QGraphicsScene
    - animation helper + lifecycle management
    - the renderer contract ``render(snapshot, highlights)``
    - gate ownership for the duration of every tracked animation
    """

    ANIMATION_OWNER = "animation"
    MIN_VIEW_SIZE = (600, 400)

    def __init__(self, global_ctrl, gate):
        super().__init__()
        self.scene = QGraphicsScene()
        self.scene.setSceneRect(-200, -200, 1200, 800)
        self.anim = AnimationToolkit(global_ctrl)
        self.gate = gate
        self._running = []
        self._canvas = None  # bound QGraphicsView (optional)
        self._default_scene_rect = QRectF(self.scene.sceneRect())

    # ---------- Renderer contract ----------

    def render(self, snapshot, highlights):
        """Draws ``snapshot`` with ``highlights`` (position → palette token)."""
        raise NotImplementedError

    def token_color(self, token) -> QColor:
        return self.anim.color(token)

    # ---------- Canvas ----------

    def bind_canvas(self, view):
        self._canvas = view
        if view:
            view.setScene(self.scene)
            view.resetTransform()
            self.fit_to_content()

    def content_rect(self) -> QRectF:
        return self.scene.itemsBoundingRect()

    def fit_to_content(self, padding=80):
        """
        Grows the scene rect around the content (never below MIN_VIEW_SIZE)
        and zooms out only when it does not fit the viewport.
        """
        rect = QRectF(self.content_rect())
        if rect.isNull():
            rect = QRectF(self._default_scene_rect)
        else:
            rect.adjust(-padding, -padding, padding, padding)

        min_w, min_h = self.MIN_VIEW_SIZE
        if rect.width() < min_w:
            grow = (min_w - rect.width()) / 2
            rect.adjust(-grow, 0, grow, 0)
        if rect.height() < min_h:
            grow = (min_h - rect.height()) / 2
            rect.adjust(0, -grow, 0, grow)
        self.scene.setSceneRect(rect)

        if not self._canvas:
            return
        viewport = self._canvas.viewport().rect()
        if viewport.isNull():
            return
        self._canvas.resetTransform()
        if rect.width() > viewport.width() or rect.height() > viewport.height():
            self._canvas.fitInView(rect, Qt.KeepAspectRatio)
        else:
            self._canvas.centerOn(rect.center())

    # ---------- Animation lifecycle ----------

    def _track_animation(self, animation, finalizer=None):
        """
        Keeps references so that animations are not garbage collected and
        holds the gate until the last running animation has finished.
        """
        if animation is None:
            if finalizer:
                finalizer()
            return

        if not self._running:
            self.gate.acquire(self.ANIMATION_OWNER)
        self._running.append(animation)

        def _cleanup():
            if animation in self._running:
                self._running.remove(animation)
            try:
                if finalizer:
                    finalizer()
            finally:
                if not self._running and self.gate.holder == self.ANIMATION_OWNER:
                    self.gate.release(self.ANIMATION_OWNER)

        animation.finished.connect(_cleanup)
        animation.start()
