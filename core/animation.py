from PyQt5.QtCore import (
    QEasingCurve,
    QParallelAnimationGroup,
    QPropertyAnimation,
    QSequentialAnimationGroup,
    QVariantAnimation,
)
from PyQt5.QtGui import QColor


class AnimationToolkit:
    """
    Factory for the Qt animations used by structural operations
    (build, insert, delete, push, pop). Every duration goes through the
    global speed multiplier and every highlight color through the palette.
    """

    def __init__(self, global_ctrl):
        self.global_ctrl = global_ctrl

    def _duration(self, base_ms):
        return max(1, self.global_ctrl.scale_duration(base_ms))

    def color(self, token, fallback="#b8b8d6") -> QColor:
        palette = self.global_ctrl.palette
        return QColor(palette.get(token) or palette.get("default") or fallback)

    def move_item(self, item, end_pos, duration=800, easing=QEasingCurve.InOutCubic):
        anim = QPropertyAnimation(item, b"pos")
        anim.setDuration(self._duration(duration))
        anim.setEndValue(end_pos)
        anim.setEasingCurve(easing)
        return anim

    def fade_item(self, item, start=0.0, end=1.0, duration=800):
        anim = QPropertyAnimation(item, b"opacity")
        anim.setDuration(self._duration(duration))
        anim.setStartValue(start)
        anim.setEndValue(end)
        anim.setEasingCurve(QEasingCurve.InOutQuad)
        return anim

    def flash_token(self, setter, start_color, token, duration=400, loops=1):
        """
        Blends ``start_color`` towards the palette color of ``token`` and
        back, ``loops`` times. ``setter`` receives each QColor.
        """
        end_color = self.color(token)
        group = QSequentialAnimationGroup()
        for _ in range(max(1, loops)):
            group.addAnimation(self._blend(setter, start_color, end_color, duration))
            group.addAnimation(self._blend(setter, end_color, start_color, duration))
        return group

    def _blend(self, setter, start_color, end_color, duration):
        anim = QVariantAnimation()
        anim.setDuration(self._duration(duration))
        anim.setStartValue(QColor(start_color))
        anim.setEndValue(QColor(end_color))
        anim.setEasingCurve(QEasingCurve.InOutQuad)

        def _update(value):
            if isinstance(value, QColor):
                setter(value)

        anim.valueChanged.connect(_update)
        return anim

    def pause(self, duration=150):
        pause = QVariantAnimation()
        pause.setDuration(self._duration(duration))
        pause.setStartValue(0)
        pause.setEndValue(0)
        return pause

    @staticmethod
    def parallel(*animations):
        group = QParallelAnimationGroup()
        for anim in animations:
            if anim:
                group.addAnimation(anim)
        return group

    @staticmethod
    def sequential(*animations):
        group = QSequentialAnimationGroup()
        for anim in animations:
            if anim:
                group.addAnimation(anim)
        return group
