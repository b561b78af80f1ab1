from typing import Any, Dict, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from core.config import load_settings


class GlobalController(QObject):
    """
    Holds the loaded settings and the playback speed multiplier shared by
    every visualizer, and emits speed changes so that all holds and
    animations adjust their duration consistently.
    """

    speedChanged = pyqtSignal(float)

    MIN_SPEED = 0.5
    MAX_SPEED = 3.0

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        super().__init__()
        self._settings = settings if settings is not None else load_settings()
        self._speed = self._clamp(float(self._settings.get("speed", 1.0)))

    @property
    def settings(self) -> Dict[str, Any]:
        return self._settings

    def section(self, name: str) -> Dict[str, Any]:
        return self._settings.get(name, {})

    @property
    def palette(self) -> Dict[str, str]:
        return self._settings.get("palette", {})

    @property
    def speed(self) -> float:
        return self._speed

    def set_speed(self, value: float):
        """Clamp and broadcast speed multiplier (0.5× – 3×)."""
        value = self._clamp(value)
        if abs(value - self._speed) > 1e-3:
            self._speed = value
            self.speedChanged.emit(self._speed)

    def scale_duration(self, base_ms: int) -> int:
        """
        Convert a base duration (ms) into the actual playback duration.
        Higher speed → shorter duration; zero stays zero.
        """
        if base_ms <= 0:
            return 0
        if self._speed <= 0:
            return base_ms
        return max(1, int(base_ms / self._speed))

    def _clamp(self, value: float) -> float:
        return max(self.MIN_SPEED, min(self.MAX_SPEED, value))
