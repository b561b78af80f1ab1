from typing import Iterable, Optional, Tuple

from core.errors import ExhaustedError
from core.steps import Step


class AnimationQueue:
    """Recorded steps of one algorithm run plus the playback cursor."""

    def __init__(self):
        self._steps: Tuple[Step, ...] = ()
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self._steps

    @property
    def remaining(self) -> int:
        return len(self._steps) - self._cursor

    def replace(self, steps: Iterable[Step]):
        self._steps = tuple(steps)
        self._cursor = 0

    def reset(self):
        self._cursor = 0

    def is_exhausted(self) -> bool:
        return self._cursor >= len(self._steps)

    def peek(self) -> Optional[Step]:
        if self.is_exhausted():
            return None
        return self._steps[self._cursor]

    def advance(self) -> Step:
        if self.is_exhausted():
            raise ExhaustedError(
                f"no step left to play ({self._cursor}/{len(self._steps)})"
            )
        step = self._steps[self._cursor]
        self._cursor += 1
        return step
