"""
Replayable algorithm steps.

A step is one atomic event of an algorithm run: it can be drawn (a highlight
map over positions) and, for the moving kinds, applied to a sequence. The
mutation rule is a pure function of (sequence, step), so a producer's working
copy and a visualizer's live data stay element-wise equal after the same
prefix of steps.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, MutableSequence, Tuple, Union


@dataclass(frozen=True)
class Compare:
    left: int
    right: int
    left_value: Any = None
    right_value: Any = None

    kind: ClassVar[str] = "compare"

    @property
    def operands(self) -> Tuple[int, ...]:
        return (self.left, self.right)

    @property
    def narration(self) -> str:
        return f"Comparing {self.left_value} and {self.right_value}"


@dataclass(frozen=True)
class Swap:
    left: int
    right: int
    left_value: Any = None
    right_value: Any = None

    kind: ClassVar[str] = "swap"

    @property
    def operands(self) -> Tuple[int, ...]:
        return (self.left, self.right)

    @property
    def narration(self) -> str:
        return f"Swapping {self.left_value} and {self.right_value}"


@dataclass(frozen=True)
class Shift:
    source: int
    target: int
    value: Any = None

    kind: ClassVar[str] = "shift"

    @property
    def operands(self) -> Tuple[int, ...]:
        return (self.source, self.target)

    @property
    def narration(self) -> str:
        return f"Shifting {self.value} from index {self.source} to {self.target}"


@dataclass(frozen=True)
class Insert:
    index: int
    value: Any = None

    kind: ClassVar[str] = "insert"

    @property
    def operands(self) -> Tuple[int, ...]:
        return (self.index,)

    @property
    def narration(self) -> str:
        return f"Inserting {self.value} at index {self.index}"


Step = Union[Compare, Swap, Shift, Insert]


def _unknown(step):
    return TypeError(f"unknown step kind: {step!r}")


def apply_step(sequence: MutableSequence, step: Step):
    """Applies the mutation effect of ``step`` to ``sequence`` in place."""
    if isinstance(step, Compare):
        return
    if isinstance(step, Swap):
        i, j = step.left, step.right
        sequence[i], sequence[j] = sequence[j], sequence[i]
        return
    if isinstance(step, Shift):
        # the source slot keeps its value until a later Insert overwrites it
        sequence[step.target] = sequence[step.source]
        return
    if isinstance(step, Insert):
        sequence[step.index] = step.value
        return
    raise _unknown(step)


def is_mutating(step: Step) -> bool:
    if isinstance(step, Compare):
        return False
    if isinstance(step, (Swap, Shift, Insert)):
        return True
    raise _unknown(step)


def active_highlights(step: Step) -> Dict[int, str]:
    """Highlight shown while the step is being considered."""
    if isinstance(step, Compare):
        return {step.left: "compare", step.right: "compare"}
    if isinstance(step, Swap):
        return {step.left: "swap", step.right: "swap"}
    if isinstance(step, Shift):
        return {step.source: "shift", step.target: "shift"}
    if isinstance(step, Insert):
        return {step.index: "insert"}
    raise _unknown(step)


def settled_highlights(step: Step) -> Dict[int, str]:
    """Highlight shown right after the step's mutation has been applied."""
    if isinstance(step, Compare):
        return active_highlights(step)
    if isinstance(step, Swap):
        return {step.left: "swapped", step.right: "swapped"}
    if isinstance(step, Shift):
        return {step.target: "shifted"}
    if isinstance(step, Insert):
        return {step.index: "inserted"}
    raise _unknown(step)
