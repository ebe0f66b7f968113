"""Quarter-turn rotation bookkeeping.

The image service rotates the pixels; what the editor has to track is the
angle and the *true size* the crop widget must assume once the image is
turned on its side.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional

FULL_TURN = 360

Size = tuple[int, int]


def normalise_angle(value: Any) -> Any:
    """Map *value* into ``[0, 360)``; non-numeric values are returned unchanged."""

    if isinstance(value, bool) or not isinstance(value, Real):
        return value
    # Python's modulo already yields a non-negative result for a positive divisor.
    return value % FULL_TURN


def is_sideways(angle: Any) -> bool:
    return normalise_angle(angle) in (90, 270)


def true_size_for_angle(size: Size, angle: Any) -> Size:
    """Return *size* swapped for 90 and 270 degrees, unchanged otherwise."""

    width, height = size
    if is_sideways(angle):
        return height, width
    return width, height


@dataclass(frozen=True)
class RotationResult:
    angle: int | float
    true_size: Optional[Size]


class RotationHandler:
    """Advance the rotation angle and derive the matching true size."""

    def __init__(self, original_size: Optional[Size] = None) -> None:
        self._original_size = original_size

    @property
    def original_size(self) -> Optional[Size]:
        return self._original_size

    def set_original_size(self, size: Optional[Size]) -> None:
        self._original_size = size

    def true_size(self, angle: Any) -> Optional[Size]:
        if self._original_size is None:
            return None
        return true_size_for_angle(self._original_size, angle)

    def rotate(self, current: Any, delta: int | float) -> RotationResult:
        base = current if isinstance(current, Real) and not isinstance(current, bool) else 0
        angle = normalise_angle(base + delta)
        return RotationResult(angle=angle, true_size=self.true_size(angle))


__all__ = [
    "RotationHandler",
    "RotationResult",
    "Size",
    "is_sideways",
    "normalise_angle",
    "true_size_for_angle",
]
