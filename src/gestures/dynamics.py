"""
Velocity-adaptive cursor dynamics applied after fingertip mapping.
"""
from dataclasses import dataclass
from typing import Optional
import math

from .landmarks import Point, Rect

# Largest per-frame target displacement (px) before rescaling
MAX_STEP = 140.0

MIN_DT = 1e-3


@dataclass(frozen=True)
class CursorSettings:
    base_gain: float = 1.0
    acceleration_k: float = 0.35
    velocity_reference: float = 950.0  # px/s at which acceleration saturates


class CursorDynamics:
    """
    Relative cursor motion with velocity-dependent gain.

    The cursor moves by the change of the mapped target scaled by
    `base_gain * (1 + acceleration_k * min(v / velocity_reference, 1))`.
    """

    def __init__(self, max_step: float = MAX_STEP):
        self._max_step = max_step
        self._last_target: Optional[Point] = None
        self._last_cursor: Optional[Point] = None
        self._last_time: Optional[float] = None

    @property
    def cursor(self) -> Optional[Point]:
        return self._last_cursor

    def reset(self) -> None:
        self._last_target = None
        self._last_cursor = None
        self._last_time = None

    def gain(self, velocity: float, settings: CursorSettings) -> float:
        if settings.velocity_reference > 0:
            ratio = min(velocity / settings.velocity_reference, 1.0)
        else:
            ratio = 1.0
        return settings.base_gain * (1.0 + settings.acceleration_k * ratio)

    def update(self, target: Point, timestamp: float, settings: CursorSettings, bounds: Rect) -> Point:
        if self._last_target is None or self._last_cursor is None or self._last_time is None:
            self._last_target = target
            self._last_cursor = target
            self._last_time = timestamp
            return target

        dt = max(MIN_DT, timestamp - self._last_time)
        dx = target[0] - self._last_target[0]
        dy = target[1] - self._last_target[1]

        # Cap single-frame jumps from detector glitches
        step = math.hypot(dx, dy)
        if step > self._max_step:
            scale = self._max_step / step
            dx *= scale
            dy *= scale
            step = self._max_step

        gain = self.gain(step / dt, settings)
        cx, cy = self._last_cursor
        cursor = bounds.clamp((cx + dx * gain, cy + dy * gain))

        self._last_target = target
        self._last_cursor = cursor
        self._last_time = timestamp
        return cursor
