"""
Fist swipe detection.
A closed fist that travels far enough, fast enough, produces one directional swipe.
"""
from typing import Optional, Tuple
import logging
import math

from .landmarks import Point
from .state_machine import GestureEvent, SwipeDirection

logger = logging.getLogger(__name__)

# Screen-space travel (px) and time window (s) for a swipe
SWIPE_DISTANCE = 180.0
SWIPE_DURATION = 0.45


class SwipeDetector:
    """Tracks one fist-closed run at a time."""

    def __init__(self, distance: float = SWIPE_DISTANCE, duration: float = SWIPE_DURATION):
        self._distance = distance
        self._duration = duration
        self._origin: Optional[Tuple[Point, float]] = None

    @property
    def origin(self) -> Optional[Tuple[Point, float]]:
        """(point, timestamp) where the current fist run started, if any."""
        return self._origin

    def reset(self) -> None:
        self._origin = None

    def update(self, fist_active: bool, point: Point, timestamp: float) -> Optional[GestureEvent]:
        """
        Feed one frame.

        Args:
            fist_active: Fist-closed reading for this frame
            point: Current cursor point (screen pixels)
            timestamp: Frame time in seconds

        Returns:
            A swipe event, or None.
        """
        if not fist_active:
            self._origin = None
            return None

        if self._origin is None:
            self._origin = (point, timestamp)
            return None

        (ox, oy), start = self._origin
        elapsed = timestamp - start
        if elapsed > self._duration:
            # Too slow: restart the run from here
            self._origin = (point, timestamp)
            return None

        dx = point[0] - ox
        dy = point[1] - oy
        if math.hypot(dx, dy) < self._distance:
            return None

        self._origin = None
        if abs(dx) > abs(dy):
            direction = SwipeDirection.RIGHT if dx > 0 else SwipeDirection.LEFT
        else:
            direction = SwipeDirection.UP if dy > 0 else SwipeDirection.DOWN
        logger.debug("Swipe %s after %.3fs", direction.name, elapsed)
        return GestureEvent.swipe(direction)
