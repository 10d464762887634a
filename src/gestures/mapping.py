"""
Fingertip to screen mapping.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
import math

from .landmarks import (
    MIN_SEGMENT_LENGTH,
    UNIT_RECT,
    LandmarkSample,
    Point,
    Rect,
    clamp01,
    normalized_direction,
)
from .one_euro_filter import OneEuroFilter


@dataclass(frozen=True)
class MappingContext:
    """
    Per-call mapping settings.

    Attributes:
        roi: Region of the camera image (normalized) mapped onto the screen
        screen_size: (width, height) in pixels
        min_cutoff, beta, derivative_cutoff: One Euro filter settings
        orientation_hint: Optional vertical hint in [0, 1] from finger orientation
        orientation_weight: Blend weight of the hint, 0-1
    """
    screen_size: Tuple[float, float]
    roi: Rect = UNIT_RECT
    min_cutoff: float = 1.2
    beta: float = 0.007
    derivative_cutoff: float = 1.0
    orientation_hint: Optional[float] = None
    orientation_weight: float = 0.18


class FingertipMapper:
    """Maps a normalized fingertip position to a filtered screen point."""

    def __init__(self):
        self._filter = OneEuroFilter()

    def reset(self) -> None:
        self._filter.reset()

    def map(self, point: Point, context: MappingContext, timestamp: float) -> Point:
        normalized = self._normalize(point, context.roi)
        # Mirror horizontally so hand motion matches cursor motion
        mirrored = (1.0 - normalized[0], normalized[1])
        base_vertical = 1.0 - mirrored[1]

        if context.orientation_hint is not None:
            weight = clamp01(context.orientation_weight)
            vertical = base_vertical * (1.0 - weight) + clamp01(context.orientation_hint) * weight
        else:
            vertical = base_vertical

        width, height = context.screen_size
        screen_point = (mirrored[0] * width, vertical * height)

        return self._filter(
            timestamp,
            screen_point,
            min_cutoff=context.min_cutoff,
            beta=context.beta,
            d_cutoff=context.derivative_cutoff,
        )

    @staticmethod
    def _normalize(point: Point, roi: Rect) -> Point:
        if roi.width <= 0 or roi.height <= 0:
            return (0.0, 0.0)
        return ((point[0] - roi.x) / roi.width, (point[1] - roi.y) / roi.height)


def orientation_hint(sample: LandmarkSample) -> Optional[float]:
    """
    Vertical pointing hint from the index finger direction.

    0.0 when the finger points straight up, 1.0 straight down.
    None when the finger segments are degenerate.
    """
    proximal = normalized_direction(sample.index_mcp, sample.index_pip)
    distal = normalized_direction(sample.index_pip, sample.index_tip)
    if proximal is None or distal is None:
        return None

    cx = proximal[0] + distal[0]
    cy = proximal[1] + distal[1]
    norm = math.hypot(cx, cy)
    if norm <= MIN_SEGMENT_LENGTH:
        return None

    y = max(-1.0, min(1.0, cy / norm))
    return 0.5 * (1.0 - y)
