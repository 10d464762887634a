"""
Landmark sample and 2D geometry helpers shared by the gesture core.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
import math

Point = Tuple[float, float]

# Segments shorter than this have no usable direction
MIN_SEGMENT_LENGTH = 1e-5


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle (origin + size)."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def clamp(self, point: Point) -> Point:
        """Clamp a point into the rectangle (edges inclusive)."""
        return (
            min(max(point[0], self.x), self.max_x),
            min(max(point[1], self.y), self.max_y),
        )

    def union(self, other: "Rect") -> "Rect":
        min_x = min(self.x, other.x)
        min_y = min(self.y, other.y)
        return Rect(
            x=min_x,
            y=min_y,
            width=max(self.max_x, other.max_x) - min_x,
            height=max(self.max_y, other.max_y) - min_y,
        )


UNIT_RECT = Rect(0.0, 0.0, 1.0, 1.0)


@dataclass(frozen=True)
class LandmarkSample:
    """
    One frame of hand keypoints from the pose detector.

    All points are normalized to [0, 1] with the origin at the bottom-left
    of the camera image (y grows upwards).

    Attributes:
        visibility: Mean detection confidence of the points, 0-1
    """
    thumb_tip: Point
    index_tip: Point
    index_pip: Point
    index_mcp: Point
    middle_tip: Point
    ring_tip: Point
    little_tip: Point
    little_pip: Point
    little_mcp: Point
    wrist: Point
    palm_center: Point
    visibility: float

    @property
    def fingertips(self) -> Tuple[Point, Point, Point, Point]:
        """Index, middle, ring and little fingertips."""
        return (self.index_tip, self.middle_tip, self.ring_tip, self.little_tip)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def normalized_direction(start: Point, end: Point) -> Optional[Point]:
    """Unit vector from start to end, or None for a degenerate segment."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    norm = math.hypot(dx, dy)
    if norm <= MIN_SEGMENT_LENGTH:
        return None
    return (dx / norm, dy / norm)


def clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)
