"""
Per-frame geometric gesture predicates.
Stateless: every reading is a pure function of one sample and the thresholds.
"""
from dataclasses import dataclass

from .landmarks import LandmarkSample, Point, distance, dot, normalized_direction

# Fixed pinky lift ratio (not exposed in the user configuration)
PINKY_LIFT_RATIO = 1.05

# Fist threshold on the mean fingertip extension (normalized units)
FIST_MAXIMUM_EXTENSION = 0.065


@dataclass(frozen=True)
class GestureParameters:
    """
    Thresholds for one gesture update.

    Distances are in normalized landmark units, durations in seconds.
    Values are used as given; nonsensical values just make a gesture
    always or never trigger.
    """
    two_finger_threshold: float
    palm_area_minimum: float
    debounce: float
    hold: float
    refractory: float
    pinky_lift_ratio: float = PINKY_LIFT_RATIO
    pinky_lift_delta: float = 0.02
    pinky_lift_minimum: float = 0.08
    pinky_separation: float = 0.035
    pinky_straightness_threshold: float = 0.6
    fist_maximum_extension: float = FIST_MAXIMUM_EXTENSION


@dataclass(frozen=True)
class GestureReading:
    """Raw boolean gesture conditions for one frame."""
    two_finger_active: bool = False
    palm_active: bool = False
    pinky_raised: bool = False
    fist_active: bool = False


def finger_extension(tip: Point, palm_center: Point) -> float:
    """Distance of a fingertip from the palm center."""
    return distance(tip, palm_center)


def average_extension(sample: LandmarkSample) -> float:
    """Mean extension of the index, middle, ring and little fingertips."""
    extensions = [finger_extension(tip, sample.palm_center) for tip in sample.fingertips]
    return sum(extensions) / len(extensions)


def pinky_straightness(sample: LandmarkSample) -> float:
    """
    Cosine between the little finger's MCP->PIP and PIP->TIP segments.

    1.0 means a straight finger. Returns 0.0 when either segment is too
    short to have a direction.
    """
    proximal = normalized_direction(sample.little_mcp, sample.little_pip)
    distal = normalized_direction(sample.little_pip, sample.little_tip)
    if proximal is None or distal is None:
        return 0.0
    return dot(proximal, distal)


def is_pinky_raised(sample: LandmarkSample, params: GestureParameters) -> bool:
    palm = sample.palm_center
    ring = finger_extension(sample.ring_tip, palm)
    index = finger_extension(sample.index_tip, palm)
    middle = finger_extension(sample.middle_tip, palm)
    pinky = finger_extension(sample.little_tip, palm)

    average_other = (ring + index + middle) / 3.0
    exceeds_average = pinky > average_other * params.pinky_lift_ratio
    exceeds_ring = (pinky - ring) > params.pinky_lift_delta
    separated = distance(sample.little_tip, sample.ring_tip) > params.pinky_separation

    return (
        pinky > params.pinky_lift_minimum
        and pinky_straightness(sample) > params.pinky_straightness_threshold
        and (exceeds_average or exceeds_ring or separated)
    )


def classify(sample: LandmarkSample, params: GestureParameters) -> GestureReading:
    """Evaluate all gesture predicates for one sample."""
    mean_extension = average_extension(sample)
    return GestureReading(
        two_finger_active=distance(sample.index_tip, sample.middle_tip) < params.two_finger_threshold,
        palm_active=mean_extension > params.palm_area_minimum,
        pinky_raised=is_pinky_raised(sample, params),
        fist_active=mean_extension < params.fist_maximum_extension,
    )
