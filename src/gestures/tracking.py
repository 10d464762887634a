"""
Frame pipeline: landmarks in, cursor target and gesture events out.

Wires the mapper, cursor dynamics, gesture state machine and swipe detector
together. Performs no I/O; delivery of the results is up to the caller.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional
import logging
import threading
import time

from .classifier import GestureParameters
from .config import Config, gesture_parameters
from .dynamics import CursorDynamics
from .landmarks import LandmarkSample, Point, Rect
from .mapping import FingertipMapper, MappingContext, orientation_hint
from .state_machine import Clock, GestureDebugState, GestureEvent, GestureStateMachine
from .swipe import SwipeDetector

logger = logging.getLogger(__name__)


class TrackingStatus(Enum):
    IDLE = auto()
    CAMERA_UNAVAILABLE = auto()
    PREPARING = auto()
    SEARCHING_HAND = auto()
    TRACKING = auto()


@dataclass
class FrameResult:
    """Output of one processed frame."""
    status: TrackingStatus
    events: List[GestureEvent] = field(default_factory=list)
    cursor: Optional[Point] = None
    debug: GestureDebugState = field(default_factory=GestureDebugState)


class FrameGate:
    """
    Single-slot, non-blocking admission gate.

    A frame that arrives while another one is in flight is dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._dropped = 0

    @property
    def dropped(self) -> int:
        return self._dropped

    def try_enter(self) -> bool:
        if self._lock.acquire(blocking=False):
            return True
        self._dropped += 1
        return False

    def leave(self) -> None:
        self._lock.release()


class TrackingPipeline:
    """
    Processes one landmark sample at a time.

    All state is owned by the pipeline and must only be touched from the
    thread that calls `process`.
    """

    def __init__(self, config: Config, screen_bounds: Rect, clock: Clock = time.monotonic):
        self._config = config
        self._screen_bounds = screen_bounds
        self._clock = clock

        self._mapper = FingertipMapper()
        self._dynamics = CursorDynamics()
        self._detector = GestureStateMachine(
            clock=clock, visibility_floor=config.tracking.visibility_floor
        )
        self._swipe = SwipeDetector()

        self._smoothed_orientation: Optional[float] = None
        self._last_hand_seen: Optional[float] = None
        self._status = TrackingStatus.SEARCHING_HAND

    @property
    def config(self) -> Config:
        return self._config

    @property
    def status(self) -> TrackingStatus:
        return self._status

    @property
    def detector(self) -> GestureStateMachine:
        return self._detector

    @property
    def swipe_detector(self) -> SwipeDetector:
        return self._swipe

    def set_config(self, config: Config) -> None:
        """Swap configuration; takes effect on the next frame."""
        self._config = config
        self._detector.visibility_floor = config.tracking.visibility_floor

    def set_screen_bounds(self, bounds: Rect) -> None:
        self._screen_bounds = bounds

    def reset(self) -> None:
        self._mapper.reset()
        self._dynamics.reset()
        self._detector.reset()
        self._swipe.reset()
        self._smoothed_orientation = None
        self._last_hand_seen = None
        self._status = TrackingStatus.SEARCHING_HAND

    def process(self, sample: Optional[LandmarkSample], timestamp: Optional[float] = None) -> FrameResult:
        """
        Process one frame.

        Args:
            sample: Landmarks, or None when no hand was detected
            timestamp: Frame time in seconds (defaults to the injected clock)
        """
        if timestamp is None:
            timestamp = self._clock()

        if sample is None:
            return self._handle_hand_lost(timestamp)

        self._last_hand_seen = timestamp
        config = self._config
        params = gesture_parameters(config.gestures)

        if not self._detector.is_visible(sample):
            self._detector.update(sample, params, now=timestamp)
            self._swipe.reset()
            self._smoothed_orientation = None
            self._status = TrackingStatus.SEARCHING_HAND
            return FrameResult(status=self._status)

        cursor = self._update_cursor(sample, timestamp)
        events = self._update_gestures(sample, params, cursor, timestamp)

        self._status = TrackingStatus.TRACKING
        return FrameResult(
            status=self._status,
            events=events,
            cursor=cursor,
            debug=self._detector.debug_state,
        )

    def _update_cursor(self, sample: LandmarkSample, timestamp: float) -> Point:
        config = self._config
        bounds = self._screen_bounds

        hint = orientation_hint(sample)
        if hint is None:
            self._smoothed_orientation = None
        elif self._smoothed_orientation is None:
            self._smoothed_orientation = hint
        else:
            current = self._smoothed_orientation
            self._smoothed_orientation = current + (hint - current) * config.tracking.orientation_smoothing

        context = MappingContext(
            screen_size=bounds.size,
            min_cutoff=config.smoothing.min_cutoff,
            beta=config.smoothing.beta,
            derivative_cutoff=config.smoothing.derivative_cutoff,
            orientation_hint=self._smoothed_orientation,
            orientation_weight=config.tracking.orientation_weight,
        )
        mapped = self._mapper.map(sample.index_tip, context, timestamp)
        target = bounds.clamp((mapped[0] + bounds.x, mapped[1] + bounds.y))

        return self._dynamics.update(target, timestamp, config.cursor.settings(), bounds)

    def _update_gestures(self, sample: LandmarkSample, params: GestureParameters,
                         cursor: Point, timestamp: float) -> List[GestureEvent]:
        events = self._detector.update(sample, params, now=timestamp)
        swipe = self._swipe.update(self._detector.last_reading.fist_active, cursor, timestamp)
        if swipe is not None:
            events.append(swipe)
        if events:
            logger.debug("Frame %.3f events: %s", timestamp, ", ".join(str(e) for e in events))
        return events

    def _handle_hand_lost(self, timestamp: float) -> FrameResult:
        last_seen = self._last_hand_seen
        if last_seen is not None and timestamp - last_seen < self._config.tracking.hand_loss_timeout:
            return FrameResult(status=self._status)

        if self._status == TrackingStatus.TRACKING:
            logger.debug("Hand lost, resetting tracking state")
        self.reset()
        return FrameResult(status=self._status)
