"""
Debounced gesture state machine.
Turns the classifier's per-frame booleans into discrete gesture events.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Callable, List, Optional
import logging
import time

from .classifier import GestureParameters, GestureReading, classify
from .landmarks import LandmarkSample

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Samples at or below this visibility reset all gesture state
VISIBILITY_FLOOR = 0.1


class GestureFlag(IntEnum):
    """Continuously tracked conditions subject to debounce/hold."""
    LEFT_CLICK_HOLD = 0
    TWO_FINGER_HOLD = 1
    PALM_OPEN_HOLD = 2


class EventKind(IntEnum):
    """Discrete event kinds."""
    LEFT_CLICK = 0
    RIGHT_CLICK = 1
    DICTATION_START = 2
    DICTATION_STOP = 3
    SWIPE = 4


class SwipeDirection(Enum):
    LEFT = auto()
    RIGHT = auto()
    UP = auto()
    DOWN = auto()


@dataclass(frozen=True)
class GestureEvent:
    """A discrete gesture event. `direction` is only set for swipes."""
    kind: EventKind
    direction: Optional[SwipeDirection] = None

    @classmethod
    def swipe(cls, direction: SwipeDirection) -> "GestureEvent":
        return cls(EventKind.SWIPE, direction)

    def __str__(self) -> str:
        if self.direction is not None:
            return f"{self.kind.name}({self.direction.name})"
        return self.kind.name


LEFT_CLICK = GestureEvent(EventKind.LEFT_CLICK)
RIGHT_CLICK = GestureEvent(EventKind.RIGHT_CLICK)
DICTATION_START = GestureEvent(EventKind.DICTATION_START)
DICTATION_STOP = GestureEvent(EventKind.DICTATION_STOP)


@dataclass(frozen=True)
class GestureDebugState:
    """Diagnostic snapshot of the last update. Not used for gating."""
    pinky_raised: bool = False
    two_finger_active: bool = False
    palm_open: bool = False
    fist_closed: bool = False


class GestureStateMachine:
    """
    Per-flag Idle -> Arming -> Active machine with refractory-gated clicks.

    - A flag arms when its boolean turns true and fires once after
      debounce + hold of continuous truth.
    - Any false reading resets the flag immediately.
    - An open palm pre-empts both click flags.
    - Clicks of the same kind are spaced by at least the refractory time.
    - Dictation stops on the first frame the palm is no longer open.
    """

    def __init__(self, clock: Clock = time.monotonic, visibility_floor: float = VISIBILITY_FLOOR):
        self._clock = clock
        self._visibility_floor = visibility_floor

        # Fixed-size state indexed by GestureFlag / EventKind
        self._timers: List[Optional[float]] = [None] * len(GestureFlag)
        self._active: List[bool] = [False] * len(GestureFlag)
        self._last_fired: List[Optional[float]] = [None] * len(EventKind)

        self._last_palm_active = False
        self._last_reading = GestureReading()
        self.debug_state = GestureDebugState()

    @property
    def visibility_floor(self) -> float:
        return self._visibility_floor

    @visibility_floor.setter
    def visibility_floor(self, value: float) -> None:
        self._visibility_floor = value

    def is_visible(self, sample: LandmarkSample) -> bool:
        """True when the sample is confident enough to be classified."""
        return sample.visibility > self._visibility_floor

    @property
    def last_reading(self) -> GestureReading:
        """Unmasked classifier output of the last update."""
        return self._last_reading

    def is_active(self, flag: GestureFlag) -> bool:
        return self._active[flag]

    def activation_time(self, flag: GestureFlag) -> Optional[float]:
        return self._timers[flag]

    def last_fired(self, kind: EventKind) -> Optional[float]:
        return self._last_fired[kind]

    def update(self, sample: LandmarkSample, params: GestureParameters,
               now: Optional[float] = None) -> List[GestureEvent]:
        """
        Process one frame.

        Args:
            sample: Landmarks for this frame
            params: Thresholds for this frame
            now: Frame timestamp in seconds (defaults to the injected clock)

        Returns:
            Events in evaluation order: dictation start, clicks, dictation stop.
        """
        if not self.is_visible(sample):
            if any(self._active) or any(t is not None for t in self._timers):
                logger.debug("Low visibility (%.2f), resetting gesture state", sample.visibility)
            self._clear_flags()
            return []

        if now is None:
            now = self._clock()

        reading = classify(sample, params)
        self._last_reading = reading
        palm_active = reading.palm_active

        self.debug_state = GestureDebugState(
            pinky_raised=False if palm_active else reading.pinky_raised,
            two_finger_active=False if palm_active else reading.two_finger_active,
            palm_open=palm_active,
            fist_closed=reading.fist_active,
        )

        events: List[GestureEvent] = []
        hold_time = params.debounce + params.hold

        if self._process(GestureFlag.PALM_OPEN_HOLD, palm_active, now, hold_time):
            events.append(DICTATION_START)

        if palm_active:
            for flag in (GestureFlag.LEFT_CLICK_HOLD, GestureFlag.TWO_FINGER_HOLD):
                self._timers[flag] = None
                self._active[flag] = False
        else:
            if self._process(GestureFlag.LEFT_CLICK_HOLD, reading.pinky_raised, now, hold_time):
                if self._can_emit(EventKind.LEFT_CLICK, params.refractory, now):
                    events.append(LEFT_CLICK)

            if self._process(GestureFlag.TWO_FINGER_HOLD, reading.two_finger_active, now, hold_time):
                if self._can_emit(EventKind.RIGHT_CLICK, params.refractory, now):
                    events.append(RIGHT_CLICK)

        if self._last_palm_active and not palm_active:
            events.append(DICTATION_STOP)
        self._last_palm_active = palm_active

        return events

    def reset(self) -> None:
        """Clear all state, including the refractory ledger."""
        self._clear_flags()
        self._last_fired = [None] * len(EventKind)

    def _clear_flags(self) -> None:
        self._timers = [None] * len(GestureFlag)
        self._active = [False] * len(GestureFlag)
        self._last_palm_active = False
        self._last_reading = GestureReading()
        self.debug_state = GestureDebugState()

    def _process(self, flag: GestureFlag, is_true: bool, now: float, hold_time: float) -> bool:
        """Advance one flag. Returns True on the frame the flag activates."""
        if not is_true:
            self._timers[flag] = None
            self._active[flag] = False
            return False

        start = self._timers[flag]
        if start is None:
            start = now
            self._timers[flag] = now

        if now - start >= hold_time and not self._active[flag]:
            self._active[flag] = True
            logger.debug("%s activated after %.3fs", flag.name, now - start)
            return True
        return False

    def _can_emit(self, kind: EventKind, refractory: float, now: float) -> bool:
        last = self._last_fired[kind]
        if last is not None and now - last < refractory:
            logger.debug("%s suppressed (refractory %.3fs)", kind.name, refractory)
            return False
        self._last_fired[kind] = now
        return True
