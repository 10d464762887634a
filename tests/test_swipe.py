import pytest

from gestures.state_machine import EventKind, GestureEvent, SwipeDirection
from gestures.swipe import SWIPE_DURATION, SwipeDetector


@pytest.fixture
def detector():
    return SwipeDetector()


def test_open_hand_never_swipes(detector):
    assert detector.update(False, (0.0, 0.0), 0.0) is None
    assert detector.update(False, (500.0, 0.0), 0.1) is None
    assert detector.origin is None


def test_first_fist_frame_sets_origin(detector):
    assert detector.update(True, (10.0, 20.0), 1.0) is None
    assert detector.origin == ((10.0, 20.0), 1.0)


@pytest.mark.parametrize("end, direction", [
    ((200.0, 0.0), SwipeDirection.RIGHT),
    ((-200.0, 0.0), SwipeDirection.LEFT),
    ((0.0, 200.0), SwipeDirection.UP),
    ((0.0, -200.0), SwipeDirection.DOWN),
    ((150.0, -160.0), SwipeDirection.DOWN),
])
def test_swipe_direction(detector, end, direction):
    detector.update(True, (0.0, 0.0), 0.0)
    event = detector.update(True, end, 0.3)
    assert event == GestureEvent.swipe(direction)
    assert event.kind == EventKind.SWIPE
    assert detector.origin is None


def test_short_travel_is_not_a_swipe(detector):
    detector.update(True, (0.0, 0.0), 0.0)
    assert detector.update(True, (170.0, 0.0), 0.2) is None
    assert detector.origin == ((0.0, 0.0), 0.0)


def test_travel_accumulates_over_frames(detector):
    detector.update(True, (0.0, 0.0), 0.0)
    assert detector.update(True, (90.0, 0.0), 0.1) is None
    assert detector.update(True, (185.0, 0.0), 0.2) == GestureEvent.swipe(SwipeDirection.RIGHT)


def test_opening_fist_cancels_run(detector):
    detector.update(True, (0.0, 0.0), 0.0)
    assert detector.update(False, (100.0, 0.0), 0.2) is None
    assert detector.origin is None

    # New run starts where the fist closes again
    assert detector.update(True, (150.0, 0.0), 0.25) is None
    assert detector.origin == ((150.0, 0.0), 0.25)
    assert detector.update(True, (250.0, 0.0), 0.3) is None


def test_slow_run_restarts_from_current_point(detector):
    detector.update(True, (0.0, 0.0), 0.0)
    late = SWIPE_DURATION + 0.05
    assert detector.update(True, (300.0, 0.0), late) is None
    assert detector.origin == ((300.0, 0.0), late)

    assert detector.update(True, (500.0, 0.0), late + 0.2) == GestureEvent.swipe(SwipeDirection.RIGHT)


def test_one_swipe_per_run(detector):
    detector.update(True, (0.0, 0.0), 0.0)
    assert detector.update(True, (200.0, 0.0), 0.1) is not None
    # Origin restarts at the next fist frame
    assert detector.update(True, (210.0, 0.0), 0.15) is None
    assert detector.origin == ((210.0, 0.0), 0.15)


def test_reset(detector):
    detector.update(True, (0.0, 0.0), 0.0)
    detector.reset()
    assert detector.origin is None


def test_custom_thresholds():
    detector = SwipeDetector(distance=50.0, duration=1.0)
    detector.update(True, (0.0, 0.0), 0.0)
    assert detector.update(True, (0.0, -60.0), 0.9) == GestureEvent.swipe(SwipeDirection.DOWN)
