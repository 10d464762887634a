import dataclasses

import pytest

from gestures.config import Config
from gestures.landmarks import Rect
from gestures.state_machine import LEFT_CLICK, GestureEvent, GestureFlag, SwipeDirection
from gestures.tracking import FrameGate, TrackingPipeline, TrackingStatus
from hands import ManualClock, fist, invisible, pinky_raised, relaxed, shifted

SCREEN = Rect(0, 0, 1920, 1080)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def pipeline(clock):
    return TrackingPipeline(Config(), SCREEN, clock=clock)


def test_starts_searching(pipeline):
    assert pipeline.status == TrackingStatus.SEARCHING_HAND


def test_first_frame_tracks(pipeline):
    result = pipeline.process(relaxed(), 0.0)
    assert result.status == TrackingStatus.TRACKING
    assert result.events == []
    x, y = result.cursor
    # Index tip at x=0.45 is mirrored to the right half of the screen
    assert x == pytest.approx(0.55 * 1920)
    assert 0.0 <= y <= 1080.0


def test_timestamp_defaults_to_clock(pipeline, clock):
    clock.now = 5.0
    pipeline.process(pinky_raised())
    assert pipeline.detector.activation_time(GestureFlag.LEFT_CLICK_HOLD) == 5.0


def test_click_event_is_reported(pipeline):
    assert pipeline.process(pinky_raised(), 0.0).events == []
    assert pipeline.process(pinky_raised(), 0.25).events == [LEFT_CLICK]


def test_short_hand_loss_keeps_state(pipeline):
    pipeline.process(pinky_raised(), 0.0)
    result = pipeline.process(None, 0.1)
    assert result.cursor is None
    assert result.events == []
    assert result.status == TrackingStatus.TRACKING
    assert pipeline.detector.activation_time(GestureFlag.LEFT_CLICK_HOLD) == 0.0


def test_hand_loss_timeout_resets(pipeline):
    pipeline.process(pinky_raised(), 0.0)
    pipeline.process(pinky_raised(), 0.25)
    pipeline.process(None, 0.3)
    result = pipeline.process(None, 0.5)
    assert result.status == TrackingStatus.SEARCHING_HAND
    assert pipeline.detector.activation_time(GestureFlag.LEFT_CLICK_HOLD) is None
    assert pipeline.detector.last_fired(LEFT_CLICK.kind) is None

    # Cursor starts over at the mapped point
    result = pipeline.process(relaxed(), 0.6)
    assert result.cursor[0] == pytest.approx(0.55 * 1920)


def test_no_hand_before_any_hand(pipeline):
    result = pipeline.process(None, 0.0)
    assert result.status == TrackingStatus.SEARCHING_HAND
    assert result.cursor is None


def test_low_visibility_withholds_cursor(pipeline):
    pipeline.process(fist(), 0.0)
    assert pipeline.swipe_detector.origin is not None

    result = pipeline.process(invisible(), 0.05)
    assert result.status == TrackingStatus.SEARCHING_HAND
    assert result.cursor is None
    assert result.events == []
    assert pipeline.swipe_detector.origin is None


def test_low_visibility_clears_gesture_flags(pipeline):
    pipeline.process(pinky_raised(), 0.0)
    pipeline.process(invisible(), 0.1)
    assert pipeline.detector.activation_time(GestureFlag.LEFT_CLICK_HOLD) is None


def test_fist_swipe(pipeline):
    start = pipeline.process(fist(), 0.0)
    assert start.events == []
    result = pipeline.process(shifted(fist(), -0.3, 0.0), 0.1)
    assert result.cursor[0] > start.cursor[0]
    assert result.events == [GestureEvent.swipe(SwipeDirection.RIGHT)]


def test_screen_origin_offset(clock):
    bounds = Rect(-1920, 0, 3840, 1080)
    pipeline = TrackingPipeline(Config(), bounds, clock=clock)
    result = pipeline.process(relaxed(), 0.0)
    assert result.cursor[0] == pytest.approx(0.55 * 3840 - 1920)


def test_set_screen_bounds_clamps_cursor(pipeline):
    pipeline.process(relaxed(), 0.0)
    pipeline.set_screen_bounds(Rect(0, 0, 100, 100))
    x, y = pipeline.process(relaxed(), 0.05).cursor
    assert 0.0 <= x <= 100.0
    assert 0.0 <= y <= 100.0


def test_set_config(pipeline):
    config = Config()
    config.gestures.hold_ms = 500
    pipeline.set_config(config)
    assert pipeline.config is config

    pipeline.process(pinky_raised(), 0.0)
    assert pipeline.process(pinky_raised(), 0.25).events == []


def test_reset(pipeline):
    pipeline.process(fist(), 0.0)
    pipeline.reset()
    assert pipeline.status == TrackingStatus.SEARCHING_HAND
    assert pipeline.swipe_detector.origin is None


def test_frame_gate_drops_busy_frames():
    gate = FrameGate()
    assert gate.try_enter()
    assert not gate.try_enter()
    assert not gate.try_enter()
    assert gate.dropped == 2

    gate.leave()
    assert gate.try_enter()
    gate.leave()
    assert gate.dropped == 2


def test_raised_visibility_floor_applies_to_gestures(pipeline):
    config = Config()
    config.tracking.visibility_floor = 0.5
    pipeline.set_config(config)
    assert pipeline.detector.visibility_floor == 0.5

    dim = dataclasses.replace(pinky_raised(), visibility=0.3)
    for t in (0.0, 0.3):
        result = pipeline.process(dim, t)
        assert result.events == []
        assert result.cursor is None
        assert result.status == TrackingStatus.SEARCHING_HAND
    assert pipeline.detector.last_fired(LEFT_CLICK.kind) is None
    assert pipeline.detector.activation_time(GestureFlag.LEFT_CLICK_HOLD) is None

    # A clear hand right after is not held back by a hidden click
    assert pipeline.process(pinky_raised(), 0.35).events == []
    assert pipeline.process(pinky_raised(), 0.6).events == [LEFT_CLICK]


def test_lowered_visibility_floor_accepts_dim_hand(pipeline):
    config = Config()
    config.tracking.visibility_floor = 0.02
    pipeline.set_config(config)

    result = pipeline.process(invisible(), 0.0)
    assert result.status == TrackingStatus.TRACKING
    assert result.cursor is not None
