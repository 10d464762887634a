"""
FingerCursor Gesture Core

Landmark filtering, gesture state machine and cursor dynamics.
No camera, OS or UI access happens in this package.
"""
from .config import Config, load_config, gesture_parameters
from .landmarks import LandmarkSample, Rect, Point
from .one_euro_filter import OneEuroFilter
from .classifier import GestureParameters, GestureReading, classify
from .state_machine import (
    GestureStateMachine,
    GestureEvent,
    GestureFlag,
    GestureDebugState,
    EventKind,
    SwipeDirection,
)
from .swipe import SwipeDetector
from .mapping import FingertipMapper, MappingContext
from .dynamics import CursorDynamics, CursorSettings
from .tracking import TrackingPipeline, TrackingStatus, FrameResult, FrameGate

__all__ = [
    'Config',
    'load_config',
    'gesture_parameters',
    'LandmarkSample',
    'Rect',
    'Point',
    'OneEuroFilter',
    'GestureParameters',
    'GestureReading',
    'classify',
    'GestureStateMachine',
    'GestureEvent',
    'GestureFlag',
    'GestureDebugState',
    'EventKind',
    'SwipeDirection',
    'SwipeDetector',
    'FingertipMapper',
    'MappingContext',
    'CursorDynamics',
    'CursorSettings',
    'TrackingPipeline',
    'TrackingStatus',
    'FrameResult',
    'FrameGate',
]
