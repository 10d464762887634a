"""
FingerCursor Webcam Module

Camera capture, MediaPipe hand landmarks and the background tracking worker.
"""
from .hand_tracker import HandTracker, to_sample
from .worker import TrackingWorker

__all__ = [
    'HandTracker',
    'to_sample',
    'TrackingWorker',
]
