"""
Background worker for camera capture and gesture tracking.
Runs in a separate QThread; results are delivered through Qt signals.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
import logging
import threading
import time
from PyQt5.QtCore import QObject, pyqtSignal

from gestures.config import Config
from gestures.landmarks import LandmarkSample, Rect
from gestures.tracking import FrameGate, TrackingPipeline, TrackingStatus

from .hand_tracker import HandTracker

logger = logging.getLogger(__name__)


class TrackingWorker(QObject):
    """
    Pulls camera frames and runs them through the tracking pipeline.

    Capture and processing run on separate threads. Only one frame is
    processed at a time; frames arriving meanwhile are dropped.
    Connect the signals with Qt.QueuedConnection so consumers run on
    their own thread and never block processing.
    """
    # Signals
    cursor_moved = pyqtSignal(float, float)
    gesture_event = pyqtSignal(object)    # Emits GestureEvent
    debug_state = pyqtSignal(object)      # Emits GestureDebugState when it changes
    status_changed = pyqtSignal(object)   # Emits TrackingStatus
    error = pyqtSignal(str)

    def __init__(self, config: Config, screen_bounds: Rect, parent=None):
        super().__init__(parent)
        self._config = config
        self._pipeline = TrackingPipeline(config, screen_bounds)
        self._tracker: Optional[HandTracker] = None
        self._gate = FrameGate()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._capture_thread: Optional[threading.Thread] = None
        self._is_running = False

        # Status is set from the worker thread and the processing thread
        self._status_lock = threading.Lock()
        self._status = TrackingStatus.IDLE
        self._last_debug = None

    @property
    def status(self) -> TrackingStatus:
        with self._status_lock:
            return self._status

    def set_screen_bounds(self, bounds: Rect) -> None:
        self._pipeline.set_screen_bounds(bounds)

    def start_process(self):
        """Start camera capture. Runs in the worker thread."""
        if self._is_running:
            return

        self._set_status(TrackingStatus.PREPARING)
        self._tracker = HandTracker(self._config)
        if not self._tracker.start():
            self._set_status(TrackingStatus.CAMERA_UNAVAILABLE)
            self.error.emit("Could not open camera")
            return

        self._pipeline.reset()
        self._last_debug = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tracking")
        self._is_running = True
        self._set_status(TrackingStatus.SEARCHING_HAND)

        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._capture_thread.start()

    def stop_process(self):
        """Stop capture and release the camera."""
        was_running = self._is_running
        self._is_running = False
        if self._capture_thread:
            self._capture_thread.join(timeout=1.0)
            self._capture_thread = None
        if self._executor:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._tracker:
            self._tracker.stop()
            self._tracker = None
        self._pipeline.reset()
        if was_running:
            logger.info("Tracking stopped, %d frames dropped", self._gate.dropped)
            self._set_status(TrackingStatus.IDLE)

    def _capture_loop(self):
        """Background thread that reads frames as fast as the camera delivers them."""
        while self._is_running:
            try:
                frame_read, sample = self._tracker.get_sample()
            except Exception as e:
                logger.exception("Capture error")
                self.error.emit(f"Capture error: {e}")
                time.sleep(0.1)  # Cool down on error
                continue

            if not frame_read:
                time.sleep(0.005)
                continue

            if not self._submit_frame(sample, time.monotonic()):
                break

    def _submit_frame(self, sample: Optional[LandmarkSample], timestamp: float) -> bool:
        """
        Hand one frame to the processing thread.

        Returns False once the executor is gone and capture should end.
        """
        executor = self._executor
        if executor is None:
            return False

        if not self._gate.try_enter():
            logger.debug("Frame dropped (%d total)", self._gate.dropped)
            return True

        try:
            executor.submit(self._process_frame, sample, timestamp)
        except RuntimeError:
            # Executor shut down by stop_process while capture was blocked
            self._gate.leave()
            return False
        return True

    def _process_frame(self, sample: Optional[LandmarkSample], timestamp: float):
        try:
            result = self._pipeline.process(sample, timestamp)

            if result.cursor is not None:
                self.cursor_moved.emit(result.cursor[0], result.cursor[1])
            for event in result.events:
                self.gesture_event.emit(event)
            if sample is not None and result.debug != self._last_debug:
                self._last_debug = result.debug
                self.debug_state.emit(result.debug)
            self._set_status(result.status)
        except Exception as e:
            logger.exception("Frame processing failed")
            self.error.emit(f"Worker Exception: {e}")
        finally:
            self._gate.leave()

    def _set_status(self, status: TrackingStatus):
        with self._status_lock:
            if status == self._status:
                return
            self._status = status
        self.status_changed.emit(status)
