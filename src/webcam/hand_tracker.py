"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Captures camera frames and converts the first detected hand to a LandmarkSample.
"""
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import logging
import time
import cv2
import numpy as np
import mediapipe as mp

from gestures.config import Config, CameraConfig, MediaPipeConfig
from gestures.landmarks import LandmarkSample, Point

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

# MediaPipe landmark indices
WRIST = 0
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_TIP = 12
RING_MCP = 13
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_TIP = 20

PALM_INDICES = (WRIST, INDEX_MCP, MIDDLE_MCP, RING_MCP, PINKY_MCP)

# Joint chains drawn in the debug view
FINGER_CHAINS = (
    (WRIST, 1, 2, 3, THUMB_TIP),
    (WRIST, INDEX_MCP, INDEX_PIP, 7, INDEX_TIP),
    (WRIST, MIDDLE_MCP, 10, 11, MIDDLE_TIP),
    (WRIST, RING_MCP, 14, 15, RING_TIP),
    (WRIST, PINKY_MCP, PINKY_PIP, 19, PINKY_TIP),
    (INDEX_MCP, MIDDLE_MCP, RING_MCP, PINKY_MCP),
)


def to_sample(points: Sequence[Tuple[float, float]], confidence: float) -> LandmarkSample:
    """
    Build a LandmarkSample from 21 MediaPipe (x, y) image coordinates.

    MediaPipe puts the origin at the top-left; samples use a bottom-left
    origin, so y is flipped. The image itself is not mirrored here.
    """
    def pt(index: int) -> Point:
        x, y = points[index]
        return (float(x), 1.0 - float(y))

    palm = [pt(i) for i in PALM_INDICES]
    palm_center = (
        sum(p[0] for p in palm) / len(palm),
        sum(p[1] for p in palm) / len(palm),
    )

    return LandmarkSample(
        thumb_tip=pt(THUMB_TIP),
        index_tip=pt(INDEX_TIP),
        index_pip=pt(INDEX_PIP),
        index_mcp=pt(INDEX_MCP),
        middle_tip=pt(MIDDLE_TIP),
        ring_tip=pt(RING_TIP),
        little_tip=pt(PINKY_TIP),
        little_pip=pt(PINKY_PIP),
        little_mcp=pt(PINKY_MCP),
        wrist=pt(WRIST),
        palm_center=palm_center,
        visibility=float(confidence),
    )


class HandTracker:
    """
    MediaPipe hand tracking wrapper with camera management.
    Uses the MediaPipe Tasks API (0.10+) in VIDEO mode.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: FingerCursor configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        if model_path is None and self._mp_config.model_path:
            model_path = Path(self._mp_config.model_path)
        self._model_path = model_path or self.DEFAULT_MODEL_PATH

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        # State
        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._last_points: Optional[List[Tuple[float, float]]] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            logger.error("Hand landmarker model missing at %s (see %s)", self._model_path, MODEL_URL)
            return False

        self._cap = self._open_camera()
        if self._cap is None:
            return False

        self._landmarker = self._create_landmarker()
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        logger.info("Hand tracking started on camera %d", self._camera_config.device_id)
        return True

    def _open_camera(self) -> Optional[cv2.VideoCapture]:
        camera = self._camera_config
        cap = cv2.VideoCapture(camera.device_id)
        if not cap.isOpened():
            logger.error("Could not open camera %d", camera.device_id)
            cap.release()
            return None

        for prop, value in (
            (cv2.CAP_PROP_FRAME_WIDTH, camera.width),
            (cv2.CAP_PROP_FRAME_HEIGHT, camera.height),
            (cv2.CAP_PROP_FPS, camera.fps),
        ):
            cap.set(prop, value)
        return cap

    def _create_landmarker(self) -> HandLandmarker:
        mp_config = self._mp_config
        return HandLandmarker.create_from_options(HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=mp_config.max_num_hands,
            min_hand_detection_confidence=mp_config.min_detection_confidence,
            min_tracking_confidence=mp_config.min_tracking_confidence,
        ))

    def _next_timestamp_ms(self) -> int:
        # VIDEO mode rejects timestamps that do not increase
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        timestamp_ms = max(timestamp_ms, self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None
        self._last_points = None

    def get_sample(self) -> Tuple[bool, Optional[LandmarkSample]]:
        """
        Capture one frame and detect the hand.

        Returns:
            (frame_read, sample). frame_read is False when the camera
            returned no frame; sample is None when no hand was found.
        """
        if not self._is_running or self._cap is None or self._landmarker is None:
            return False, None

        ret, frame = self._cap.read()
        if not ret:
            return False, None

        self._frame_count += 1
        self._last_frame = frame

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb.flags.writeable = False
        result = self._landmarker.detect_for_video(
            mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb),
            self._next_timestamp_ms(),
        )

        if not result.hand_landmarks:
            self._last_points = None
            return True, None

        # Only the first hand is tracked
        points = [(lm.x, lm.y) for lm in result.hand_landmarks[0]]
        confidence = result.handedness[0][0].score
        self._last_points = points

        return True, to_sample(points, confidence)

    def get_frame_with_landmarks(self, black_background: bool = False) -> Optional[np.ndarray]:
        """
        Get the last frame with the last detected landmarks drawn on it.

        The frame is mirrored for display so it matches cursor motion.
        """
        if self._last_frame is None:
            return None

        if black_background:
            frame = np.zeros_like(self._last_frame)
        else:
            frame = self._last_frame.copy()

        if self._last_points is not None:
            h, w = frame.shape[:2]
            pixels = np.array(
                [(x * w, y * h) for x, y in self._last_points], dtype=np.int32
            )
            chains = [pixels[list(chain)].reshape(-1, 1, 2) for chain in FINGER_CHAINS]
            cv2.polylines(frame, chains, False, (0, 255, 0), 2)
            for x, y in pixels:
                cv2.circle(frame, (int(x), int(y)), 4, (0, 0, 255), -1)

        return cv2.flip(frame, 1)

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count
