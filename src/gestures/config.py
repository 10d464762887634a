"""
Config loader for FingerCursor.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml

from .classifier import FIST_MAXIMUM_EXTENSION, PINKY_LIFT_RATIO, GestureParameters
from .dynamics import CursorSettings
from .state_machine import VISIBILITY_FLOOR

# Pixel thresholds are expressed against a 720px-high camera image
REFERENCE_HEIGHT_PX = 720.0

PINCH_PIXELS_MIN = 5.0
PINCH_PIXELS_MAX = 80.0


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30


@dataclass
class MediaPipeConfig:
    max_num_hands: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    model_path: Optional[str] = None


@dataclass
class GestureConfig:
    pinch_pixels: float = 25.0        # Pinky sensitivity (5 = most sensitive, 80 = strictest)
    two_finger_pixels: float = 25.0   # Index/middle tip distance for right click
    palm_area_minimum: float = 190.0  # Mean fingertip extension for an open palm
    debounce_ms: int = 120
    hold_ms: int = 80
    refractory_ms: int = 200


@dataclass
class SmoothingConfig:
    min_cutoff: float = 1.2
    beta: float = 0.007
    derivative_cutoff: float = 1.0


@dataclass
class CursorConfig:
    base_gain: float = 1.0
    acceleration_k: float = 0.35
    velocity_reference: float = 950.0

    def settings(self) -> CursorSettings:
        return CursorSettings(
            base_gain=self.base_gain,
            acceleration_k=self.acceleration_k,
            velocity_reference=self.velocity_reference,
        )


@dataclass
class TrackingConfig:
    hand_loss_timeout: float = 0.2      # Seconds without a hand before state is dropped
    orientation_weight: float = 0.18    # Blend of finger orientation into vertical position
    orientation_smoothing: float = 0.25
    visibility_floor: float = VISIBILITY_FLOOR


@dataclass
class UIConfig:
    debug_overlay: bool = False


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    cursor: CursorConfig = field(default_factory=CursorConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def gesture_parameters(config: GestureConfig) -> GestureParameters:
    """
    Derive classifier thresholds from the user-facing gesture settings.

    The single pinky sensitivity setting scales all pinky thresholds
    between their loosest and strictest values.
    """
    pinch = min(max(config.pinch_pixels, PINCH_PIXELS_MIN), PINCH_PIXELS_MAX)
    scale = (pinch - PINCH_PIXELS_MIN) / (PINCH_PIXELS_MAX - PINCH_PIXELS_MIN)

    return GestureParameters(
        two_finger_threshold=config.two_finger_pixels / REFERENCE_HEIGHT_PX,
        palm_area_minimum=config.palm_area_minimum / REFERENCE_HEIGHT_PX,
        debounce=config.debounce_ms / 1000.0,
        hold=config.hold_ms / 1000.0,
        refractory=config.refractory_ms / 1000.0,
        pinky_lift_ratio=PINKY_LIFT_RATIO,
        pinky_lift_delta=0.015 + scale * 0.045,
        pinky_lift_minimum=0.06 + scale * 0.12,
        pinky_separation=0.028 + scale * 0.02,
        pinky_straightness_threshold=0.5 + scale * 0.3,
        fist_maximum_extension=FIST_MAXIMUM_EXTENSION,
    )


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        smoothing=_dict_to_dataclass(SmoothingConfig, data.get('smoothing')),
        cursor=_dict_to_dataclass(CursorConfig, data.get('cursor')),
        tracking=_dict_to_dataclass(TrackingConfig, data.get('tracking')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
