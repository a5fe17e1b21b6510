"""
Configuration management for the gesture classification engine.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from .types import DetectionMode


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Tasks model settings."""
    gesture_model_path: str
    face_model_path: str
    num_hands: int
    num_faces: int
    min_detection_confidence: float
    min_presence_confidence: float
    min_tracking_confidence: float


@dataclass
class DetectionConfig:
    """Gesture detection and stabilization settings."""
    mode: DetectionMode
    debounce_ms: float
    min_score: float  # estimator floor, 0..1


@dataclass
class ExpressionConfig:
    """Facial expression thresholds."""
    smile_threshold: float
    mouth_open_threshold: float
    brow_raise_threshold: float


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    window_name: str


@dataclass
class ServerConfig:
    """HTTP service settings."""
    host: str
    port: int


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    detection: DetectionConfig
    expressions: ExpressionConfig
    display: DisplayConfig
    server: ServerConfig
    logging: LoggingConfig


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if a value is out of range (unknown mode, bad threshold)
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        gesture_model_path=mp_data['gesture_model_path'],
        face_model_path=mp_data['face_model_path'],
        num_hands=mp_data['num_hands'],
        num_faces=mp_data['num_faces'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_presence_confidence=mp_data['min_presence_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    detection_data = data['detection']
    min_score = float(detection_data['min_score'])
    if not 0.0 <= min_score <= 1.0:
        raise ValueError(f"detection.min_score must be in [0, 1], got {min_score}")
    detection = DetectionConfig(
        mode=DetectionMode(detection_data['mode']),
        debounce_ms=float(detection_data['debounce_ms']),
        min_score=min_score
    )

    expr_data = data['expressions']
    expressions = ExpressionConfig(
        smile_threshold=float(expr_data['smile_threshold']),
        mouth_open_threshold=float(expr_data['mouth_open_threshold']),
        brow_raise_threshold=float(expr_data['brow_raise_threshold'])
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        window_name=display_data['window_name']
    )

    server_data = data['server']
    server = ServerConfig(
        host=server_data['host'],
        port=int(server_data['port'])
    )

    logging_config = LoggingConfig(level=data.get('logging', {}).get('level', 'INFO'))

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        detection=detection,
        expressions=expressions,
        display=display,
        server=server,
        logging=logging_config
    )
