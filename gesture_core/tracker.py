"""
Landmark source adapter over MediaPipe Tasks (GestureRecognizer + FaceLandmarker).
"""
import logging
from pathlib import Path
from typing import Optional

import numpy as np

from .config import MediaPipeConfig
from .expressions import blendshapes_to_dict
from .types import DetectionMode, ExternalGesture, FrameInput

logger = logging.getLogger(__name__)


def frame_from_results(timestamp_ms: float, gesture_result=None, face_result=None) -> FrameInput:
    """
    Convert MediaPipe Tasks results into a FrameInput.

    Only the first hand and the first face are kept.

    Args:
        timestamp_ms: frame time in epoch milliseconds
        gesture_result: GestureRecognizerResult (or None when hands were not run)
        face_result: FaceLandmarkerResult (or None when the face was not run)
    """
    hand_landmarks = None
    external = None
    if gesture_result is not None and getattr(gesture_result, "hand_landmarks", None):
        hand_landmarks = list(gesture_result.hand_landmarks[0])
        gestures = getattr(gesture_result, "gestures", None)
        if gestures and gestures[0]:
            top = gestures[0][0]
            external = ExternalGesture(name=top.category_name, score=float(top.score))

    blendshapes = None
    if face_result is not None and getattr(face_result, "face_blendshapes", None):
        blendshapes = blendshapes_to_dict(face_result.face_blendshapes[0])

    return FrameInput(
        timestamp_ms=timestamp_ms,
        hand_landmarks=hand_landmarks,
        external_gesture=external,
        blendshapes=blendshapes,
    )


class LandmarkTracker:
    """Runs the MediaPipe hand gesture recognizer and face landmarker on video frames."""

    def __init__(self, cfg: MediaPipeConfig):
        """
        Load both MediaPipe models in VIDEO running mode.

        Raises:
            FileNotFoundError: if a model file is missing
        """
        # Imported here so frame_from_results works without the MediaPipe runtime
        import mediapipe as mp
        from mediapipe.tasks import python as mp_tasks
        from mediapipe.tasks.python import vision

        for model_path in (cfg.gesture_model_path, cfg.face_model_path):
            if not Path(model_path).exists():
                raise FileNotFoundError(f"MediaPipe model not found: {model_path}")

        self._mp = mp
        self.recognizer = vision.GestureRecognizer.create_from_options(
            vision.GestureRecognizerOptions(
                base_options=mp_tasks.BaseOptions(model_asset_path=cfg.gesture_model_path),
                running_mode=vision.RunningMode.VIDEO,
                num_hands=cfg.num_hands,
                min_hand_detection_confidence=cfg.min_detection_confidence,
                min_hand_presence_confidence=cfg.min_presence_confidence,
                min_tracking_confidence=cfg.min_tracking_confidence,
            )
        )
        self.face_landmarker = vision.FaceLandmarker.create_from_options(
            vision.FaceLandmarkerOptions(
                base_options=mp_tasks.BaseOptions(model_asset_path=cfg.face_model_path),
                running_mode=vision.RunningMode.VIDEO,
                num_faces=cfg.num_faces,
                min_face_detection_confidence=cfg.min_detection_confidence,
                min_face_presence_confidence=cfg.min_presence_confidence,
                min_tracking_confidence=cfg.min_tracking_confidence,
                output_face_blendshapes=True,
            )
        )
        self._last_timestamp_ms = -1
        logger.info("MediaPipe gesture recognizer and face landmarker initialized")

    def process(self, frame_bgr: np.ndarray, timestamp_ms: float, mode: DetectionMode) -> Optional[FrameInput]:
        """
        Run the models needed for `mode` on one frame.

        Returns:
            FrameInput, or None when the frame is not newer than the previous
            one (VIDEO mode needs strictly increasing timestamps)
        """
        import cv2

        ts = int(timestamp_ms)
        if ts <= self._last_timestamp_ms:
            return None
        self._last_timestamp_ms = ts

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=frame_rgb)

        gesture_result = self.recognizer.recognize_for_video(mp_image, ts) if mode.uses_hands else None
        face_result = self.face_landmarker.detect_for_video(mp_image, ts) if mode.uses_face else None
        return frame_from_results(timestamp_ms, gesture_result, face_result)

    def close(self) -> None:
        self.recognizer.close()
        self.face_landmarker.close()
