"""
Webcam application driving the gesture pipeline.
"""
import argparse
import asyncio
import logging
import time
from typing import Optional

import cv2
import numpy as np

from .config import Cfg, load_config
from .errors import AuthoringError
from .feedback_mock import MockFeedback
from .pipeline import GesturePipeline
from .tracker import LandmarkTracker
from .types import DetectionMode

logger = logging.getLogger(__name__)

MODE_CYCLE = [DetectionMode.HANDS, DetectionMode.FACE, DetectionMode.BOTH]


def draw_landmarks(frame: np.ndarray, landmarks) -> np.ndarray:
    """
    Draw hand landmarks on the frame.

    Args:
        frame: Input frame
        landmarks: 21 landmarks with normalized .x/.y

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]
    for i, lm in enumerate(landmarks):
        px = int(lm.x * width)
        py = int(lm.y * height)
        cv2.circle(frame, (px, py), 3, (0, 255, 0), -1)
        cv2.putText(frame, str(i), (px + 5, py - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.3, (255, 255, 255), 1)
    return frame


class GestureApp:
    """Main application class: camera -> landmarks -> pipeline -> feedback."""

    def __init__(self, cfg: Optional[Cfg] = None, config_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = cfg if cfg is not None else load_config(config_path)
        self.tracker = LandmarkTracker(self.config.mediapipe)
        self.pipeline = GesturePipeline(self.config)
        self.feedback = MockFeedback()
        self._captures = 0

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    def _cycle_mode(self) -> None:
        current = MODE_CYCLE.index(self.pipeline.mode)
        self.pipeline.set_mode(MODE_CYCLE[(current + 1) % len(MODE_CYCLE)])

    def _capture(self) -> None:
        self._captures += 1
        try:
            template = self.pipeline.capture(f"Custom_{self._captures}")
            logger.info(f"Saved gesture {template.name}")
        except AuthoringError as e:
            self._captures -= 1
            logger.warning(f"Capture failed: {e}")

    async def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name}")
        logger.info("Keys: 'm' cycle mode, 'c' capture current pose, 'q' quit")

        was_active = False
        while True:
            ret, frame = self.cap.read()
            if not ret:
                logger.error("Failed to read frame from camera")
                break

            t_now_ms = time.time() * 1000.0
            frame_input = self.tracker.process(frame, t_now_ms, self.pipeline.mode)
            # a repeated clock tick yields no input; the frame is still shown
            if frame_input is not None:
                event = self.pipeline.process(frame_input)
                if event:
                    await self.feedback.on_gesture(event)

            active = self.pipeline.current_gesture
            if was_active and active is None:
                await self.feedback.on_clear()
            was_active = active is not None

            if frame_input is not None and frame_input.hand_landmarks and self.config.display.show_landmarks:
                frame = draw_landmarks(frame, frame_input.hand_landmarks)

            status_text = f"Mode: {self.pipeline.mode.value}"
            gesture_text = (
                f"Gesture: {active.name} ({active.confidence:.0f}%)" if active else "Gesture: -"
            )
            cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
            cv2.putText(frame, gesture_text, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.7,
                        (0, 255, 0) if active else (0, 0, 255), 2)

            for i, (finger, curl, direction) in enumerate(self.pipeline.pose_snapshot()):
                cv2.putText(frame, f"{finger}: {curl} ({direction})", (10, 90 + i * 20),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

            cv2.putText(frame, "m = mode, c = capture, q = quit", (10, frame.shape[0] - 20),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

            cv2.imshow(self.config.display.window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('m'):
                self._cycle_mode()
            elif key == ord('c'):
                self._capture()

        # Cleanup
        self.cap.release()
        self.tracker.close()
        cv2.destroyAllWindows()

    def __del__(self):
        """Cleanup resources."""
        if hasattr(self, 'cap') and self.cap.isOpened():
            self.cap.release()


async def main():
    """Entry point for the application."""
    parser = argparse.ArgumentParser(description="Hand and face gesture feedback")
    parser.add_argument("--config", help="Path to a YAML config file")
    args = parser.parse_args()

    cfg = load_config(args.config)
    logging.basicConfig(level=getattr(logging, cfg.logging.level.upper(), logging.INFO))

    try:
        app = GestureApp(cfg)
        await app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except (RuntimeError, FileNotFoundError) as e:
        logger.error(f"Error: {e}")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
