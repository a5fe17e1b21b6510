"""
Test cases for the webcam application loop, with the camera and models mocked out.
"""
import asyncio
import importlib.util
import unittest
import sys
from pathlib import Path
from unittest import mock

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_core.config import load_config

HAS_CV2 = importlib.util.find_spec("cv2") is not None


@unittest.skipUnless(HAS_CV2, "opencv-python not installed")
class TestGestureApp(unittest.TestCase):
    """Test GestureApp without a camera."""

    def setUp(self):
        from gesture_core import main as app_module

        self.app_module = app_module
        self.cfg = load_config()

        cv2_patch = mock.patch.object(app_module, "cv2")
        tracker_patch = mock.patch.object(app_module, "LandmarkTracker")
        self.cv2 = cv2_patch.start()
        self.tracker_cls = tracker_patch.start()
        self.addCleanup(cv2_patch.stop)
        self.addCleanup(tracker_patch.stop)

        self.cap = self.cv2.VideoCapture.return_value
        self.cap.isOpened.return_value = True
        self.cv2.waitKey.return_value = -1

    def test_uses_given_config(self):
        with mock.patch.object(self.app_module, "load_config") as load:
            app = self.app_module.GestureApp(self.cfg)
        load.assert_not_called()
        self.assertIs(app.config, self.cfg)
        self.tracker_cls.assert_called_once_with(self.cfg.mediapipe)

    def test_frame_shown_when_tracker_skips(self):
        frame = np.zeros((48, 64, 3), dtype=np.uint8)
        self.cap.read.side_effect = [(True, frame), (True, frame), (False, None)]
        self.tracker_cls.return_value.process.return_value = None

        app = self.app_module.GestureApp(self.cfg)
        asyncio.run(app.run())

        self.assertEqual(self.cv2.imshow.call_count, 2)
        self.assertEqual(self.cv2.waitKey.call_count, 2)
        self.tracker_cls.return_value.close.assert_called_once()


if __name__ == '__main__':
    unittest.main()
