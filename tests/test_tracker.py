"""
Test cases for converting landmark source results and for the mock feedback renderer.
"""
import asyncio
import unittest
import sys
from pathlib import Path
from types import SimpleNamespace

# Add project root and tests dir to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from gesture_core.feedback_mock import MockFeedback
from gesture_core.pipeline import GesturePipeline
from gesture_core.tracker import frame_from_results
from gesture_core.types import FeedbackProto, GestureEvent
from synthetic_hands import VICTORY_CURLS, make_hand


def landmark_objects(points):
    return [SimpleNamespace(x=x, y=y, z=z) for x, y, z in points]


def category(name, score):
    return SimpleNamespace(category_name=name, score=score)


class TestFrameFromResults(unittest.TestCase):
    """Test conversion of MediaPipe Tasks results into frames."""

    def test_first_hand_and_top_gesture(self):
        first = landmark_objects(make_hand(curls=VICTORY_CURLS))
        second = landmark_objects(make_hand())
        result = SimpleNamespace(
            hand_landmarks=[first, second],
            gestures=[[category("Victory", 0.91), category("None", 0.05)], [category("Open_Palm", 0.8)]],
        )
        frame = frame_from_results(1234.0, gesture_result=result)

        self.assertEqual(frame.timestamp_ms, 1234.0)
        self.assertEqual(frame.hand_landmarks, first)
        self.assertEqual(frame.external_gesture.name, "Victory")
        self.assertAlmostEqual(frame.external_gesture.score, 0.91)
        self.assertIsNone(frame.blendshapes)

    def test_no_hand(self):
        frame = frame_from_results(0.0, gesture_result=SimpleNamespace(hand_landmarks=[], gestures=[]))
        self.assertIsNone(frame.hand_landmarks)
        self.assertIsNone(frame.external_gesture)

    def test_face_blendshapes(self):
        result = SimpleNamespace(face_blendshapes=[[category("jawOpen", 0.7), category("browInnerUp", 0.2)]])
        frame = frame_from_results(0.0, face_result=result)
        self.assertEqual(frame.blendshapes, {"jawOpen": 0.7, "browInnerUp": 0.2})
        self.assertIsNone(frame.hand_landmarks)

    def test_results_drive_pipeline(self):
        result = SimpleNamespace(
            hand_landmarks=[landmark_objects(make_hand(curls=VICTORY_CURLS))],
            gestures=[[category("None", 0.6)]],
        )
        event = GesturePipeline().process(frame_from_results(0.0, gesture_result=result))
        self.assertEqual(event.name, "Victory")
        self.assertEqual(event.source, "estimator")


class TestMockFeedback(unittest.TestCase):
    """Test the mock feedback renderer."""

    def test_satisfies_protocol(self):
        self.assertIsInstance(MockFeedback(), FeedbackProto)

    def test_records_calls(self):
        feedback = MockFeedback()
        event = GestureEvent(name="Victory", confidence=90.0, timestamp=0.0)

        asyncio.run(feedback.on_gesture(event))
        asyncio.run(feedback.on_clear())
        self.assertEqual(feedback.events, [event])
        self.assertEqual(feedback.clear_count, 1)

        feedback.reset_counters()
        self.assertEqual(feedback.events, [])
        self.assertEqual(feedback.clear_count, 0)


if __name__ == '__main__':
    unittest.main()
