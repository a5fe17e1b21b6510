"""
Test cases for the FastAPI service.
"""
import json
import unittest
import sys
from pathlib import Path

from fastapi.testclient import TestClient

# Add project root and tests dir to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from gesture_core.pipeline import GesturePipeline
from gesture_core.server import create_app
from synthetic_hands import THUMB_FOLDED_CURLS, VICTORY_CURLS, make_hand


def landmarks_json(points):
    return [{"x": x, "y": y, "z": z} for x, y, z in points]


class TestServer(unittest.TestCase):
    """Test the HTTP endpoints against an in-process pipeline."""

    def setUp(self):
        self.pipeline = GesturePipeline()
        self.client = TestClient(create_app(self.pipeline))

    def _frame(self, ts, points=None, **extra):
        body = {"timestamp_ms": ts}
        if points is not None:
            body["hand_landmarks"] = landmarks_json(points)
        body.update(extra)
        return self.client.post("/frames", json=body)

    def test_health(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["status"], "online")
        self.assertEqual(data["mode"], "hands")
        self.assertEqual(data["templates"], 5)

    def test_frame_emits_event(self):
        response = self._frame(1000, make_hand(curls=VICTORY_CURLS))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["event"]["name"], "Victory")
        self.assertEqual(data["current"]["name"], "Victory")

        data = self._frame(1100, make_hand(curls=VICTORY_CURLS)).json()
        self.assertIsNone(data["event"])
        self.assertEqual(data["current"]["name"], "Victory")

        gesture = self.client.get("/gesture").json()["gesture"]
        self.assertEqual(gesture["source"], "estimator")

    def test_frame_without_z(self):
        points = [{"x": x, "y": y} for x, y, _ in make_hand()]
        response = self.client.post("/frames", json={"timestamp_ms": 0, "hand_landmarks": points})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(self.client.get("/pose").json()["detected"])

    def test_external_gesture(self):
        data = self._frame(0, make_hand(curls=VICTORY_CURLS),
                           external_gesture={"name": "Pointing_Up", "score": 0.7}).json()
        self.assertEqual(data["event"]["name"], "Pointing_Up")
        self.assertEqual(data["event"]["source"], "external")

    def test_malformed_frame_rejected(self):
        response = self.client.post("/frames", json={"hand_landmarks": []})
        self.assertEqual(response.status_code, 422)

    def test_non_finite_timestamp_rejected(self):
        self._frame(1000, make_hand(curls=VICTORY_CURLS))

        body = json.dumps({
            "timestamp_ms": float("nan"),
            "hand_landmarks": landmarks_json(make_hand(curls=THUMB_FOLDED_CURLS)),
        })
        response = self.client.post("/frames", content=body, headers={"Content-Type": "application/json"})
        self.assertEqual(response.status_code, 422)

        response = self.client.get("/gesture")
        self.assertEqual(response.status_code, 200)
        gesture = response.json()["gesture"]
        self.assertEqual(gesture["name"], "Victory")
        self.assertEqual(gesture["timestamp"], 1000.0)

    def test_pose(self):
        self.assertEqual(self.client.get("/pose").json(), {"detected": False, "fingers": []})
        self._frame(0, make_hand(curls=VICTORY_CURLS))
        pose = self.client.get("/pose").json()
        self.assertTrue(pose["detected"])
        self.assertEqual(pose["fingers"][3], {"finger": "Ring", "curl": "Full Curl", "direction": "Vertical Up"})

    def test_templates_listing(self):
        templates = self.client.get("/templates").json()["templates"]
        self.assertEqual([t["name"] for t in templates], ["OK_Sign", "Rock_On", "Call_Me", "Victory", "Thumb_Up"])
        self.assertFalse(templates[0]["custom"])

    def test_capture_and_delete(self):
        self._frame(0, make_hand(curls=THUMB_FOLDED_CURLS))
        response = self.client.post("/templates", json={"name": "Four"})
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json()["custom"])
        self.assertEqual(len(response.json()["curls"]), 5)

        data = self._frame(50, make_hand(curls=THUMB_FOLDED_CURLS)).json()
        self.assertEqual(data["event"]["name"], "Four")

        self.assertEqual(self.client.delete("/templates/Four").json(), {"removed": 1})
        self.assertEqual(self.client.delete("/templates/Four").status_code, 404)

    def test_capture_without_hand(self):
        response = self.client.post("/templates", json={"name": "Four"})
        self.assertEqual(response.status_code, 409)

    def test_capture_blank_name(self):
        self._frame(0, make_hand())
        response = self.client.post("/templates", json={"name": "   "})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.client.get("/").json()["templates"], 5)

    def test_mode(self):
        response = self.client.put("/mode", json={"mode": "face"})
        self.assertEqual(response.json(), {"mode": "face"})
        self.assertEqual(self.pipeline.mode.value, "face")

        data = self._frame(0, blendshapes={"jawOpen": 0.8}).json()
        self.assertEqual(data["event"]["name"], "MouthOpen")
        self.assertEqual(data["event"]["source"], "face")

        self.assertEqual(self.client.put("/mode", json={"mode": "eyes"}).status_code, 422)


if __name__ == '__main__':
    unittest.main()
