"""
Hand landmark validation and per-finger pose feature extraction.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import MalformedLandmarksError
from .geometry import slope_angle, vertex_angle
from .types import CurlState, DirectionState, Finger, Pose

logger = logging.getLogger(__name__)

NUM_LANDMARKS = 21

# (start, mid, end) joints whose angle at `mid` measures curl
CURL_JOINTS: Dict[Finger, Tuple[int, int, int]] = {
    Finger.THUMB: (1, 3, 4),     # CMC, IP, tip
    Finger.INDEX: (0, 6, 8),     # wrist, PIP, tip
    Finger.MIDDLE: (0, 10, 12),
    Finger.RING: (0, 14, 16),
    Finger.PINKY: (0, 18, 20),
}

# (proximal, distal) joints whose 2-D slope gives the pointing direction
DIRECTION_JOINTS: Dict[Finger, Tuple[int, int]] = {
    Finger.THUMB: (2, 4),        # MCP -> tip
    Finger.INDEX: (5, 8),
    Finger.MIDDLE: (9, 12),
    Finger.RING: (13, 16),
    Finger.PINKY: (17, 20),
}

# Fixed curl thresholds (degrees at the middle joint)
NO_CURL_START_LIMIT = 130.0
HALF_CURL_START_LIMIT = 60.0


def _point_from(entry) -> Tuple[float, float, float]:
    """Read (x, y, z) from a landmark object, dict or sequence. Missing z is 0."""
    if hasattr(entry, "x") and hasattr(entry, "y"):
        z = getattr(entry, "z", None)
        return (float(entry.x), float(entry.y), float(z) if z is not None else 0.0)
    if isinstance(entry, dict):
        z = entry.get("z")
        return (float(entry["x"]), float(entry["y"]), float(z) if z is not None else 0.0)
    if isinstance(entry, (list, tuple, np.ndarray)) and len(entry) in (2, 3):
        z = entry[2] if len(entry) == 3 else 0.0
        return (float(entry[0]), float(entry[1]), float(z))
    raise MalformedLandmarksError(
        "Unsupported landmark format; expected object with x,y[,z], dict or sequence of 2-3 values."
    )


@dataclass(frozen=True)
class HandLandmarks:
    """
    The 21 landmarks of one hand as a (21, 3) float array.

    Build through from_points(), which rejects malformed input.
    """
    points: np.ndarray

    @classmethod
    def from_points(cls, landmarks: Iterable) -> "HandLandmarks":
        """
        Validate and convert raw landmarks.

        Args:
            landmarks: 21 landmark objects (.x/.y/.z), dicts or (x, y[, z]) sequences,
                or an existing (21, 2) / (21, 3) array

        Raises:
            MalformedLandmarksError: wrong count, unknown entry format or non-finite values
        """
        if isinstance(landmarks, HandLandmarks):
            return landmarks
        if landmarks is None:
            raise MalformedLandmarksError("No landmarks given")

        try:
            rows = [_point_from(entry) for entry in landmarks]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedLandmarksError(f"Could not read landmark: {e}") from e

        if len(rows) != NUM_LANDMARKS:
            raise MalformedLandmarksError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(rows)}"
            )

        arr = np.array(rows, dtype=float)
        if not np.all(np.isfinite(arr)):
            raise MalformedLandmarksError("Landmarks contain non-finite coordinates")

        arr.setflags(write=False)
        return cls(points=arr)

    def __getitem__(self, index: int) -> np.ndarray:
        return self.points[index]

    def __len__(self) -> int:
        return len(self.points)


def classify_curl(angle_deg: float) -> CurlState:
    """Map an interior joint angle (degrees) to a curl state."""
    if angle_deg > NO_CURL_START_LIMIT:
        return CurlState.NO_CURL
    if angle_deg > HALF_CURL_START_LIMIT:
        return CurlState.HALF_CURL
    return CurlState.FULL_CURL


def classify_direction(angle_deg: float) -> DirectionState:
    """
    Bucket a segment angle (degrees, image coordinates) into one of four cardinal directions.

    Diagonal states are never produced here.
    """
    if -45.0 < angle_deg <= 45.0:
        return DirectionState.HORIZONTAL_RIGHT
    if 45.0 < angle_deg <= 135.0:
        return DirectionState.VERTICAL_DOWN
    if angle_deg > 135.0 or angle_deg <= -135.0:
        return DirectionState.HORIZONTAL_LEFT
    return DirectionState.VERTICAL_UP


def finger_curl_angle(hand: HandLandmarks, finger: Finger) -> float:
    start, mid, end = CURL_JOINTS[finger]
    return vertex_angle(hand[start], hand[mid], hand[end])


def finger_direction_angle(hand: HandLandmarks, finger: Finger) -> float:
    proximal, distal = DIRECTION_JOINTS[finger]
    return slope_angle(hand[proximal], hand[distal])


def extract_pose(landmarks: Union[HandLandmarks, Sequence[object], None]) -> Optional[Pose]:
    """
    Derive curl and direction state for every finger.

    Args:
        landmarks: one hand's 21 landmarks in normalized frame coordinates

    Returns:
        Pose, or None if the landmarks are missing or malformed (treated
        by callers as "no hand detected" for this frame)
    """
    if landmarks is None:
        return None

    try:
        hand = HandLandmarks.from_points(landmarks)
    except MalformedLandmarksError as e:
        logger.debug(f"Dropping malformed hand landmarks: {e}")
        return None

    curls = {finger: classify_curl(finger_curl_angle(hand, finger)) for finger in Finger}
    directions = {finger: classify_direction(finger_direction_angle(hand, finger)) for finger in Finger}
    return Pose(curls=curls, directions=directions)
