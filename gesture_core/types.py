"""
Type definitions for the gesture classification engine.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable


class Finger(Enum):
    """Finger identity. Definition order is the canonical finger order."""
    THUMB = "Thumb"
    INDEX = "Index"
    MIDDLE = "Middle"
    RING = "Ring"
    PINKY = "Pinky"

    @property
    def label(self) -> str:
        return self.value


class CurlState(Enum):
    """How far a finger is bent."""
    NO_CURL = "No Curl"
    HALF_CURL = "Half Curl"
    FULL_CURL = "Full Curl"

    @property
    def label(self) -> str:
        return self.value


class DirectionState(Enum):
    """Pointing orientation of a finger's distal segment (image coordinates, y grows down)."""
    VERTICAL_UP = "Vertical Up"
    VERTICAL_DOWN = "Vertical Down"
    HORIZONTAL_LEFT = "Horizontal Left"
    HORIZONTAL_RIGHT = "Horizontal Right"
    DIAGONAL_UP_LEFT = "Diagonal Up Left"
    DIAGONAL_UP_RIGHT = "Diagonal Up Right"
    DIAGONAL_DOWN_LEFT = "Diagonal Down Left"
    DIAGONAL_DOWN_RIGHT = "Diagonal Down Right"

    @property
    def label(self) -> str:
        return self.value


class DetectionMode(Enum):
    """Which sub-pipelines run for each frame."""
    HANDS = "hands"
    FACE = "face"
    BOTH = "both"

    @property
    def uses_hands(self) -> bool:
        return self in (DetectionMode.HANDS, DetectionMode.BOTH)

    @property
    def uses_face(self) -> bool:
        return self in (DetectionMode.FACE, DetectionMode.BOTH)


@dataclass(frozen=True)
class Pose:
    """Discrete curl and direction state for every finger of one hand."""
    curls: Dict[Finger, CurlState]
    directions: Dict[Finger, DirectionState]

    def __post_init__(self):
        for finger in Finger:
            if finger not in self.curls or finger not in self.directions:
                raise ValueError(f"Pose is missing an entry for {finger.label}")

    def curl(self, finger: Finger) -> CurlState:
        return self.curls[finger]

    def direction(self, finger: Finger) -> DirectionState:
        return self.directions[finger]

    def describe(self) -> List[Tuple[str, str, str]]:
        """
        Human-readable snapshot of the pose.

        Returns:
            One (finger, curl, direction) label triple per finger, e.g.
            ("Thumb", "No Curl", "Vertical Up").
        """
        return [
            (finger.label, self.curls[finger].label, self.directions[finger].label)
            for finger in Finger
        ]

    @classmethod
    def from_labels(cls, rows: Sequence[Sequence[str]]) -> "Pose":
        """
        Rebuild a pose from the triples produced by describe().

        Raises:
            ValueError: if a label is unknown or a finger is missing
        """
        curls: Dict[Finger, CurlState] = {}
        directions: Dict[Finger, DirectionState] = {}
        for finger_label, curl_label, direction_label in rows:
            finger = Finger(finger_label)
            curls[finger] = CurlState(curl_label)
            directions[finger] = DirectionState(direction_label)
        return cls(curls=curls, directions=directions)


@dataclass(frozen=True)
class GestureCandidate:
    """Per-frame, unstabilized gesture match. Score is in [0, 1]."""
    name: str
    score: float
    source: str = "estimator"


@dataclass(frozen=True)
class ExpressionReading:
    """Per-frame facial expression label with its intensity in [0, 1]."""
    label: str
    intensity: float

    @property
    def name(self) -> str:
        return self.label

    @property
    def score(self) -> float:
        return self.intensity


# What the stabilizer consumes for one frame: a hand match, a face reading or nothing.
Signal = Union[GestureCandidate, ExpressionReading]


@dataclass(frozen=True)
class GestureEvent:
    """Stabilized gesture emitted to the feedback layer. Confidence is 0..100."""
    name: str
    confidence: float
    timestamp: float  # epoch milliseconds
    source: str = "estimator"


@dataclass(frozen=True)
class ExternalGesture:
    """Gesture reported by the landmark source's own pre-trained classifier."""
    name: str
    score: float

    @property
    def is_gesture(self) -> bool:
        # MediaPipe's canned recognizer reports the literal category "None"
        return bool(self.name) and self.name != "None"


@dataclass
class FrameInput:
    """Everything the external landmark source reports for one video frame."""
    timestamp_ms: float
    hand_landmarks: Optional[Sequence[object]] = None
    external_gesture: Optional[ExternalGesture] = None
    blendshapes: Optional[Mapping[str, float]] = None  # None when no face was detected


@runtime_checkable
class FeedbackProto(Protocol):
    """Abstract protocol for collaborators that render gesture events."""

    async def on_gesture(self, event: GestureEvent) -> None:
        """React to a newly emitted gesture event."""
        ...

    async def on_clear(self) -> None:
        """React to the active gesture being cleared."""
        ...
