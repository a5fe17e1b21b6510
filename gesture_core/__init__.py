"""
Gesture Classification Engine

Turns per-frame 3D hand landmarks and facial blendshape scores into
debounced, named gesture events, and lets users author new hand gestures
from a live pose.
"""

__version__ = "0.1.0"
__author__ = "Gesture Feedback Team"

from .types import (
    Finger,
    CurlState,
    DirectionState,
    DetectionMode,
    Pose,
    GestureCandidate,
    ExpressionReading,
    GestureEvent,
    ExternalGesture,
    FrameInput,
    FeedbackProto,
)
from .errors import GestureError, MalformedLandmarksError, AuthoringError
from .config import load_config, Cfg
from .landmarks import HandLandmarks, extract_pose
from .templates import GestureTemplate, TemplateBuilder, TemplateLibrary, builtin_templates
from .estimator import GestureEstimator
from .expressions import ExpressionClassifier
from .stabilizer import Stabilizer, StabilizerState, step
from .authoring import capture_template
from .pipeline import GesturePipeline
from .feedback_mock import MockFeedback

__all__ = [
    "Finger",
    "CurlState",
    "DirectionState",
    "DetectionMode",
    "Pose",
    "GestureCandidate",
    "ExpressionReading",
    "GestureEvent",
    "ExternalGesture",
    "FrameInput",
    "FeedbackProto",
    "GestureError",
    "MalformedLandmarksError",
    "AuthoringError",
    "load_config",
    "Cfg",
    "HandLandmarks",
    "extract_pose",
    "GestureTemplate",
    "TemplateBuilder",
    "TemplateLibrary",
    "builtin_templates",
    "GestureEstimator",
    "ExpressionClassifier",
    "Stabilizer",
    "StabilizerState",
    "step",
    "capture_template",
    "GesturePipeline",
    "MockFeedback",
]
