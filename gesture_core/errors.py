"""
Exceptions raised by the gesture classification engine.
"""


class GestureError(Exception):
    """Base class for gesture engine errors."""


class MalformedLandmarksError(GestureError, ValueError):
    """Landmark set has the wrong length or non-finite coordinates."""


class AuthoringError(GestureError):
    """A gesture template could not be captured."""

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason  # "no_pose" or "invalid_name"
