"""
Gesture authoring: turn a live pose into a new weighted template.
"""
import logging
from typing import Optional, Sequence

from .errors import AuthoringError
from .templates import GestureTemplate, TemplateBuilder, TemplateLibrary
from .types import Finger, Pose

logger = logging.getLogger(__name__)

CAPTURED_CURL_WEIGHT = 1.0
CAPTURED_DIRECTION_WEIGHT = 0.9


def build_template(pose: Optional[Pose], name: Optional[str]) -> GestureTemplate:
    """
    Build a template that describes `pose`.

    Each finger gets a curl rule at weight 1.0 for its observed curl and a
    direction rule at weight 0.9 for its observed direction.

    Raises:
        AuthoringError: if the name is blank or no pose is available
    """
    clean_name = (name or "").strip()
    if not clean_name:
        raise AuthoringError("Gesture name must not be empty", reason="invalid_name")
    if pose is None:
        raise AuthoringError("No hand pose available to capture", reason="no_pose")

    builder = TemplateBuilder(clean_name)
    for finger in Finger:
        builder.add_curl(finger, pose.curl(finger), CAPTURED_CURL_WEIGHT)
        builder.add_direction(finger, pose.direction(finger), CAPTURED_DIRECTION_WEIGHT)
    return builder.build(custom=True)


def capture_template(library: TemplateLibrary, pose: Optional[Pose], name: Optional[str]) -> GestureTemplate:
    """
    Capture `pose` under `name` and append it to `library`.

    The library is left untouched when the capture is rejected.
    """
    try:
        template = build_template(pose, name)
    except AuthoringError as e:
        logger.warning(f"Gesture capture rejected: {e}")
        raise

    library.add(template)
    logger.info(f"Captured gesture '{template.name}' ({len(library)} templates)")
    return template


def capture_from_labels(library: TemplateLibrary, rows: Sequence[Sequence[str]], name: Optional[str]) -> GestureTemplate:
    """
    Capture from a labelled pose snapshot, as produced by Pose.describe().

    An empty snapshot means no hand was tracked.
    """
    pose = Pose.from_labels(rows) if rows else None
    return capture_template(library, pose, name)
