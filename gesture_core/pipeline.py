"""
Per-frame gesture pipeline: feature extraction, estimation, arbitration and stabilization.
"""
import logging
import math
import threading
from typing import List, Optional, Tuple, Union

from .authoring import capture_template
from .config import Cfg
from .estimator import DEFAULT_MIN_SCORE, GestureEstimator
from .expressions import ExpressionClassifier
from .landmarks import extract_pose
from .stabilizer import DEFAULT_DEBOUNCE_MS, Stabilizer, StabilizerState, select_hand_signal, select_signal
from .templates import GestureTemplate, TemplateLibrary
from .types import DetectionMode, FrameInput, GestureEvent, Pose

logger = logging.getLogger(__name__)


class GesturePipeline:
    """
    Turns landmark frames into stabilized gesture events.

    Features:
    - Rule-based matching of the first hand against the template library
    - Landmark source's own gesture classification preferred when present
    - Facial expression labels from blendshapes
    - Debounced emission, immediate clear when the hand leaves (hands mode)
    - Runtime gesture authoring from the latest pose

    Frames are processed synchronously, one at a time. The stabilizer and the
    latest pose are lock-guarded so authoring and queries may come from
    another thread; each frame reads a snapshot of the library taken when it
    starts.
    """

    def __init__(self, cfg: Optional[Cfg] = None, library: Optional[TemplateLibrary] = None,
                 mode: Optional[Union[DetectionMode, str]] = None):
        """
        Initialize the pipeline.

        Args:
            cfg: loaded configuration; built-in defaults are used when None
            library: template library to match against; built-ins when None
            mode: detection mode, overriding cfg.detection.mode
        """
        self.cfg = cfg
        self.library = library if library is not None else TemplateLibrary.with_builtins()

        min_score = cfg.detection.min_score if cfg else DEFAULT_MIN_SCORE
        debounce_ms = cfg.detection.debounce_ms if cfg else DEFAULT_DEBOUNCE_MS
        self.estimator = GestureEstimator(self.library, min_score=min_score)
        self.stabilizer = Stabilizer(debounce_ms=debounce_ms)

        if cfg:
            self.classifier = ExpressionClassifier(
                smile_threshold=cfg.expressions.smile_threshold,
                mouth_open_threshold=cfg.expressions.mouth_open_threshold,
                brow_raise_threshold=cfg.expressions.brow_raise_threshold,
            )
        else:
            self.classifier = ExpressionClassifier()

        if mode is None:
            mode = cfg.detection.mode if cfg else DetectionMode.HANDS
        self._mode = DetectionMode(mode)

        self._lock = threading.Lock()
        self._pose: Optional[Pose] = None

    @property
    def mode(self) -> DetectionMode:
        with self._lock:
            return self._mode

    def set_mode(self, mode: Union[DetectionMode, str]) -> DetectionMode:
        """Switch detection mode. The active gesture is dropped."""
        new_mode = DetectionMode(mode)
        with self._lock:
            self._mode = new_mode
            if not new_mode.uses_hands:
                self._pose = None
        self.stabilizer.reset()
        logger.info(f"Detection mode set to {new_mode.value}")
        return new_mode

    @property
    def current_pose(self) -> Optional[Pose]:
        with self._lock:
            return self._pose

    @property
    def state(self) -> StabilizerState:
        return self.stabilizer.state

    @property
    def current_gesture(self) -> Optional[GestureEvent]:
        """Event for the active gesture, or None when nothing is active."""
        state = self.stabilizer.state
        if state.current_gesture is None:
            return None
        return state.last_event

    def process(self, frame: FrameInput) -> Optional[GestureEvent]:
        """
        Process one frame.

        Args:
            frame: landmarks, optional external classification and blendshapes for one frame

        Returns:
            GestureEvent when the stabilizer accepts a gesture this frame, None otherwise
        """
        if not math.isfinite(frame.timestamp_ms):
            logger.debug(f"Skipping frame with non-finite timestamp {frame.timestamp_ms}")
            return None

        mode = self.mode
        templates = self.library.templates()

        pose = None
        hand_signal = None
        if mode.uses_hands:
            pose = extract_pose(frame.hand_landmarks)
            if pose is not None:
                estimated = self.estimator.best(pose, templates=templates)
                hand_signal = select_hand_signal(frame.external_gesture, estimated)
            elif frame.hand_landmarks is not None:
                logger.debug("Hand landmarks rejected; treating frame as no hand")

        face_signal = None
        if mode.uses_face and frame.blendshapes is not None:
            face_signal = self.classifier.classify(frame.blendshapes)

        with self._lock:
            if mode.uses_hands:
                self._pose = pose

        signal = select_signal(mode, hand_signal, face_signal)
        clear = mode is DetectionMode.HANDS and pose is None
        return self.stabilizer.update(signal, frame.timestamp_ms, clear_on_empty=clear)

    def pose_snapshot(self) -> List[Tuple[str, str, str]]:
        """Label triples of the latest pose; empty when no hand is tracked."""
        pose = self.current_pose
        return pose.describe() if pose is not None else []

    def capture(self, name: str) -> GestureTemplate:
        """
        Author a template from the latest pose and add it to the library.

        Raises:
            AuthoringError: blank name, or no hand tracked in the latest frame
        """
        return capture_template(self.library, self.current_pose, name)
