"""
Facial expression classification from blendshape scores.
"""
import math
from typing import Iterable, Mapping, Optional, Union

from .types import ExpressionReading

SMILE = "Smile"
MOUTH_OPEN = "MouthOpen"
EYEBROW_RAISE = "EyebrowRaise"


def blendshapes_to_dict(categories: Union[Mapping[str, float], Iterable[object], None]) -> dict:
    """
    Normalize blendshape categories into a name -> score dict.

    Accepts a mapping, or an iterable of objects with `category_name`/`score`
    (MediaPipe Tasks) or `categoryName`/`score` dicts (the JS wire format).
    """
    if categories is None:
        return {}
    if isinstance(categories, Mapping):
        return {str(k): v for k, v in categories.items()}

    result = {}
    for entry in categories:
        if isinstance(entry, Mapping):
            name = entry.get("categoryName", entry.get("category_name"))
            score = entry.get("score", 0.0)
        else:
            name = getattr(entry, "category_name", None)
            score = getattr(entry, "score", 0.0)
        if name:
            result[str(name)] = score
    return result


def _score(blendshapes: Mapping[str, float], name: str) -> float:
    try:
        value = float(blendshapes.get(name, 0.0))
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


class ExpressionClassifier:
    """
    Maps blendshape scores to at most one expression label per frame.

    Signals are checked in priority order (smile, mouth open, brow raise);
    only the first one above its threshold fires.
    """

    def __init__(self, smile_threshold: float = 0.6, mouth_open_threshold: float = 0.5,
                 brow_raise_threshold: float = 0.5):
        self.smile_threshold = smile_threshold
        self.mouth_open_threshold = mouth_open_threshold
        self.brow_raise_threshold = brow_raise_threshold

    def signals(self, blendshapes: Mapping[str, float]) -> dict:
        """Derived signals; missing categories count as 0."""
        smile = (_score(blendshapes, "mouthSmileLeft") + _score(blendshapes, "mouthSmileRight")) / 2.0
        return {
            SMILE: smile,
            MOUTH_OPEN: _score(blendshapes, "jawOpen"),
            EYEBROW_RAISE: _score(blendshapes, "browInnerUp"),
        }

    def classify(self, blendshapes: Union[Mapping[str, float], Iterable[object], None]) -> Optional[ExpressionReading]:
        """
        Classify one frame of blendshapes.

        Returns:
            ExpressionReading for the first signal over threshold, or None
        """
        signals = self.signals(blendshapes_to_dict(blendshapes))

        ordered = (
            (SMILE, self.smile_threshold),
            (MOUTH_OPEN, self.mouth_open_threshold),
            (EYEBROW_RAISE, self.brow_raise_threshold),
        )
        for label, threshold in ordered:
            if signals[label] > threshold:
                return ExpressionReading(label=label, intensity=signals[label])
        return None
