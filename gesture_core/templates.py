"""
Gesture templates: named, weighted rule sets over finger curl and direction.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .types import CurlState, DirectionState, Finger

logger = logging.getLogger(__name__)


def _check_weight(weight: float) -> float:
    weight = float(weight)
    if not 0.0 < weight <= 1.0:
        raise ValueError(f"Rule weight must be in (0, 1], got {weight}")
    return weight


@dataclass(frozen=True)
class GestureTemplate:
    """
    Immutable description of a gesture.

    `curl_rules` and `direction_rules` hold (finger, state, weight) triples
    in the order they were added.
    """
    name: str
    curl_rules: Tuple[Tuple[Finger, CurlState, float], ...] = ()
    direction_rules: Tuple[Tuple[Finger, DirectionState, float], ...] = ()
    custom: bool = False

    def curl_weights(self, finger: Finger) -> Dict[CurlState, float]:
        """Best weight per curl state for one finger (max over duplicate rules)."""
        weights: Dict[CurlState, float] = {}
        for rule_finger, state, weight in self.curl_rules:
            if rule_finger is finger:
                weights[state] = max(weight, weights.get(state, 0.0))
        return weights

    def direction_weights(self, finger: Finger) -> Dict[DirectionState, float]:
        """Best weight per direction state for one finger (max over duplicate rules)."""
        weights: Dict[DirectionState, float] = {}
        for rule_finger, state, weight in self.direction_rules:
            if rule_finger is finger:
                weights[state] = max(weight, weights.get(state, 0.0))
        return weights

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "custom": self.custom,
            "curls": [
                {"finger": f.label, "curl": s.label, "weight": w} for f, s, w in self.curl_rules
            ],
            "directions": [
                {"finger": f.label, "direction": s.label, "weight": w} for f, s, w in self.direction_rules
            ],
        }


class TemplateBuilder:
    """Accumulates rules for a template, then freezes it with build()."""

    def __init__(self, name: str):
        self.name = name
        self._curls: List[Tuple[Finger, CurlState, float]] = []
        self._directions: List[Tuple[Finger, DirectionState, float]] = []

    def add_curl(self, finger: Finger, curl: CurlState, weight: float = 1.0) -> "TemplateBuilder":
        self._curls.append((finger, curl, _check_weight(weight)))
        return self

    def add_direction(self, finger: Finger, direction: DirectionState, weight: float = 1.0) -> "TemplateBuilder":
        self._directions.append((finger, direction, _check_weight(weight)))
        return self

    def build(self, custom: bool = False) -> GestureTemplate:
        return GestureTemplate(
            name=self.name,
            curl_rules=tuple(self._curls),
            direction_rules=tuple(self._directions),
            custom=custom,
        )


def builtin_templates() -> List[GestureTemplate]:
    """The built-in gesture catalogue, in declaration order."""
    # OK Sign: thumb and index touching, other fingers extended
    ok_sign = (
        TemplateBuilder("OK_Sign")
        .add_curl(Finger.THUMB, CurlState.HALF_CURL, 1.0)
        .add_curl(Finger.THUMB, CurlState.NO_CURL, 0.5)
        .add_curl(Finger.INDEX, CurlState.HALF_CURL, 1.0)
        .add_curl(Finger.INDEX, CurlState.NO_CURL, 0.5)
        .add_curl(Finger.MIDDLE, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.RING, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.PINKY, CurlState.NO_CURL, 1.0)
        .build()
    )

    # Rock On: index and pinky extended, middle and ring folded, thumb free
    rock_on = (
        TemplateBuilder("Rock_On")
        .add_curl(Finger.INDEX, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.PINKY, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.MIDDLE, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.RING, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.THUMB, CurlState.HALF_CURL, 0.5)
        .add_curl(Finger.THUMB, CurlState.NO_CURL, 0.5)
        .build()
    )

    # Call Me (shaka): thumb and pinky extended, thumb pointing sideways
    call_me = (
        TemplateBuilder("Call_Me")
        .add_curl(Finger.THUMB, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.PINKY, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.INDEX, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.MIDDLE, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.RING, CurlState.FULL_CURL, 1.0)
        .add_direction(Finger.THUMB, DirectionState.HORIZONTAL_LEFT, 0.7)
        .add_direction(Finger.THUMB, DirectionState.HORIZONTAL_RIGHT, 0.7)
        .build()
    )

    # Victory: index and middle extended
    victory = (
        TemplateBuilder("Victory")
        .add_curl(Finger.INDEX, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.MIDDLE, CurlState.NO_CURL, 1.0)
        .add_curl(Finger.RING, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.PINKY, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.THUMB, CurlState.HALF_CURL, 0.9)
        .build()
    )

    # Thumb Up: thumb extended and pointing up, everything else curled
    thumb_up = (
        TemplateBuilder("Thumb_Up")
        .add_curl(Finger.THUMB, CurlState.NO_CURL, 1.0)
        .add_direction(Finger.THUMB, DirectionState.VERTICAL_UP, 1.0)
        .add_direction(Finger.THUMB, DirectionState.DIAGONAL_UP_LEFT, 0.9)
        .add_direction(Finger.THUMB, DirectionState.DIAGONAL_UP_RIGHT, 0.9)
        .add_curl(Finger.INDEX, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.MIDDLE, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.RING, CurlState.FULL_CURL, 1.0)
        .add_curl(Finger.PINKY, CurlState.FULL_CURL, 1.0)
        .build()
    )

    return [ok_sign, rock_on, call_me, victory, thumb_up]


class TemplateLibrary:
    """
    Ordered, append-only collection of gesture templates.

    Names are not unique: adding a template whose name already exists keeps
    both entries and both take part in matching. Readers take a snapshot with
    templates(), so an insert made while a frame is being estimated only
    shows up from the next frame on.
    """

    def __init__(self, templates: Optional[List[GestureTemplate]] = None):
        self._lock = threading.Lock()
        self._templates: List[GestureTemplate] = list(templates or [])
        self._initial: Tuple[GestureTemplate, ...] = tuple(self._templates)

    @classmethod
    def with_builtins(cls) -> "TemplateLibrary":
        return cls(builtin_templates())

    def add(self, template: GestureTemplate) -> None:
        with self._lock:
            if any(t.name == template.name for t in self._templates):
                logger.info(f"Template '{template.name}' already exists; keeping both entries")
            self._templates.append(template)

    def remove(self, name: str) -> int:
        """Remove every template called `name`. Returns how many were removed."""
        with self._lock:
            kept = [t for t in self._templates if t.name != name]
            removed = len(self._templates) - len(kept)
            self._templates = kept
        if removed:
            logger.info(f"Removed {removed} template(s) named '{name}'")
        return removed

    def templates(self) -> Tuple[GestureTemplate, ...]:
        with self._lock:
            return tuple(self._templates)

    def custom_templates(self) -> Tuple[GestureTemplate, ...]:
        """Templates added after construction, in insertion order."""
        return tuple(t for t in self.templates() if not any(t is s for s in self._initial))

    def names(self) -> List[str]:
        return [t.name for t in self.templates()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self.names()

    def __iter__(self) -> Iterator[GestureTemplate]:
        return iter(self.templates())
