"""
Temporal stabilization of per-frame gesture signals.

The state machine is a pure function, step(), so it can be driven from a
timer callback, a capture loop or a request handler alike. Stabilizer wraps
it with the one piece of mutable state the engine keeps across frames.
"""
import logging
import math
import threading
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .types import DetectionMode, ExpressionReading, ExternalGesture, GestureCandidate, GestureEvent, Signal

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 500.0


def _clamp01(value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class StabilizerState:
    """Active gesture name and the time (ms) it was last accepted."""
    current_gesture: Optional[str] = None
    last_change_ms: float = 0.0
    last_event: Optional[GestureEvent] = None


def step(state: StabilizerState, signal: Optional[Signal], timestamp_ms: float,
         debounce_ms: float = DEFAULT_DEBOUNCE_MS,
         clear_on_empty: bool = False) -> Tuple[StabilizerState, Optional[GestureEvent]]:
    """
    Advance the stabilizer by one frame.

    A signal is accepted when its name differs from the active gesture or
    more than `debounce_ms` has passed since the last acceptance; otherwise
    the state is held and nothing is emitted. An empty frame clears the
    active gesture immediately when `clear_on_empty` is set. A frame whose
    timestamp is not finite is skipped.

    Args:
        state: state after the previous frame
        signal: this frame's hand candidate or expression reading, if any
        timestamp_ms: frame time in epoch milliseconds
        debounce_ms: repeat-acceptance window
        clear_on_empty: clear the active gesture when `signal` is None

    Returns:
        (new_state, event) where event is None unless a gesture was accepted
    """
    if not math.isfinite(timestamp_ms):
        return state, None

    if signal is None:
        if clear_on_empty and state.current_gesture is not None:
            return replace(state, current_gesture=None), None
        return state, None

    name = signal.name
    elapsed = timestamp_ms - state.last_change_ms
    if name == state.current_gesture and elapsed <= debounce_ms:
        return state, None

    # event timestamps never go backwards, even if the frame clock does
    event_time = max(float(timestamp_ms), state.last_change_ms)
    source = signal.source if isinstance(signal, GestureCandidate) else "face"
    event = GestureEvent(
        name=name,
        confidence=_clamp01(signal.score) * 100.0,
        timestamp=event_time,
        source=source,
    )
    return StabilizerState(current_gesture=name, last_change_ms=event_time, last_event=event), event


def select_hand_signal(external: Optional[ExternalGesture],
                       estimated: Optional[GestureCandidate]) -> Optional[GestureCandidate]:
    """
    Prefer the landmark source's own classification over the rule-based one.

    Decided per frame: the estimator's candidate is used only when the
    external classifier reports no gesture for this frame, or a score that
    is not finite.
    """
    if external is not None and external.is_gesture and math.isfinite(external.score):
        return GestureCandidate(name=external.name, score=_clamp01(external.score), source="external")
    return estimated


def select_signal(mode: DetectionMode, hand: Optional[GestureCandidate],
                  face: Optional[ExpressionReading]) -> Optional[Signal]:
    """Pick the one signal the stabilizer sees this frame; hands win in 'both' mode."""
    if mode.uses_hands and hand is not None:
        return hand
    if mode.uses_face and face is not None:
        return face
    return None


class Stabilizer:
    """Thread-safe holder of the stabilizer state."""

    def __init__(self, debounce_ms: float = DEFAULT_DEBOUNCE_MS):
        self.debounce_ms = debounce_ms
        self._state = StabilizerState()
        self._lock = threading.Lock()

    @property
    def state(self) -> StabilizerState:
        with self._lock:
            return self._state

    @property
    def current_gesture(self) -> Optional[str]:
        return self.state.current_gesture

    def update(self, signal: Optional[Signal], timestamp_ms: float,
               clear_on_empty: bool = False) -> Optional[GestureEvent]:
        with self._lock:
            previous = self._state
            current, event = step(previous, signal, timestamp_ms,
                                  debounce_ms=self.debounce_ms,
                                  clear_on_empty=clear_on_empty)
            self._state = current
        if event is not None:
            logger.info(f"Gesture {event.name} ({event.confidence:.0f}%) from {event.source}")
        elif previous.current_gesture is not None and current.current_gesture is None:
            logger.debug(f"Cleared gesture {previous.current_gesture}")
        return event

    def reset(self) -> None:
        with self._lock:
            self._state = StabilizerState()
