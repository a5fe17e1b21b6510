"""
Mock feedback implementation for exercising gesture events without a UI.
"""
import logging

from .types import GestureEvent

logger = logging.getLogger(__name__)


class MockFeedback:
    """Mock feedback renderer that logs events instead of drawing them."""

    def __init__(self):
        """Initialize the mock feedback renderer."""
        self.events = []
        self.clear_count = 0

    async def on_gesture(self, event: GestureEvent) -> None:
        """Log the gesture instead of rendering it."""
        self.events.append(event)
        logger.info(f"[MockFeedback] {event.name} {event.confidence:.0f}% (event #{len(self.events)})")

    async def on_clear(self) -> None:
        """Log the clear instead of resetting the display."""
        self.clear_count += 1
        logger.info(f"[MockFeedback] cleared (call #{self.clear_count})")

    def reset_counters(self) -> None:
        """Reset recorded events for testing."""
        self.events = []
        self.clear_count = 0
