"""
Tracking state and narration output models.
"""

from __future__ import annotations

from dataclasses import dataclass

from .detection import BoundingBox


@dataclass
class TrackedLabelState:
    """
    Dwell state for one label, owned by the stability tracker.

    Attributes:
        label: Class label being tracked.
        first_seen_ms: When the current dwell started (milliseconds).
        last_box: Box the dwell is anchored to.
    """
    label: str
    first_seen_ms: float
    last_box: BoundingBox

    def dwell_ms(self, now_ms: float) -> float:
        return now_ms - self.first_seen_ms


@dataclass(frozen=True)
class NarrationEvent:
    """
    A sentence to be spoken about a stationary object.

    Attributes:
        text: Narration sentence handed to the speech sink.
        label: Label the sentence is about.
        emitted_at_ms: Frame timestamp the narration was produced at.
        position: Position description used in the sentence.
        depth_m: Estimated distance in meters.
    """
    text: str
    label: str
    emitted_at_ms: float
    position: str = ""
    depth_m: float = 0.0

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "label": self.label,
            "emitted_at_ms": self.emitted_at_ms,
            "position": self.position,
            "depth_m": self.depth_m,
        }
