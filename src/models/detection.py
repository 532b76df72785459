"""
Detection models for decoded detector output.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    An axis-aligned box in pixel coordinates of the original frame.

    Attributes:
        left: Left edge x coordinate.
        top: Top edge y coordinate.
        right: Right edge x coordinate.
        bottom: Bottom edge y coordinate.
    """
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_finite(self) -> bool:
        """True when every edge is a finite number."""
        return all(math.isfinite(v) for v in self.as_tuple())

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (left, top, right, bottom) tuple."""
        return (self.left, self.top, self.right, self.bottom)

    @classmethod
    def from_tuple(cls, t: Tuple[float, float, float, float]) -> "BoundingBox":
        """Create from (left, top, right, bottom) tuple."""
        return cls(left=t[0], top=t[1], right=t[2], bottom=t[3])

    @classmethod
    def from_center(cls, cx: float, cy: float, w: float, h: float) -> "BoundingBox":
        """Create from center point and size, all in pixels."""
        left = cx - w / 2
        top = cy - h / 2
        return cls(left=left, top=top, right=left + w, bottom=top + h)


@dataclass(frozen=True)
class Detection:
    """
    A single decoded detection.

    Detections live for one frame only and carry no identity across frames.

    Attributes:
        box: Bounding box in pixel coordinates.
        confidence: Objectness score of the prediction (0-1).
        class_id: Index into the label vocabulary.
        label: Human-readable class name.
    """
    box: BoundingBox
    confidence: float
    class_id: int
    label: str

    @property
    def center(self) -> Tuple[float, float]:
        return self.box.center

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "box": list(self.box.as_tuple()),
            "confidence": self.confidence,
            "class_id": self.class_id,
            "label": self.label,
        }
