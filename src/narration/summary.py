"""
Plain-text display summary for the current frame.
"""

from __future__ import annotations

from typing import List, Sequence

from algorithms.position import describe_position
from models.detection import Detection

NO_OBJECTS_TEXT = "No objects detected"


def summarize_detections(
    detections: Sequence[Detection],
    frame_width: float,
    frame_height: float,
) -> List[str]:
    """One line per detection: label, confidence percentage and position."""
    return [
        f"{det.label}: {det.confidence:.0%} → {describe_position(det.box, frame_width, frame_height)}"
        for det in detections
    ]


def summary_text(lines: Sequence[str]) -> str:
    return "\n".join(lines) if lines else NO_OBJECTS_TEXT
