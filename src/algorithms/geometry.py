"""
Geometry utilities.

Shared box helpers for suppression and tracking.
"""

from __future__ import annotations

import math

from models.detection import BoundingBox


def calculate_iou(box_a: BoundingBox, box_b: BoundingBox) -> float:
    """
    Calculate Intersection over Union (IoU) between two boxes.

    Returns 0.0 when the union area is not positive, so degenerate boxes
    neither suppress nor get suppressed.
    """
    left = max(box_a.left, box_b.left)
    top = max(box_a.top, box_b.top)
    right = min(box_a.right, box_b.right)
    bottom = min(box_a.bottom, box_b.bottom)

    intersection = max(0.0, right - left) * max(0.0, bottom - top)
    union = box_a.area + box_b.area - intersection

    if not union > 0:
        return 0.0
    return intersection / union


def center_distance(box_a: BoundingBox, box_b: BoundingBox) -> float:
    """Euclidean distance between the centers of two boxes, in pixels."""
    ax, ay = box_a.center
    bx, by = box_b.center
    return math.hypot(ax - bx, ay - by)
