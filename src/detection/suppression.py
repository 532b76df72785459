"""
Class-wise non-maximum suppression.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from algorithms.geometry import calculate_iou
from models.detection import Detection


def suppress_overlaps(detections: Sequence[Detection], iou_threshold: float = 0.5) -> List[Detection]:
    """
    Remove redundant overlapping detections within each class.

    Detections are grouped by class_id and sorted by confidence, highest
    first; equal confidences keep their input order. A detection is kept only
    if its IoU with every already-kept detection of the same class is at most
    iou_threshold.

    Returns:
        Kept detections, class by class in order of first appearance.
    """
    by_class: Dict[int, List[Detection]] = {}
    for det in detections:
        by_class.setdefault(det.class_id, []).append(det)

    kept: List[Detection] = []
    for group in by_class.values():
        selected: List[Detection] = []
        for det in sorted(group, key=lambda d: d.confidence, reverse=True):
            if all(calculate_iou(det.box, other.box) <= iou_threshold for other in selected):
                selected.append(det)
        kept.extend(selected)
    return kept
