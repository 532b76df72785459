"""
Spatial algorithms used by suppression, tracking and narration.

- geometry: IoU and center distance between boxes
- depth: monocular distance from box height
- position: 3x3 grid direction plus closeness
"""

from .geometry import calculate_iou, center_distance
from .depth import DepthEstimator, estimate_depth
from .position import describe_position

__all__ = [
    "calculate_iou",
    "center_distance",
    "DepthEstimator",
    "estimate_depth",
    "describe_position",
]
