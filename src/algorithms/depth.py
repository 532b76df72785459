"""
Monocular depth estimation from apparent box height.

Uses the pinhole relation depth = real_height * focal_length / pixel_height
with a per-label table of typical real-world heights.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional

from models.config import DEFAULT_KNOWN_HEIGHTS_M, DepthConfig

# Heights at or below this are treated as degenerate.
MIN_BOX_HEIGHT_PX = 1e-6


def estimate_depth(
    box_height_px: float,
    label: str,
    focal_length_px: float = 1000.0,
    known_heights_m: Optional[Mapping[str, float]] = None,
    default_height_m: float = 1.0,
) -> Optional[float]:
    """
    Estimate the distance to an object in meters.

    Args:
        box_height_px: Height of the detection box in pixels.
        label: Class label, used to look up the real-world height.
        focal_length_px: Camera focal length in pixels.
        known_heights_m: Label to real height table (meters).
        default_height_m: Height used for labels missing from the table.

    Returns:
        Distance in meters, or None when the height is degenerate or the
        result is not finite.
    """
    if not math.isfinite(box_height_px) or box_height_px <= MIN_BOX_HEIGHT_PX:
        return None

    heights = DEFAULT_KNOWN_HEIGHTS_M if known_heights_m is None else known_heights_m
    real_height = heights.get(label, default_height_m)
    depth = real_height * focal_length_px / box_height_px
    if not math.isfinite(depth):
        return None
    return depth


class DepthEstimator:
    """Depth estimation bound to a calibration config."""

    def __init__(self, config: Optional[DepthConfig] = None):
        self.config = config or DepthConfig()

    @property
    def known_heights_m(self) -> Dict[str, float]:
        return dict(self.config.known_heights_m)

    def estimate(self, box_height_px: float, label: str) -> Optional[float]:
        return estimate_depth(
            box_height_px,
            label,
            focal_length_px=self.config.focal_length_px,
            known_heights_m=self.config.known_heights_m,
            default_height_m=self.config.default_height_m,
        )
