"""
Frame models for captured video frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class FrameMeta:
    """
    Per-frame metadata needed by the core pipeline.

    Attributes:
        width: Original (pre-resize) frame width in pixels.
        height: Original (pre-resize) frame height in pixels.
        frame_index: Sequential frame number since start.
        source: Identifier for the camera/video source.
    """
    width: int
    height: int
    frame_index: int = 0
    source: Optional[str] = None


@dataclass
class FrameData:
    """
    Metadata and payload for a captured video frame.

    Attributes:
        frame: The raw frame data as a numpy array (BGR format).
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Unix timestamp when frame was captured (seconds).
        frame_index: Sequential frame number since start.
        source: Identifier for the camera/video source.
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: float,
        frame_index: int = 0,
        source: Optional[str] = None,
    ) -> "FrameData":
        """Create FrameData from a numpy array."""
        h, w = frame.shape[:2]
        return cls(
            frame=frame,
            width=w,
            height=h,
            timestamp=timestamp,
            frame_index=frame_index,
            source=source,
        )

    @property
    def meta(self) -> FrameMeta:
        return FrameMeta(
            width=self.width,
            height=self.height,
            frame_index=self.frame_index,
            source=self.source,
        )

    @property
    def timestamp_ms(self) -> float:
        return self.timestamp * 1000.0

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
