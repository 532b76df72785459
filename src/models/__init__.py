"""
Typed models for the scene narrator.

Detections are per-frame values; tracking state and narration events are
produced by the stability tracker; configuration mirrors the YAML layout.
"""

from .frame import FrameData, FrameMeta
from .detection import BoundingBox, Detection
from .narration import NarrationEvent, TrackedLabelState
from .labels import COCO_LABELS, UNKNOWN_LABEL, label_for
from .config import (
    Config,
    CameraConfig,
    InferenceConfig,
    DetectionConfig,
    TrackingConfig,
    DepthConfig,
    NarrationConfig,
    WebConfig,
)

__all__ = [
    # Frame
    "FrameData",
    "FrameMeta",
    # Detection
    "BoundingBox",
    "Detection",
    # Tracking / narration
    "NarrationEvent",
    "TrackedLabelState",
    # Labels
    "COCO_LABELS",
    "UNKNOWN_LABEL",
    "label_for",
    # Config
    "Config",
    "CameraConfig",
    "InferenceConfig",
    "DetectionConfig",
    "TrackingConfig",
    "DepthConfig",
    "NarrationConfig",
    "WebConfig",
]
