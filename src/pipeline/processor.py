"""
Synchronous per-frame processing: decode -> suppress -> track.

Nothing here touches a camera, a model or a speaker. process_frame takes the
raw output tensor, frame metadata and a timestamp, and returns the frame's
detections together with any narration events. Side effects (speech,
display) belong to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from detection.decoder import decode_predictions, validate_output
from detection.suppression import suppress_overlaps
from models.config import DetectionConfig
from models.detection import Detection
from models.frame import FrameMeta
from models.labels import COCO_LABELS
from models.narration import NarrationEvent
from narration.summary import summarize_detections, summary_text
from tracking.stability import StabilityTracker


@dataclass(frozen=True)
class FrameResult:
    """
    Output of one processed frame.

    Attributes:
        detections: Detections that survived suppression.
        narrations: Narration events emitted this frame.
        summary_lines: Display lines for every visible detection.
        timestamp_ms: Frame timestamp in milliseconds.
    """
    detections: List[Detection] = field(default_factory=list)
    narrations: List[NarrationEvent] = field(default_factory=list)
    summary_lines: List[str] = field(default_factory=list)
    timestamp_ms: float = 0.0

    @property
    def summary_text(self) -> str:
        return summary_text(self.summary_lines)


def process_frame(
    output: np.ndarray,
    frame_meta: FrameMeta,
    now_ms: float,
    tracker: StabilityTracker,
    detection_config: Optional[DetectionConfig] = None,
    labels: Sequence[str] = COCO_LABELS,
) -> FrameResult:
    """
    Run one model output through decoding, suppression and tracking.

    Args:
        output: Raw model output of shape [1, N, 5+K], K == len(labels).
        frame_meta: Original frame dimensions.
        now_ms: Frame timestamp in milliseconds.
        tracker: Stability tracker holding cross-frame state.
        detection_config: Thresholds for decoding and suppression.
        labels: Class vocabulary.

    Raises:
        TensorShapeError: If the output layout is wrong. The tracker is not
            touched in that case.
    """
    cfg = detection_config or DetectionConfig()
    rows = validate_output(output, num_classes=len(labels))

    decoded = decode_predictions(
        rows,
        frame_meta.width,
        frame_meta.height,
        confidence_threshold=cfg.confidence_threshold,
        class_threshold=cfg.effective_class_threshold,
        labels=labels,
    )
    detections = suppress_overlaps(decoded, iou_threshold=cfg.iou_threshold)
    narrations = tracker.update(detections, now_ms, frame_meta.width, frame_meta.height)

    return FrameResult(
        detections=detections,
        narrations=narrations,
        summary_lines=summarize_detections(detections, frame_meta.width, frame_meta.height),
        timestamp_ms=now_ms,
    )


class FrameProcessor:
    """
    Binds thresholds, labels and a tracker for repeated process_frame calls.

    Example:
        processor = FrameProcessor(StabilityTracker(), DetectionConfig())
        result = processor.process(output, FrameMeta(width=1280, height=720), now_ms)
        for event in result.narrations:
            sink.speak(event.text)
    """

    def __init__(
        self,
        tracker: Optional[StabilityTracker] = None,
        detection_config: Optional[DetectionConfig] = None,
        labels: Sequence[str] = COCO_LABELS,
    ):
        self.tracker = tracker or StabilityTracker()
        self.detection_config = detection_config or DetectionConfig()
        self.labels = list(labels)

    def process(self, output: np.ndarray, frame_meta: FrameMeta, now_ms: float) -> FrameResult:
        return process_frame(
            output,
            frame_meta,
            now_ms,
            self.tracker,
            detection_config=self.detection_config,
            labels=self.labels,
        )

    def reset(self) -> None:
        """Drop all cross-frame tracking state."""
        self.tracker.reset()
