"""
Decoder for YOLOv5-style detection tensors.

Each prediction row is laid out as

    [cx, cy, w, h, objectness, class_0, ..., class_{K-1}]

with the box normalized to [0, 1] relative to the model input. Boxes are
scaled by the original (pre-resize) frame size to get pixel coordinates.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from models.detection import BoundingBox, Detection
from models.labels import COCO_LABELS, label_for

# Index of the objectness score; class scores follow it.
OBJECTNESS_INDEX = 4
CLASS_OFFSET = 5


class TensorShapeError(ValueError):
    """Raised when a detector output does not have the expected layout."""


def validate_output(output: np.ndarray, num_classes: Optional[int] = None) -> np.ndarray:
    """
    Check a raw model output of shape [1, N, 5+K] and return its [N, 5+K] rows.

    Args:
        output: Model output tensor.
        num_classes: Expected K. When None any K >= 1 is accepted.

    Raises:
        TensorShapeError: If rank or row width does not match.
    """
    arr = np.asarray(output)
    if arr.ndim != 3 or arr.shape[0] != 1:
        raise TensorShapeError(f"Expected output shape [1, N, 5+K], got {list(arr.shape)}")
    rows = arr[0]
    _check_row_width(rows, num_classes)
    return rows


def _check_row_width(rows: np.ndarray, num_classes: Optional[int]) -> None:
    width = rows.shape[1]
    if num_classes is None:
        if width < CLASS_OFFSET + 1:
            raise TensorShapeError(
                f"Prediction rows need at least {CLASS_OFFSET + 1} values, got {width}"
            )
    elif width != CLASS_OFFSET + num_classes:
        raise TensorShapeError(
            f"Expected {CLASS_OFFSET + num_classes} values per prediction "
            f"({num_classes} classes), got {width}"
        )


def decode_predictions(
    predictions: np.ndarray,
    image_width: float,
    image_height: float,
    confidence_threshold: float = 0.4,
    class_threshold: Optional[float] = None,
    labels: Sequence[str] = COCO_LABELS,
) -> List[Detection]:
    """
    Convert prediction rows into pixel-space detections.

    A row is kept only when its objectness and its best class score are both
    strictly greater than their thresholds. Comparisons are done in the
    tensor's dtype so a float32 score equal to the threshold is rejected.

    Args:
        predictions: Array of shape [N, 5+K].
        image_width: Original frame width in pixels.
        image_height: Original frame height in pixels.
        confidence_threshold: Objectness gate.
        class_threshold: Best class score gate (defaults to confidence_threshold).
        labels: Class vocabulary; out-of-range ids map to "Unknown".

    Returns:
        Detections in row order. The reported confidence is the objectness.
    """
    rows = np.asarray(predictions)
    if rows.ndim != 2:
        raise TensorShapeError(f"Expected predictions of shape [N, 5+K], got {list(rows.shape)}")
    _check_row_width(rows, None)
    if rows.shape[0] == 0:
        return []

    if class_threshold is None:
        class_threshold = confidence_threshold

    dtype = rows.dtype if np.issubdtype(rows.dtype, np.floating) else np.float64
    rows = rows.astype(dtype, copy=False)
    obj_gate = np.asarray(confidence_threshold, dtype=dtype)
    cls_gate = np.asarray(class_threshold, dtype=dtype)

    objectness = rows[:, OBJECTNESS_INDEX]
    class_scores = rows[:, CLASS_OFFSET:]
    best_class = np.argmax(class_scores, axis=1)
    best_score = class_scores[np.arange(rows.shape[0]), best_class]

    keep = (objectness > obj_gate) & (best_score > cls_gate)
    indices = np.flatnonzero(keep)

    detections: List[Detection] = []
    for i in indices:
        cx, cy, w, h = (float(v) for v in rows[i, :4])
        box_w = w * image_width
        box_h = h * image_height
        left = cx * image_width - box_w / 2
        top = cy * image_height - box_h / 2
        class_id = int(best_class[i])
        detections.append(
            Detection(
                box=BoundingBox(left=left, top=top, right=left + box_w, bottom=top + box_h),
                confidence=float(objectness[i]),
                class_id=class_id,
                label=label_for(class_id, labels),
            )
        )

    logging.debug(f"Decoded {len(detections)} of {rows.shape[0]} predictions")
    return detections
