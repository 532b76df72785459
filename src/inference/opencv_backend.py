"""
OpenCV DNN inference backend.

Runs an exported YOLOv5 model (ONNX) through cv2.dnn. Frames are resized to
a square input, converted BGR -> RGB and scaled to [0, 1]. Ultralytics ONNX
exports report boxes in input pixels; set box_units to "pixels" to have them
normalized so the decoder always sees [0, 1] coordinates.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import cv2
import numpy as np

from .backend import InferenceBackend, ModelUnavailableError

BOX_UNITS = ("normalized", "pixels")


@dataclass(frozen=True)
class DnnBackendConfig:
    model: str
    input_size: int = 640
    box_units: str = "normalized"

    @classmethod
    def from_inference_config(cls, inference_cfg: Dict[str, Any]) -> "DnnBackendConfig":
        """Adapter: Create from the inference section of the config dict."""
        return cls(
            model=inference_cfg.get("model", ""),
            input_size=int(inference_cfg.get("input_size", 640)),
            box_units=inference_cfg.get("box_units", "normalized"),
        )


class OpenCvDnnBackend(InferenceBackend):
    """
    YOLOv5 inference through cv2.dnn.

    Example:
        backend = OpenCvDnnBackend(DnnBackendConfig(model="models/yolov5s.onnx"))
        backend.load()
        output = backend.infer(frame)  # [1, N, 85]
    """

    def __init__(self, cfg: DnnBackendConfig):
        if cfg.box_units not in BOX_UNITS:
            raise ValueError(f"box_units must be one of: {', '.join(BOX_UNITS)}")
        self.cfg = cfg
        self._net: Optional[Any] = None

    @property
    def is_loaded(self) -> bool:
        return self._net is not None

    def load(self) -> None:
        if self._net is not None:
            return
        if not self.cfg.model or not os.path.exists(self.cfg.model):
            raise ModelUnavailableError(f"Model file not found: {self.cfg.model!r}")
        try:
            self._net = cv2.dnn.readNet(self.cfg.model)
        except cv2.error as e:
            raise ModelUnavailableError(f"Failed to load model {self.cfg.model!r}: {e}") from e
        logging.info(f"Model loaded: {self.cfg.model} (input {self.cfg.input_size}px)")

    def preprocess(self, frame: np.ndarray) -> np.ndarray:
        """Resize to the model input and return an NCHW float blob in [0, 1]."""
        size = self.cfg.input_size
        return cv2.dnn.blobFromImage(
            frame,
            scalefactor=1.0 / 255.0,
            size=(size, size),
            swapRB=True,
            crop=False,
        )

    def infer(self, frame: np.ndarray) -> np.ndarray:
        if self._net is None:
            raise ModelUnavailableError("Model is not loaded; call load() first")

        self._net.setInput(self.preprocess(frame))
        output = np.asarray(self._net.forward(), dtype=np.float32)

        if self.cfg.box_units == "pixels" and output.ndim == 3 and output.shape[-1] >= 4:
            output = output.copy()
            output[..., :4] /= float(self.cfg.input_size)
        return output
