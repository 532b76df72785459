"""
Inference backend interface.

Backends run the detector on one frame and return its raw output tensor of
shape [1, N, 5+K]. Decoding to pixel-space detections happens downstream,
so a backend only needs to know how to feed the model.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np


class ModelUnavailableError(RuntimeError):
    """Raised when the detector model cannot be loaded; terminal for the session."""


class InferenceBackend(Protocol):
    def load(self) -> None:
        ...

    def infer(self, frame: np.ndarray) -> np.ndarray:
        ...
