"""
Inference boundary: model loading and raw tensor output.
"""

from .backend import InferenceBackend, ModelUnavailableError
from .opencv_backend import DnnBackendConfig, OpenCvDnnBackend

__all__ = [
    "InferenceBackend",
    "ModelUnavailableError",
    "DnnBackendConfig",
    "OpenCvDnnBackend",
]
