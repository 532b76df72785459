"""
Detection post-processing: tensor decoding and class-wise suppression.
"""

from .decoder import TensorShapeError, decode_predictions, validate_output
from .suppression import suppress_overlaps

__all__ = [
    "TensorShapeError",
    "decode_predictions",
    "validate_output",
    "suppress_overlaps",
]
