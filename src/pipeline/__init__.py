"""
Pipeline module for the scene narrator.

The pipeline orchestrates the full processing flow:
- Frame acquisition from observation sources
- Inference through a pluggable backend
- Decoding, suppression and stability tracking (FrameProcessor)
- Narration sinks and display callbacks
"""

from .processor import FrameProcessor, FrameResult, process_frame
from .engine import PipelineEngine, PipelineConfig, PipelineStats

__all__ = [
    "FrameProcessor",
    "FrameResult",
    "process_frame",
    "PipelineEngine",
    "PipelineConfig",
    "PipelineStats",
]
