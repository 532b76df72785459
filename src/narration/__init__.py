"""
Narration boundary: speech sinks and the display summary.
"""

from .sinks import LoggingSink, NarrationSink, SpeechSink, create_sink_from_config
from .summary import NO_OBJECTS_TEXT, summarize_detections, summary_text

__all__ = [
    "LoggingSink",
    "NarrationSink",
    "SpeechSink",
    "create_sink_from_config",
    "NO_OBJECTS_TEXT",
    "summarize_detections",
    "summary_text",
]
