"""
Shared state between the pipeline thread and the web server.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from models.frame import FrameData
from pipeline.processor import FrameResult


class SharedState:
    """
    Latest display summary plus a bounded narration history.

    Add on_frame as an engine callback; the web routes only read copies.
    """

    def __init__(self, history_size: int = 50):
        self._lock = threading.Lock()
        self._narrations: Deque[Dict[str, Any]] = deque(maxlen=history_size)
        self._detections: List[Dict[str, Any]] = []
        self._summary_lines: List[str] = []
        self._last_frame_ts: Optional[float] = None
        self._frame_count = 0
        self._narration_count = 0
        self._start_time = time.time()
        self._pipeline_stats: Dict[str, Any] = {}

    def on_frame(self, frame_data: FrameData, result: FrameResult) -> None:
        """Engine callback: record the latest frame result."""
        with self._lock:
            self._detections = [d.to_dict() for d in result.detections]
            self._summary_lines = list(result.summary_lines)
            self._last_frame_ts = frame_data.timestamp
            self._frame_count += 1
            for event in result.narrations:
                self._narrations.append(event.to_dict())
                self._narration_count += 1

    def update_pipeline_stats(self, stats: Dict[str, Any]) -> None:
        with self._lock:
            self._pipeline_stats.update(stats)

    def snapshot(self) -> Dict[str, Any]:
        """Return a consistent copy of everything the routes expose."""
        with self._lock:
            return {
                "detections": list(self._detections),
                "summary_lines": list(self._summary_lines),
                "narrations": list(self._narrations),
                "last_frame_ts": self._last_frame_ts,
                "frame_count": self._frame_count,
                "narration_count": self._narration_count,
                "start_time": self._start_time,
                "pipeline_stats": dict(self._pipeline_stats),
            }
