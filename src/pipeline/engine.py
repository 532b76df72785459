"""
Pipeline engine for the scene narrator.

The engine binds the outside world to the pure frame processor:
observation source -> inference backend -> FrameProcessor -> sinks.
At most one frame is processed at a time; a frame that arrives while
another is in flight is dropped (keep only latest).
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from detection.decoder import TensorShapeError
from inference.backend import InferenceBackend, ModelUnavailableError
from models.frame import FrameData
from narration.sinks import NarrationSink
from observation.base import ObservationSource
from pipeline.processor import FrameProcessor, FrameResult


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        max_consecutive_failures: Max frame read failures before stopping.
        stats_log_interval: Seconds between status log messages.
        read_retry_delay: Seconds to wait after a failed frame read.
    """
    max_consecutive_failures: int = 10
    stats_log_interval: float = 60.0
    read_retry_delay: float = 0.5


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    frame_count: int = 0
    dropped_frames: int = 0
    failed_frames: int = 0
    narration_count: int = 0
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)
    last_frame_ts: Optional[float] = None
    consecutive_failures: int = 0

    def to_dict(self) -> dict:
        return {
            "frame_count": self.frame_count,
            "dropped_frames": self.dropped_frames,
            "failed_frames": self.failed_frames,
            "narration_count": self.narration_count,
            "start_time": self.start_time,
            "last_frame_ts": self.last_frame_ts,
        }


FrameCallback = Callable[[FrameData, FrameResult], None]


class PipelineEngine:
    """
    Main processing engine.

    This engine:
    - Loads the model once; a load failure ends the session
    - Reads frames from an ObservationSource (or accepts them via submit())
    - Runs inference and the pure frame processor
    - Hands narration text to every sink and results to display callbacks

    Example:
        engine = PipelineEngine(source, backend, FrameProcessor(), sinks=[LoggingSink()])
        engine.add_callback(lambda frame, result: print(result.summary_text))
        engine.run()
    """

    def __init__(
        self,
        source: Optional[ObservationSource],
        backend: InferenceBackend,
        processor: FrameProcessor,
        sinks: Optional[Sequence[NarrationSink]] = None,
        config: Optional[PipelineConfig] = None,
    ):
        self.source = source
        self.backend = backend
        self.processor = processor
        self.sinks: List[NarrationSink] = list(sinks or [])
        self.config = config or PipelineConfig()
        self.stats = PipelineStats()
        self._running = False
        self._frame_lock = threading.Lock()
        self._stats_lock = threading.Lock()
        self._callbacks: List[FrameCallback] = []

    @property
    def is_running(self) -> bool:
        return self._running

    def add_callback(self, callback: FrameCallback) -> None:
        """
        Add a callback to be called after each frame is processed.

        Args:
            callback: Function taking (frame_data, result) as arguments.
        """
        self._callbacks.append(callback)

    def load_model(self) -> None:
        """Load the backend model, logging a terminal failure once."""
        try:
            self.backend.load()
        except ModelUnavailableError as e:
            logging.error(f"Model unavailable: {e}")
            raise

    def run(self) -> None:
        """
        Run the main processing loop.

        Loads the model, opens the observation source, processes frames until
        stopped or exhausted, then closes resources.

        Raises:
            ModelUnavailableError: If the model cannot be loaded.
        """
        if self.source is None:
            raise RuntimeError("PipelineEngine.run() needs an observation source")

        self.load_model()
        self._running = True
        self.stats = PipelineStats()

        try:
            self.source.open()
            logging.info(f"Pipeline started: source={self.source.source_id}")

            while self._running:
                frame_data = self.source.read()

                if frame_data is None:
                    self.stats.consecutive_failures += 1
                    if self.stats.consecutive_failures >= self.config.max_consecutive_failures:
                        logging.error(
                            f"Too many consecutive failures ({self.stats.consecutive_failures}), stopping"
                        )
                        break
                    logging.warning(
                        f"Frame read failed ({self.stats.consecutive_failures}/"
                        f"{self.config.max_consecutive_failures})"
                    )
                    time.sleep(self.config.read_retry_delay)
                    continue

                self.stats.consecutive_failures = 0
                self.submit(frame_data)
                self._handle_periodic_tasks()

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Signal the pipeline to stop after the current frame."""
        self._running = False

    def submit(self, frame_data: FrameData, now_ms: Optional[float] = None) -> Optional[FrameResult]:
        """
        Process one frame unless another frame is still in flight.

        Safe to call from any thread. Returns None when the frame was dropped
        or failed.
        """
        if not self._frame_lock.acquire(blocking=False):
            with self._stats_lock:
                self.stats.dropped_frames += 1
            logging.debug(f"Dropped frame {frame_data.frame_index} (previous frame in flight)")
            return None
        try:
            return self._process_frame(frame_data, now_ms)
        finally:
            self._frame_lock.release()

    def _process_frame(self, frame_data: FrameData, now_ms: Optional[float]) -> Optional[FrameResult]:
        if now_ms is None:
            now_ms = frame_data.timestamp_ms

        try:
            output = self.backend.infer(frame_data.frame)
            result = self.processor.process(output, frame_data.meta, now_ms)
        except ModelUnavailableError:
            raise
        except TensorShapeError as e:
            self.stats.failed_frames += 1
            logging.warning(f"Frame {frame_data.frame_index} skipped: {e}")
            return None
        except Exception as e:
            self.stats.failed_frames += 1
            logging.warning(f"Frame {frame_data.frame_index} inference failed: {e}")
            return None

        self.stats.frame_count += 1
        self.stats.last_frame_ts = frame_data.timestamp

        if self.stats.frame_count % 30 == 0:
            logging.debug(
                f"[FRAME] frame={self.stats.frame_count} detections={len(result.detections)} "
                f"tracked={self.processor.tracker.tracked_labels}"
            )

        self._dispatch(frame_data, result)
        return result

    def _dispatch(self, frame_data: FrameData, result: FrameResult) -> None:
        for event in result.narrations:
            self.stats.narration_count += 1
            for sink in self.sinks:
                try:
                    sink.speak(event.text)
                except Exception as e:
                    logging.warning(f"Narration sink error: {e}")

        for callback in self._callbacks:
            try:
                callback(frame_data, result)
            except Exception as e:
                logging.warning(f"Callback error: {e}")

    def _handle_periodic_tasks(self) -> None:
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            logging.info(
                f"Pipeline stats: frames={self.stats.frame_count}, "
                f"dropped={self.stats.dropped_frames}, failed={self.stats.failed_frames}, "
                f"narrations={self.stats.narration_count}"
            )
            self.stats.last_stats_log_time = now

    def _cleanup(self) -> None:
        self._running = False
        if self.source is not None:
            try:
                self.source.close()
            except Exception as e:
                logging.warning(f"Error closing source: {e}")
        logging.info("Pipeline stopped")
