"""
Narration output sinks.

A sink receives narration text and must not block the frame path. The
speech sink queues text in FIFO order and speaks it on a worker thread, so
new narrations are appended and never interrupt one already playing.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from typing import Any, Callable, Deque, Optional, Protocol

from models.config import NarrationConfig


class NarrationSink(Protocol):
    def speak(self, text: str) -> None:
        ...


class LoggingSink:
    """
    Sink that only logs; useful headless or when speech is disabled.

    Keeps the last history_size texts in `spoken`.
    """

    def __init__(self, history_size: int = 50) -> None:
        self.spoken: Deque[str] = deque(maxlen=history_size)

    def speak(self, text: str) -> None:
        self.spoken.append(text)
        logging.info(f"[NARRATE] {text}")


def _default_engine_factory() -> Any:
    try:
        import pyttsx3  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise ImportError(
            "pyttsx3 is not installed. Install with `pip install pyttsx3` "
            "or set narration.speech_enabled to false."
        ) from e
    return pyttsx3.init()


class SpeechSink:
    """
    Text-to-speech sink backed by pyttsx3.

    Example:
        sink = SpeechSink(NarrationConfig(voice_rate=130))
        sink.speak("I see a person at center-middle, near, approximately 2.1 meters away.")
        ...
        sink.close()
    """

    def __init__(
        self,
        config: Optional[NarrationConfig] = None,
        engine_factory: Callable[[], Any] = _default_engine_factory,
    ):
        self.config = config or NarrationConfig()
        self._engine = engine_factory()
        self._engine.setProperty("rate", self.config.voice_rate)
        self._engine.setProperty("volume", self.config.voice_volume)

        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._running = True
        self._worker = threading.Thread(target=self._run, name="speech-sink", daemon=True)
        self._worker.start()
        logging.info("Speech sink started")

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def speak(self, text: str) -> None:
        if not self._running:
            logging.warning(f"Speech sink closed, dropping: {text}")
            return
        self._queue.put(text)

    def wait_idle(self) -> None:
        """Block until every queued narration has been spoken."""
        self._queue.join()

    def close(self, timeout: float = 5.0) -> None:
        if not self._running:
            return
        self._running = False
        self._queue.put(None)
        self._worker.join(timeout=timeout)
        logging.info("Speech sink stopped")

    def _run(self) -> None:
        while True:
            text = self._queue.get()
            try:
                if text is None:
                    return
                self._engine.say(text)
                self._engine.runAndWait()
            except Exception as e:
                logging.warning(f"Speech playback failed: {e}")
            finally:
                self._queue.task_done()


def create_sink_from_config(config: NarrationConfig) -> NarrationSink:
    """Speech sink when enabled and available, else a logging sink."""
    if not config.speech_enabled:
        return LoggingSink()
    try:
        return SpeechSink(config)
    except Exception as e:
        logging.warning(f"Speech unavailable ({e}), narrations will only be logged")
        return LoggingSink()
