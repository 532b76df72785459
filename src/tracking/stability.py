"""
Per-label stability tracking for narration.

This module decides when a detected object has stayed in place long enough
to be worth announcing. State is keyed by label, not by object identity:

- A label seen for the first time starts a dwell timer.
- A label seen again within the movement threshold of its anchor box keeps
  its timer; once the dwell reaches the stability threshold it narrates and
  its entry is dropped, so it must be freshly observed to narrate again.
- A label that moved restarts its timer at the new box.
- A label missing from a frame is evicted.
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence

from algorithms.depth import DepthEstimator
from algorithms.geometry import center_distance
from algorithms.position import describe_position
from models.config import TrackingConfig
from models.detection import Detection
from models.narration import NarrationEvent, TrackedLabelState


def format_narration(label: str, position: str, depth_m: float) -> str:
    """Build the sentence spoken for a stationary object."""
    return f"I see a {label} at {position}, approximately {depth_m:.1f} meters away."


class StabilityTracker:
    """
    Tracks labels across frames and emits narration events.

    The tracker owns its state table exclusively. Callers that deliver frames
    from several threads must serialize calls to update().
    """

    def __init__(
        self,
        config: Optional[TrackingConfig] = None,
        depth_estimator: Optional[DepthEstimator] = None,
        position_describer: Callable[..., str] = describe_position,
    ):
        """
        Initialize the stability tracker.

        Args:
            config: Movement and dwell thresholds.
            depth_estimator: Estimator used for narration distances.
            position_describer: Function (box, frame_width, frame_height) -> str.
        """
        self.config = config or TrackingConfig()
        self.depth_estimator = depth_estimator or DepthEstimator()
        self.position_describer = position_describer
        self._states: Dict[str, TrackedLabelState] = {}

        logging.info(
            f"Stability tracker initialized: movement={self.config.movement_threshold_px}px, "
            f"stability={self.config.stability_threshold_ms}ms"
        )

    @property
    def movement_threshold_px(self) -> float:
        return self.config.movement_threshold_px

    @property
    def stability_threshold_ms(self) -> float:
        return self.config.stability_threshold_ms

    @property
    def tracked_labels(self) -> List[str]:
        return list(self._states)

    def get_state(self, label: str) -> Optional[TrackedLabelState]:
        """Return a copy of the state for a label, or None if untracked."""
        state = self._states.get(label)
        if state is None:
            return None
        return TrackedLabelState(state.label, state.first_seen_ms, state.last_box)

    def reset(self) -> None:
        """Forget every tracked label."""
        self._states.clear()

    def update(
        self,
        detections: Sequence[Detection],
        now_ms: float,
        frame_width: float,
        frame_height: float,
    ) -> List[NarrationEvent]:
        """
        Apply one frame of detections.

        Args:
            detections: Suppressed detections for the frame.
            now_ms: Frame timestamp in milliseconds.
            frame_width: Frame width in pixels.
            frame_height: Frame height in pixels.

        Returns:
            Narration events produced this frame, in detection order.
        """
        events: List[NarrationEvent] = []
        seen = set()

        for det in detections:
            seen.add(det.label)
            event = self._observe(det, now_ms, frame_width, frame_height)
            if event is not None:
                events.append(event)

        for label in [label for label in self._states if label not in seen]:
            del self._states[label]
            logging.debug(f"[STABILITY] evicted '{label}' (not in frame)")

        return events

    def _observe(
        self,
        det: Detection,
        now_ms: float,
        frame_width: float,
        frame_height: float,
    ) -> Optional[NarrationEvent]:
        if not det.box.is_finite():
            logging.debug(f"[STABILITY] skipping non-finite box for '{det.label}'")
            return None

        state = self._states.get(det.label)
        if state is None:
            self._states[det.label] = TrackedLabelState(det.label, now_ms, det.box)
            return None

        distance = center_distance(state.last_box, det.box)
        if not math.isfinite(distance):
            return None

        if distance >= self.config.movement_threshold_px:
            # Moved: restart the dwell at the new position.
            self._states[det.label] = TrackedLabelState(det.label, now_ms, det.box)
            return None

        if state.dwell_ms(now_ms) < self.config.stability_threshold_ms:
            return None

        event = self._narrate(det, now_ms, frame_width, frame_height)
        if event is not None:
            del self._states[det.label]
        return event

    def _narrate(
        self,
        det: Detection,
        now_ms: float,
        frame_width: float,
        frame_height: float,
    ) -> Optional[NarrationEvent]:
        depth_m = self.depth_estimator.estimate(det.box.height, det.label)
        if depth_m is None:
            logging.debug(f"[STABILITY] no depth for '{det.label}' (height={det.box.height})")
            return None

        position = self.position_describer(det.box, frame_width, frame_height)
        text = format_narration(det.label, position, depth_m)
        logging.info(f"Narration: {text}")
        return NarrationEvent(
            text=text,
            label=det.label,
            emitted_at_ms=now_ms,
            position=position,
            depth_m=depth_m,
        )
