"""
Tests for per-label stability tracking and narration.
"""

import math

import pytest

from algorithms.depth import DepthEstimator
from models.config import DepthConfig, TrackingConfig
from models.detection import BoundingBox, Detection
from tracking.stability import StabilityTracker, format_narration

FRAME_W = 900
FRAME_H = 900


def person_at(cx, cy, height=500.0, width=200.0, label="person", class_id=0):
    return Detection(
        box=BoundingBox.from_center(cx, cy, width, height),
        confidence=0.9,
        class_id=class_id,
        label=label,
    )


@pytest.fixture
def tracker():
    return StabilityTracker(TrackingConfig(movement_threshold_px=50, stability_threshold_ms=2000))


def step(tracker, detections, now_ms):
    return tracker.update(detections, now_ms, FRAME_W, FRAME_H)


class TestFormatNarration:
    def test_sentence(self):
        text = format_narration("person", "center-middle, very close", 3.4)
        assert text == "I see a person at center-middle, very close, approximately 3.4 meters away."

    def test_depth_rounded_to_one_decimal(self):
        assert format_narration("car", "left-top, far", 12.345).endswith("approximately 12.3 meters away.")


class TestStationaryObject:
    def test_narrates_after_dwell(self, tracker):
        assert step(tracker, [person_at(450, 450)], 0) == []
        assert step(tracker, [person_at(450, 450)], 1000) == []

        events = step(tracker, [person_at(450, 450)], 2000)

        assert len(events) == 1
        assert events[0].text == "I see a person at center-middle, very close, approximately 3.4 meters away."
        assert events[0].label == "person"
        assert events[0].emitted_at_ms == 2000
        assert events[0].depth_m == pytest.approx(3.4)
        assert events[0].position == "center-middle, very close"

    def test_entry_removed_after_narration(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        step(tracker, [person_at(450, 450)], 2000)

        assert tracker.get_state("person") is None

    def test_narration_repeats_after_fresh_dwell(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        assert len(step(tracker, [person_at(450, 450)], 2000)) == 1

        # Next frame starts a new dwell rather than narrating again.
        assert step(tracker, [person_at(450, 450)], 2100) == []
        assert step(tracker, [person_at(450, 450)], 4000) == []
        assert len(step(tracker, [person_at(450, 450)], 4100)) == 1

    def test_dwell_just_below_threshold(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        assert step(tracker, [person_at(450, 450)], 1999) == []

    def test_single_observation_never_narrates(self, tracker):
        assert step(tracker, [person_at(450, 450)], 0) == []
        assert tracker.get_state("person").first_seen_ms == 0


class TestMovement:
    def test_movement_restarts_dwell(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        step(tracker, [person_at(600, 450)], 1500)

        state = tracker.get_state("person")
        assert state.first_seen_ms == 1500
        assert state.last_box.center == (600, 450)

        assert step(tracker, [person_at(600, 450)], 2500) == []
        assert len(step(tracker, [person_at(600, 450)], 3500)) == 1

    def test_movement_equal_to_threshold_counts_as_moved(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        assert step(tracker, [person_at(500, 450)], 2000) == []
        assert tracker.get_state("person").first_seen_ms == 2000

    def test_movement_just_below_threshold_is_stationary(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        assert len(step(tracker, [person_at(480, 480)], 2000)) == 1

    def test_anchor_not_updated_while_stationary(self, tracker):
        """Small steps that add up past the threshold still count as movement."""
        step(tracker, [person_at(450, 450)], 0)
        step(tracker, [person_at(480, 450)], 500)
        assert tracker.get_state("person").last_box.center == (450, 450)

        step(tracker, [person_at(510, 450)], 1000)
        assert tracker.get_state("person").first_seen_ms == 1000


class TestEviction:
    def test_missing_label_evicted(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        step(tracker, [], 1000)

        assert tracker.get_state("person") is None
        assert step(tracker, [person_at(450, 450)], 2000) == []
        assert tracker.get_state("person").first_seen_ms == 2000

    def test_other_labels_unaffected(self, tracker):
        dog = person_at(150, 700, height=300, label="dog", class_id=16)
        step(tracker, [person_at(450, 450), dog], 0)
        step(tracker, [dog], 1000)

        assert tracker.tracked_labels == ["dog"]


class TestMultipleLabels:
    def test_events_in_detection_order(self, tracker):
        car = person_at(150, 150, height=200, label="car", class_id=2)
        person = person_at(450, 450)
        step(tracker, [car, person], 0)

        events = step(tracker, [car, person], 2000)

        assert [e.label for e in events] == ["car", "person"]
        assert events[0].text == "I see a car at left-top, far, approximately 7.5 meters away."

    def test_unknown_label_uses_default_height(self, tracker):
        chair = person_at(450, 450, height=250, label="chair", class_id=56)
        step(tracker, [chair], 0)

        events = step(tracker, [chair], 2000)

        assert events[0].depth_m == pytest.approx(4.0)

    def test_same_label_twice_applied_in_order(self, tracker):
        """A second same-label detection starts a fresh entry once the first narrates."""
        step(tracker, [person_at(450, 450)], 0)

        events = step(tracker, [person_at(450, 450), person_at(100, 100)], 2000)

        assert len(events) == 1
        state = tracker.get_state("person")
        assert state.first_seen_ms == 2000
        assert state.last_box.center == (100, 100)


class TestDegenerateInput:
    def test_zero_height_box_not_narrated(self, tracker):
        flat = person_at(450, 450, height=0.0)
        step(tracker, [flat], 0)

        assert step(tracker, [flat], 2500) == []
        assert tracker.get_state("person") is not None

    def test_non_finite_box_skipped(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        bad = Detection(BoundingBox(math.nan, 0, 10, 10), 0.9, 0, "person")

        assert step(tracker, [bad], 1000) == []
        # The label still counts as seen.
        assert tracker.get_state("person").first_seen_ms == 0

    def test_non_finite_box_never_creates_state(self, tracker):
        bad = Detection(BoundingBox(0, 0, math.inf, 10), 0.9, 0, "person")
        step(tracker, [bad], 0)
        assert tracker.get_state("person") is None


class TestTrackerConfiguration:
    def test_defaults(self):
        t = StabilityTracker()
        assert t.movement_threshold_px == 50
        assert t.stability_threshold_ms == 2000

    def test_custom_depth_calibration(self):
        depth = DepthEstimator(DepthConfig(focal_length_px=500, known_heights_m={"person": 2.0}))
        t = StabilityTracker(TrackingConfig(stability_threshold_ms=100), depth_estimator=depth)
        t.update([person_at(450, 450)], 0, FRAME_W, FRAME_H)

        events = t.update([person_at(450, 450)], 100, FRAME_W, FRAME_H)

        assert events[0].depth_m == pytest.approx(2.0)

    def test_custom_position_describer(self):
        t = StabilityTracker(
            TrackingConfig(stability_threshold_ms=0),
            position_describer=lambda box, w, h: "ahead",
        )
        t.update([person_at(450, 450)], 0, FRAME_W, FRAME_H)
        events = t.update([person_at(450, 450)], 0, FRAME_W, FRAME_H)
        assert events[0].position == "ahead"

    def test_get_state_returns_copy(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        state = tracker.get_state("person")
        state.first_seen_ms = 99999

        assert tracker.get_state("person").first_seen_ms == 0

    def test_reset(self, tracker):
        step(tracker, [person_at(450, 450)], 0)
        tracker.reset()

        assert tracker.tracked_labels == []
        assert step(tracker, [person_at(450, 450)], 2000) == []


class TestTimelines:
    """End-to-end dwell timelines over several frames."""

    def test_person_narrates_once_at_2100(self, tracker):
        assert step(tracker, [person_at(450, 450)], 0) == []
        assert step(tracker, [person_at(460, 455)], 500) == []
        assert step(tracker, [person_at(440, 445)], 1500) == []

        events = step(tracker, [person_at(455, 450)], 2100)

        assert len(events) == 1
        assert events[0].emitted_at_ms == 2100
        assert tracker.get_state("person") is None

    def test_car_shift_resets_dwell(self, tracker):
        car = dict(height=200, label="car", class_id=2)
        step(tracker, [person_at(300, 450, **car)], 0)
        step(tracker, [person_at(500, 450, **car)], 1000)

        assert step(tracker, [person_at(500, 450, **car)], 2500) == []
        assert tracker.get_state("car").first_seen_ms == 1000

    def test_absent_one_frame_before_threshold(self, tracker):
        for t in range(0, 2000, 100):
            assert step(tracker, [person_at(450, 450)], t) == []

        step(tracker, [], 2000)

        assert tracker.get_state("person") is None
        assert step(tracker, [person_at(450, 450)], 2100) == []
