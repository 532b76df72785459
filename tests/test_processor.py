"""
Tests for the synchronous frame processor.
"""

import numpy as np
import pytest

from detection.decoder import TensorShapeError
from models.config import DetectionConfig, TrackingConfig
from models.frame import FrameMeta
from narration.summary import NO_OBJECTS_TEXT, summarize_detections, summary_text
from pipeline.processor import FrameProcessor, FrameResult, process_frame
from tensors import box_row, make_output, make_row
from tracking.stability import StabilityTracker

META = FrameMeta(width=900, height=900)


def person_output(objectness=0.9):
    return make_output([box_row(350, 200, 550, 700, 900, 900, objectness=objectness)])


@pytest.fixture
def tracker():
    return StabilityTracker(TrackingConfig(movement_threshold_px=50, stability_threshold_ms=2000))


class TestProcessFrame:
    def test_single_frame_has_detections_and_no_narration(self, tracker):
        result = process_frame(person_output(), META, 0, tracker)

        assert isinstance(result, FrameResult)
        assert len(result.detections) == 1
        assert result.detections[0].label == "person"
        assert result.narrations == []
        assert result.timestamp_ms == 0

    def test_stationary_person_narrated(self, tracker):
        process_frame(person_output(), META, 0, tracker)
        process_frame(person_output(), META, 1000, tracker)
        result = process_frame(person_output(), META, 2000, tracker)

        assert [e.text for e in result.narrations] == [
            "I see a person at center-middle, very close, approximately 3.4 meters away."
        ]

    def test_overlapping_duplicates_suppressed(self, tracker):
        output = make_output([
            box_row(350, 200, 550, 700, 900, 900, objectness=0.8),
            box_row(355, 205, 555, 705, 900, 900, objectness=0.95),
        ])

        result = process_frame(output, META, 0, tracker)

        assert len(result.detections) == 1
        assert result.detections[0].confidence == pytest.approx(0.95, abs=1e-6)

    def test_no_detections(self, tracker):
        result = process_frame(make_output([]), META, 0, tracker)

        assert result.detections == []
        assert result.summary_text == NO_OBJECTS_TEXT

    def test_empty_frame_evicts_tracked_labels(self, tracker):
        process_frame(person_output(), META, 0, tracker)
        process_frame(make_output([]), META, 1000, tracker)

        assert tracker.tracked_labels == []

    def test_low_confidence_frame_evicts(self, tracker):
        process_frame(person_output(), META, 0, tracker)
        process_frame(person_output(objectness=0.2), META, 1000, tracker)

        assert tracker.get_state("person") is None

    def test_bad_shape_leaves_tracker_untouched(self, tracker):
        process_frame(person_output(), META, 0, tracker)

        with pytest.raises(TensorShapeError):
            process_frame(np.zeros((1, 3, 84), dtype=np.float32), META, 1000, tracker)

        assert tracker.get_state("person").first_seen_ms == 0

    def test_custom_thresholds(self, tracker):
        cfg = DetectionConfig(confidence_threshold=0.95)
        result = process_frame(person_output(objectness=0.9), META, 0, tracker, detection_config=cfg)
        assert result.detections == []

    def test_custom_labels(self, tracker):
        rows = [make_row(0.5, 0.5, 0.2, 0.2, 0.9, 1, 0.9, num_classes=2)]
        output = make_output(rows, num_classes=2)

        result = process_frame(output, META, 0, tracker, labels=["cane", "door"])

        assert result.detections[0].label == "door"

    def test_summary_lines(self, tracker):
        result = process_frame(person_output(), META, 0, tracker)

        assert result.summary_lines == ["person: 90% → center-middle, very close"]
        assert result.summary_text == "person: 90% → center-middle, very close"


class TestFrameProcessor:
    def test_process_keeps_state_between_frames(self):
        processor = FrameProcessor(StabilityTracker(TrackingConfig(stability_threshold_ms=500)))
        processor.process(person_output(), META, 0)

        result = processor.process(person_output(), META, 500)

        assert len(result.narrations) == 1

    def test_reset(self):
        processor = FrameProcessor()
        processor.process(person_output(), META, 0)
        processor.reset()

        assert processor.tracker.tracked_labels == []

    def test_defaults(self):
        processor = FrameProcessor()
        assert processor.detection_config.confidence_threshold == 0.4
        assert len(processor.labels) == 80


class TestSummary:
    def test_summary_text_joins_lines(self):
        assert summary_text(["a", "b"]) == "a\nb"

    def test_summary_text_empty(self):
        assert summary_text([]) == "No objects detected"

    def test_summarize_empty(self):
        assert summarize_detections([], 640, 480) == []
