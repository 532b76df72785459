"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  device_id: 0

inference:
  model: "models/yolov5s.onnx"
  input_size: 640

detection:
  confidence_threshold: 0.4
  iou_threshold: 0.5

tracking:
  movement_threshold_px: 50
  stability_threshold_ms: 2000

depth:
  focal_length_px: 1000
  known_heights_m:
    person: 1.7

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "device_id": 0,
            "resolution": [1280, 720],
            "fps": 30,
        },
        "inference": {
            "model": "models/yolov5s.onnx",
            "input_size": 640,
        },
        "detection": {
            "confidence_threshold": 0.4,
            "iou_threshold": 0.5,
        },
        "tracking": {
            "movement_threshold_px": 50,
            "stability_threshold_ms": 2000,
        },
        "depth": {
            "focal_length_px": 1000,
            "known_heights_m": {"person": 1.7, "car": 1.5, "bicycle": 1.2},
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
