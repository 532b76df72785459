"""
Smoke tests for configuration loading and validation.
"""

import sys

import pytest

from main import build_processor, load_config, main, validate_config
from models.config import Config


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        """A complete valid config passes validation."""
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    @pytest.mark.parametrize("section", ["camera", "inference", "detection", "tracking", "depth", "log_path", "log_level"])
    def test_missing_section(self, valid_config, section):
        """Each required section is reported by name when missing."""
        del valid_config[section]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert section in error

    def test_invalid_device_id_type(self, valid_config):
        valid_config["camera"]["device_id"] = [1, 2, 3]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "device_id" in error

    def test_negative_device_id(self, valid_config):
        valid_config["camera"]["device_id"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "device_id" in error

    def test_video_file_device_id_valid(self, valid_config):
        valid_config["camera"]["device_id"] = "clips/hallway.mp4"

        is_valid, error = validate_config(valid_config)

        assert is_valid is True

    def test_empty_model_path(self, valid_config):
        valid_config["inference"]["model"] = ""

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "inference.model" in error

    def test_invalid_box_units(self, valid_config):
        valid_config["inference"]["box_units"] = "inches"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "box_units" in error

    def test_empty_labels(self, valid_config):
        valid_config["inference"]["labels"] = []

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "labels" in error

    @pytest.mark.parametrize("key,value", [
        ("confidence_threshold", 0),
        ("confidence_threshold", 1.5),
        ("class_threshold", -0.1),
        ("iou_threshold", "high"),
    ])
    def test_invalid_detection_thresholds(self, valid_config, key, value):
        valid_config["detection"][key] = value

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert key in error

    def test_invalid_movement_threshold(self, valid_config):
        valid_config["tracking"]["movement_threshold_px"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "movement_threshold_px" in error

    def test_zero_stability_threshold_valid(self, valid_config):
        valid_config["tracking"]["stability_threshold_ms"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is True

    def test_invalid_focal_length(self, valid_config):
        valid_config["depth"]["focal_length_px"] = -5

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "focal_length_px" in error

    def test_invalid_known_height(self, valid_config):
        valid_config["depth"]["known_heights_m"]["person"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "person" in error

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_default_yaml(self, temp_config_dir):
        """Config loads from default.yaml when only it exists."""
        config_path = str(temp_config_dir / "config.yaml")

        config = load_config(config_path)

        assert config["camera"]["device_id"] == 0
        assert config["detection"]["confidence_threshold"] == 0.4
        assert config["depth"]["known_heights_m"]["person"] == 1.7

    def test_local_overrides_merge(self, temp_config_dir):
        """Local config.yaml overrides default.yaml."""
        config_yaml = temp_config_dir / "config.yaml"
        config_yaml.write_text("""
detection:
  confidence_threshold: 0.6
tracking:
  stability_threshold_ms: 3000
""")

        config = load_config(str(config_yaml))

        assert config["detection"]["confidence_threshold"] == 0.6
        assert config["tracking"]["stability_threshold_ms"] == 3000
        assert config["detection"]["iou_threshold"] == 0.5
        assert config["tracking"]["movement_threshold_px"] == 50

    def test_deep_merge_preserves_nested(self, temp_config_dir):
        """Deep merge keeps table entries that are not overridden."""
        config_yaml = temp_config_dir / "config.yaml"
        config_yaml.write_text("""
depth:
  known_heights_m:
    dog: 0.6
""")

        config = load_config(str(config_yaml))

        assert config["depth"]["known_heights_m"] == {"person": 1.7, "dog": 0.6}
        assert config["depth"]["focal_length_px"] == 1000

    def test_explicit_config_applied_last(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("log_level: WARNING\n")
        explicit = temp_config_dir / "field.yaml"
        explicit.write_text("log_level: DEBUG\n")

        config = load_config(str(explicit))

        assert config["log_level"] == "DEBUG"

    def test_missing_everything_gives_empty(self, tmp_path):
        assert load_config(str(tmp_path / "config.yaml")) == {}

    def test_loaded_config_validates(self, temp_config_dir):
        config = load_config(str(temp_config_dir / "config.yaml"))

        is_valid, error = validate_config(config)

        assert is_valid is True, error


class TestBuildProcessor:
    def test_thresholds_flow_into_processor(self, valid_config):
        valid_config["tracking"]["stability_threshold_ms"] = 1500
        valid_config["detection"]["confidence_threshold"] = 0.55

        processor = build_processor(Config.from_dict(valid_config))

        assert processor.tracker.stability_threshold_ms == 1500
        assert processor.detection_config.confidence_threshold == 0.55
        assert processor.tracker.depth_estimator.config.known_heights_m["car"] == 1.5


class TestMain:
    def test_missing_model_exits_with_error(self, temp_config_dir, tmp_path, monkeypatch):
        log_path = tmp_path / "logs" / "narrator.log"
        (temp_config_dir / "config.yaml").write_text(f"log_path: {log_path}\n")
        monkeypatch.setattr(sys, "argv", [
            "main.py",
            "--config", str(temp_config_dir / "config.yaml"),
            "--model", str(tmp_path / "absent.onnx"),
            "--no-speech",
        ])

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 1
        assert log_path.exists()

    def test_invalid_config_exits(self, temp_config_dir, monkeypatch):
        (temp_config_dir / "config.yaml").write_text("log_level: LOUD\n")
        monkeypatch.setattr(sys, "argv", ["main.py", "--config", str(temp_config_dir / "config.yaml")])

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 1
