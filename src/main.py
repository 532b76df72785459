"""
Scene narrator: announce stationary objects in front of the camera.

Reads frames from a camera or video file, runs a YOLOv5 model, and speaks a
sentence for each object that has stayed in place long enough.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file
    --model: Override inference.model
    --source: Override camera.device_id (index or video file)
    --web: Serve the status API
    --no-speech: Log narrations instead of speaking them
"""

import argparse
import logging
import os
import sys
import threading
from typing import Any, Dict, Optional, Tuple

import yaml

from algorithms.depth import DepthEstimator
from inference.backend import ModelUnavailableError
from inference.opencv_backend import DnnBackendConfig, OpenCvDnnBackend
from models.config import Config
from narration.sinks import LoggingSink, create_sink_from_config
from observation.opencv_source import OpenCVSource, OpenCVSourceConfig
from ops.logging import setup_logging
from pipeline.engine import PipelineEngine
from pipeline.processor import FrameProcessor
from tracking.stability import StabilityTracker

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)

    Raises:
        OSError, yaml.YAMLError: If a present file cannot be read or parsed.
    """
    config_dir = os.path.dirname(config_path)
    base_path = os.path.join(config_dir, "default.yaml")
    local_overrides_path = os.path.join(config_dir, "config.yaml")

    merged: Dict[str, Any] = _read_yaml(base_path) if os.path.exists(base_path) else {}
    if os.path.exists(local_overrides_path):
        merged = _deep_merge(merged, _read_yaml(local_overrides_path))

    explicit = os.path.abspath(config_path)
    if (
        os.path.exists(config_path)
        and explicit != os.path.abspath(local_overrides_path)
        and explicit != os.path.abspath(base_path)
    ):
        merged = _deep_merge(merged, _read_yaml(config_path))

    return merged


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'inference', 'detection', 'tracking', 'depth', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    camera = config.get('camera') or {}
    device_id = camera.get('device_id', 0)
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (file path)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"

    inference = config.get('inference') or {}
    if not isinstance(inference.get('model'), str) or not inference.get('model'):
        return False, "inference.model must be a non-empty string"
    input_size = inference.get('input_size', 640)
    if isinstance(input_size, bool) or not isinstance(input_size, int) or input_size <= 0:
        return False, "inference.input_size must be a positive integer"
    if inference.get('box_units', 'normalized') not in ('normalized', 'pixels'):
        return False, "inference.box_units must be one of: normalized, pixels"
    labels = inference.get('labels')
    if labels is not None:
        if not isinstance(labels, list) or not labels or not all(isinstance(x, str) for x in labels):
            return False, "inference.labels must be a non-empty list of strings"

    detection = config.get('detection') or {}
    for key in ('confidence_threshold', 'class_threshold', 'iou_threshold'):
        if key in detection and detection[key] is not None:
            value = detection[key]
            if not _is_number(value) or not (0 < value <= 1):
                return False, f"detection.{key} must be between 0 and 1"

    tracking = config.get('tracking') or {}
    if 'movement_threshold_px' in tracking:
        value = tracking['movement_threshold_px']
        if not _is_number(value) or value <= 0:
            return False, "tracking.movement_threshold_px must be a positive number"
    if 'stability_threshold_ms' in tracking:
        value = tracking['stability_threshold_ms']
        if not _is_number(value) or value < 0:
            return False, "tracking.stability_threshold_ms must be a non-negative number"

    depth = config.get('depth') or {}
    if 'focal_length_px' in depth:
        value = depth['focal_length_px']
        if not _is_number(value) or value <= 0:
            return False, "depth.focal_length_px must be a positive number"
    if 'default_height_m' in depth:
        value = depth['default_height_m']
        if not _is_number(value) or value <= 0:
            return False, "depth.default_height_m must be a positive number"
    heights = depth.get('known_heights_m')
    if heights is not None:
        if not isinstance(heights, dict):
            return False, "depth.known_heights_m must be a mapping of label to meters"
        for label, value in heights.items():
            if not _is_number(value) or value <= 0:
                return False, f"depth.known_heights_m[{label}] must be a positive number"

    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def build_processor(cfg: Config) -> FrameProcessor:
    """Create the tracker and frame processor from typed config."""
    tracker = StabilityTracker(cfg.tracking, depth_estimator=DepthEstimator(cfg.depth))
    return FrameProcessor(tracker, cfg.detection, labels=cfg.inference.labels)


def _start_web(engine: PipelineEngine, cfg: Config) -> None:
    import uvicorn

    from web.app import create_app
    from web.state import SharedState

    shared = SharedState(history_size=cfg.web.history_size)

    def record(frame_data, result):
        shared.on_frame(frame_data, result)
        shared.update_pipeline_stats(engine.stats.to_dict())

    engine.add_callback(record)

    def run_web_app():
        uvicorn.run(create_app(shared), host=cfg.web.host, port=cfg.web.port, log_level="info")

    threading.Thread(target=run_web_app, daemon=True).start()
    logging.info(f"Web interface started on {cfg.web.host}:{cfg.web.port}")


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Scene Narrator')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--model', type=str, default=None,
                        help='Override inference.model')
    parser.add_argument('--source', type=str, default=None,
                        help='Camera index or video file (overrides camera.device_id)')
    parser.add_argument('--web', action='store_true',
                        help='Serve the status API')
    parser.add_argument('--no-speech', action='store_true',
                        help='Log narrations instead of speaking them')
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    if args.model:
        config.setdefault('inference', {})['model'] = args.model
    if args.source is not None:
        config.setdefault('camera', {})['device_id'] = int(args.source) if args.source.isdigit() else args.source

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    setup_logging(config['log_path'], config['log_level'])
    cfg = Config.from_dict(config)
    logging.info("Starting Scene Narrator")

    backend = OpenCvDnnBackend(DnnBackendConfig.from_inference_config(config['inference']))
    source = OpenCVSource(OpenCVSourceConfig.from_camera_config(config['camera'], source_id="main-camera"))
    sink = LoggingSink() if args.no_speech else create_sink_from_config(cfg.narration)

    engine = PipelineEngine(source, backend, build_processor(cfg), sinks=[sink])
    engine.add_callback(lambda frame_data, result: logging.debug(f"[DISPLAY] {result.summary_text}"))
    if args.web or cfg.web.enabled:
        _start_web(engine, cfg)

    try:
        engine.run()
    except ModelUnavailableError:
        sys.exit(1)
    except RuntimeError as e:
        logging.error(f"Pipeline failed: {e}")
        sys.exit(1)
    finally:
        if hasattr(sink, "close"):
            sink.close()
        logging.info("Scene Narrator stopped")


if __name__ == "__main__":
    main()
