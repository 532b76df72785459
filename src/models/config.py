"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .labels import COCO_LABELS

DEFAULT_KNOWN_HEIGHTS_M: Dict[str, float] = {
    "person": 1.7,
    "car": 1.5,
    "bicycle": 1.2,
}


@dataclass
class CameraConfig:
    """Camera configuration."""
    device_id: Union[int, str] = 0
    resolution: Optional[List[int]] = None
    fps: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution"),
            fps=d.get("fps"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"device_id": self.device_id}
        if self.resolution is not None:
            d["resolution"] = self.resolution
        if self.fps is not None:
            d["fps"] = self.fps
        return d


@dataclass
class InferenceConfig:
    """Model/inference boundary configuration."""
    model: str = "models/yolov5s.onnx"
    input_size: int = 640
    box_units: str = "normalized"
    labels: List[str] = field(default_factory=lambda: list(COCO_LABELS))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InferenceConfig":
        return cls(
            model=d.get("model", "models/yolov5s.onnx"),
            input_size=d.get("input_size", 640),
            box_units=d.get("box_units", "normalized"),
            labels=list(d.get("labels") or COCO_LABELS),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "input_size": self.input_size,
            "box_units": self.box_units,
            "labels": list(self.labels),
        }


@dataclass
class DetectionConfig:
    """
    Decoding and suppression thresholds.

    class_threshold falls back to confidence_threshold when unset, so a single
    value gates both objectness and the best class score.
    """
    confidence_threshold: float = 0.4
    class_threshold: Optional[float] = None
    iou_threshold: float = 0.5

    @property
    def effective_class_threshold(self) -> float:
        if self.class_threshold is None:
            return self.confidence_threshold
        return self.class_threshold

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            confidence_threshold=d.get("confidence_threshold", 0.4),
            class_threshold=d.get("class_threshold"),
            iou_threshold=d.get("iou_threshold", 0.5),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "confidence_threshold": self.confidence_threshold,
            "iou_threshold": self.iou_threshold,
        }
        if self.class_threshold is not None:
            d["class_threshold"] = self.class_threshold
        return d


@dataclass
class TrackingConfig:
    """Stability tracker configuration."""
    movement_threshold_px: float = 50.0
    stability_threshold_ms: float = 2000.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TrackingConfig":
        return cls(
            movement_threshold_px=d.get("movement_threshold_px", 50.0),
            stability_threshold_ms=d.get("stability_threshold_ms", 2000.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "movement_threshold_px": self.movement_threshold_px,
            "stability_threshold_ms": self.stability_threshold_ms,
        }


@dataclass
class DepthConfig:
    """Monocular depth calibration."""
    focal_length_px: float = 1000.0
    known_heights_m: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_KNOWN_HEIGHTS_M))
    default_height_m: float = 1.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DepthConfig":
        return cls(
            focal_length_px=d.get("focal_length_px", 1000.0),
            known_heights_m=dict(d.get("known_heights_m") or DEFAULT_KNOWN_HEIGHTS_M),
            default_height_m=d.get("default_height_m", 1.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "focal_length_px": self.focal_length_px,
            "known_heights_m": dict(self.known_heights_m),
            "default_height_m": self.default_height_m,
        }


@dataclass
class NarrationConfig:
    """Speech output configuration."""
    speech_enabled: bool = True
    voice_rate: int = 130
    voice_volume: float = 0.9

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NarrationConfig":
        return cls(
            speech_enabled=d.get("speech_enabled", True),
            voice_rate=d.get("voice_rate", 130),
            voice_volume=d.get("voice_volume", 0.9),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speech_enabled": self.speech_enabled,
            "voice_rate": self.voice_rate,
            "voice_volume": self.voice_volume,
        }


@dataclass
class WebConfig:
    """Status web app configuration."""
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 5000
    history_size: int = 50

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=d.get("enabled", False),
            host=d.get("host", "127.0.0.1"),
            port=d.get("port", 5000),
            history_size=d.get("history_size", 50),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "host": self.host,
            "port": self.port,
            "history_size": self.history_size,
        }


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    depth: DepthConfig = field(default_factory=DepthConfig)
    narration: NarrationConfig = field(default_factory=NarrationConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/narrator.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            inference=InferenceConfig.from_dict(d.get("inference", {}) or {}),
            detection=DetectionConfig.from_dict(d.get("detection", {}) or {}),
            tracking=TrackingConfig.from_dict(d.get("tracking", {}) or {}),
            depth=DepthConfig.from_dict(d.get("depth", {}) or {}),
            narration=NarrationConfig.from_dict(d.get("narration", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            log_path=d.get("log_path", "logs/narrator.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        return {
            "camera": self.camera.to_dict(),
            "inference": self.inference.to_dict(),
            "detection": self.detection.to_dict(),
            "tracking": self.tracking.to_dict(),
            "depth": self.depth.to_dict(),
            "narration": self.narration.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
