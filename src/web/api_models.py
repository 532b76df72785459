from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class DetectionModel(BaseModel):
    box: List[float] = Field(..., description="[left, top, right, bottom] in pixels")
    confidence: float
    class_id: int
    label: str


class DetectionsResponse(BaseModel):
    detections: List[DetectionModel]
    summary_lines: List[str]
    summary_text: str
    last_frame_ts: Optional[float] = None


class NarrationModel(BaseModel):
    text: str
    label: str
    emitted_at_ms: float
    position: str = ""
    depth_m: float = 0.0


class NarrationsResponse(BaseModel):
    narrations: List[NarrationModel]
    total: int


class StatusResponse(BaseModel):
    """Compact status for polling clients."""
    running: bool = Field(..., description="True if frames arrived recently")
    last_frame_age_s: Optional[float] = Field(None, description="Seconds since last frame")
    uptime_seconds: int = 0
    frames_processed: int = 0
    frames_dropped: int = 0
    frames_failed: int = 0
    narrations_total: int = 0
    warnings: List[str] = Field(default_factory=list)
