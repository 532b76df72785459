from __future__ import annotations

import time
from typing import List, Optional

from fastapi import APIRouter, Request

from narration.summary import summary_text
from ..api_models import DetectionsResponse, NarrationsResponse, StatusResponse
from ..state import SharedState

router = APIRouter()


def _get_state(request: Request) -> SharedState:
    return request.app.state.shared


def _compute_warnings(last_frame_age_s: Optional[float], frames_failed: int = 0, frames_processed: int = 0) -> List[str]:
    """
    Thresholds: no frame or >10s since last frame => camera_offline;
    >2s => camera_stale; more failed than processed frames => inference_failing.
    """
    warnings: List[str] = []
    if last_frame_age_s is None or last_frame_age_s > 10:
        warnings.append("camera_offline")
    elif last_frame_age_s > 2:
        warnings.append("camera_stale")

    if frames_failed > 0 and frames_failed > frames_processed:
        warnings.append("inference_failing")
    return warnings


@router.get("/status", response_model=StatusResponse)
def status(request: Request):
    now = time.time()
    snap = _get_state(request).snapshot()
    stats = snap["pipeline_stats"]

    last_frame_ts = snap["last_frame_ts"]
    last_frame_age = now - last_frame_ts if last_frame_ts else None
    frames_processed = stats.get("frame_count", snap["frame_count"])
    frames_failed = stats.get("failed_frames", 0)
    warnings = _compute_warnings(last_frame_age, frames_failed, frames_processed)

    return StatusResponse(
        running="camera_offline" not in warnings,
        last_frame_age_s=last_frame_age,
        uptime_seconds=int(now - snap["start_time"]),
        frames_processed=frames_processed,
        frames_dropped=stats.get("dropped_frames", 0),
        frames_failed=frames_failed,
        narrations_total=snap["narration_count"],
        warnings=warnings,
    )


@router.get("/detections", response_model=DetectionsResponse)
def detections(request: Request):
    snap = _get_state(request).snapshot()
    return DetectionsResponse(
        detections=snap["detections"],
        summary_lines=snap["summary_lines"],
        summary_text=summary_text(snap["summary_lines"]),
        last_frame_ts=snap["last_frame_ts"],
    )


@router.get("/narrations", response_model=NarrationsResponse)
def narrations(request: Request, limit: int = 20):
    snap = _get_state(request).snapshot()
    recent = snap["narrations"][-limit:] if limit > 0 else []
    return NarrationsResponse(narrations=list(reversed(recent)), total=snap["narration_count"])
