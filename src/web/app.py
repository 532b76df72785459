"""
FastAPI application factory for the scene narrator status API.

Routes:
- /api/status -> pipeline health
- /api/detections -> latest display summary
- /api/narrations -> recent narration history
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .routes import api
from .state import SharedState


def create_app(shared_state: Optional[SharedState] = None) -> FastAPI:
    """Create the FastAPI app bound to a SharedState instance."""
    app = FastAPI(
        title="Scene Narrator",
        version="0.1.0",
        description="Read-only status of the on-device scene narrator",
    )
    app.state.shared = shared_state or SharedState()
    app.include_router(api.router, prefix="/api")
    return app
