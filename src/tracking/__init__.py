"""
Tracking module.

The stability tracker lives in tracking.stability.
"""

from .stability import StabilityTracker, format_narration

__all__ = ["StabilityTracker", "format_narration"]
