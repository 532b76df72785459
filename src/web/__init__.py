"""
Read-only web API exposing the display boundary.
"""

from .app import create_app
from .state import SharedState

__all__ = ["create_app", "SharedState"]
