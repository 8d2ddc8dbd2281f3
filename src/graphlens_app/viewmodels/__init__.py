"""
ViewModels for GraphLens app.

MVVM architecture separating engine state from rendering:
- ViewModels handle state and commands
- The host renderer draws and forwards input
- Services handle the pipeline, search and camera math
"""

from .base import BaseViewModel
from .focus_vm import FocusVM, GraphSettings, CameraSettings, InitialFocus
from .search_vm import SearchVM, SearchResultRow
from .frame_driver import FrameDriver

__all__ = [
    # Base
    "BaseViewModel",

    # ViewModels
    "FocusVM",
    "SearchVM",
    "FrameDriver",

    # Data classes
    "GraphSettings",
    "CameraSettings",
    "InitialFocus",
    "SearchResultRow",
]
