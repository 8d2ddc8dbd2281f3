"""
GraphLens Core - Headless focus and camera engine for 3D node/link graphs.

This module provides graph scoping, patch merging, normalization, search,
quality presets and camera framing/animation. It has no UI dependencies
and can be embedded in other applications.
"""

__version__ = "0.1.0"

# Lazy imports to avoid loading everything at once
def __getattr__(name):
    if name == "ForceLayout3D":
        from .adapters.force_layout import ForceLayout3D
        return ForceLayout3D
    elif name == "SearchService":
        from .services.search import SearchService
        return SearchService
    elif name == "CameraAnimator":
        from .services.animation import CameraAnimator
        return CameraAnimator
    elif name == "normalize_graph":
        from .services.normalizer import normalize_graph
        return normalize_graph
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "__version__",
    "ForceLayout3D",
    "SearchService",
    "CameraAnimator",
    "normalize_graph",
]
