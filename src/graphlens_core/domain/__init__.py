"""
Domain models for GraphLens.

Contains DTOs, enums, and data structures used throughout the library.
"""

from .models import (
    Vec3,
    GraphNode,
    GraphLink,
    NormalizedGraph,
    Group,
    BoundingBox,
    CameraPose,
    FocusRequest,
    ViewSnapshot,
    GraphSnapshot,
)
from .enums import (
    FocusKind,
    AnimationState,
    QualityMode,
    InitialFocusType,
)

__all__ = [
    # Models
    "Vec3",
    "GraphNode",
    "GraphLink",
    "NormalizedGraph",
    "Group",
    "BoundingBox",
    "CameraPose",
    "FocusRequest",
    "ViewSnapshot",
    "GraphSnapshot",
    # Enums
    "FocusKind",
    "AnimationState",
    "QualityMode",
    "InitialFocusType",
]
