"""
Enumerations for GraphLens domain.
"""

from enum import Enum


class FocusKind(str, Enum):
    """Intent attached to a focus request; drives camera framing."""
    DEFAULT = "default"
    ALL = "all"
    AREA = "area"       # Named groups, teams, users
    NODE = "node"       # Clicked node plus neighbors
    SEARCH = "search"


class AnimationState(str, Enum):
    """Camera animation engine states."""
    IDLE = "idle"
    ANIMATING = "animating"


class QualityMode(str, Enum):
    """Registered quality presets."""
    HIGH = "high"
    BALANCED = "balanced"
    PERFORMANCE = "performance"


class InitialFocusType(str, Enum):
    """What to frame on the first non-empty load."""
    ALL = "all"
    GROUP = "group"
    NODES = "nodes"
