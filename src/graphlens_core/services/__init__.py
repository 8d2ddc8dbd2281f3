"""
Services for GraphLens.

Pure pipeline stages (merge, scoping, normalization), search, quality
presets and the camera framing/animation engine.
"""

from .normalizer import normalize_graph
from .scoping import apply_scopes, filter_by_team, filter_by_user
from .merge import merge_graph
from .search import SearchService
from .quality import QualityManager, QualityPreset, DensePolicy, QUALITY_PRESETS
from .framing import CameraFraming, compute_framing
from .animation import CameraAnimator

__all__ = [
    "normalize_graph",
    "apply_scopes",
    "filter_by_team",
    "filter_by_user",
    "merge_graph",
    "SearchService",
    "QualityManager",
    "QualityPreset",
    "DensePolicy",
    "QUALITY_PRESETS",
    "CameraFraming",
    "compute_framing",
    "CameraAnimator",
]
