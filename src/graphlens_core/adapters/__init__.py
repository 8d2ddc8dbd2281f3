"""
Adapters for GraphLens.

Implementations of the port interfaces.
"""

from .force_layout import ForceLayout3D

__all__ = ["ForceLayout3D"]
